from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import json_body
from ..container import Container
from ..core.enums import Council


def register(app: Flask, container: Container) -> None:
    service = container.voting_service

    @app.route("/api/voting/positions", methods=["GET"], endpoint="voting_positions")
    def voting_positions():
        ballot = [p.to_dict() for p in service.voting_positions(council=request.args.get("council"))]
        councils = {c.value: [p for p in ballot if p["council"] == c.value] for c in Council}
        return jsonify({"positions": ballot, "councils": councils})

    @app.route("/api/voting/validate-code", methods=["POST"], endpoint="voting_validate_code")
    def voting_validate_code():
        member, has_voted = service.validate_code(json_body().get("code"))
        return jsonify({"valid": True, "has_voted": has_voted, "member": {"id": member.member_id, "name": member.name}})

    @app.route("/api/voting/verify", methods=["POST"], endpoint="voting_verify")
    def voting_verify():
        status = service.verify(json_body().get("code"))
        return jsonify(status.to_dict())

    @app.route("/api/voting/submit", methods=["POST"], endpoint="voting_submit")
    def voting_submit():
        body = json_body()
        result = service.submit(
            body.get("code"),
            candidate_ids=body.get("candidate_ids"),
            candidate_id=body.get("candidate_id"),
        )
        return jsonify(result.to_dict())

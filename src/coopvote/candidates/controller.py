from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, audit, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.candidate_service

    @app.route("/api/candidates", methods=["GET"], endpoint="candidates_public")
    def candidates_public():
        grouped = service.list_public()
        return jsonify(
            {
                "candidates": {
                    council: {name: [c.to_dict() for c in rows] for name, rows in positions.items()}
                    for council, positions in grouped.items()
                }
            }
        )

    @app.route("/api/admin/candidates", methods=["GET"], endpoint="admin_candidates")
    @admin_required
    def admin_candidates():
        rows = service.list_admin(council=request.args.get("council"), status=request.args.get("status"))
        return jsonify({"candidates": [r.to_dict(with_votes=True) for r in rows]})

    @app.route("/api/admin/candidates", methods=["POST"], endpoint="admin_create_candidate")
    @admin_required
    def admin_create_candidate():
        body = json_body()
        view = service.create_candidate(
            member_id=body.get("member_id"),
            position_id=body.get("position_id"),
            bio=body.get("bio"),
            photo_url=body.get("photo_url"),
            display_order=body.get("order"),
        )
        audit(
            container.activity_service,
            "create_candidate",
            entity="candidate",
            entity_id=view.candidate_id,
            details={"name": view.member_name, "position": view.position_name, "council": view.council.value},
        )
        return jsonify({"success": True, "candidate": view.to_dict()}), 201

    @app.route("/api/admin/candidates/<int:candidate_id>", methods=["PUT"], endpoint="admin_update_candidate")
    @admin_required
    def admin_update_candidate(candidate_id: int):
        body = json_body()
        view = service.update_candidate(
            candidate_id,
            bio=body.get("bio"),
            photo_url=body.get("photo_url"),
            status=body.get("status"),
            display_order=body.get("order"),
        )
        audit(
            container.activity_service,
            "update_candidate",
            entity="candidate",
            entity_id=candidate_id,
            details={k: body[k] for k in ("bio", "photo_url", "status", "order") if k in body},
        )
        return jsonify({"success": True, "candidate": view.to_dict()})

    @app.route("/api/admin/candidates/<int:candidate_id>", methods=["DELETE"], endpoint="admin_delete_candidate")
    @admin_required
    def admin_delete_candidate(candidate_id: int):
        view = service.delete_candidate(candidate_id)
        audit(
            container.activity_service,
            "delete_candidate",
            entity="candidate",
            entity_id=candidate_id,
            details={"name": view.member_name, "position": view.position_name},
        )
        return jsonify({"success": True})

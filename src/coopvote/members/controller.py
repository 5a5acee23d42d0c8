from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, audit, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/members/search", methods=["GET"], endpoint="members_search")
    def members_search():
        results = container.member_service.search(request.args.get("q"))
        members = []
        for row in results:
            members.append(
                {
                    "id": row.member.member_id,
                    "name": row.member.name,
                    "email": row.member.email,
                    "cedula": row.member.cedula,
                    "has_confirmed": row.has_attendance,
                }
            )
        return jsonify({"members": members})

    @app.route("/api/admin/members", methods=["GET"], endpoint="admin_members")
    @admin_required
    def admin_members():
        rows = container.member_service.list_admin_view()
        return jsonify({"members": [r.to_dict() for r in rows]})

    @app.route("/api/admin/members", methods=["POST"], endpoint="admin_create_member")
    @admin_required
    def admin_create_member():
        body = json_body()
        member = container.member_service.create_member(
            name=body.get("name"),
            email=body.get("email"),
            cedula=body.get("cedula"),
            phone=body.get("phone"),
            status=body.get("status"),
        )
        audit(
            container.activity_service,
            "create_member",
            entity="member",
            entity_id=member.member_id,
            details={"name": member.name, "email": member.email, "cedula": member.cedula},
        )
        return jsonify({"success": True, "member": member.to_dict()}), 201

    @app.route("/api/admin/members/<int:member_id>", methods=["PUT"], endpoint="admin_update_member")
    @admin_required
    def admin_update_member(member_id: int):
        body = json_body()
        member = container.member_service.update_member(
            member_id,
            name=body.get("name"),
            email=body.get("email"),
            cedula=body.get("cedula"),
            phone=body.get("phone"),
            status=body.get("status"),
        )
        audit(
            container.activity_service,
            "update_member",
            entity="member",
            entity_id=member.member_id,
            details={"name": member.name, "email": member.email, "cedula": member.cedula, "status": member.status.value},
        )
        return jsonify({"success": True, "member": member.to_dict()})

    @app.route("/api/admin/members/<int:member_id>", methods=["DELETE"], endpoint="admin_delete_member")
    @admin_required
    def admin_delete_member(member_id: int):
        member = container.member_service.delete_member(member_id)
        audit(container.activity_service, "delete_member", entity="member", entity_id=member_id, details={"name": member.name})
        return jsonify({"success": True})

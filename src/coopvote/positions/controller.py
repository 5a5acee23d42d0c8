from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import isoformat, now_local
from ..common.web import admin_required, audit, json_body, query_flag
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.position_service

    @app.route("/api/admin/positions", methods=["GET"], endpoint="admin_positions")
    @admin_required
    def admin_positions():
        rows = service.list_positions(
            council=request.args.get("council"),
            available_only=query_flag("available"),
        )
        return jsonify({"positions": [r.to_dict() for r in rows]})

    @app.route("/api/admin/positions", methods=["POST"], endpoint="admin_create_position")
    @admin_required
    def admin_create_position():
        body = json_body()
        position = service.create_position(
            name=body.get("name"),
            council=body.get("council"),
            sort_order=body.get("order"),
        )
        audit(
            container.activity_service,
            "create_position",
            entity="position",
            entity_id=position.position_id,
            details=position.to_dict(),
        )
        return jsonify({"success": True, "position": position.to_dict()}), 201

    @app.route("/api/admin/positions/<int:position_id>", methods=["PUT"], endpoint="admin_update_position")
    @admin_required
    def admin_update_position(position_id: int):
        body = json_body()
        position, changes = service.update_position(
            position_id,
            name=body.get("name"),
            council=body.get("council"),
            sort_order=body.get("order"),
        )
        audit(container.activity_service, "update_position", entity="position", entity_id=position_id, details=changes)
        return jsonify({"success": True, "position": position.to_dict()})

    @app.route("/api/admin/positions/<int:position_id>", methods=["DELETE"], endpoint="admin_delete_position")
    @admin_required
    def admin_delete_position(position_id: int):
        position = service.delete_position(position_id)
        audit(
            container.activity_service,
            "delete_position",
            entity="position",
            entity_id=position_id,
            details={"name": position.name, "council": position.council.value},
        )
        return jsonify({"success": True})

    @app.route("/api/admin/assignments", methods=["GET"], endpoint="admin_assignments")
    @admin_required
    def admin_assignments():
        today = now_local().date()
        rows = service.list_assignments(
            council=request.args.get("council"),
            active_only=query_flag("active"),
            today=today,
        )
        return jsonify({"assignments": [r.to_dict(today) for r in rows]})

    @app.route("/api/admin/assignments", methods=["POST"], endpoint="admin_create_assignment")
    @admin_required
    def admin_create_assignment():
        body = json_body()
        today = now_local().date()
        view = service.create_assignment(
            position_id=body.get("position_id"),
            member_id=body.get("member_id"),
            term_start_date=body.get("term_start_date"),
            term_end_date=body.get("term_end_date"),
            today=today,
        )
        audit(
            container.activity_service,
            "create_assignment",
            entity="assignment",
            entity_id=view.assignment.assignment_id,
            details={
                "position": view.position_name,
                "council": view.council.value,
                "member": view.member_name,
                "term_start_date": isoformat(view.assignment.term_start_date),
                "term_end_date": isoformat(view.assignment.term_end_date),
            },
        )
        return jsonify({"success": True, "assignment": view.to_dict(today)}), 201

    @app.route("/api/admin/assignments/<int:assignment_id>", methods=["PUT"], endpoint="admin_update_assignment")
    @admin_required
    def admin_update_assignment(assignment_id: int):
        body = json_body()
        view = service.update_assignment(
            assignment_id,
            term_start_date=body.get("term_start_date"),
            term_end_date=body.get("term_end_date"),
        )
        audit(
            container.activity_service,
            "update_assignment",
            entity="assignment",
            entity_id=assignment_id,
            details={
                "term_start_date": isoformat(view.assignment.term_start_date),
                "term_end_date": isoformat(view.assignment.term_end_date),
            },
        )
        return jsonify({"success": True, "assignment": view.to_dict(now_local().date())})

    @app.route("/api/admin/assignments/<int:assignment_id>", methods=["DELETE"], endpoint="admin_delete_assignment")
    @admin_required
    def admin_delete_assignment(assignment_id: int):
        view = service.delete_assignment(assignment_id)
        audit(
            container.activity_service,
            "delete_assignment",
            entity="assignment",
            entity_id=assignment_id,
            details={"position": view.position_name, "member": view.member_name},
        )
        return jsonify({"success": True})

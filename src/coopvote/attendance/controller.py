from __future__ import annotations

from flask import Flask, current_app, jsonify, request, send_file

from ..common.datetime_utils import isoformat, now_local
from ..common.web import admin_required, audit, json_body
from ..container import Container
from .export import (
    XLSX_MIMETYPE,
    export_filename,
    export_rows,
    normalize_format,
    qr_png,
    to_csv_bytes,
    to_xlsx_bytes,
    voting_url,
)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/window", methods=["GET"], endpoint="attendance_window")
    def attendance_window():
        return jsonify(container.attendance_service.window_status().to_dict())

    @app.route("/api/attendance/confirm", methods=["POST"], endpoint="attendance_confirm")
    def attendance_confirm():
        body = json_body()
        result = container.attendance_service.confirm(body.get("member_id", body.get("memberId")))
        return jsonify(
            {
                "success": True,
                "code": result.record.code,
                "email_sent": result.email_sent,
                "member": {
                    "id": result.member.member_id,
                    "name": result.member.name,
                    "email": result.member.email,
                },
            }
        )

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    def attendance_stats():
        stats = container.attendance_service.stats()
        return jsonify(
            {
                "total_members": stats.total_members,
                "attendance_count": stats.attendance_count,
                "attendance_percentage": stats.attendance_percentage,
                "attendees": [
                    {
                        "name": view.member.name,
                        "email": view.member.email,
                        "cedula": view.member.cedula,
                        "confirmed_at": isoformat(view.record.confirmed_at),
                    }
                    for view in stats.attendees
                ],
            }
        )

    @app.route("/api/attendance/code/<code>/qr", methods=["GET"], endpoint="attendance_code_qr")
    def attendance_code_qr(code: str):
        record = container.attendance_service.get_by_code(code)
        buf = qr_png(voting_url(current_app.config.get("APP_URL", "http://localhost:5000"), record.code))
        return send_file(buf, mimetype="image/png")

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    def admin_attendance():
        rows = container.attendance_service.list_admin_view()
        return jsonify({"attendances": [r.to_dict() for r in rows]})

    @app.route(
        "/api/admin/attendance/<int:attendance_id>/regenerate",
        methods=["POST"],
        endpoint="admin_attendance_regenerate",
    )
    @admin_required
    def admin_attendance_regenerate(attendance_id: int):
        change = container.attendance_service.regenerate_code(attendance_id)
        audit(
            container.activity_service,
            "regenerate_code",
            entity="attendance",
            entity_id=attendance_id,
            details={
                "member_id": change.record.member_id,
                "old_code": change.old_code,
                "new_code": change.record.code,
            },
        )
        return jsonify({"success": True, "attendance": change.record.to_dict()})

    @app.route(
        "/api/admin/attendance/<int:attendance_id>/resend",
        methods=["POST"],
        endpoint="admin_attendance_resend",
    )
    @admin_required
    def admin_attendance_resend(attendance_id: int):
        member, delivery = container.attendance_service.resend_email(attendance_id)
        audit(
            container.activity_service,
            "resend_email",
            entity="attendance",
            entity_id=attendance_id,
            details={"member_id": member.member_id, "email": member.email, "success": delivery.sent},
        )
        if not delivery.sent:
            return jsonify({"success": False, "error": "Error al enviar email"}), 502
        return jsonify({"success": True, "message": f"Email reenviado a {member.email}"})

    @app.route(
        "/api/admin/attendance/<int:attendance_id>/status",
        methods=["PUT"],
        endpoint="admin_attendance_status",
    )
    @admin_required
    def admin_attendance_status(attendance_id: int):
        body = json_body()
        change = container.attendance_service.change_status(attendance_id, body.get("status"))
        audit(
            container.activity_service,
            "change_attendance_status",
            entity="attendance",
            entity_id=attendance_id,
            details={"old_status": change.old_status.value, "new_status": change.record.status.value},
        )
        return jsonify({"success": True, "attendance": change.record.to_dict()})

    @app.route("/api/admin/attendance/export", methods=["GET"], endpoint="admin_attendance_export")
    @admin_required
    def admin_attendance_export():
        fmt = normalize_format(request.args.get("format"))
        rows = export_rows(container.attendance_service.export_rows())
        filename = export_filename(fmt, now_local().date())

        audit(container.activity_service, "export_attendance", entity="attendance", details={"format": fmt, "rows": len(rows)})

        if fmt == "excel":
            payload, mimetype = to_xlsx_bytes(rows), XLSX_MIMETYPE
        else:
            payload, mimetype = to_csv_bytes(rows), "text/csv"
        return app.response_class(
            payload,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

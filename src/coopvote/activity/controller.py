from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/logs", methods=["GET"], endpoint="admin_logs")
    @admin_required
    def admin_logs():
        args = request.args
        return jsonify(
            container.activity_service.list_logs(
                action=args.get("action"),
                entity=args.get("entity"),
                admin_id=args.get("admin_id"),
                date_from=args.get("date_from"),
                date_to=args.get("date_to"),
                limit=args.get("limit"),
                offset=args.get("offset"),
            )
        )

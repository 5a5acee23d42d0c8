from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import admin_required, audit, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/config", methods=["GET"], endpoint="admin_configs")
    @admin_required
    def admin_configs():
        return jsonify({"configs": [c.to_dict() for c in container.config_service.list_configs()]})

    @app.route("/api/admin/config/<key>", methods=["PUT"], endpoint="admin_update_config")
    @admin_required
    def admin_update_config(key: str):
        entry = container.config_service.set_config(key, json_body().get("value"), updated_by=session.get("username"))
        audit(
            container.activity_service,
            "update_config",
            entity="config",
            entity_id=entry.key,
            details={"key": entry.key, "value": entry.value[:20] + ("..." if len(entry.value) > 20 else "")},
        )
        return jsonify({"success": True, "config": entry.to_dict()})

    @app.route("/api/admin/config/test/<kind>", methods=["POST"], endpoint="admin_test_config")
    @admin_required
    def admin_test_config(kind: str):
        return jsonify(container.config_service.test_connection(kind))

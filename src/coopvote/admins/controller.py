from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import audit, json_body
from ..container import Container
from ..core.exceptions import AuthenticationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/auth/login", methods=["POST"], endpoint="admin_login")
    def admin_login():
        body = json_body()
        username = body.get("username")
        try:
            s_admin = container.auth_service.authenticate(username, body.get("password"))
        except AuthenticationError:
            audit(container.activity_service, "login_failed", entity="admin", details={"username": username})
            raise

        session.clear()
        session.permanent = True
        session["admin_id"] = s_admin.admin_id
        session["username"] = s_admin.username
        session["name"] = s_admin.name
        session["role"] = s_admin.role.value

        audit(
            container.activity_service,
            "login_success",
            entity="admin",
            entity_id=s_admin.admin_id,
            details={"username": s_admin.username},
        )
        return jsonify(
            {
                "success": True,
                "admin": {
                    "id": s_admin.admin_id,
                    "username": s_admin.username,
                    "name": s_admin.name,
                    "role": s_admin.role.value,
                },
            }
        )

    @app.route("/api/admin/auth/logout", methods=["POST"], endpoint="admin_logout")
    def admin_logout():
        if "admin_id" in session:
            audit(
                container.activity_service,
                "logout",
                entity="admin",
                entity_id=session["admin_id"],
                details={"username": session.get("username")},
            )
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/admin/auth/session", methods=["GET"], endpoint="admin_session")
    def admin_session():
        if "admin_id" not in session:
            return jsonify({"authenticated": False}), 401
        return jsonify(
            {
                "authenticated": True,
                "admin": {
                    "id": session["admin_id"],
                    "username": session.get("username"),
                    "name": session.get("name"),
                    "role": session.get("role"),
                },
            }
        )

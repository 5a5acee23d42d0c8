"""Helpers shared by the Flask controllers."""
from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.exceptions import ValidationError


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "admin_id" not in session:
            return jsonify({"success": False, "error": "No autenticado. Inicia sesión primero."}), 401
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Cuerpo de la solicitud no válido")
    return data


def query_flag(name: str) -> bool:
    return (request.args.get(name) or "").lower() == "true"


def client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or request.remote_addr or "unknown"


def audit(
    activity_service,
    action: str,
    *,
    entity: Optional[str] = None,
    entity_id: Optional[Any] = None,
    details: Optional[dict] = None,
    admin_id: Optional[int] = None,
) -> None:
    """Record an admin action with the caller's IP and user agent."""
    if admin_id is None:
        admin_id = session.get("admin_id")
    activity_service.record(
        admin_id=admin_id,
        action=action,
        entity=entity,
        entity_id=None if entity_id is None else str(entity_id),
        details=details,
        ip_address=client_ip(),
        user_agent=request.headers.get("User-Agent") or "unknown",
    )

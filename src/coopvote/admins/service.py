from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_choice, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_ADMIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .model import Admin
from .repository import AdminRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionAdmin:
    """What we store into the Flask session after login."""

    admin_id: int
    username: str
    name: str
    role: Role


class AuthService:
    """Use cases: admin login and account creation."""

    def __init__(self, admins: AdminRepository):
        self._admins = admins

    def authenticate(self, username: Optional[str], password: Optional[str]) -> SessionAdmin:
        if not username or not password:
            raise ValidationError("Usuario y contraseña son requeridos")
        if not isinstance(username, str) or not isinstance(password, str):
            raise AuthenticationError("Credenciales inválidas")

        admin = self._admins.get_by_username(username.strip())
        if not admin:
            raise AuthenticationError("Credenciales inválidas")

        try:
            ok = check_password_hash(admin.password_hash, password)
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Credenciales inválidas")

        self._admins.touch_last_login(admin.admin_id, at=now_local())
        return SessionAdmin(admin_id=admin.admin_id, username=admin.username, name=admin.name, role=admin.role)

    def get(self, admin_id: int) -> Optional[Admin]:
        return self._admins.get_by_id(int(admin_id))

    def create_admin(
        self,
        *,
        username: Optional[str],
        password: Optional[str],
        name: Optional[str],
        email: Optional[str],
        role: Optional[str] = None,
    ) -> Admin:
        username = require_non_empty(username, "Usuario")
        password = require_min_length(password, "Contraseña", MIN_ADMIN_PASSWORD_LENGTH)
        name = require_non_empty(name, "Nombre")
        email = require_email(email)
        role = require_choice(role or Role.ADMIN.value, Role, "Rol no válido")

        if self._admins.get_by_username(username):
            raise ValidationError("El nombre de usuario ya existe")

        admin_id = self._admins.create_admin(
            username=username,
            password_hash=generate_password_hash(password),
            name=name,
            email=email,
            role=role,
        )
        logger.info("Created admin %s (%s)", username, role.value)
        return self._admins.get_by_id(admin_id)

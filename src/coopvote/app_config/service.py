from __future__ import annotations

import logging
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import CONFIG_KEY_RE
from ..core.constants import ATTENDANCE_WINDOW_ENABLED, ATTENDANCE_WINDOW_END, ATTENDANCE_WINDOW_START
from ..core.exceptions import ValidationError
from ..members.repository import MemberRepository
from .model import ConfigEntry
from .repository import ConfigRepository

logger = logging.getLogger(__name__)


class ConfigService:
    """Use cases: runtime settings and connectivity checks for the admin panel."""

    def __init__(self, config: ConfigRepository, members: MemberRepository, mailer):
        self._config = config
        self._members = members
        self._mailer = mailer

    def list_configs(self) -> Sequence[ConfigEntry]:
        return self._config.list_all()

    @staticmethod
    def _clean_value(key: str, value) -> str:
        if value is None:
            raise ValidationError("El valor es requerido")
        text = str(value).strip()

        if key == ATTENDANCE_WINDOW_ENABLED:
            text = text.lower()
            if text not in ("true", "false"):
                raise ValidationError("El valor debe ser true o false")
        elif key in (ATTENDANCE_WINDOW_START, ATTENDANCE_WINDOW_END) and text:
            parse_iso_datetime(text)
        return text

    def set_config(self, key: Optional[str], value, *, updated_by: Optional[str]) -> ConfigEntry:
        key = (key or "").strip().upper()
        if not CONFIG_KEY_RE.match(key):
            raise ValidationError("Clave de configuración no válida")

        text = self._clean_value(key, value)
        self._config.upsert(key, text, updated_by=updated_by)
        logger.info("Config %s updated by %s", key, updated_by)
        return self._config.get(key)

    def test_connection(self, kind: str) -> dict:
        if kind == "database":
            try:
                self._config.ping()
                count = self._members.count_all()
            except mysql.connector.Error as err:
                logger.warning("Database check failed: %s", err)
                return {"success": False, "error": str(err) or "Error desconocido"}
            return {
                "success": True,
                "message": f"Conexión exitosa a la base de datos.\n\nMiembros registrados: {count}",
            }

        if kind == "email":
            result = self._mailer.verify_connection()
            if not result.ok:
                return {"success": False, "error": result.error or "Error desconocido"}
            return {"success": True, "message": result.message}

        raise ValidationError("Tipo de prueba no válido")

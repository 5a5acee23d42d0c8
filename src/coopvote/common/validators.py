from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CEDULA_RE = re.compile(r"^\d{3}-?\d{7}-?\d$")
CONFIG_KEY_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} es requerido")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} debe tener al menos {min_len} caracteres")
    return value


def require_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email").lower()
    if not EMAIL_RE.match(email):
        raise ValidationError("Email no válido")
    return email


def require_cedula(value: Optional[str]) -> str:
    cedula = require_non_empty(value, "Cédula")
    if not CEDULA_RE.match(cedula):
        raise ValidationError("Cédula no válida (formato 000-0000000-0)")
    return cedula


def require_choice(value: Optional[str], enum_cls: Type[E], message: str) -> E:
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise ValidationError(message)


def require_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} no es válido")
    if number <= 0:
        raise ValidationError(f"{field_name} no es válido")
    return number


def optional_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None

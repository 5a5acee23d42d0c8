from __future__ import annotations

import secrets

from ..core.constants import CODE_ALPHABET, CODE_LENGTH
from ..core.exceptions import ValidationError


def generate_code(length: int = CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def normalize_code(value) -> str:
    code = str(value or "").strip().upper()
    if not code:
        raise ValidationError("Código de votación es requerido")
    return code

from __future__ import annotations

from datetime import date, datetime

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string (or a full ISO timestamp) into date."""
    try:
        return datetime.fromisoformat(str(value).strip()[:10]).date()
    except ValueError:
        raise ValidationError(f"Fecha no válida: {value}")


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive local datetime.

    Browsers send values like ``2025-03-01T08:00:00.000Z``; aware values are
    converted to local time so they compare against ``now_local()``.
    """
    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Fecha no válida: {value}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def format_date_es(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def format_datetime_es(value: datetime) -> str:
    return value.strftime("%d/%m/%Y %H:%M")


def isoformat(value):
    return value.isoformat() if value is not None else None

from __future__ import annotations

import json
import logging
from datetime import datetime, time
from typing import Optional

import mysql.connector

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import require_int
from ..core.constants import DEFAULT_LOG_LIMIT, MAX_LOG_LIMIT
from ..core.exceptions import ValidationError
from .model import LogFilter
from .repository import ActivityRepository

logger = logging.getLogger(__name__)


def _parse_bound(value: Optional[str], *, end_of_day: bool) -> Optional[datetime]:
    if not value:
        return None
    parsed = parse_iso_datetime(value)
    # A bare YYYY-MM-DD upper bound covers the whole day.
    if end_of_day and len(str(value).strip()) == 10:
        parsed = datetime.combine(parsed.date(), time.max)
    return parsed


def _parse_non_negative(value, default: int, field_name: str) -> int:
    if value in (None, ""):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} no es válido")
    if number < 0:
        raise ValidationError(f"{field_name} no es válido")
    return number


class ActivityService:
    """Audit trail of admin actions."""

    def __init__(self, activity: ActivityRepository):
        self._activity = activity

    def record(
        self,
        *,
        admin_id: Optional[int],
        action: str,
        entity: Optional[str] = None,
        entity_id: Optional[str] = None,
        details: Optional[dict] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[int]:
        payload = json.dumps(details, ensure_ascii=False, default=str) if details is not None else None
        try:
            return self._activity.create_log(
                admin_id=admin_id,
                action=action,
                entity=entity,
                entity_id=entity_id,
                details=payload,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        except mysql.connector.Error:
            # Audit failures never fail the audited request.
            logger.exception("Could not write activity log %s", action)
            return None

    def list_logs(
        self,
        *,
        action: Optional[str] = None,
        entity: Optional[str] = None,
        admin_id=None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        limit=None,
        offset=None,
    ) -> dict:
        filters = LogFilter(
            action=action or None,
            entity=entity or None,
            admin_id=require_int(admin_id, "Administrador") if admin_id not in (None, "") else None,
            date_from=_parse_bound(date_from, end_of_day=False),
            date_to=_parse_bound(date_to, end_of_day=True),
        )
        limit = min(max(_parse_non_negative(limit, DEFAULT_LOG_LIMIT, "Límite"), 1), MAX_LOG_LIMIT)
        offset = _parse_non_negative(offset, 0, "Desplazamiento")

        return {
            "logs": [log.to_dict() for log in self._activity.list_logs(filters, limit=limit, offset=offset)],
            "total": self._activity.count_logs(filters),
            "limit": limit,
            "offset": offset,
            "filters": {
                "actions": list(self._activity.distinct_actions()),
                "entities": list(self._activity.distinct_entities()),
            },
        }

from __future__ import annotations

from enum import Enum


class Council(str, Enum):
    """Governance bodies elected by the assembly."""

    ADMINISTRACION = "administracion"
    VIGILANCIA = "vigilancia"
    CREDITO = "credito"


class MemberStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class AttendanceStatus(str, Enum):
    """State of a voting code. Only ACTIVE codes can vote."""

    ACTIVE = "active"
    CANCELLED = "cancelled"
    REGENERATED = "regenerated"


class CandidateStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Role(str, Enum):
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class WindowStatus(str, Enum):
    BEFORE = "before"
    DURING = "during"
    AFTER = "after"

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import Council

CODE_LENGTH = 8
CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
MAX_CODE_ATTEMPTS = 10

DEFAULT_SESSION_HOURS = 8
MIN_ADMIN_PASSWORD_LENGTH = 8

DEFAULT_LOG_LIMIT = 100
MAX_LOG_LIMIT = 500
DEFAULT_SEARCH_LIMIT = 50

COUNCIL_LABELS = {
    Council.ADMINISTRACION: "Consejo de Administración",
    Council.VIGILANCIA: "Consejo de Vigilancia",
    Council.CREDITO: "Comité de Crédito",
}

# Order used when presenting results.
COUNCIL_ORDER = (Council.ADMINISTRACION, Council.CREDITO, Council.VIGILANCIA)

ATTENDANCE_WINDOW_ENABLED = "ATTENDANCE_WINDOW_ENABLED"
ATTENDANCE_WINDOW_START = "ATTENDANCE_WINDOW_START"
ATTENDANCE_WINDOW_END = "ATTENDANCE_WINDOW_END"

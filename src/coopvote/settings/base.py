"""Settings shared by every environment; values come from the process environment (.env)."""
import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "coopvote_db"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

DEBUG = False
TESTING = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Public base URL used in emails and QR codes
APP_URL = os.getenv("APP_URL", "http://localhost:5000")
ASSEMBLY_NAME = os.getenv("ASSEMBLY_NAME", "COOPVOTE")

SESSION_HOURS = int(os.getenv("SESSION_HOURS", "8"))

# Flask-Mail; delivery is skipped while MAIL_USERNAME/MAIL_PASSWORD are empty
MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
MAIL_USE_TLS = os.getenv("MAIL_USE_TLS", "1") not in ("0", "false", "False")
MAIL_USE_SSL = os.getenv("MAIL_USE_SSL", "0") in ("1", "true", "True")
MAIL_USERNAME = os.getenv("MAIL_USERNAME", "")
MAIL_PASSWORD = os.getenv("MAIL_PASSWORD", "")
MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", MAIL_USERNAME or "noreply@coopvote.local")

# Account created by scripts/seed_db.py when no admin exists
DEFAULT_ADMIN_USERNAME = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin12345")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

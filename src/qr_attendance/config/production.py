import os
import tempfile

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TOKEN_ALGORITHM = "HS256"
DEFAULT_SESSION_MINUTES = int(os.getenv("DEFAULT_SESSION_MINUTES", "5"))
MAX_SESSION_MINUTES = int(os.getenv("MAX_SESSION_MINUTES", "240"))

EXPORT_DIR = os.getenv("EXPORT_DIR", tempfile.gettempdir())

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

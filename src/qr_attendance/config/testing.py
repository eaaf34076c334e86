import os
import tempfile

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TOKEN_ALGORITHM = "HS256"
DEFAULT_SESSION_MINUTES = 5
MAX_SESSION_MINUTES = 240

EXPORT_DIR = tempfile.gettempdir()

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

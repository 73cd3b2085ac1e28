import os
import tempfile

SECRET_KEY = "test-secret"

STORAGE_BACKEND = "local"
DATA_PATH = os.path.join(tempfile.gettempdir(), "timeclock-test.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_test"),
}

TIMEZONE = "America/New_York"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

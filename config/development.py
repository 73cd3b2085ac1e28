import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "local" keeps logs in a JSON file on this device, "mysql" uses the shared database
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
DATA_PATH = os.getenv("DATA_PATH", "data/timeclock.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_db"),
}

# All stamps are taken in this zone, whatever the device's own zone is
TIMEZONE = os.getenv("TIMEZONE", "America/New_York")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled (mysql backend), the app applies schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

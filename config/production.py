import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")
DATA_PATH = os.getenv("DATA_PATH", "/data/timeclock.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "timeclock"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_db"),
}

TIMEZONE = os.getenv("TIMEZONE", "America/New_York")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

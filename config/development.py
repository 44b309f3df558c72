import os

from .config import db_config_from_env, env_bool

DB_CONFIG = db_config_from_env()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

SCAN_COOLDOWN_SECONDS = int(os.getenv("SCAN_COOLDOWN_SECONDS", "60"))
ALERT_HISTORY_LIMIT = int(os.getenv("ALERT_HISTORY_LIMIT", "100"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, the app applies schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", True)

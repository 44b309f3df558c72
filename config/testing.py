from .config import db_config_from_env

DB_CONFIG = db_config_from_env(default_database="field_telemetry_test")

HOST = "127.0.0.1"
PORT = 3000
CORS_ORIGINS = "*"

SCAN_COOLDOWN_SECONDS = 60
ALERT_HISTORY_LIMIT = 100

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

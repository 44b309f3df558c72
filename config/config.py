"""Environment readers shared by the per-environment settings modules.

DB_* variables win; the MYSQL* names used by the hosted deployment are
accepted as fallbacks.
"""
import os


def env_first(*names: str, default: str = "") -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


def env_bool(name: str, default: bool) -> bool:
    return bool(int(os.getenv(name, "1" if default else "0")))


def db_config_from_env(*, default_password: str = "", default_database: str = "field_telemetry") -> dict:
    return {
        "host": env_first("DB_HOST", "MYSQLHOST", default="localhost"),
        "port": int(env_first("DB_PORT", "MYSQLPORT", default="3306")),
        "user": env_first("DB_USER", "MYSQLUSER", default="root"),
        "password": env_first("DB_PASSWORD", "MYSQLPASSWORD", default=default_password),
        "database": env_first("DB_NAME", "MYSQLDATABASE", default=default_database),
        "pool_size": int(os.getenv("DB_POOL_SIZE", "10")),
        "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
    }

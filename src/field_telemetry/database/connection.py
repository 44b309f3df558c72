from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import pooling
from mysql.connector.constants import ClientFlag
from mysql.connector.errors import PoolError

from ..core.constants import DEFAULT_DB_CONNECT_TIMEOUT, DEFAULT_DB_POOL_SIZE, POOL_RETRY_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = DEFAULT_DB_POOL_SIZE
    connect_timeout: int = DEFAULT_DB_CONNECT_TIMEOUT

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "field_telemetry")),
            pool_size=int(db_config.get("pool_size", DEFAULT_DB_POOL_SIZE)),
            connect_timeout=int(db_config.get("connect_timeout", DEFAULT_DB_CONNECT_TIMEOUT)),
        )

    def connect_kwargs(self) -> dict:
        return {
            "host": self.host,
            "port": int(self.port),
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "connection_timeout": int(self.connect_timeout),
            # rowcount must tell "changed" apart from "matched" for the scan upsert.
            "client_flags": [-ClientFlag.FOUND_ROWS],
        }


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Connections are borrowed from a pool and returned on close(). The pool is
    created lazily so the app can start while MySQL is still coming up.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._pool_lock = threading.Lock()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        with self._pool_lock:
            if self._pool is None:
                self._pool = self._create_pool()
        return self._pool

    def _create_pool(self) -> pooling.MySQLConnectionPool:
        pool = pooling.MySQLConnectionPool(
            pool_name="field_telemetry",
            pool_size=int(self._config.pool_size),
            pool_reset_session=True,
            **self._config.connect_kwargs(),
        )
        logger.info(
            "MySQL pool ready: %s@%s:%s/%s (size=%s)",
            self._config.user,
            self._config.host,
            self._config.port,
            self._config.database,
            self._config.pool_size,
        )
        return pool

    def connect(self):
        if self._config.pool_size <= 0:
            return mysql.connector.connect(**self._config.connect_kwargs())

        # get_connection() never blocks; wait for a free slot up to the connect timeout.
        pool = self._get_pool()
        deadline = time.monotonic() + max(int(self._config.connect_timeout), 0)
        while True:
            try:
                return pool.get_connection()
            except PoolError:
                if time.monotonic() >= deadline:
                    logger.warning("MySQL pool exhausted after %ss", self._config.connect_timeout)
                    raise
                time.sleep(POOL_RETRY_INTERVAL_SECONDS)

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import ContextManager, Iterator, Optional, Protocol

import mysql.connector

from ..core.exceptions import StoreFailure


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class TransactionManager(Protocol):
    """Runs a block as one durable unit of work."""

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: Connections are short-lived per operation. Inside ``transaction()``
    every repository call on the same thread joins one connection, committed
    once at the end.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._local = threading.local()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )

    def active_connection(self):
        return getattr(self._local, "conn", None)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        # Nested blocks join the outer transaction.
        if self.active_connection() is not None:
            yield
            return

        try:
            conn = self.connect()
        except mysql.connector.Error as exc:
            raise StoreFailure("Database is unavailable") from exc

        self._local.conn = conn
        try:
            yield
            conn.commit()
        except mysql.connector.Error as exc:
            conn.rollback()
            raise StoreFailure(f"Transaction failed: {exc}") from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            conn.close()

from __future__ import annotations

from datetime import datetime
from typing import Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import CardBindingRepository


class MySQLCardBindingRepository(CardBindingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_user_id(self, card_id: str) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM card_bindings WHERE card_id=%s", (card_id,))
            r = fetchone(cur)
            return int(r["user_id"]) if r else None

    def is_bound(self, card_id: str) -> bool:
        return self.get_user_id(card_id) is not None

    def bind(self, *, card_id: str, user_id: int, bound_at: datetime) -> None:
        with self._conn_factory.transaction():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM card_bindings WHERE user_id=%s", (int(user_id),))
                try:
                    cur.execute(
                        "INSERT INTO card_bindings(card_id, user_id, bound_at) VALUES(%s,%s,%s)",
                        (card_id, int(user_id), bound_at),
                    )
                except mysql.connector.IntegrityError as exc:
                    if exc.errno == errorcode.ER_DUP_ENTRY:
                        raise ConflictError("Card is already in use") from exc
                    raise

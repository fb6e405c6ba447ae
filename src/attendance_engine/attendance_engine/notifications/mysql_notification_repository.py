from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, notification: Notification) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, title, body, priority, is_read, created_at)
                VALUES(%s,%s,%s,%s,0,%s)
                """,
                (
                    int(notification.user_id),
                    notification.title,
                    notification.body,
                    notification.priority.value,
                    notification.created_at,
                ),
            )
            return int(cur.lastrowid)

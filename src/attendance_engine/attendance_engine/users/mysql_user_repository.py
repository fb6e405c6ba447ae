from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, organization_id, full_name, role, is_active
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return User(
                user_id=int(row["user_id"]),
                organization_id=int(row["organization_id"]),
                full_name=row["full_name"],
                role=Role(row["role"]),
                is_active=bool(row.get("is_active", True)),
            )

    def list_active_ids(self, organization_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id FROM users WHERE organization_id=%s AND is_active=1 ORDER BY user_id",
                (int(organization_id),),
            )
            return [int(r["user_id"]) for r in fetchall(cur)]

    def list_organization_ids(self) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT organization_id FROM organizations ORDER BY organization_id")
            return [int(r["organization_id"]) for r in fetchall(cur)]

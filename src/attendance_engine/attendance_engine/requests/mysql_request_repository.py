from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import ApprovalAction, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AbsenceRequest, ApprovalHistoryEntry
from .repository import RequestRepository


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        request_type: str,
        request_date: date,
        reason: Optional[str],
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO absence_requests(user_id, request_type, request_date, reason, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), request_type, request_date, reason, RequestStatus.PENDING.value, created_at),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int, *, for_update: bool = False) -> Optional[AbsenceRequest]:
        sql = """
            SELECT request_id, user_id, request_type, request_date, reason, status, created_at
            FROM absence_requests
            WHERE request_id=%s
        """
        if for_update:
            sql += " FOR UPDATE"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (int(request_id),))
            r = fetchone(cur)
            if not r:
                return None
            return AbsenceRequest(
                request_id=int(r["request_id"]),
                user_id=int(r["user_id"]),
                request_type=r["request_type"],
                request_date=r["request_date"],
                reason=r.get("reason"),
                status=RequestStatus(r["status"]),
                created_at=r["created_at"],
            )

    def set_status(self, request_id: int, status: RequestStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE absence_requests SET status=%s WHERE request_id=%s",
                (status.value, int(request_id)),
            )
            return cur.rowcount > 0

    def append_history(
        self,
        *,
        request_id: int,
        approver_id: int,
        action: ApprovalAction,
        comment: Optional[str],
        acted_at: datetime,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO request_approvals(request_id, approver_id, action, comment, acted_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(request_id), int(approver_id), action.value, comment, acted_at),
            )

    def list_history(self, request_id: int) -> Sequence[ApprovalHistoryEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT request_id, approver_id, action, comment, acted_at
                FROM request_approvals
                WHERE request_id=%s
                ORDER BY acted_at DESC, approval_id DESC
                """,
                (int(request_id),),
            )
            return [
                ApprovalHistoryEntry(
                    request_id=int(r["request_id"]),
                    approver_id=int(r["approver_id"]),
                    action=ApprovalAction(r["action"]),
                    comment=r.get("comment"),
                    acted_at=r["acted_at"],
                )
                for r in fetchall(cur)
            ]

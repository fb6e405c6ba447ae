from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import AttendanceStatus, WriterKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "record_id, user_id, logical_date, status, check_in_time, check_out_time, reason, last_writer, updated_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        person_id=int(r["user_id"]),
        logical_date=r["logical_date"],
        status=AttendanceStatus(r["status"]),
        last_writer=WriterKind(r["last_writer"]),
        updated_at=r["updated_at"],
        check_in=r.get("check_in_time"),
        check_out=r.get("check_out_time"),
        reason=r.get("reason"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_person_and_date(
        self,
        person_id: int,
        logical_date: date,
        *,
        for_update: bool = False,
    ) -> Optional[AttendanceRecord]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND logical_date=%s{lock}
                """,
                (int(person_id), logical_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert_if_absent(self, record: AttendanceRecord) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        user_id, logical_date, status, check_in_time, check_out_time, reason, last_writer, updated_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(record.person_id),
                        record.logical_date,
                        record.status.value,
                        record.check_in,
                        record.check_out,
                        record.reason,
                        record.last_writer.value,
                        record.updated_at,
                    ),
                )
            except mysql.connector.IntegrityError as exc:
                # Unique (user_id, logical_date): a concurrent writer inserted first.
                if exc.errno == errorcode.ER_DUP_ENTRY:
                    return None
                raise
            return int(cur.lastrowid)

    def update_record(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, check_in_time=%s, check_out_time=%s, reason=%s, last_writer=%s, updated_at=%s
                WHERE record_id=%s
                """,
                (
                    record.status.value,
                    record.check_in,
                    record.check_out,
                    record.reason,
                    record.last_writer.value,
                    record.updated_at,
                    int(record.record_id),
                ),
            )
            return cur.rowcount > 0

    def list_open_for_date(self, *, organization_id: int, logical_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {", ".join("ar." + c.strip() for c in _COLUMNS.split(","))}
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.user_id
                WHERE u.organization_id=%s
                  AND ar.logical_date=%s
                  AND ar.status=%s
                  AND ar.check_out_time IS NULL
                  AND ar.last_writer=%s
                ORDER BY ar.user_id ASC
                """,
                (
                    int(organization_id),
                    logical_date,
                    AttendanceStatus.PRESENT.value,
                    WriterKind.SCAN.value,
                ),
            )
            return [_to_record(r) for r in fetchall(cur)]

from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Period, ScheduleConfig
from .repository import ScheduleConfigRepository


class MySQLScheduleConfigRepository(ScheduleConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_schedule_config(self, organization_id: int) -> Optional[ScheduleConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT late_limit_minutes, date_reset_time, school_start_time, school_end_time
                FROM organization_settings
                WHERE organization_id=%s
                """,
                (int(organization_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                """
                SELECT period_number, period_name, start_time, end_time
                FROM organization_time_slots
                WHERE organization_id=%s
                ORDER BY period_number ASC
                """,
                (int(organization_id),),
            )
            periods = tuple(
                Period(
                    index=int(s["period_number"]),
                    name=s.get("period_name"),
                    start=normalize_mysql_time(s["start_time"]),
                    end=normalize_mysql_time(s["end_time"]),
                )
                for s in fetchall(cur)
            )

            return ScheduleConfig(
                late_tolerance_minutes=int(r["late_limit_minutes"]),
                logical_day_reset_time=normalize_mysql_time(r["date_reset_time"]),
                school_start=normalize_mysql_time(r["school_start_time"]),
                school_end=normalize_mysql_time(r["school_end_time"]),
                periods=periods,
            )

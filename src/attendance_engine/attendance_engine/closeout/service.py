"""Nightly end-of-day sweep.

Open scan records (present, never checked out) are auto-closed, and active
members without any record for the day are marked absent. Both writes go
through the reconciler as batch writes, so they never overwrite a late
arrival, an approval decision or a checkout.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Set, Tuple

from ..attendance.reconciler import AttendanceReconciler
from ..attendance.repository import AttendanceRepository
from ..attendance.resolver import logical_date_for
from ..common.datetime_utils import Clock, SystemClock
from ..core.enums import AttendanceStatus, WriterKind
from ..schedules.service import ScheduleConfigProvider
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)

AUTO_CLOSE_REASON = "Auto-closed at end of day"


@dataclass(frozen=True)
class CloseoutReport:
    organization_id: int
    logical_date: date
    closed: int = 0
    marked_absent: int = 0
    skipped: bool = False


@dataclass
class CloseoutSummary:
    reports: List[CloseoutReport] = field(default_factory=list)
    failed_organizations: List[int] = field(default_factory=list)

    @property
    def closed(self) -> int:
        return sum(r.closed for r in self.reports)

    @property
    def marked_absent(self) -> int:
        return sum(r.marked_absent for r in self.reports)


class EndOfDayCloseout:
    def __init__(
        self,
        reconciler: AttendanceReconciler,
        records: AttendanceRepository,
        users: UserRepository,
        schedules: ScheduleConfigProvider,
        *,
        mark_absent: bool = True,
        clock: Clock | None = None,
    ):
        self._reconciler = reconciler
        self._records = records
        self._users = users
        self._schedules = schedules
        self._mark_absent = mark_absent
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()
        self._done: Set[Tuple[int, date]] = set()

    def run(self, organization_id: int, logical_date: date) -> CloseoutReport:
        at = self._clock.now()

        closed = 0
        for record in self._records.list_open_for_date(organization_id=int(organization_id), logical_date=logical_date):
            commit = self._reconciler.apply(
                record.person_id,
                logical_date,
                AttendanceStatus.AUTO_CLOSED,
                WriterKind.BATCH,
                reason=AUTO_CLOSE_REASON,
                at=at,
            )
            if commit.applied:
                closed += 1

        marked_absent = 0
        if self._mark_absent:
            for person_id in self._users.list_active_ids(int(organization_id)):
                commit = self._reconciler.apply(
                    person_id,
                    logical_date,
                    AttendanceStatus.ABSENT,
                    WriterKind.BATCH,
                    at=at,
                )
                if commit.created:
                    marked_absent += 1

        logger.info(
            "Closeout org=%s date=%s: closed=%s marked_absent=%s",
            organization_id, logical_date, closed, marked_absent,
        )
        return CloseoutReport(
            organization_id=int(organization_id),
            logical_date=logical_date,
            closed=closed,
            marked_absent=marked_absent,
        )

    def run_all(self, now: Optional[datetime] = None) -> CloseoutSummary:
        """Close out every organization's current logical day, once per day."""

        now = now or self._clock.now()
        summary = CloseoutSummary()

        # Overlapping triggers must not sweep the same day twice.
        with self._lock:
            for organization_id in self._users.list_organization_ids():
                config = self._schedules.get(organization_id)
                logical_date = logical_date_for(now, config.logical_day_reset_time)
                key = (int(organization_id), logical_date)
                # Earlier days of this organization can no longer be triggered.
                self._done = {k for k in self._done if k[0] != key[0] or k[1] >= logical_date}

                if key in self._done:
                    summary.reports.append(
                        CloseoutReport(organization_id=int(organization_id), logical_date=logical_date, skipped=True)
                    )
                    continue

                try:
                    report = self.run(organization_id, logical_date)
                except Exception:
                    logger.exception("Closeout failed for organization %s on %s", organization_id, logical_date)
                    summary.failed_organizations.append(int(organization_id))
                    continue

                self._done.add(key)
                summary.reports.append(report)

        return summary

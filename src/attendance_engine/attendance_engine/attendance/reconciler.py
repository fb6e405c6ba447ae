"""Owner of the authoritative per-person/per-day attendance record.

Every writer (scan, approval override, end-of-day batch) goes through
``AttendanceReconciler.apply``, which decides with ``may_replace`` whether the
proposed status replaces what is already stored.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import Clock, SystemClock
from ..core.enums import AttendanceStatus, WriterKind
from ..core.exceptions import StoreFailure
from ..database.connection import TransactionManager
from .model import AttendanceRecord, CommitResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def may_replace(
    existing: Optional[AttendanceRecord],
    writer: WriterKind,
    proposed: AttendanceStatus,
) -> bool:
    """Precedence of writer kinds on one (person, logical date) record.

    A higher-ranked writer replaces a lower one. Between two approval
    overrides the later decision wins. The only batch write over a scan is
    closing a record that is still open. A scan never replaces a record that
    already holds the day's arrival, even after the batch closed it.
    """

    if existing is None:
        return True
    if writer == WriterKind.SCAN and existing.check_in is not None:
        return False
    if writer.rank > existing.last_writer.rank:
        return True
    if writer == WriterKind.APPROVAL_OVERRIDE and existing.last_writer == WriterKind.APPROVAL_OVERRIDE:
        return True
    return writer == WriterKind.BATCH and proposed == AttendanceStatus.AUTO_CLOSED and existing.is_open


class AttendanceReconciler:
    def __init__(
        self,
        records: AttendanceRepository,
        transactions: TransactionManager,
        *,
        clock: Clock | None = None,
    ):
        self._records = records
        self._tx = transactions
        self._clock = clock or SystemClock()

    def apply(
        self,
        person_id: int,
        logical_date: date,
        proposed_status: AttendanceStatus,
        writer_kind: WriterKind,
        reason: Optional[str] = None,
        *,
        at: Optional[datetime] = None,
        check_in: Optional[datetime] = None,
    ) -> CommitResult:
        at = at or self._clock.now()

        with self._tx.transaction():
            # No locking read before the insert: FOR UPDATE on an absent key takes a
            # gap lock, and two such holders deadlock on their inserts.
            existing = self._records.get_for_person_and_date(int(person_id), logical_date)

            if existing is None:
                record = AttendanceRecord(
                    record_id=None,
                    person_id=int(person_id),
                    logical_date=logical_date,
                    status=proposed_status,
                    last_writer=writer_kind,
                    updated_at=at,
                    check_in=check_in,
                    reason=reason,
                )
                new_id = self._records.insert_if_absent(record)
                if new_id is not None:
                    logger.info(
                        "Attendance created: person=%s date=%s status=%s writer=%s",
                        person_id, logical_date, proposed_status.value, writer_kind.value,
                    )
                    return CommitResult(applied=True, created=True, record=replace(record, record_id=new_id))

                # Lost the insert race; evaluate precedence against the winner.

            existing = self._records.get_for_person_and_date(int(person_id), logical_date, for_update=True)
            if existing is None:
                raise StoreFailure("Attendance record could not be created")

            if not may_replace(existing, writer_kind, proposed_status):
                logger.debug(
                    "Attendance kept: person=%s date=%s status=%s (%s) rejected %s (%s)",
                    person_id, logical_date, existing.status.value, existing.last_writer.value,
                    proposed_status.value, writer_kind.value,
                )
                return CommitResult(applied=False, created=False, record=existing, previous_status=existing.status)

            updated = replace(
                existing,
                status=proposed_status,
                last_writer=writer_kind,
                updated_at=at,
                reason=reason if reason is not None else existing.reason,
                check_in=existing.check_in or check_in,
            )
            if not self._records.update_record(updated):
                raise StoreFailure("Attendance record update was not persisted")

        logger.info(
            "Attendance updated: person=%s date=%s %s -> %s writer=%s",
            person_id, logical_date, existing.status.value, proposed_status.value, writer_kind.value,
        )
        return CommitResult(applied=True, created=False, record=updated, previous_status=existing.status)

    def record_checkout(
        self,
        person_id: int,
        logical_date: date,
        *,
        at: datetime,
        decide: Callable[[AttendanceRecord], AttendanceStatus],
    ) -> Optional[CommitResult]:
        """Store the checkout time on an existing record, keeping its writer.

        Returns None when there is no record to check out of, and an
        unapplied result when the record was already checked out.
        """

        with self._tx.transaction():
            existing = self._records.get_for_person_and_date(int(person_id), logical_date, for_update=True)
            if existing is None:
                return None
            if existing.check_out is not None:
                return CommitResult(applied=False, created=False, record=existing, previous_status=existing.status)

            # Approval decisions keep their status; only the departure time is stored.
            if existing.last_writer == WriterKind.APPROVAL_OVERRIDE:
                status = existing.status
            else:
                status = decide(existing)

            updated = replace(existing, check_out=at, status=status, updated_at=at)
            if not self._records.update_record(updated):
                raise StoreFailure("Checkout was not persisted")

        logger.info("Checkout recorded: person=%s date=%s status=%s", person_id, logical_date, status.value)
        return CommitResult(applied=True, created=False, record=updated, previous_status=existing.status)

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_person_and_date(
        self,
        person_id: int,
        logical_date: date,
        *,
        for_update: bool = False,
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert_if_absent(self, record: AttendanceRecord) -> Optional[int]:
        """Insert unless (person_id, logical_date) already exists.

        Returns the new record id, or None when another writer got there first.
        """

        raise NotImplementedError

    def update_record(self, record: AttendanceRecord) -> bool:
        """Persist status/times/reason/writer of an existing record by record_id."""

        raise NotImplementedError

    def list_open_for_date(self, *, organization_id: int, logical_date: date) -> Sequence[AttendanceRecord]:
        """Scan-sourced PRESENT records without checkout for an organization's day."""

        raise NotImplementedError

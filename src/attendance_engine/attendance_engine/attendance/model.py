from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, WriterKind


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: the single attendance record of a person for a logical day."""

    record_id: Optional[int]
    person_id: int
    logical_date: date
    status: AttendanceStatus
    last_writer: WriterKind
    updated_at: datetime
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    reason: Optional[str] = None

    @property
    def is_open(self) -> bool:
        """Present from a scan and never checked out."""
        return (
            self.last_writer == WriterKind.SCAN
            and self.status == AttendanceStatus.PRESENT
            and self.check_out is None
        )


@dataclass(frozen=True)
class CommitResult:
    applied: bool
    created: bool
    record: AttendanceRecord
    previous_status: Optional[AttendanceStatus] = None


@dataclass(frozen=True)
class AttendanceOutcome:
    """Result of an arrival/departure event processed as attendance."""

    person_id: int
    logical_date: date
    status: AttendanceStatus
    period_name: Optional[str]
    already_recorded: bool
    message: str
    kind: str = "attendance"

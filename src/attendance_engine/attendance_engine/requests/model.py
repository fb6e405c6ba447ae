from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ApprovalAction, AttendanceStatus, RequestStatus


@dataclass(frozen=True)
class AbsenceRequest:
    request_id: int
    user_id: int
    request_type: str
    request_date: date
    reason: Optional[str]
    status: RequestStatus
    created_at: datetime


@dataclass(frozen=True)
class ApprovalHistoryEntry:
    request_id: int
    approver_id: int
    action: ApprovalAction
    comment: Optional[str]
    acted_at: datetime


@dataclass(frozen=True)
class Decision:
    """Outcome of approving or rejecting a request."""

    request_id: int
    status: RequestStatus
    attendance_status: Optional[AttendanceStatus] = None
    attendance_applied: bool = False


_ABSENT_TYPES = frozenset({"absence", "absent", "official_absence"})
_LATE_TYPES = frozenset({"late", "official_late"})
_EARLY_TYPES = frozenset({"early_departure", "early_leave"})


def status_for_request_type(request_type: str) -> AttendanceStatus:
    kind = (request_type or "").strip().lower()
    if kind in _ABSENT_TYPES:
        return AttendanceStatus.ABSENT
    if kind in _LATE_TYPES:
        return AttendanceStatus.LATE
    if kind in _EARLY_TYPES:
        return AttendanceStatus.EARLY_DEPARTURE
    return AttendanceStatus.PRESENT

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for endpoint access checks."""

    ADMIN = "admin"
    STAFF = "staff"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored in the database."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    EARLY_DEPARTURE = "early_departure"
    AUTO_CLOSED = "auto_left"


class WriterKind(str, Enum):
    """Provenance of the last write to an attendance record.

    ``rank`` orders the writers; a higher rank replaces a lower one.
    """

    BATCH = "batch"
    SCAN = "scan"
    APPROVAL_OVERRIDE = "approval_override"

    @property
    def rank(self) -> int:
        return _WRITER_RANK[self]


_WRITER_RANK = {
    WriterKind.BATCH: 1,
    WriterKind.SCAN: 2,
    WriterKind.APPROVAL_OVERRIDE: 3,
}


class PairingState(str, Enum):
    IDLE = "idle"
    WAITING = "waiting"
    SCANNED = "scanned"


class RequestStatus(str, Enum):
    """Approval flow status of an absence/lateness request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorKind(str, Enum):
    """Kinds of expected business failures reported to callers."""

    CONFLICT = "conflict"
    INVALID_SESSION = "invalid_session"
    UNKNOWN_CARD = "unknown_card"
    INVALID_STATE = "invalid_state"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFIG_UNAVAILABLE = "config_unavailable"
    STORE_FAILURE = "store_failure"

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalAction, RequestStatus
from .model import AbsenceRequest, ApprovalHistoryEntry


class RequestRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        request_type: str,
        request_date: date,
        reason: Optional[str],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int, *, for_update: bool = False) -> Optional[AbsenceRequest]:
        raise NotImplementedError

    def set_status(self, request_id: int, status: RequestStatus) -> bool:
        raise NotImplementedError

    def append_history(
        self,
        *,
        request_id: int,
        approver_id: int,
        action: ApprovalAction,
        comment: Optional[str],
        acted_at: datetime,
    ) -> None:
        raise NotImplementedError

    def list_history(self, request_id: int) -> Sequence[ApprovalHistoryEntry]:
        """Newest entry first."""

        raise NotImplementedError

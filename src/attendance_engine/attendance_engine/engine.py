"""Entry points of the attendance engine.

Every operation returns a ``Result``: expected business failures come back
as an error kind and message instead of an exception.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, TypeVar

from .attendance.model import AttendanceOutcome
from .attendance.scan_router import ScanOutcome, ScanRouter
from .attendance.service import AttendanceService
from .closeout.service import CloseoutReport, CloseoutSummary, EndOfDayCloseout
from .core.exceptions import DomainError
from .core.result import Result
from .pairing.manager import PairingSessionManager
from .pairing.model import PairingStatus
from .requests.model import Decision
from .requests.service import ApprovalWorkflow

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _run(operation: str, fn: Callable[[], T]) -> Result[T]:
    try:
        return Result.success(fn())
    except DomainError as exc:
        logger.info("%s failed (%s): %s", operation, exc.kind.value, exc)
        return Result.from_error(exc)


class AttendanceEngine:
    def __init__(
        self,
        pairing: PairingSessionManager,
        scan_router: ScanRouter,
        attendance: AttendanceService,
        approvals: ApprovalWorkflow,
        closeout: EndOfDayCloseout,
    ):
        self._pairing = pairing
        self._scan_router = scan_router
        self._attendance = attendance
        self._approvals = approvals
        self._closeout = closeout

    # -------- Card pairing --------
    def start_pairing(self, user_id: int) -> Result[PairingStatus]:
        return _run("start_pairing", lambda: self._pairing.start(user_id))

    def get_pairing_status(self, user_id: int) -> Result[PairingStatus]:
        return _run("get_pairing_status", lambda: self._pairing.status(user_id))

    def confirm_pairing(self, user_id: int) -> Result[str]:
        return _run("confirm_pairing", lambda: self._pairing.confirm(user_id))

    def cancel_pairing(self, user_id: int) -> Result[None]:
        return _run("cancel_pairing", lambda: self._pairing.cancel(user_id))

    # -------- Attendance --------
    def handle_card_scan(self, card_id: str, *, at: Optional[datetime] = None) -> Result[ScanOutcome]:
        return _run("handle_card_scan", lambda: self._scan_router.handle_scan(card_id, at=at))

    def record_qr_scan(self, user_id: int, *, at: Optional[datetime] = None) -> Result[AttendanceOutcome]:
        return _run("record_qr_scan", lambda: self._attendance.record_qr_scan(user_id, at=at))

    def record_checkout(self, user_id: int, *, at: Optional[datetime] = None) -> Result[AttendanceOutcome]:
        return _run("record_checkout", lambda: self._attendance.record_checkout(user_id, at=at))

    # -------- Requests --------
    def approve_request(self, request_id: int, approver_id: int, comment: Optional[str] = None) -> Result[Decision]:
        return _run("approve_request", lambda: self._approvals.approve(request_id, approver_id, comment))

    def reject_request(self, request_id: int, approver_id: int, comment: Optional[str] = None) -> Result[Decision]:
        return _run("reject_request", lambda: self._approvals.reject(request_id, approver_id, comment))

    # -------- Batch --------
    def run_end_of_day_closeout(
        self,
        organization_id: Optional[int] = None,
        logical_date: Optional[date] = None,
    ) -> Result[CloseoutReport | CloseoutSummary]:
        """One organization/day when both are given, otherwise every organization's current day."""

        if organization_id is not None and logical_date is not None:
            return _run("run_end_of_day_closeout", lambda: self._closeout.run(organization_id, logical_date))
        return _run("run_end_of_day_closeout", lambda: self._closeout.run_all())

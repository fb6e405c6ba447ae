"""Approval of absence/lateness requests.

Approving a request overrides the requester's attendance for the request
date; rejecting only records the decision. History, request status and the
attendance write commit together. The requester is notified after commit.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..attendance.reconciler import AttendanceReconciler
from ..common.datetime_utils import Clock, SystemClock
from ..common.validators import optional_text, require_non_empty
from ..core.enums import ApprovalAction, NotificationPriority, RequestStatus, WriterKind
from ..core.exceptions import InvalidStateError, NotFoundError, StoreFailure
from ..database.connection import TransactionManager
from ..notifications.service import Notifier
from ..users.repository import UserRepository
from .model import AbsenceRequest, ApprovalHistoryEntry, Decision, status_for_request_type
from .repository import RequestRepository

logger = logging.getLogger(__name__)


class ApprovalWorkflow:
    def __init__(
        self,
        requests: RequestRepository,
        reconciler: AttendanceReconciler,
        transactions: TransactionManager,
        notifier: Notifier,
        *,
        users: UserRepository | None = None,
        clock: Clock | None = None,
    ):
        self._requests = requests
        self._reconciler = reconciler
        self._tx = transactions
        self._notifier = notifier
        self._users = users
        self._clock = clock or SystemClock()

    def submit(self, *, user_id: int, request_type: str, request_date: date, reason: Optional[str] = None) -> int:
        request_type = require_non_empty(request_type, "Request type").lower()
        if self._users is not None and self._users.get_by_id(int(user_id)) is None:
            raise NotFoundError(f"User {user_id} does not exist")

        request_id = self._requests.create(
            user_id=int(user_id),
            request_type=request_type,
            request_date=request_date,
            reason=optional_text(reason),
            created_at=self._clock.now(),
        )
        logger.info("Request %s submitted by user %s (%s on %s)", request_id, user_id, request_type, request_date)
        return request_id

    def history(self, request_id: int) -> Sequence[ApprovalHistoryEntry]:
        if self._requests.get_by_id(int(request_id)) is None:
            raise NotFoundError(f"Request {request_id} does not exist")
        return self._requests.list_history(int(request_id))

    def _load_pending(self, request_id: int) -> AbsenceRequest:
        req = self._requests.get_by_id(int(request_id), for_update=True)
        if req is None:
            raise NotFoundError(f"Request {request_id} does not exist")
        if req.status != RequestStatus.PENDING:
            raise InvalidStateError(f"Request {request_id} is already {req.status.value}")
        return req

    def _record_decision(
        self,
        req: AbsenceRequest,
        *,
        approver_id: int,
        action: ApprovalAction,
        status: RequestStatus,
        comment: Optional[str],
    ) -> None:
        self._requests.append_history(
            request_id=req.request_id,
            approver_id=int(approver_id),
            action=action,
            comment=comment,
            acted_at=self._clock.now(),
        )
        if not self._requests.set_status(req.request_id, status):
            raise StoreFailure(f"Request {req.request_id} status was not persisted")

    def approve(self, request_id: int, approver_id: int, comment: Optional[str] = None) -> Decision:
        comment = optional_text(comment)

        with self._tx.transaction():
            req = self._load_pending(request_id)
            self._record_decision(
                req, approver_id=approver_id, action=ApprovalAction.APPROVE, status=RequestStatus.APPROVED, comment=comment
            )
            commit = self._reconciler.apply(
                req.user_id,
                req.request_date,
                status_for_request_type(req.request_type),
                WriterKind.APPROVAL_OVERRIDE,
                reason=req.reason,
            )

        logger.info(
            "Request %s approved by %s: user=%s date=%s status=%s",
            req.request_id, approver_id, req.user_id, req.request_date, commit.record.status.value,
        )
        self._notify(
            req.user_id,
            "Request approved",
            f"Your {req.request_type} request for {req.request_date.isoformat()} was approved.",
            NotificationPriority.MEDIUM,
        )
        return Decision(
            request_id=req.request_id,
            status=RequestStatus.APPROVED,
            attendance_status=commit.record.status,
            attendance_applied=commit.applied,
        )

    def reject(self, request_id: int, approver_id: int, comment: Optional[str] = None) -> Decision:
        comment = optional_text(comment)

        with self._tx.transaction():
            req = self._load_pending(request_id)
            self._record_decision(
                req, approver_id=approver_id, action=ApprovalAction.REJECT, status=RequestStatus.REJECTED, comment=comment
            )

        logger.info("Request %s rejected by %s", req.request_id, approver_id)
        body = f"Your {req.request_type} request for {req.request_date.isoformat()} was rejected."
        if comment:
            body += f" Comment: {comment}"
        self._notify(req.user_id, "Request rejected", body, NotificationPriority.HIGH)
        return Decision(request_id=req.request_id, status=RequestStatus.REJECTED)

    def _notify(self, user_id: int, title: str, body: str, priority: NotificationPriority) -> None:
        try:
            self._notifier.notify(user_id, title, body, priority)
        except Exception:
            logger.exception("Could not notify user %s", user_id)

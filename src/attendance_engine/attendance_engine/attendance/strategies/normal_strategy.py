from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time arrival, normal departure."""

    def decide_arrival(self, *, event_at: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_departure(self, *, event_at: datetime, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)

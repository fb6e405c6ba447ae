from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Arrival after school start plus the late tolerance."""

    def decide_arrival(self, *, event_at: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Arrived {event_at:%H:%M:%S}")

    def decide_departure(self, *, event_at: datetime, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)

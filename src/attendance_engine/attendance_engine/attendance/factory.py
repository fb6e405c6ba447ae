from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time

from ..core.enums import AttendanceStatus
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyDepartureStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_arrival(self, *, event_at: datetime, late_limit: time) -> AttendanceStrategy:
        # Inclusive boundary: arriving exactly at the limit is on time.
        if event_at.time() <= late_limit:
            return NormalStrategy()
        return LateStrategy()

    def for_departure(
        self,
        *,
        event_at: datetime,
        logical_date: date,
        school_end: time,
        current_status: AttendanceStatus,
    ) -> AttendanceStrategy:
        # After midnight the checkout still belongs to the previous day, past its end.
        if event_at.date() != logical_date:
            return NormalStrategy()
        if event_at.time() < school_end and current_status == AttendanceStatus.PRESENT:
            return EarlyDepartureStrategy()
        return NormalStrategy()

"""Logical time resolution: which school day and period an event belongs to."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import add_minutes
from ..core.enums import AttendanceStatus
from ..schedules.model import FALLBACK_PERIODS, Period, ScheduleConfig
from .factory import AttendanceStrategyFactory


@dataclass(frozen=True)
class TimeResolution:
    logical_date: date
    period_name: Optional[str]
    late_limit: time
    status: AttendanceStatus
    note: Optional[str] = None


def logical_date_for(event_at: datetime, reset_time: time) -> date:
    """Events before the reset time belong to the previous day."""
    if event_at.time() < reset_time:
        return event_at.date() - timedelta(days=1)
    return event_at.date()


def late_limit_for(config: ScheduleConfig) -> time:
    return add_minutes(config.school_start, config.late_tolerance_minutes)


def match_period(event_at: datetime, periods: Sequence[Period]) -> Optional[Period]:
    """First period containing the event, both ends inclusive, at minute resolution."""
    hm = event_at.time().replace(second=0, microsecond=0)
    for period in periods:
        if period.start <= hm <= period.end:
            return period
    return None


class LogicalTimeResolver:
    """Pure layer turning a wall-clock event into logical date, period and status.

    Lateness is judged against the school-wide start time, never the matched
    period's start; the period is reported for display only.
    """

    def __init__(self, strategy_factory: AttendanceStrategyFactory | None = None):
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def resolve(self, event_at: datetime, config: ScheduleConfig) -> TimeResolution:
        late_limit = late_limit_for(config)
        period = match_period(event_at, config.periods or FALLBACK_PERIODS)

        strategy = self._factory.for_arrival(event_at=event_at, late_limit=late_limit)
        decision = strategy.decide_arrival(event_at=event_at)

        return TimeResolution(
            logical_date=logical_date_for(event_at, config.logical_day_reset_time),
            period_name=period.label if period else None,
            late_limit=late_limit,
            status=decision.status,
            note=decision.note,
        )

    def logical_date(self, event_at: datetime, config: ScheduleConfig) -> date:
        return logical_date_for(event_at, config.logical_day_reset_time)

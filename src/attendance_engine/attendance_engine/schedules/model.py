from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Optional, Tuple

from ..core.constants import (
    DEFAULT_DAY_RESET_TIME,
    DEFAULT_LATE_TOLERANCE_MINUTES,
    DEFAULT_SCHOOL_END,
    DEFAULT_SCHOOL_START,
)


@dataclass(frozen=True)
class Period:
    """A named class period (time slot) of the school day."""

    index: int
    name: Optional[str]
    start: time
    end: time

    @property
    def label(self) -> str:
        return self.name or f"Period {self.index}"


# Degraded-mode timetable used when the settings store has no periods.
FALLBACK_PERIODS: Tuple[Period, ...] = (
    Period(1, "Period 1", time(9, 0), time(10, 30)),
    Period(2, "Period 2", time(10, 40), time(12, 10)),
    Period(3, "Period 3", time(13, 0), time(14, 30)),
    Period(4, "Period 4", time(14, 40), time(16, 10)),
    Period(5, "Period 5", time(16, 20), time(17, 50)),
)


@dataclass(frozen=True)
class ScheduleConfig:
    """Organization timing rules, read-only snapshot per fetch."""

    late_tolerance_minutes: int = DEFAULT_LATE_TOLERANCE_MINUTES
    logical_day_reset_time: time = DEFAULT_DAY_RESET_TIME
    school_start: time = DEFAULT_SCHOOL_START
    school_end: time = DEFAULT_SCHOOL_END
    periods: Tuple[Period, ...] = field(default=FALLBACK_PERIODS)
    degraded: bool = False

    @classmethod
    def fallback(cls) -> "ScheduleConfig":
        return cls(degraded=True)

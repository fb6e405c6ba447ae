from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import Clock, SystemClock
from ..core.enums import AttendanceStatus, WriterKind
from ..core.exceptions import NotFoundError, ValidationError
from ..schedules.model import ScheduleConfig
from ..schedules.service import ScheduleConfigProvider
from ..users.model import User
from ..users.repository import UserRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceOutcome, AttendanceRecord
from .reconciler import AttendanceReconciler
from .resolver import LogicalTimeResolver, TimeResolution

logger = logging.getLogger(__name__)


class AttendanceService:
    """Arrival (card/QR) and departure processing for a known user."""

    def __init__(
        self,
        reconciler: AttendanceReconciler,
        users: UserRepository,
        schedules: ScheduleConfigProvider,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        clock: Clock | None = None,
    ):
        self._reconciler = reconciler
        self._users = users
        self._schedules = schedules
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._resolver = LogicalTimeResolver(self._factory)
        self._clock = clock or SystemClock()

    def _get_active_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError(f"User {user_id} does not exist")
        if not user.is_active:
            raise ValidationError(f"User {user_id} is inactive")
        return user

    def record_arrival(self, user_id: int, *, at: Optional[datetime] = None) -> AttendanceOutcome:
        user = self._get_active_user(user_id)
        at = at or self._clock.now()

        config = self._schedules.get(user.organization_id)
        resolution = self._resolver.resolve(at, config)

        commit = self._reconciler.apply(
            user.user_id,
            resolution.logical_date,
            resolution.status,
            WriterKind.SCAN,
            at=at,
            check_in=at,
        )
        if not commit.applied:
            logger.info("Attendance already recorded: user=%s date=%s", user.user_id, resolution.logical_date)
            return AttendanceOutcome(
                person_id=user.user_id,
                logical_date=resolution.logical_date,
                status=commit.record.status,
                period_name=resolution.period_name,
                already_recorded=True,
                message=f"{user.full_name}: attendance already recorded",
            )

        return AttendanceOutcome(
            person_id=user.user_id,
            logical_date=resolution.logical_date,
            status=commit.record.status,
            period_name=resolution.period_name,
            already_recorded=False,
            message=self._arrival_message(user, resolution, config),
        )

    def record_qr_scan(self, user_id: int, *, at: Optional[datetime] = None) -> AttendanceOutcome:
        return self.record_arrival(user_id, at=at)

    def record_checkout(self, user_id: int, *, at: Optional[datetime] = None) -> AttendanceOutcome:
        user = self._get_active_user(user_id)
        at = at or self._clock.now()

        config = self._schedules.get(user.organization_id)
        logical_date = self._resolver.logical_date(at, config)

        def decide(record: AttendanceRecord) -> AttendanceStatus:
            strategy = self._factory.for_departure(
                event_at=at,
                logical_date=logical_date,
                school_end=config.school_end,
                current_status=record.status,
            )
            return strategy.decide_departure(event_at=at, current=record.status).status

        commit = self._reconciler.record_checkout(user.user_id, logical_date, at=at, decide=decide)
        if commit is None:
            raise ValidationError("No arrival recorded for today")
        if not commit.applied:
            raise ValidationError("Checkout already recorded for today")

        return AttendanceOutcome(
            person_id=user.user_id,
            logical_date=logical_date,
            status=commit.record.status,
            period_name=None,
            already_recorded=False,
            message=f"{user.full_name}: checkout recorded",
        )

    @staticmethod
    def _arrival_message(user: User, resolution: TimeResolution, config: ScheduleConfig) -> str:
        if resolution.status == AttendanceStatus.PRESENT:
            where = resolution.period_name or "outside class hours"
            return f"{user.full_name}: attendance recorded ({where})"

        message = f"{user.full_name}: late, school starts at {config.school_start:%H:%M}"
        if resolution.period_name:
            message += f" (now: {resolution.period_name})"
        return message

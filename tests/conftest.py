from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from src.attendance_engine.attendance_engine.attendance.model import AttendanceRecord
from src.attendance_engine.attendance_engine.container import assemble
from src.attendance_engine.attendance_engine.core.enums import RequestStatus, Role
from src.attendance_engine.attendance_engine.core.exceptions import ConflictError, StoreFailure
from src.attendance_engine.attendance_engine.requests.model import AbsenceRequest, ApprovalHistoryEntry
from src.attendance_engine.attendance_engine.schedules.model import ScheduleConfig
from src.attendance_engine.attendance_engine.users.model import User


class FakeClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **delta) -> None:
        self.current = self.current + timedelta(**delta)


class InMemoryTransactions:
    """Snapshots every store on entry and restores them if the block raises."""

    def __init__(self, *stores):
        self._stores = list(stores)
        self._depth = 0
        self.commits = 0

    @contextmanager
    def transaction(self):
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        snapshots = [s.snapshot() for s in self._stores]
        self._depth = 1
        try:
            yield
            self.commits += 1
        except Exception:
            for store, snap in zip(self._stores, snapshots):
                store.restore(snap)
            raise
        finally:
            self._depth = 0


class InMemoryUsers:
    def __init__(self, users: list[User], extra_organizations: tuple[int, ...] = ()):
        self.users = {u.user_id: u for u in users}
        self.extra_organizations = set(extra_organizations)
        self.failing_organizations: set[int] = set()

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(int(user_id))

    def list_active_ids(self, organization_id: int):
        if organization_id in self.failing_organizations:
            raise StoreFailure("Database error: lost connection")
        return sorted(u.user_id for u in self.users.values() if u.organization_id == organization_id and u.is_active)

    def list_organization_ids(self):
        return sorted({u.organization_id for u in self.users.values()} | self.extra_organizations)


class InMemoryAttendance:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.records: dict[tuple[int, date], AttendanceRecord] = {}
        self._next_id = 1
        self.fail_writes = False

    def snapshot(self):
        return dict(self.records), self._next_id

    def restore(self, snap) -> None:
        self.records, self._next_id = dict(snap[0]), snap[1]

    def get_for_person_and_date(self, person_id, logical_date, *, for_update=False):
        return self.records.get((int(person_id), logical_date))

    def insert_if_absent(self, record: AttendanceRecord):
        if self.fail_writes:
            raise StoreFailure("Database error: write failed")
        key = (record.person_id, record.logical_date)
        if key in self.records:
            return None
        record_id = self._next_id
        self._next_id += 1
        self.records[key] = replace(record, record_id=record_id)
        return record_id

    def update_record(self, record: AttendanceRecord) -> bool:
        if self.fail_writes:
            raise StoreFailure("Database error: write failed")
        key = (record.person_id, record.logical_date)
        if key not in self.records:
            return False
        self.records[key] = record
        return True

    def list_open_for_date(self, *, organization_id, logical_date):
        return [
            r
            for (person_id, day), r in sorted(self.records.items())
            if day == logical_date
            and r.is_open
            and self._users.get_by_id(person_id).organization_id == organization_id
        ]

    def seed(self, person_id, logical_date, status, writer, *, at, check_in=None, check_out=None, reason=None):
        record = AttendanceRecord(
            record_id=None,
            person_id=person_id,
            logical_date=logical_date,
            status=status,
            last_writer=writer,
            updated_at=at,
            check_in=check_in,
            check_out=check_out,
            reason=reason,
        )
        self.insert_if_absent(record)
        return self.records[(person_id, logical_date)]


class InMemoryCards:
    def __init__(self):
        self.bindings: dict[str, int] = {}
        self.fail_bind = False

    def get_user_id(self, card_id: str):
        return self.bindings.get(card_id)

    def is_bound(self, card_id: str) -> bool:
        return card_id in self.bindings

    def bind(self, *, card_id: str, user_id: int, bound_at: datetime) -> None:
        if self.fail_bind:
            raise StoreFailure("Database is unavailable")
        owner = self.bindings.get(card_id)
        if owner is not None and owner != user_id:
            raise ConflictError("Card is already in use")
        for cid in [c for c, u in self.bindings.items() if u == user_id]:
            del self.bindings[cid]
        self.bindings[card_id] = user_id


class InMemorySettings:
    def __init__(self):
        self.configs: dict[int, ScheduleConfig] = {}
        self.failing: set[int] = set()

    def get_schedule_config(self, organization_id: int):
        if organization_id in self.failing:
            raise StoreFailure("Database is unavailable")
        return self.configs.get(organization_id)


class InMemoryRequests:
    def __init__(self):
        self.requests: dict[int, AbsenceRequest] = {}
        self.history: list[ApprovalHistoryEntry] = []
        self._next_id = 1

    def snapshot(self):
        return dict(self.requests), list(self.history), self._next_id

    def restore(self, snap) -> None:
        self.requests, self.history, self._next_id = dict(snap[0]), list(snap[1]), snap[2]

    def create(self, *, user_id, request_type, request_date, reason, created_at) -> int:
        request_id = self._next_id
        self._next_id += 1
        self.requests[request_id] = AbsenceRequest(
            request_id=request_id,
            user_id=int(user_id),
            request_type=request_type,
            request_date=request_date,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=created_at,
        )
        return request_id

    def get_by_id(self, request_id, *, for_update=False):
        return self.requests.get(int(request_id))

    def set_status(self, request_id, status) -> bool:
        req = self.requests.get(int(request_id))
        if req is None:
            return False
        self.requests[int(request_id)] = replace(req, status=status)
        return True

    def append_history(self, *, request_id, approver_id, action, comment, acted_at) -> None:
        self.history.append(
            ApprovalHistoryEntry(
                request_id=int(request_id),
                approver_id=int(approver_id),
                action=action,
                comment=comment,
                acted_at=acted_at,
            )
        )

    def list_history(self, request_id):
        entries = [h for h in self.history if h.request_id == int(request_id)]
        return list(reversed(entries))


class RecordingNotifier:
    def __init__(self):
        self.sent: list[tuple] = []
        self.fail = False

    def notify(self, user_id, title, body, priority) -> None:
        if self.fail:
            raise RuntimeError("mail server down")
        self.sent.append((user_id, title, body, priority))


class World:
    """Engine wired on in-memory stores, with handles on every fake."""

    def __init__(self, *, now: datetime):
        self.clock = FakeClock(now)
        self.users = InMemoryUsers(
            [
                User(1, 1, "Alice"),
                User(2, 1, "Bob"),
                User(4, 1, "Dave", is_active=False),
                User(3, 2, "Carol"),
                User(9, 3, "Admin", role=Role.ADMIN),
            ]
        )
        self.attendance = InMemoryAttendance(self.users)
        self.cards = InMemoryCards()
        self.settings = InMemorySettings()
        self.requests = InMemoryRequests()
        self.notifier = RecordingNotifier()
        self.transactions = InMemoryTransactions(self.attendance, self.requests)

        for org in (1, 2, 3):
            self.settings.configs[org] = ScheduleConfig()

        self.container = assemble(
            transactions=self.transactions,
            users_repo=self.users,
            cards_repo=self.cards,
            attendance_repo=self.attendance,
            settings_repo=self.settings,
            requests_repo=self.requests,
            notifier=self.notifier,
            clock=self.clock,
        )
        self.engine = self.container.engine

    def record(self, person_id: int, logical_date: date) -> Optional[AttendanceRecord]:
        return self.attendance.records.get((person_id, logical_date))

    def at(self, value: datetime) -> None:
        self.clock.current = value


@pytest.fixture
def world() -> World:
    return World(now=datetime(2026, 2, 10, 8, 50, 0))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 2, 10, 8, 50, 0))

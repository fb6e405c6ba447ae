from datetime import date, datetime

import pytest

from src.attendance_engine.attendance_engine.core.enums import (
    ApprovalAction,
    AttendanceStatus,
    NotificationPriority,
    RequestStatus,
    WriterKind,
)
from src.attendance_engine.attendance_engine.core.exceptions import (
    InvalidStateError,
    NotFoundError,
    StoreFailure,
    ValidationError,
)
from src.attendance_engine.attendance_engine.requests.model import status_for_request_type

DAY = date(2026, 2, 10)


@pytest.fixture
def workflow(world):
    return world.container.approvals


def _submit(workflow, request_type="absence", user_id=1, reason="fever"):
    return workflow.submit(user_id=user_id, request_type=request_type, request_date=DAY, reason=reason)


@pytest.mark.parametrize(
    "request_type, expected",
    [
        ("absence", AttendanceStatus.ABSENT),
        ("official_absence", AttendanceStatus.ABSENT),
        ("late", AttendanceStatus.LATE),
        ("official_late", AttendanceStatus.LATE),
        ("early_leave", AttendanceStatus.EARLY_DEPARTURE),
        ("field_trip", AttendanceStatus.PRESENT),
    ],
)
def test_request_type_mapping(request_type, expected):
    assert status_for_request_type(request_type) == expected


def test_submit_creates_pending_request(world, workflow):
    request_id = _submit(workflow, request_type=" Absence ")

    req = world.requests.requests[request_id]
    assert req.status == RequestStatus.PENDING
    assert req.request_type == "absence"
    assert req.reason == "fever"


def test_submit_requires_type_and_known_user(workflow):
    with pytest.raises(ValidationError):
        _submit(workflow, request_type="")
    with pytest.raises(NotFoundError):
        _submit(workflow, user_id=404)


def test_approval_overrides_scanned_present(world, workflow):
    world.container.attendance_service.record_qr_scan(1)
    request_id = _submit(workflow)

    decision = workflow.approve(request_id, approver_id=9, comment="ok")

    record = world.record(1, DAY)
    assert decision.status == RequestStatus.APPROVED
    assert decision.attendance_status == AttendanceStatus.ABSENT
    assert record.status == AttendanceStatus.ABSENT
    assert record.last_writer == WriterKind.APPROVAL_OVERRIDE
    assert record.reason == "fever"
    assert world.requests.requests[request_id].status == RequestStatus.APPROVED
    assert world.notifier.sent[-1][0] == 1
    assert world.notifier.sent[-1][3] == NotificationPriority.MEDIUM


def test_approval_without_existing_record_creates_one(world, workflow):
    request_id = _submit(workflow, request_type="late")

    workflow.approve(request_id, approver_id=9)

    record = world.record(1, DAY)
    assert record.status == AttendanceStatus.LATE
    assert record.check_in is None


def test_rejection_leaves_attendance_untouched(world, workflow):
    world.container.attendance_service.record_qr_scan(1)
    before = world.record(1, DAY)
    request_id = _submit(workflow)

    decision = workflow.reject(request_id, approver_id=9, comment="no proof")

    assert decision.status == RequestStatus.REJECTED
    assert world.record(1, DAY) == before
    user_id, _, body, priority = world.notifier.sent[-1]
    assert user_id == 1
    assert priority == NotificationPriority.HIGH
    assert "no proof" in body


def test_deciding_twice_is_invalid_state(workflow):
    request_id = _submit(workflow)
    workflow.approve(request_id, approver_id=9)

    with pytest.raises(InvalidStateError):
        workflow.approve(request_id, approver_id=9)
    with pytest.raises(InvalidStateError):
        workflow.reject(request_id, approver_id=9)


def test_unknown_request_is_not_found(workflow):
    with pytest.raises(NotFoundError):
        workflow.approve(999, approver_id=9)
    with pytest.raises(NotFoundError):
        workflow.history(999)


def test_failed_attendance_write_rolls_back_approval(world, workflow):
    request_id = _submit(workflow)
    world.attendance.fail_writes = True

    with pytest.raises(StoreFailure):
        workflow.approve(request_id, approver_id=9)

    assert world.requests.requests[request_id].status == RequestStatus.PENDING
    assert world.requests.history == []
    assert world.notifier.sent == []


def test_notification_failure_does_not_undo_approval(world, workflow):
    request_id = _submit(workflow)
    world.notifier.fail = True

    decision = workflow.approve(request_id, approver_id=9)

    assert decision.status == RequestStatus.APPROVED
    assert world.record(1, DAY).status == AttendanceStatus.ABSENT


def test_history_lists_newest_first(world, workflow):
    first = _submit(workflow)
    world.clock.advance(minutes=5)
    workflow.reject(first, approver_id=9, comment="  ")

    entries = workflow.history(first)

    assert len(entries) == 1
    assert entries[0].action == ApprovalAction.REJECT
    assert entries[0].comment is None
    assert entries[0].acted_at == datetime(2026, 2, 10, 8, 55)

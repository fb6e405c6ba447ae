from datetime import date, datetime, time

import pytest

from src.attendance_engine.attendance_engine.attendance.model import AttendanceOutcome
from src.attendance_engine.attendance_engine.core.enums import AttendanceStatus, WriterKind
from src.attendance_engine.attendance_engine.core.exceptions import NotFoundError, UnknownCardError, ValidationError
from src.attendance_engine.attendance_engine.pairing.model import PairingOutcome
from src.attendance_engine.attendance_engine.schedules.model import ScheduleConfig

DAY = date(2026, 2, 10)


def test_bound_card_scan_records_present(world):
    world.cards.bindings["CARD-A"] = 1

    outcome = world.container.scan_router.handle_scan("CARD-A")

    assert isinstance(outcome, AttendanceOutcome)
    assert outcome.status == AttendanceStatus.PRESENT
    assert not outcome.already_recorded
    assert outcome.period_name is None
    record = world.record(1, DAY)
    assert record.last_writer == WriterKind.SCAN
    assert record.check_in == datetime(2026, 2, 10, 8, 50)


def test_second_scan_same_day_is_already_recorded(world):
    world.cards.bindings["CARD-A"] = 1
    router = world.container.scan_router
    router.handle_scan("CARD-A")
    first_updated = world.record(1, DAY).updated_at

    world.clock.advance(hours=2)
    outcome = router.handle_scan("CARD-A")

    assert outcome.already_recorded
    assert outcome.status == AttendanceStatus.PRESENT
    assert len(world.attendance.records) == 1
    assert world.record(1, DAY).updated_at == first_updated


def test_scan_after_tolerance_is_late_with_period(world):
    world.cards.bindings["CARD-A"] = 1
    world.at(datetime(2026, 2, 10, 10, 45))

    outcome = world.container.scan_router.handle_scan("CARD-A")

    assert outcome.status == AttendanceStatus.LATE
    assert outcome.period_name == "Period 2"
    assert "09:00" in outcome.message


def test_scan_after_midnight_counts_for_previous_day(world):
    world.cards.bindings["CARD-A"] = 1
    world.at(datetime(2026, 2, 10, 3, 50))

    outcome = world.container.scan_router.handle_scan("CARD-A")

    assert outcome.logical_date == date(2026, 2, 9)
    assert world.record(1, date(2026, 2, 9)) is not None


def test_unknown_card_writes_nothing(world):
    with pytest.raises(UnknownCardError):
        world.container.scan_router.handle_scan("NOPE")

    assert world.attendance.records == {}


def test_blank_card_id_is_rejected(world):
    with pytest.raises(ValidationError):
        world.container.scan_router.handle_scan("  ")


def test_scan_during_pairing_is_not_attendance(world):
    world.cards.bindings["CARD-A"] = 1
    world.container.pairing.start(2)

    outcome = world.container.scan_router.handle_scan("NEW-CARD")

    assert isinstance(outcome, PairingOutcome)
    assert outcome.accepted
    assert world.attendance.records == {}


def test_scan_over_batch_absence_records_arrival(world):
    world.cards.bindings["CARD-A"] = 1
    world.attendance.seed(1, DAY, AttendanceStatus.ABSENT, WriterKind.BATCH, at=datetime(2026, 2, 10, 0, 0))
    world.at(datetime(2026, 2, 10, 9, 40))

    outcome = world.container.scan_router.handle_scan("CARD-A")

    assert not outcome.already_recorded
    assert world.record(1, DAY).status == AttendanceStatus.LATE
    assert world.record(1, DAY).last_writer == WriterKind.SCAN


def test_scan_after_approval_keeps_approval(world):
    world.cards.bindings["CARD-A"] = 1
    world.attendance.seed(1, DAY, AttendanceStatus.ABSENT, WriterKind.APPROVAL_OVERRIDE, at=datetime(2026, 2, 9, 18, 0))

    outcome = world.container.scan_router.handle_scan("CARD-A")

    assert outcome.already_recorded
    assert outcome.status == AttendanceStatus.ABSENT


def test_org_specific_schedule_is_used(world):
    world.settings.configs[2] = ScheduleConfig(school_start=time(8, 0), late_tolerance_minutes=10)
    world.cards.bindings["CARD-C"] = 3

    outcome = world.container.scan_router.handle_scan("CARD-C")

    assert outcome.status == AttendanceStatus.LATE


def test_qr_scan_for_unknown_user(world):
    with pytest.raises(NotFoundError):
        world.container.attendance_service.record_qr_scan(404)


def test_qr_scan_for_inactive_user(world):
    with pytest.raises(ValidationError):
        world.container.attendance_service.record_qr_scan(4)


def test_checkout_before_end_marks_early_departure(world):
    service = world.container.attendance_service
    service.record_qr_scan(1)
    world.at(datetime(2026, 2, 10, 14, 0))

    outcome = service.record_checkout(1)

    assert outcome.status == AttendanceStatus.EARLY_DEPARTURE
    record = world.record(1, DAY)
    assert record.check_out == datetime(2026, 2, 10, 14, 0)
    assert record.last_writer == WriterKind.SCAN


def test_checkout_after_end_keeps_present(world):
    service = world.container.attendance_service
    service.record_qr_scan(1)
    world.at(datetime(2026, 2, 10, 16, 5))

    assert service.record_checkout(1).status == AttendanceStatus.PRESENT


def test_checkout_twice_or_without_arrival_fails(world):
    service = world.container.attendance_service

    with pytest.raises(ValidationError):
        service.record_checkout(1)

    service.record_qr_scan(1)
    world.at(datetime(2026, 2, 10, 16, 5))
    service.record_checkout(1)
    with pytest.raises(ValidationError):
        service.record_checkout(1)


def test_checkout_keeps_approval_status(world):
    world.attendance.seed(1, DAY, AttendanceStatus.LATE, WriterKind.APPROVAL_OVERRIDE, at=datetime(2026, 2, 9, 18, 0))
    world.at(datetime(2026, 2, 10, 12, 0))

    outcome = world.container.attendance_service.record_checkout(1)

    assert outcome.status == AttendanceStatus.LATE
    assert world.record(1, DAY).last_writer == WriterKind.APPROVAL_OVERRIDE


def test_checkout_after_midnight_counts_for_previous_day(world):
    service = world.container.attendance_service
    service.record_qr_scan(1)
    world.at(datetime(2026, 2, 11, 1, 0))

    outcome = service.record_checkout(1)

    assert outcome.logical_date == DAY
    assert outcome.status == AttendanceStatus.PRESENT
    assert world.record(1, DAY).check_out == datetime(2026, 2, 11, 1, 0)

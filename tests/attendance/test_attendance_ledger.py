from __future__ import annotations

import asyncio
from datetime import date, datetime

import pytest

from src.staff_ledger.staff_ledger.attendance.model import AttendanceRecord
from src.staff_ledger.staff_ledger.attendance.service import AttendanceLedger
from src.staff_ledger.staff_ledger.attendance.settings import AttendanceSettings, AttendanceSettingsProvider
from src.staff_ledger.staff_ledger.businesses.model import NewBusiness
from src.staff_ledger.staff_ledger.core.constants import OWNER_RECIPIENT
from src.staff_ledger.staff_ledger.core.enums import AttendanceStatus, NotificationType, WorkLocation
from src.staff_ledger.staff_ledger.core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    InvalidBusiness,
    NoCheckInFound,
    StorageFailure,
    ValidationError,
)
from src.staff_ledger.staff_ledger.shifts.model import ShiftDraft

MONDAY = date(2024, 3, 4)


def at(hour, minute=0, day=MONDAY):
    return datetime(day.year, day.month, day.day, hour, minute)


@pytest.fixture
async def nine_to_five(container, business):
    await container.attendance_settings.save(
        AttendanceSettings(business_id=business.business_id, late_threshold_minutes=10)
    )
    return await container.shift_catalog.create(
        business.business_id,
        ShiftDraft(name="Day", start_time="09:00", end_time="17:00", break_minutes=60),
    )


async def test_checkin_at_threshold_is_on_time_and_one_minute_later_is_late(container, business, nine_to_five):
    ledger = container.attendance_ledger

    on_time = await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9, 10))
    late = await ledger.check_in(business.business_id, "s2", "onsite", now=at(9, 11))

    assert on_time.is_late is False
    assert late.is_late is True
    assert on_time.status == AttendanceStatus.PRESENT
    assert on_time.work_date == MONDAY


async def test_checkout_records_working_hours_to_two_decimals(container, business, nine_to_five):
    ledger = container.attendance_ledger
    await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9, 10))

    record = await ledger.check_out(business.business_id, "s1", now=at(17, 30))

    assert record.working_hours == 8.33
    assert record.check_out_time == at(17, 30)
    assert record.status == AttendanceStatus.PRESENT

    stored = await ledger.get_today_for(business.business_id, "s1", today=MONDAY)
    assert stored.working_hours == 8.33
    assert stored.is_checked_out


async def test_second_checkin_same_day_is_rejected(container, business):
    ledger = container.attendance_ledger
    await ledger.check_in(business.business_id, "s1", WorkLocation.WFH, now=at(9))

    with pytest.raises(AlreadyCheckedIn):
        await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(13))

    records = await ledger.get_by_date_range(business.business_id, MONDAY, MONDAY)
    assert len(records) == 1


async def test_checkin_next_day_starts_a_new_record(container, business):
    ledger = container.attendance_ledger
    await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9))
    await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9, day=date(2024, 3, 5)))

    history = await ledger.list_by_staff("s1")
    assert [r.work_date for r in history] == [date(2024, 3, 5), MONDAY]


async def test_concurrent_checkins_produce_exactly_one_record(container, business):
    ledger = container.attendance_ledger

    results = await asyncio.gather(
        ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9)),
        ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9)),
        return_exceptions=True,
    )

    assert sum(isinstance(r, AttendanceRecord) for r in results) == 1
    assert sum(isinstance(r, AlreadyCheckedIn) for r in results) == 1


async def test_store_rejects_duplicate_daily_record(container, business):
    def record(record_id):
        return AttendanceRecord(
            record_id=record_id,
            business_id=business.business_id,
            staff_id="s1",
            work_date=MONDAY,
            check_in_time=at(9),
            check_out_time=None,
            location=WorkLocation.ONSITE,
            status=AttendanceStatus.PRESENT,
            created_at=at(9),
        )

    await container.attendance_repo.create_checkin(record("r1"))
    with pytest.raises(AlreadyCheckedIn):
        await container.attendance_repo.create_checkin(record("r2"))


async def test_checkout_without_checkin(container, business):
    with pytest.raises(NoCheckInFound):
        await container.attendance_ledger.check_out(business.business_id, "s1", now=at(17))


async def test_checkout_twice_is_rejected(container, business):
    ledger = container.attendance_ledger
    await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9))
    await ledger.check_out(business.business_id, "s1", now=at(17))

    with pytest.raises(AlreadyCheckedOut):
        await ledger.check_out(business.business_id, "s1", now=at(18))


async def test_checkout_must_follow_checkin(container, business):
    ledger = container.attendance_ledger
    await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9))

    with pytest.raises(ValidationError):
        await ledger.check_out(business.business_id, "s1", now=at(9))


async def test_checkin_rejects_unknown_business_and_location(container, business):
    ledger = container.attendance_ledger

    with pytest.raises(InvalidBusiness):
        await ledger.check_in("biz_missing", "s1", WorkLocation.ONSITE, now=at(9))
    with pytest.raises(ValidationError):
        await ledger.check_in(business.business_id, "s1", "beach", now=at(9))


async def test_without_any_shift_nobody_is_late(container, business):
    record = await container.attendance_ledger.check_in(
        business.business_id, "s1", WorkLocation.FIELD, now=at(11, 45)
    )
    assert record.is_late is False


async def test_failing_notifier_does_not_fail_checkin(container, business, failing_sink):
    ledger = AttendanceLedger(
        container.attendance_repo,
        container.business_registry,
        container.shift_catalog,
        container.attendance_settings,
        notifier=failing_sink,
    )

    record = await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9))
    out = await ledger.check_out(business.business_id, "s1", now=at(12))

    assert record.is_checked_in
    assert out.working_hours == 3.0


async def test_checkin_and_checkout_notify_owner(container, business, nine_to_five):
    ledger = container.attendance_ledger
    await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(8, 55))
    await ledger.check_out(business.business_id, "s1", now=at(18))

    inbox = await container.notifications_repo.list_for_business(business.business_id, OWNER_RECIPIENT)
    by_type = {n.type: n for n in inbox}

    checkin = by_type[NotificationType.STAFF_CHECKIN.value]
    checkout = by_type[NotificationType.STAFF_CHECKOUT.value]
    assert checkin.recipient_id == OWNER_RECIPIENT
    assert checkin.data["isLate"] is False
    assert checkout.data["workingHours"] == 9.08
    assert checkout.data["leftEarly"] is False
    assert checkout.data["overtimeMinutes"] == 60


async def test_checkout_before_shift_end_is_flagged_as_leaving_early(container, business, nine_to_five, recording_sink):
    ledger = AttendanceLedger(
        container.attendance_repo,
        container.business_registry,
        container.shift_catalog,
        container.attendance_settings,
        notifier=recording_sink,
    )
    await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9))
    await ledger.check_out(business.business_id, "s1", now=at(15))

    checkout = recording_sink.events[-1]
    assert checkout.type == NotificationType.STAFF_CHECKOUT
    assert checkout.data["leftEarly"] is True
    assert checkout.data["overtimeMinutes"] == 0


async def test_date_range_queries(container, business):
    ledger = container.attendance_ledger
    await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9))
    await ledger.check_in(business.business_id, "s2", WorkLocation.WFH, now=at(9, day=date(2024, 3, 31)))
    await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9, day=date(2024, 4, 1)))

    first = await ledger.get_by_date_range(business.business_id, date(2024, 3, 1), date(2024, 3, 31))
    second = await ledger.get_by_date_range(business.business_id, date(2024, 3, 1), date(2024, 3, 31))
    assert {r.record_id for r in first} == {r.record_id for r in second}
    assert len(first) == 2

    assert await ledger.get_by_date_range(business.business_id, date(2024, 3, 31), date(2024, 3, 1)) == []
    assert len(await ledger.get_monthly(business.business_id, 2024, 4)) == 1
    assert len(await ledger.list_for_day(business.business_id, MONDAY)) == 1
    assert len(await ledger.list_by_staff("s1", limit=1)) == 1


async def test_records_are_scoped_to_their_business(container, business):
    other = await container.business_registry.create(NewBusiness(name="Other", business_type="retail"))
    ledger = container.attendance_ledger
    await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9))
    await ledger.check_in(other.business_id, "s1", WorkLocation.ONSITE, now=at(9))

    assert len(await ledger.list_for_day(business.business_id, MONDAY)) == 1
    assert len(await ledger.list_for_day(other.business_id, MONDAY)) == 1


async def test_unknown_business_is_rejected_before_any_lock_exists(container):
    ledger = container.attendance_ledger

    with pytest.raises(InvalidBusiness):
        await ledger.check_in("biz_missing", "s1", WorkLocation.ONSITE, now=at(9))
    with pytest.raises(InvalidBusiness):
        await ledger.check_out("biz_missing", "s1", now=at(17))

    assert "biz_missing" not in ledger._locks


class FlakySettings(AttendanceSettingsProvider):
    def __init__(self, inner):
        super().__init__()
        self._inner = inner
        self.fail = False

    async def get_for(self, business_id):
        if self.fail:
            raise StorageFailure("settings store unavailable")
        return await self._inner.get_for(business_id)


async def test_failed_settings_read_leaves_record_checked_in(container, business, nine_to_five):
    settings = FlakySettings(container.attendance_settings)
    ledger = AttendanceLedger(
        container.attendance_repo,
        container.business_registry,
        container.shift_catalog,
        settings,
    )
    await ledger.check_in(business.business_id, "s1", WorkLocation.ONSITE, now=at(9))

    settings.fail = True
    with pytest.raises(StorageFailure):
        await ledger.check_out(business.business_id, "s1", now=at(17))

    stored = await ledger.get_today_for(business.business_id, "s1", today=MONDAY)
    assert stored.check_out_time is None
    assert stored.working_hours is None

    settings.fail = False
    out = await ledger.check_out(business.business_id, "s1", now=at(17))
    assert out.working_hours == 8.0

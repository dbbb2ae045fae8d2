from __future__ import annotations

import asyncio
import logging
import uuid
from collections import defaultdict
from datetime import date, datetime
from typing import Callable, Dict, Optional, Sequence

from ..businesses.service import BusinessRegistry
from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import require_enum
from ..core.constants import OWNER_RECIPIENT
from ..core.enums import AttendanceStatus, NotificationType, WorkLocation
from ..core.exceptions import AlreadyCheckedIn, AlreadyCheckedOut, NoCheckInFound, ValidationError
from ..notifications.model import NotificationEvent
from ..notifications.sink import NotificationSink, notify_safely
from ..reports.calculator.base import WorkingHoursCalculator
from ..reports.calculator.standard_calculator import StandardWorkingHoursCalculator
from ..shifts.classifier import classify_checkout
from ..shifts.service import ShiftCatalog
from .model import AttendanceRecord, Coordinates
from .repository import AttendanceRepository
from .settings import AttendanceSettingsProvider

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Daily check-in/check-out state machine: NoRecord -> CheckedIn -> CheckedOut.

    One record per (business, staff, day). The rule is checked here before
    writing and enforced again by a unique index in the store; writes for a
    business are also serialized through one in-process lock, so two calls
    racing in the same event loop cannot both pass the read-then-write check.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        businesses: BusinessRegistry,
        shifts: ShiftCatalog,
        settings: AttendanceSettingsProvider,
        *,
        notifier: Optional[NotificationSink] = None,
        calculator: Optional[WorkingHoursCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._businesses = businesses
        self._shifts = shifts
        self._settings = settings
        self._notifier = notifier
        self._calculator = calculator or StandardWorkingHoursCalculator()
        self._clock = clock
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def check_in(
        self,
        business_id: str,
        staff_id: str,
        location: WorkLocation | str,
        coordinates: Optional[Coordinates] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        location = require_enum(WorkLocation, location, "Work location")
        # Validated before a lock is created for the id.
        await self._businesses.require(business_id)

        async with self._locks[business_id]:
            now = now or self._clock()
            today = now.date()

            existing = await self._attendance.get_for_staff_and_date(business_id, staff_id, today)
            if existing:
                logger.warning("Rejected check-in: %s already checked in at %s on %s", staff_id, business_id, today)
                raise AlreadyCheckedIn("Already checked in today")

            shift = await self._shifts.resolve_for(business_id=business_id, staff_id=staff_id, work_date=today)
            settings = await self._settings.get_for(business_id)
            decision = self._shifts.classify(now, shift, late_threshold_minutes=settings.late_threshold_minutes)

            record = AttendanceRecord(
                record_id=str(uuid.uuid4()),
                business_id=business_id,
                staff_id=staff_id,
                work_date=today,
                check_in_time=now,
                check_out_time=None,
                location=location,
                status=AttendanceStatus.PRESENT,
                is_late=decision.is_late,
                coordinates=coordinates,
                created_at=now,
            )
            await self._attendance.create_checkin(record)

        logger.info(
            "Staff %s checked in at %s (%s, late=%s)", staff_id, business_id, location.value, record.is_late
        )
        await notify_safely(
            self._notifier,
            NotificationEvent(
                business_id=business_id,
                recipient_id=OWNER_RECIPIENT,
                type=NotificationType.STAFF_CHECKIN,
                title="Staff Check-in",
                message=f"Staff member has checked in ({location.value})",
                data={"staffId": staff_id, "recordId": record.record_id, "isLate": record.is_late},
            ),
        )
        return record

    async def check_out(self, business_id: str, staff_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        await self._businesses.require(business_id)

        async with self._locks[business_id]:
            now = now or self._clock()
            today = now.date()

            record = await self._attendance.get_for_staff_and_date(business_id, staff_id, today)
            if not record or record.check_in_time is None:
                logger.warning("Rejected check-out: no check-in for %s at %s on %s", staff_id, business_id, today)
                raise NoCheckInFound("No check-in record found for today")
            if record.check_out_time is not None:
                logger.warning("Rejected check-out: %s already checked out at %s on %s", staff_id, business_id, today)
                raise AlreadyCheckedOut("Already checked out today")
            if now <= record.check_in_time:
                raise ValidationError("Check-out time must be after check-in time")

            # Everything the notification needs is read before the record is written.
            shift = await self._shifts.resolve_for(business_id=business_id, staff_id=staff_id, work_date=today)
            settings = await self._settings.get_for(business_id)
            expected_end = self._shifts.classify(
                record.check_in_time, shift, late_threshold_minutes=settings.late_threshold_minutes
            ).expected_end
            outcome = classify_checkout(
                now, expected_end, overtime_threshold_minutes=settings.overtime_threshold_minutes
            )

            working_hours = self._calculator.working_hours(record.check_in_time, now)
            if not await self._attendance.update_checkout(
                record_id=record.record_id,
                check_out_time=now,
                working_hours=working_hours,
            ):
                raise AlreadyCheckedOut("Already checked out today")

        logger.info("Staff %s checked out at %s after %.2fh", staff_id, business_id, working_hours)
        await notify_safely(
            self._notifier,
            NotificationEvent(
                business_id=business_id,
                recipient_id=OWNER_RECIPIENT,
                type=NotificationType.STAFF_CHECKOUT,
                title="Staff Check-out",
                message="Staff member has checked out",
                data={
                    "staffId": staff_id,
                    "recordId": record.record_id,
                    "workingHours": working_hours,
                    "leftEarly": outcome.left_early,
                    "overtimeMinutes": outcome.overtime_minutes,
                },
            ),
        )
        return AttendanceRecord(
            record_id=record.record_id,
            business_id=record.business_id,
            staff_id=record.staff_id,
            work_date=record.work_date,
            check_in_time=record.check_in_time,
            check_out_time=now,
            location=record.location,
            status=record.status,
            is_late=record.is_late,
            working_hours=working_hours,
            coordinates=record.coordinates,
            notes=record.notes,
            created_at=record.created_at,
            updated_at=now,
        )

    async def get_by_date_range(self, business_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Inclusive on both ends; no ordering guarantee."""
        if end < start:
            return []
        return await self._attendance.list_by_date_range(business_id, start, end)

    async def get_today_for(
        self, business_id: str, staff_id: str, *, today: Optional[date] = None
    ) -> Optional[AttendanceRecord]:
        today = today or self._clock().date()
        return await self._attendance.get_for_staff_and_date(business_id, staff_id, today)

    async def list_for_day(self, business_id: str, day: Optional[date] = None) -> Sequence[AttendanceRecord]:
        day = day or self._clock().date()
        return await self._attendance.list_by_date_range(business_id, day, day)

    async def get_monthly(self, business_id: str, year: int, month: int) -> Sequence[AttendanceRecord]:
        start, end = month_bounds(year, month)
        return await self._attendance.list_by_date_range(business_id, start, end)

    async def list_by_staff(self, staff_id: str, *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        return await self._attendance.list_by_staff(staff_id, limit=limit)

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .attendance.service import AttendanceLedger
from .attendance.settings import AttendanceSettingsProvider
from .attendance.sqlite_attendance_repository import SQLiteAttendanceRepository
from .attendance.sqlite_settings_repository import SQLiteAttendanceSettingsRepository
from .businesses.service import BusinessRegistry
from .businesses.sqlite_business_repository import SQLiteBusinessRepository
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_LATE_THRESHOLD_MINUTES, DEFAULT_OVERTIME_THRESHOLD_MINUTES
from .database.connection import DBConfig, Database
from .leaves.service import LeaveLedger
from .leaves.sqlite_leave_repository import SQLiteLeaveRepository
from .notifications.sqlite_notification_repository import SQLiteNotificationRepository
from .plans.gate import HeadcountGate
from .plans.service import PlanService
from .reports.calculator.standard_calculator import StandardWorkingHoursCalculator
from .reports.service import AttendanceReportService
from .shifts.service import ShiftCatalog
from .shifts.sqlite_shift_repository import SQLiteShiftRepository
from .staff.service import StaffRequestService
from .staff.sqlite_staff_request_repository import SQLiteStaffRequestRepository


@dataclass(frozen=True)
class Container:
    database: Database

    businesses_repo: SQLiteBusinessRepository
    shifts_repo: SQLiteShiftRepository
    attendance_repo: SQLiteAttendanceRepository
    settings_repo: SQLiteAttendanceSettingsRepository
    leaves_repo: SQLiteLeaveRepository
    staff_requests_repo: SQLiteStaffRequestRepository
    notifications_repo: SQLiteNotificationRepository

    business_registry: BusinessRegistry
    shift_catalog: ShiftCatalog
    attendance_settings: AttendanceSettingsProvider
    headcount_gate: HeadcountGate
    attendance_ledger: AttendanceLedger
    leave_ledger: LeaveLedger
    staff_request_service: StaffRequestService
    plan_service: PlanService
    report_service: AttendanceReportService


def build_container(
    *,
    database_url: str,
    echo: bool = False,
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES,
    overtime_threshold_minutes: int = DEFAULT_OVERTIME_THRESHOLD_MINUTES,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    database = Database(DBConfig(url=str(database_url), echo=bool(echo)))

    businesses_repo = SQLiteBusinessRepository(database)
    shifts_repo = SQLiteShiftRepository(database)
    attendance_repo = SQLiteAttendanceRepository(database)
    settings_repo = SQLiteAttendanceSettingsRepository(database)
    leaves_repo = SQLiteLeaveRepository(database)
    staff_requests_repo = SQLiteStaffRequestRepository(database)
    notifications_repo = SQLiteNotificationRepository(database, clock=clock)

    business_registry = BusinessRegistry(businesses_repo, clock=clock)
    shift_catalog = ShiftCatalog(shifts_repo, clock=clock)
    attendance_settings = AttendanceSettingsProvider(
        settings_repo,
        default_late_threshold_minutes=late_threshold_minutes,
        default_overtime_threshold_minutes=overtime_threshold_minutes,
    )
    headcount_gate = HeadcountGate(business_registry, staff_requests_repo)

    attendance_ledger = AttendanceLedger(
        attendance_repo,
        business_registry,
        shift_catalog,
        attendance_settings,
        notifier=notifications_repo,
        calculator=StandardWorkingHoursCalculator(),
        clock=clock,
    )
    leave_ledger = LeaveLedger(
        leaves_repo,
        business_registry,
        gate=headcount_gate,
        notifier=notifications_repo,
        clock=clock,
    )
    staff_request_service = StaffRequestService(
        staff_requests_repo,
        business_registry,
        headcount_gate,
        notifier=notifications_repo,
        clock=clock,
    )
    plan_service = PlanService(business_registry, notifier=notifications_repo)
    report_service = AttendanceReportService(attendance_ledger, leave_ledger, business_registry)

    return Container(
        database=database,
        businesses_repo=businesses_repo,
        shifts_repo=shifts_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        leaves_repo=leaves_repo,
        staff_requests_repo=staff_requests_repo,
        notifications_repo=notifications_repo,
        business_registry=business_registry,
        shift_catalog=shift_catalog,
        attendance_settings=attendance_settings,
        headcount_gate=headcount_gate,
        attendance_ledger=attendance_ledger,
        leave_ledger=leave_ledger,
        staff_request_service=staff_request_service,
        plan_service=plan_service,
        report_service=report_service,
    )

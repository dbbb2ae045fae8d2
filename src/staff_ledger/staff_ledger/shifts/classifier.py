from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from .model import Shift


@dataclass(frozen=True)
class ShiftClassification:
    is_late: bool
    expected_end: Optional[datetime]


@dataclass(frozen=True)
class CheckOutClassification:
    left_early: bool
    overtime_minutes: int


def shift_window(shift: Shift, work_date: date) -> tuple[datetime, datetime]:
    """Start/end datetimes of a shift on a day; overnight shifts end the next day."""
    start = datetime.combine(work_date, shift.start_time)
    end_day = work_date + timedelta(days=1) if shift.is_overnight else work_date
    end = datetime.combine(end_day, shift.end_time)
    return start, end


def classify(check_in_time: datetime, shift: Optional[Shift], *, late_threshold_minutes: int) -> ShiftClassification:
    """Late when check-in is strictly past shift start plus the threshold.

    A check-in before the end time of an overnight shift belongs to the window
    that started the previous day. Without a shift nobody is late and there is
    no expected end.
    """
    if shift is None:
        return ShiftClassification(is_late=False, expected_end=None)

    work_date = check_in_time.date()
    if shift.is_overnight and check_in_time.time() < shift.end_time:
        work_date -= timedelta(days=1)
    start, end = shift_window(shift, work_date)
    deadline = start + timedelta(minutes=int(late_threshold_minutes))
    return ShiftClassification(is_late=check_in_time > deadline, expected_end=end)


def classify_checkout(
    check_out_time: datetime,
    expected_end: Optional[datetime],
    *,
    overtime_threshold_minutes: int,
) -> CheckOutClassification:
    """Overtime counts only once past expected end plus the threshold."""
    if expected_end is None:
        return CheckOutClassification(left_early=False, overtime_minutes=0)

    if check_out_time < expected_end:
        return CheckOutClassification(left_early=True, overtime_minutes=0)

    extra = int((check_out_time - expected_end).total_seconds() // 60)
    if extra <= int(overtime_threshold_minutes):
        return CheckOutClassification(left_early=False, overtime_minutes=0)
    return CheckOutClassification(left_early=False, overtime_minutes=extra)

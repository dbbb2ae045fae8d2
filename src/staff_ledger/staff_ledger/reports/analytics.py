"""Attendance statistics over a snapshot of records.

Pure functions: nothing here reads the store, and nothing raises on empty or
partial input. Percentages are floats in [0, 100] and are never rounded here.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.constants import OVERTIME_HOURLY_RATE, STANDARD_WORKDAY_HOURS
from ..core.enums import AttendanceStatus, LeaveStatus, WorkLocation
from ..attendance.model import AttendanceRecord
from ..leaves.model import LeaveRequest


def percentage(part: float, whole: float) -> float:
    """part / whole * 100 clamped to [0, 100]; 0 / 0 is 0."""
    if not whole:
        return 0.0
    return min(max(part / whole * 100.0, 0.0), 100.0)


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


@dataclass(frozen=True)
class StaffAttendanceStats:
    staff_id: str
    total_days: int
    present_days: int
    late_days: int
    absent_days: int
    wfh_days: int
    attendance_percentage: float
    punctuality_score: float
    average_working_hours: float
    overtime_hours: float
    total_working_hours: float
    leave_days: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BusinessAttendanceStats:
    total_staff: int
    total_records: int
    average_attendance: float
    punctuality_rate: float
    average_working_hours: float
    wfh_utilization: float
    total_working_hours: float
    total_overtime_hours: float
    total_leave_days: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def approved_leave_days(leaves: Iterable[LeaveRequest], start: date, end: date) -> Dict[str, int]:
    days: Dict[str, int] = {}
    for leave in leaves:
        if leave.status != LeaveStatus.APPROVED:
            continue
        covered = leave.days_within(start, end)
        if covered:
            days[leave.staff_id] = days.get(leave.staff_id, 0) + covered
    return days


def compute_staff_stats(staff_id: str, records: Iterable[AttendanceRecord], *, leave_days: int = 0) -> StaffAttendanceStats:
    mine = [r for r in records if r.staff_id == staff_id]

    total_days = len(mine)
    present_days = sum(1 for r in mine if r.status == AttendanceStatus.PRESENT)
    late_days = sum(1 for r in mine if r.is_late)
    wfh_days = sum(1 for r in mine if r.location == WorkLocation.WFH)

    hours = [float(r.working_hours) for r in mine if r.working_hours is not None]
    overtime = sum(max(0.0, h - STANDARD_WORKDAY_HOURS) for h in hours)

    return StaffAttendanceStats(
        staff_id=staff_id,
        total_days=total_days,
        present_days=present_days,
        late_days=late_days,
        absent_days=total_days - present_days,
        wfh_days=wfh_days,
        attendance_percentage=percentage(present_days, total_days),
        punctuality_score=percentage(present_days - late_days, present_days),
        average_working_hours=mean(hours),
        overtime_hours=overtime,
        total_working_hours=sum(hours),
        leave_days=int(leave_days),
    )


def compute_all_staff_stats(
    records: Sequence[AttendanceRecord],
    leave_days: Optional[Dict[str, int]] = None,
) -> List[StaffAttendanceStats]:
    """One entry per staff member with at least one record, in order of first appearance."""
    leave_days = leave_days or {}
    staff_ids = list(dict.fromkeys(r.staff_id for r in records))
    return [compute_staff_stats(sid, records, leave_days=leave_days.get(sid, 0)) for sid in staff_ids]


def compute_business_stats(
    records: Sequence[AttendanceRecord],
    staff_stats: Sequence[StaffAttendanceStats],
    *,
    total_leave_days: int = 0,
) -> BusinessAttendanceStats:
    wfh_records = sum(1 for r in records if r.location == WorkLocation.WFH)
    return BusinessAttendanceStats(
        total_staff=len(staff_stats),
        total_records=len(records),
        average_attendance=mean([s.attendance_percentage for s in staff_stats]),
        punctuality_rate=mean([s.punctuality_score for s in staff_stats]),
        average_working_hours=mean([s.average_working_hours for s in staff_stats]),
        wfh_utilization=percentage(wfh_records, len(records)),
        total_working_hours=sum(s.total_working_hours for s in staff_stats),
        total_overtime_hours=sum(s.overtime_hours for s in staff_stats),
        total_leave_days=int(total_leave_days),
    )


def overtime_cost(staff_stats: Sequence[StaffAttendanceStats], *, hourly_rate: float = OVERTIME_HOURLY_RATE) -> float:
    return sum(s.overtime_hours for s in staff_stats) * hourly_rate


def leaderboard(staff_stats: Sequence[StaffAttendanceStats]) -> List[Dict[str, Any]]:
    ranked = sorted(
        staff_stats,
        key=lambda s: (-s.attendance_percentage, -s.punctuality_score, s.staff_id),
    )
    return [
        {
            "rank": i,
            "staff_id": s.staff_id,
            "attendance_percentage": s.attendance_percentage,
            "punctuality_score": s.punctuality_score,
            "overtime_hours": s.overtime_hours,
        }
        for i, s in enumerate(ranked, start=1)
    ]


def trends(current: BusinessAttendanceStats, previous: BusinessAttendanceStats) -> Dict[str, float]:
    """Percentage-point change from the previous period."""
    return {
        "attendance": current.average_attendance - previous.average_attendance,
        "punctuality": current.punctuality_rate - previous.punctuality_rate,
        "working_hours": current.average_working_hours - previous.average_working_hours,
    }

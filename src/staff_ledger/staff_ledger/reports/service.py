from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceLedger
from ..businesses.service import BusinessRegistry
from ..common.datetime_utils import month_bounds, previous_month
from ..core.enums import LeaveStatus
from ..leaves.model import LeaveRequest
from ..leaves.service import LeaveLedger
from ..plans.policy import filter_analytics_by_plan, get_plan_limits
from . import analytics
from .analytics import StaffAttendanceStats


@dataclass(frozen=True)
class MonthSnapshot:
    start: date
    end: date
    records: Sequence[AttendanceRecord]
    leaves: Sequence[LeaveRequest]


class AttendanceReportService:
    """Recomputes statistics on read from ledger snapshots."""

    def __init__(self, attendance: AttendanceLedger, leaves: LeaveLedger, businesses: BusinessRegistry):
        self._attendance = attendance
        self._leaves = leaves
        self._businesses = businesses

    async def _snapshot(self, business_id: str, year: int, month: int) -> MonthSnapshot:
        start, end = month_bounds(year, month)
        records = await self._attendance.get_by_date_range(business_id, start, end)
        leaves = await self._leaves.list_for_business(business_id, status=LeaveStatus.APPROVED)
        return MonthSnapshot(start=start, end=end, records=records, leaves=leaves)

    async def staff_stats(self, business_id: str, staff_id: str, year: int, month: int) -> StaffAttendanceStats:
        snap = await self._snapshot(business_id, year, month)
        leave_days = analytics.approved_leave_days(snap.leaves, snap.start, snap.end)
        return analytics.compute_staff_stats(staff_id, snap.records, leave_days=leave_days.get(staff_id, 0))

    async def monthly_report(self, business_id: str, year: int, month: int) -> Dict[str, Any]:
        business = await self._businesses.require(business_id)
        limits = get_plan_limits(business.plan)

        snap = await self._snapshot(business_id, year, month)
        leave_days = analytics.approved_leave_days(snap.leaves, snap.start, snap.end)
        staff = analytics.compute_all_staff_stats(snap.records, leave_days)
        summary = analytics.compute_business_stats(
            snap.records, staff, total_leave_days=sum(leave_days.values())
        )

        report: Dict[str, Any] = {
            "business_id": business_id,
            "period": {"year": int(year), "month": int(month), "start": snap.start, "end": snap.end},
            "summary": summary.to_dict(),
            "staff": [s.to_dict() for s in staff],
        }

        if limits.has_advanced_attendance:
            report["overtime_cost"] = analytics.overtime_cost(staff)
        if limits.has_leaderboards:
            report["leaderboards"] = analytics.leaderboard(staff)
        if limits.has_trend_analysis:
            prev_year, prev_month = previous_month(int(year), int(month))
            prev = await self._snapshot(business_id, prev_year, prev_month)
            prev_staff = analytics.compute_all_staff_stats(prev.records)
            prev_summary = analytics.compute_business_stats(prev.records, prev_staff)
            report["trends"] = analytics.trends(summary, prev_summary)

        return filter_analytics_by_plan(report, business.plan)

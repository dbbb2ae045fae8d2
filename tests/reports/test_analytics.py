from datetime import date, datetime

from src.staff_ledger.staff_ledger.attendance.model import AttendanceRecord
from src.staff_ledger.staff_ledger.core.enums import AttendanceStatus, LeaveStatus, LeaveType, WorkLocation
from src.staff_ledger.staff_ledger.leaves.model import LeaveRequest
from src.staff_ledger.staff_ledger.reports import analytics


def rec(staff_id, day, *, hours=None, late=False, status=AttendanceStatus.PRESENT, location=WorkLocation.ONSITE):
    work_date = date(2024, 3, day)
    return AttendanceRecord(
        record_id=f"{staff_id}-{day}",
        business_id="biz_1",
        staff_id=staff_id,
        work_date=work_date,
        check_in_time=datetime(2024, 3, day, 9, 0),
        check_out_time=None,
        location=location,
        status=status,
        is_late=late,
        working_hours=hours,
    )


def test_staff_without_records_scores_zero():
    stats = analytics.compute_staff_stats("s1", [])

    assert stats.total_days == 0
    assert stats.attendance_percentage == 0
    assert stats.punctuality_score == 0
    assert stats.average_working_hours == 0
    assert stats.overtime_hours == 0


def test_overtime_is_hours_beyond_standard_day():
    records = [rec("s1", 4, hours=9), rec("s1", 5, hours=7.5), rec("s1", 6, hours=10)]

    stats = analytics.compute_staff_stats("s1", records)

    assert stats.overtime_hours == 3
    assert stats.total_working_hours == 26.5
    assert abs(stats.average_working_hours - 26.5 / 3) < 1e-9


def test_percentages_and_counts():
    records = [
        rec("s1", 4, hours=8, late=True),
        rec("s1", 5, hours=8, location=WorkLocation.WFH),
        rec("s1", 6, status=AttendanceStatus.ABSENT),
        rec("s1", 7, hours=8),
        rec("s2", 4, hours=8),
    ]

    stats = analytics.compute_staff_stats("s1", records)

    assert (stats.total_days, stats.present_days, stats.late_days, stats.absent_days) == (4, 3, 1, 1)
    assert stats.wfh_days == 1
    assert stats.attendance_percentage == 75.0
    assert abs(stats.punctuality_score - 200 / 3) < 1e-9
    assert 0 <= stats.punctuality_score <= 100


def test_records_without_hours_are_left_out_of_the_average():
    stats = analytics.compute_staff_stats("s1", [rec("s1", 4, hours=6), rec("s1", 5)])
    assert stats.average_working_hours == 6


def test_business_stats_average_across_staff():
    records = [
        rec("s1", 4, hours=8),
        rec("s1", 5, hours=10, late=True, location=WorkLocation.WFH),
        rec("s2", 4, hours=8),
        rec("s2", 5, status=AttendanceStatus.ABSENT),
    ]
    staff = analytics.compute_all_staff_stats(records)

    summary = analytics.compute_business_stats(records, staff, total_leave_days=2)

    assert [s.staff_id for s in staff] == ["s1", "s2"]
    assert summary.total_staff == 2
    assert summary.average_attendance == 75.0
    assert summary.punctuality_rate == 75.0
    assert summary.wfh_utilization == 25.0
    assert summary.total_working_hours == 26
    assert summary.total_overtime_hours == 2
    assert summary.total_leave_days == 2
    assert analytics.overtime_cost(staff) == 50


def test_business_stats_on_empty_snapshot():
    summary = analytics.compute_business_stats([], [])

    assert summary.total_staff == 0
    assert summary.average_attendance == 0
    assert summary.wfh_utilization == 0


def test_leaderboard_ranks_by_attendance_then_punctuality():
    records = [
        rec("s1", 4, late=True),
        rec("s2", 4),
        rec("s3", 4),
        rec("s3", 5, status=AttendanceStatus.ABSENT),
    ]

    board = analytics.leaderboard(analytics.compute_all_staff_stats(records))

    assert [(row["rank"], row["staff_id"]) for row in board] == [(1, "s2"), (2, "s1"), (3, "s3")]


def test_approved_leave_days_are_clipped_to_the_period():
    def leave(staff_id, start, end, status=LeaveStatus.APPROVED):
        return LeaveRequest(
            request_id=f"l-{staff_id}-{start}",
            business_id="biz_1",
            staff_id=staff_id,
            leave_type=LeaveType.ANNUAL,
            start_date=start,
            end_date=end,
            reason="",
            status=status,
            requested_at=datetime(2024, 2, 1),
        )

    leaves = [
        leave("s1", date(2024, 2, 27), date(2024, 3, 2)),
        leave("s1", date(2024, 3, 10), date(2024, 3, 10)),
        leave("s2", date(2024, 3, 5), date(2024, 3, 6), status=LeaveStatus.PENDING),
    ]

    days = analytics.approved_leave_days(leaves, date(2024, 3, 1), date(2024, 3, 31))
    assert days == {"s1": 3}


def test_trends_compare_with_previous_period():
    current = analytics.compute_business_stats([rec("s1", 4)], analytics.compute_all_staff_stats([rec("s1", 4)]))
    previous_records = [rec("s1", 4), rec("s1", 5, status=AttendanceStatus.ABSENT)]
    previous = analytics.compute_business_stats(previous_records, analytics.compute_all_staff_stats(previous_records))

    assert analytics.trends(current, previous)["attendance"] == 50.0

from datetime import datetime, time

from src.staff_ledger.staff_ledger.shifts.classifier import classify, classify_checkout, shift_window
from src.staff_ledger.staff_ledger.shifts.model import Shift


def make_shift(start, end, break_minutes=0, days=(1, 2, 3, 4, 5)):
    return Shift(
        shift_id="sh1",
        business_id="biz_1",
        name="Day",
        start_time=start,
        end_time=end,
        break_minutes=break_minutes,
        days_of_week=frozenset(days),
    )


def test_late_only_strictly_after_threshold():
    shift = make_shift(time(9, 0), time(17, 0))

    assert classify(datetime(2024, 3, 4, 9, 15), shift, late_threshold_minutes=15).is_late is False
    assert classify(datetime(2024, 3, 4, 9, 15, 1), shift, late_threshold_minutes=15).is_late is True
    assert classify(datetime(2024, 3, 4, 8, 30), shift, late_threshold_minutes=0).is_late is False


def test_no_shift_means_not_late_and_no_expected_end():
    result = classify(datetime(2024, 3, 4, 23, 0), None, late_threshold_minutes=0)
    assert result.is_late is False
    assert result.expected_end is None


def test_overnight_shift_ends_next_day():
    shift = make_shift(time(22, 0), time(6, 0), break_minutes=30)

    start, end = shift_window(shift, datetime(2024, 3, 4).date())
    assert start == datetime(2024, 3, 4, 22, 0)
    assert end == datetime(2024, 3, 5, 6, 0)
    assert shift.is_overnight
    assert shift.duration_minutes == 8 * 60 - 30


def test_check_in_after_midnight_belongs_to_previous_night():
    shift = make_shift(time(22, 0), time(6, 0))

    after_midnight = classify(datetime(2024, 3, 5, 0, 30), shift, late_threshold_minutes=15)
    on_time = classify(datetime(2024, 3, 4, 22, 10), shift, late_threshold_minutes=15)

    assert after_midnight.is_late is True
    assert after_midnight.expected_end == datetime(2024, 3, 5, 6, 0)
    assert on_time.is_late is False
    assert on_time.expected_end == datetime(2024, 3, 5, 6, 0)


def test_duration_can_be_degenerate():
    assert make_shift(time(9, 0), time(9, 0)).duration_minutes == 0
    assert make_shift(time(9, 0), time(10, 0), break_minutes=90).duration_minutes == -30


def test_checkout_classification():
    end = datetime(2024, 3, 4, 17, 0)

    early = classify_checkout(datetime(2024, 3, 4, 16, 59), end, overtime_threshold_minutes=30)
    within = classify_checkout(datetime(2024, 3, 4, 17, 30), end, overtime_threshold_minutes=30)
    over = classify_checkout(datetime(2024, 3, 4, 17, 31), end, overtime_threshold_minutes=30)

    assert (early.left_early, early.overtime_minutes) == (True, 0)
    assert (within.left_early, within.overtime_minutes) == (False, 0)
    assert (over.left_early, over.overtime_minutes) == (False, 31)
    assert classify_checkout(end, None, overtime_threshold_minutes=30).left_early is False

from datetime import datetime

from src.staff_ledger.staff_ledger.reports.calculator.standard_calculator import StandardWorkingHoursCalculator


def test_standard_calculator_counts_whole_minutes():
    calc = StandardWorkingHoursCalculator()

    assert calc.worked_minutes(datetime(2024, 3, 4, 9, 10), datetime(2024, 3, 4, 17, 30)) == 500
    assert calc.working_hours(datetime(2024, 3, 4, 9, 10), datetime(2024, 3, 4, 17, 30)) == 8.33


def test_standard_calculator_never_negative():
    calc = StandardWorkingHoursCalculator()
    assert calc.worked_minutes(datetime(2024, 3, 4, 17, 0), datetime(2024, 3, 4, 9, 0)) == 0


def test_overnight_span_is_counted():
    calc = StandardWorkingHoursCalculator()
    assert calc.working_hours(datetime(2024, 3, 4, 22, 0), datetime(2024, 3, 5, 6, 30)) == 8.5

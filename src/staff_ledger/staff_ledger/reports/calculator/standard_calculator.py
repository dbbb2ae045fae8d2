from __future__ import annotations

from datetime import datetime

from .base import WorkingHoursCalculator


class StandardWorkingHoursCalculator(WorkingHoursCalculator):
    """Standard rule: whole minutes between check-in and check-out, not below 0."""

    def worked_minutes(self, check_in_time: datetime, check_out_time: datetime) -> int:
        minutes = int((check_out_time - check_in_time).total_seconds() // 60)
        return max(minutes, 0)

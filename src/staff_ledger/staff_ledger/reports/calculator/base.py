from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class WorkingHoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked time)."""

    @abstractmethod
    def worked_minutes(self, check_in_time: datetime, check_out_time: datetime) -> int:
        raise NotImplementedError

    def working_hours(self, check_in_time: datetime, check_out_time: datetime) -> float:
        return round(self.worked_minutes(check_in_time, check_out_time) / 60, 2)

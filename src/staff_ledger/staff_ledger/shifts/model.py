from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import FrozenSet, Optional


def _minutes(t: time) -> int:
    return t.hour * 60 + t.minute


@dataclass(frozen=True)
class Shift:
    """Domain entity: a named recurring time window of a business.

    days_of_week uses 0 = Sunday ... 6 = Saturday.
    """

    shift_id: str
    business_id: str
    name: str
    start_time: time
    end_time: time
    break_minutes: int = 0
    days_of_week: FrozenSet[int] = frozenset()
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def is_overnight(self) -> bool:
        return self.end_time < self.start_time

    @property
    def span_minutes(self) -> int:
        span = _minutes(self.end_time) - _minutes(self.start_time)
        return span + 24 * 60 if self.is_overnight else span

    @property
    def duration_minutes(self) -> int:
        """(end - start) - break. May be zero or negative for a degenerate shift."""
        return self.span_minutes - int(self.break_minutes)

    def runs_on(self, weekday: int) -> bool:
        return int(weekday) in self.days_of_week


@dataclass(frozen=True)
class ShiftDraft:
    name: str
    start_time: str
    end_time: str
    break_minutes: int = 0
    days_of_week: tuple[int, ...] = (1, 2, 3, 4, 5)
    is_active: bool = True

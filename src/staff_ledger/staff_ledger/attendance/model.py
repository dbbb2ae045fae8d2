from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, WorkLocation


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one staff member's attendance for one business-local day."""

    record_id: str
    business_id: str
    staff_id: str
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    location: WorkLocation
    status: AttendanceStatus
    is_late: bool = False
    working_hours: Optional[float] = None
    coordinates: Optional[Coordinates] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_checked_in(self) -> bool:
        return self.check_in_time is not None and self.check_out_time is None

    @property
    def is_checked_out(self) -> bool:
        return self.check_in_time is not None and self.check_out_time is not None

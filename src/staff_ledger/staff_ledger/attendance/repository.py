from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    async def get_for_staff_and_date(self, business_id: str, staff_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    async def create_checkin(self, record: AttendanceRecord) -> None:
        """Insert the day's record. Raises AlreadyCheckedIn when one exists."""

        raise NotImplementedError

    async def update_checkout(
        self,
        *,
        record_id: str,
        check_out_time: datetime,
        working_hours: float,
        notes: Optional[str] = None,
    ) -> bool:
        """Set check-out once. Returns False when the record is missing or already checked out."""

        raise NotImplementedError

    async def list_by_date_range(self, business_id: str, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    async def list_by_staff(self, staff_id: str, *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

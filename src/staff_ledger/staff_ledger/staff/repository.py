from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import StaffRequestStatus
from .model import StaffRequest


class StaffRequestRepository(Protocol):
    async def add(self, request: StaffRequest) -> None:
        raise NotImplementedError

    async def get_by_id(self, request_id: str) -> Optional[StaffRequest]:
        raise NotImplementedError

    async def list_for_business(
        self, business_id: str, *, status: Optional[StaffRequestStatus] = None
    ) -> Sequence[StaffRequest]:
        raise NotImplementedError

    async def find_open(self, business_id: str, staff_id: str) -> Optional[StaffRequest]:
        """The PENDING or ACTIVE request of a staff member in a business, if any."""
        raise NotImplementedError

    async def count_active(self, business_id: str) -> int:
        raise NotImplementedError

    async def decide(
        self,
        *,
        request_id: str,
        status: StaffRequestStatus,
        decided_at: datetime,
        reason: Optional[str] = None,
    ) -> bool:
        """Move a PENDING request to its final status. Returns False if not pending."""

        raise NotImplementedError

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    async def add(self, request: LeaveRequest) -> None:
        raise NotImplementedError

    async def get_by_id(self, request_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError

    async def list_for_business(
        self, business_id: str, *, status: Optional[LeaveStatus] = None
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    async def list_by_staff(self, staff_id: str) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    async def mark_approved(self, *, request_id: str, approved_by: str, approved_at: datetime) -> bool:
        """pending -> approved. Returns False if the request is not pending."""

        raise NotImplementedError

    async def mark_rejected(
        self, *, request_id: str, rejected_by: str, rejected_at: datetime, rejection_reason: str
    ) -> bool:
        """pending -> rejected. Returns False if the request is not pending."""

        raise NotImplementedError

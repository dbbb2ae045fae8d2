from __future__ import annotations

import asyncio
import logging
import uuid
from collections import defaultdict
from datetime import datetime
from typing import Callable, Dict, Optional, Sequence

from ..businesses.service import BusinessRegistry
from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty
from ..core.constants import OWNER_RECIPIENT
from ..core.enums import NotificationType, Role, StaffRequestStatus
from ..core.exceptions import AlreadyResolved, InvalidBusiness, NotFound, ValidationError
from ..notifications.model import NotificationEvent
from ..notifications.sink import NotificationSink, notify_safely
from ..plans.gate import HeadcountGate
from .model import StaffRequest
from .repository import StaffRequestRepository

logger = logging.getLogger(__name__)


class StaffRequestService:
    """Join-code requests: submit -> PENDING -> ACTIVE (headcount gated) | REJECTED.

    Approvals for one business are serialized so the headcount check and the
    status write cannot interleave with another approval.
    """

    def __init__(
        self,
        requests: StaffRequestRepository,
        businesses: BusinessRegistry,
        gate: HeadcountGate,
        *,
        notifier: Optional[NotificationSink] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._requests = requests
        self._businesses = businesses
        self._gate = gate
        self._notifier = notifier
        self._clock = clock
        self._approval_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def submit(
        self,
        *,
        join_code: str,
        staff_id: str,
        full_name: str,
        role: Role | str = Role.STAFF,
        email: Optional[str] = None,
    ) -> StaffRequest:
        business = await self._businesses.find_by_code(join_code)
        if not business:
            raise InvalidBusiness("Invalid Business Code. Please join a valid business.")
        staff_id = require_non_empty(staff_id, "Staff id")
        if await self._requests.find_open(business.business_id, staff_id):
            raise ValidationError("Staff member already has an open request for this business")

        request = StaffRequest(
            request_id=f"sr_{uuid.uuid4()}",
            business_id=business.business_id,
            staff_id=staff_id,
            full_name=require_non_empty(full_name, "Full name"),
            email=(email or "").strip() or None,
            role=require_enum(Role, role, "Role"),
            status=StaffRequestStatus.PENDING,
            created_at=self._clock(),
        )
        await self._requests.add(request)

        logger.info("Join request %s submitted for business %s", request.request_id, business.business_id)
        await notify_safely(
            self._notifier,
            NotificationEvent(
                business_id=business.business_id,
                recipient_id=OWNER_RECIPIENT,
                type=NotificationType.STAFF_REQUEST,
                title="New Staff Request",
                message=f"{request.full_name} wants to join as {request.role.value}",
                data={"staffId": request.staff_id, "requestId": request.request_id},
            ),
        )
        return request

    async def _pending(self, request_id: str) -> StaffRequest:
        request = await self._requests.get_by_id(request_id)
        if not request:
            raise NotFound(f"Staff request not found: {request_id}")
        if request.status != StaffRequestStatus.PENDING:
            raise AlreadyResolved(f"Staff request already {request.status.value}")
        return request

    async def approve(self, request_id: str) -> StaffRequest:
        request = await self._pending(request_id)

        async with self._approval_locks[request.business_id]:
            request = await self._pending(request_id)
            await self._gate.ensure_can_approve(request.business_id)

            if not await self._requests.decide(
                request_id=request_id, status=StaffRequestStatus.ACTIVE, decided_at=self._clock()
            ):
                raise AlreadyResolved("Staff request already resolved")

        logger.info("Join request %s approved for business %s", request_id, request.business_id)
        await notify_safely(
            self._notifier,
            NotificationEvent(
                business_id=request.business_id,
                recipient_id=request.staff_id,
                type=NotificationType.STAFF_APPROVED,
                title="Request Approved",
                message="Your request to join the business has been approved",
                data={"requestId": request_id},
            ),
        )
        return await self._requests.get_by_id(request_id)

    async def reject(self, request_id: str, reason: Optional[str] = None) -> StaffRequest:
        await self._pending(request_id)

        if not await self._requests.decide(
            request_id=request_id,
            status=StaffRequestStatus.REJECTED,
            decided_at=self._clock(),
            reason=(reason or "").strip(),
        ):
            raise AlreadyResolved("Staff request already resolved")

        logger.info("Join request %s rejected", request_id)
        return await self._requests.get_by_id(request_id)

    async def count_active(self, business_id: str) -> int:
        return await self._requests.count_active(business_id)

    async def list_pending(self, business_id: str) -> Sequence[StaffRequest]:
        return await self._requests.list_for_business(business_id, status=StaffRequestStatus.PENDING)

    async def list_active(self, business_id: str) -> Sequence[StaffRequest]:
        return await self._requests.list_for_business(business_id, status=StaffRequestStatus.ACTIVE)

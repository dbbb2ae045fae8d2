from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..businesses.service import BusinessRegistry
from ..common.datetime_utils import now_local
from ..common.validators import require_enum
from ..core.constants import OWNER_RECIPIENT
from ..core.enums import LeaveStatus, LeaveType, NotificationType
from ..core.exceptions import AlreadyResolved, InvalidDateRange, NotFound
from ..notifications.model import NotificationEvent
from ..notifications.sink import NotificationSink, notify_safely
from ..plans.gate import HeadcountGate
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveLedger:
    """Leave workflow: submit -> pending -> approved | rejected, each transition exactly once.

    Callers verify the approver's role before calling approve/reject.
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        businesses: BusinessRegistry,
        *,
        gate: Optional[HeadcountGate] = None,
        notifier: Optional[NotificationSink] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._businesses = businesses
        self._gate = gate
        self._notifier = notifier
        self._clock = clock

    async def submit(
        self,
        business_id: str,
        staff_id: str,
        start_date: date,
        end_date: date,
        leave_type: LeaveType | str,
        reason: str = "",
    ) -> LeaveRequest:
        if end_date < start_date:
            raise InvalidDateRange("End date must be on or after start date")
        leave_type = require_enum(LeaveType, leave_type, "Leave type")
        await self._businesses.require(business_id)

        request = LeaveRequest(
            request_id=str(uuid.uuid4()),
            business_id=business_id,
            staff_id=staff_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=(reason or "").strip(),
            status=LeaveStatus.PENDING,
            requested_at=self._clock(),
        )
        await self._leaves.add(request)

        logger.info("Leave %s submitted by %s (%s, %s day(s))", request.request_id, staff_id, leave_type.value, request.days)
        await notify_safely(
            self._notifier,
            NotificationEvent(
                business_id=business_id,
                recipient_id=OWNER_RECIPIENT,
                type=NotificationType.LEAVE_REQUEST,
                title="Leave Request",
                message=f"Staff member has requested leave from {start_date.isoformat()} to {end_date.isoformat()}",
                data={"staffId": staff_id, "requestId": request.request_id},
            ),
        )
        return request

    async def _pending(self, request_id: str) -> LeaveRequest:
        request = await self._leaves.get_by_id(request_id)
        if not request:
            raise NotFound(f"Leave request not found: {request_id}")
        if request.status != LeaveStatus.PENDING:
            raise AlreadyResolved(f"Leave request already {request.status.value}")
        return request

    async def approve(self, request_id: str, approver_id: str) -> LeaveRequest:
        request = await self._pending(request_id)

        if self._gate is not None:
            # Informational only: leave approval is never blocked by plan limits.
            check = await self._gate.can_approve(request.business_id)
            if check.current_active_count > check.max_allowed:
                logger.warning(
                    "Business %s is over its %s headcount (%s/%s) while approving leave %s",
                    request.business_id,
                    check.plan.value,
                    check.current_active_count,
                    check.max_allowed,
                    request_id,
                )

        if not await self._leaves.mark_approved(
            request_id=request_id, approved_by=approver_id, approved_at=self._clock()
        ):
            raise AlreadyResolved("Leave request already resolved")

        logger.info("Leave %s approved by %s", request_id, approver_id)
        await notify_safely(
            self._notifier,
            NotificationEvent(
                business_id=request.business_id,
                recipient_id=request.staff_id,
                type=NotificationType.LEAVE_APPROVED,
                title="Leave Approved",
                message=f"Your leave from {request.start_date.isoformat()} to {request.end_date.isoformat()} was approved",
                data={"requestId": request_id, "approvedBy": approver_id},
            ),
        )
        return await self._leaves.get_by_id(request_id)

    async def reject(self, request_id: str, approver_id: str, reason: Optional[str] = None) -> LeaveRequest:
        request = await self._pending(request_id)

        rejection_reason = (reason or "").strip()
        if not await self._leaves.mark_rejected(
            request_id=request_id,
            rejected_by=approver_id,
            rejected_at=self._clock(),
            rejection_reason=rejection_reason,
        ):
            raise AlreadyResolved("Leave request already resolved")

        logger.info("Leave %s rejected by %s", request_id, approver_id)
        await notify_safely(
            self._notifier,
            NotificationEvent(
                business_id=request.business_id,
                recipient_id=request.staff_id,
                type=NotificationType.LEAVE_REJECTED,
                title="Leave Rejected",
                message=rejection_reason or "Your leave request was rejected",
                data={"requestId": request_id, "rejectedBy": approver_id},
            ),
        )
        return await self._leaves.get_by_id(request_id)

    async def get(self, request_id: str) -> Optional[LeaveRequest]:
        return await self._leaves.get_by_id(request_id)

    async def list_pending(self, business_id: str) -> Sequence[LeaveRequest]:
        return await self._leaves.list_for_business(business_id, status=LeaveStatus.PENDING)

    async def list_by_staff(self, staff_id: str) -> Sequence[LeaveRequest]:
        return await self._leaves.list_by_staff(staff_id)

    async def list_for_business(
        self, business_id: str, *, status: Optional[LeaveStatus] = None
    ) -> Sequence[LeaveRequest]:
        return await self._leaves.list_for_business(business_id, status=status)

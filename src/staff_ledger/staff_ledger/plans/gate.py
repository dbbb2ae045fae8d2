from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from ..businesses.service import BusinessRegistry
from ..core.enums import PlanTier
from ..core.exceptions import StaffLimitReached
from .policy import get_plan_limits

logger = logging.getLogger(__name__)


class ActiveStaffCounter(Protocol):
    async def count_active(self, business_id: str) -> int:
        raise NotImplementedError


@dataclass(frozen=True)
class HeadcountCheck:
    allowed: bool
    current_active_count: int
    max_allowed: int
    plan: PlanTier
    message: Optional[str] = None


class HeadcountGate:
    """Blocks approving a new staff member once the plan's max_staff is reached."""

    def __init__(self, businesses: BusinessRegistry, staff: ActiveStaffCounter):
        self._businesses = businesses
        self._staff = staff

    async def can_approve(self, business_id: str) -> HeadcountCheck:
        business = await self._businesses.require(business_id)
        limits = get_plan_limits(business.plan)
        current = int(await self._staff.count_active(business_id))
        allowed = current < limits.max_staff

        message = None
        if not allowed:
            message = (
                f"Staff limit reached for {business.plan.value} plan ({limits.max_staff} max). "
                "Upgrade to Premium for up to 30 staff members."
            )
        return HeadcountCheck(
            allowed=allowed,
            current_active_count=current,
            max_allowed=limits.max_staff,
            plan=business.plan,
            message=message,
        )

    async def ensure_can_approve(self, business_id: str) -> HeadcountCheck:
        check = await self.can_approve(business_id)
        if not check.allowed:
            logger.warning(
                "Headcount gate tripped for %s: %s/%s on %s",
                business_id,
                check.current_active_count,
                check.max_allowed,
                check.plan.value,
            )
            raise StaffLimitReached(
                current_active_count=check.current_active_count,
                max_allowed=check.max_allowed,
                plan=check.plan.value,
            )
        return check

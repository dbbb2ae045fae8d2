from __future__ import annotations

import logging
from typing import Optional

from ..businesses.model import Business
from ..businesses.service import BusinessRegistry
from ..core.enums import NotificationType, PlanTier
from ..core.exceptions import InvalidBusiness
from ..notifications.model import NotificationEvent
from ..notifications.sink import NotificationSink, notify_safely
from .policy import PlanLimits, get_plan_limits, is_feature_available

logger = logging.getLogger(__name__)


class PlanService:
    """Plan lookups for a business and the explicit upgrade action."""

    def __init__(self, businesses: BusinessRegistry, *, notifier: Optional[NotificationSink] = None):
        self._businesses = businesses
        self._notifier = notifier

    async def limits_for(self, business_id: str) -> PlanLimits:
        business = await self._businesses.require(business_id)
        return get_plan_limits(business.plan)

    async def is_feature_available(self, business_id: str, feature_id: str) -> bool:
        business = await self._businesses.require(business_id)
        return is_feature_available(business.plan, feature_id)

    async def upgrade_to_premium(self, business_id: str) -> Business:
        updated = await self._businesses.set_plan(business_id, PlanTier.PREMIUM)
        if updated is None:
            raise InvalidBusiness(f"Unknown business: {business_id}")

        logger.info("Business %s upgraded to PREMIUM", business_id)
        await notify_safely(
            self._notifier,
            NotificationEvent(
                business_id=business_id,
                recipient_id=None,
                type=NotificationType.PLAN_UPGRADE,
                title="Upgrade Successful",
                message="Your business has been upgraded to Premium! All premium features are now available.",
                data={"plan": PlanTier.PREMIUM.value},
            ),
        )
        return updated

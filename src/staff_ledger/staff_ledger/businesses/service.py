from __future__ import annotations

import logging
import secrets
import uuid
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty
from ..core.constants import JOIN_CODE_ALPHABET, JOIN_CODE_LENGTH
from ..core.enums import PlanTier
from ..core.exceptions import InvalidBusiness, ValidationError
from .model import Business, NewBusiness
from .repository import BusinessRepository

logger = logging.getLogger(__name__)


def random_join_code() -> str:
    return "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(JOIN_CODE_LENGTH))


class BusinessRegistry:
    """Owns business records: creation, lookup and plan tier."""

    def __init__(
        self,
        businesses: BusinessRepository,
        *,
        code_generator: Callable[[], str] = random_join_code,
        clock: Callable[[], datetime] = now_local,
    ):
        self._businesses = businesses
        self._code_generator = code_generator
        self._clock = clock

    async def create(self, data: NewBusiness) -> Business:
        name = require_non_empty(data.name, "Business name")
        business_type = require_non_empty(data.business_type, "Business type")
        plan = require_enum(PlanTier, data.plan, "Plan")

        if data.join_code:
            join_code = data.join_code.strip().upper()
            if len(join_code) != JOIN_CODE_LENGTH or not all(c in JOIN_CODE_ALPHABET for c in join_code):
                raise ValidationError(f"Join code must be {JOIN_CODE_LENGTH} uppercase letters or digits")
            if await self._businesses.get_by_code(join_code):
                raise ValidationError("Join code already in use")
        else:
            join_code = await self._unique_code()

        business = Business(
            business_id=f"biz_{uuid.uuid4()}",
            name=name,
            business_type=business_type,
            join_code=join_code,
            plan=plan,
            created_at=self._clock(),
            owner_name=data.owner_name,
            owner_email=data.owner_email,
            owner_phone=data.owner_phone,
        )
        await self._businesses.add(business)
        logger.info("Business %s created (code=%s, plan=%s)", business.business_id, join_code, plan.value)
        return business

    async def _unique_code(self) -> str:
        while True:
            candidate = self._code_generator().upper()
            if not await self._businesses.get_by_code(candidate):
                return candidate

    async def find_by_id(self, business_id: str) -> Optional[Business]:
        return await self._businesses.get_by_id(business_id)

    async def find_by_code(self, join_code: str) -> Optional[Business]:
        if not join_code or not join_code.strip():
            return None
        return await self._businesses.get_by_code(join_code)

    async def require(self, business_id: str) -> Business:
        business = await self._businesses.get_by_id(business_id)
        if not business:
            raise InvalidBusiness(f"Unknown business: {business_id}")
        return business

    async def set_plan(self, business_id: str, plan: PlanTier) -> Optional[Business]:
        """Overwrite the plan tier. Returns None when the business is unknown."""
        plan = require_enum(PlanTier, plan, "Plan")
        if not await self._businesses.set_plan(business_id, plan):
            return None
        logger.info("Business %s plan set to %s", business_id, plan.value)
        return await self._businesses.get_by_id(business_id)

    async def list_all(self) -> Sequence[Business]:
        return await self._businesses.list_all()

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PlanTier
from .model import Business


class BusinessRepository(Protocol):
    async def add(self, business: Business) -> None:
        raise NotImplementedError

    async def get_by_id(self, business_id: str) -> Optional[Business]:
        raise NotImplementedError

    async def get_by_code(self, join_code: str) -> Optional[Business]:
        """Case-insensitive lookup."""

        raise NotImplementedError

    async def set_plan(self, business_id: str, plan: PlanTier) -> bool:
        raise NotImplementedError

    async def list_all(self) -> Sequence[Business]:
        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PlanTier


@dataclass(frozen=True)
class Business:
    """Domain entity: a tenant that owns staff, attendance and leave records."""

    business_id: str
    name: str
    business_type: str
    join_code: str
    plan: PlanTier
    created_at: datetime
    owner_name: Optional[str] = None
    owner_email: Optional[str] = None
    owner_phone: Optional[str] = None

    @property
    def is_premium(self) -> bool:
        return self.plan == PlanTier.PREMIUM


@dataclass(frozen=True)
class NewBusiness:
    name: str
    business_type: str
    owner_name: Optional[str] = None
    owner_email: Optional[str] = None
    owner_phone: Optional[str] = None
    plan: PlanTier = PlanTier.FREE
    join_code: Optional[str] = None

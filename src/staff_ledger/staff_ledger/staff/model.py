from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role, StaffRequestStatus


@dataclass(frozen=True)
class StaffRequest:
    """A staff member's request to join a business by its join-code."""

    request_id: str
    business_id: str
    staff_id: str
    full_name: str
    role: Role
    status: StaffRequestStatus
    created_at: datetime
    email: Optional[str] = None
    reason: Optional[str] = None
    decided_at: Optional[datetime] = None

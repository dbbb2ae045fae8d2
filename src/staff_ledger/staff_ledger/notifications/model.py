from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class NotificationEvent:
    """What the core hands to the notification sink."""

    business_id: str
    recipient_id: Optional[str]
    type: NotificationType
    title: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Notification:
    """A delivered notification as kept by the local inbox."""

    notification_id: str
    business_id: str
    recipient_id: Optional[str]
    type: str
    title: str
    message: str
    data: Dict[str, Any]
    read: bool
    created_at: datetime

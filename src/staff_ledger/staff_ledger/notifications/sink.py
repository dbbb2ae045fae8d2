from __future__ import annotations

import logging
from typing import Optional, Protocol

from .model import NotificationEvent

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    async def notify(self, event: NotificationEvent) -> None:
        raise NotImplementedError


async def notify_safely(sink: Optional[NotificationSink], event: NotificationEvent) -> bool:
    """Best-effort delivery: a failing sink is logged, never raised to the caller."""
    if sink is None:
        return False
    try:
        await sink.notify(event)
        return True
    except Exception:
        logger.exception("Notification %s for business %s not delivered", event.type.value, event.business_id)
        return False

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """A committed write: which collection, what happened, which key."""

    entity: str
    action: str
    key: str


Listener = Callable[[ChangeEvent], None]


class ChangeFeed:
    """Observer hub that repositories publish committed writes to.

    Replaces re-reading the store on an interval: interested parties subscribe
    once and are told about every change as it happens.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, entity: str, action: str, key: str) -> None:
        event = ChangeEvent(entity=entity, action=action, key=str(key))
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Change listener failed for %s %s %s", entity, action, key)

"""In-process publish/subscribe for submission lifecycle events.

The bus only shortens the time between an admin action and the directory
reflecting it inside the same process. It keeps no history and gives no
delivery guarantee; the directory's periodic poll is what keeps separate
processes consistent.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

EVENT_SUBMITTED = "submitted"
EVENT_APPROVED = "approved"
EVENT_REJECTED = "rejected"
EVENT_DELISTED = "delisted"
EVENT_DELETED = "deleted"


@dataclass(frozen=True)
class BusEvent:
    """Something changed for ``submission_id``; ``payload`` is optional context."""

    type: str
    submission_id: int
    payload: Any = None


Handler = Callable[[BusEvent], None]


class PropagationBus:
    """Synchronous fan-out of :class:`BusEvent` to the current subscribers."""

    def __init__(self) -> None:
        self._handlers: list[Handler] = []

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        """Register ``handler`` and return a function that removes it again."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            try:
                self._handlers.remove(handler)
            except ValueError:
                pass

        return unsubscribe

    def publish(self, event: BusEvent) -> None:
        """Deliver ``event`` to every subscriber, isolating handler failures."""
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Bus handler %r failed for %s event on submission %s",
                    handler,
                    event.type,
                    event.submission_id,
                )

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

"""Invalidation Signal: process-wide "listing view is stale" notification.

Invariants:
    - revision increases by exactly 1 per emit()
    - Subscribers are called synchronously, in subscription order
    - A failing subscriber is logged and does not stop the others

Design Decisions:
    - Single signal, no cache: consumers decide what to recompute
    - Singleton via get_invalidation_signal() (lru_cache), overridable as a FastAPI dependency
"""

import logging
from functools import lru_cache
from typing import Callable

logger = logging.getLogger(__name__)

Subscriber = Callable[[str, int], None]


class InvalidationSignal:
    """Monotonic revision counter plus subscriber fan-out."""

    def __init__(self):
        self.revision = 0
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a subscriber; returns a function that unsubscribes it."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def emit(self, collection: str) -> int:
        self.revision += 1
        logger.info(
            f"Listing invalidated: {collection}",
            extra={"revision": self.revision},
        )
        for subscriber in list(self._subscribers):
            try:
                subscriber(collection, self.revision)
            except Exception as e:
                logger.error(
                    f"Invalidation subscriber failed: {e}", exc_info=True,
                )
        return self.revision


@lru_cache
def get_invalidation_signal() -> InvalidationSignal:
    return InvalidationSignal()

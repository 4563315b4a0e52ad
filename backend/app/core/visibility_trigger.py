"""Incremental Load Trigger: edge-detecting proximity observer for a scroll sentinel.

Invariants:
    - Callback fires exactly once per not-visible -> visible transition
    - Staying inside the proximity zone never re-fires
    - After cancel()/teardown() no callback fires, whatever events follow
    - Rebinding with a different callback identity replaces the observer, so the
      newest closure is the only one that can be invoked
    - Callback runs synchronously inside the notification that crossed the edge

Design Decisions:
    - Stream of sentinel distances (px below the viewport edge) instead of a
      platform visibility API: any scroll source can feed observe()
    - A fresh observer starts Idle, so a sentinel that is still visible after
      rebinding fires once for the new target
    - No in-flight guard here: the integrator (services/paged_feed.py) enforces
      at-most-one outstanding page request
"""

from enum import Enum
from typing import Callable

DEFAULT_PROXIMITY_PX = 50.0

LoadCallback = Callable[[], None]


class TriggerState(str, Enum):
    """Observer state machine."""
    IDLE = "idle"
    ARMED = "armed"
    CANCELLED = "cancelled"


class ProximityObserver:
    """Handle returned by arm(): feeds distances in, fires on entry edges."""

    def __init__(
        self,
        target: str,
        callback: LoadCallback,
        proximity: float = DEFAULT_PROXIMITY_PX,
    ):
        if proximity < 0:
            raise ValueError(f"proximity must be non-negative, got {proximity}")
        self.target = target
        self.callback = callback
        self.proximity = proximity
        self.state = TriggerState.IDLE
        self.fire_count = 0

    @property
    def active(self) -> bool:
        return self.state is not TriggerState.CANCELLED

    def in_zone(self, distance: float) -> bool:
        return distance <= self.proximity

    def observe(self, distance: float) -> bool:
        """Record the sentinel's current distance; returns True if the callback fired."""
        if not self.active:
            return False
        if not self.in_zone(distance):
            self.state = TriggerState.IDLE
            return False
        if self.state is TriggerState.ARMED:
            return False
        self.state = TriggerState.ARMED
        self.fire_count += 1
        self.callback()
        return True

    def cancel(self) -> None:
        self.state = TriggerState.CANCELLED


def arm(
    target: str,
    callback: LoadCallback,
    proximity: float = DEFAULT_PROXIMITY_PX,
) -> ProximityObserver:
    """Start observing `target`; cancel the returned handle to stop."""
    return ProximityObserver(target, callback, proximity)


class IncrementalLoadTrigger:
    """Owns the observer for one sentinel and recreates it when the callback changes."""

    def __init__(self, target: str = "sentinel", proximity: float = DEFAULT_PROXIMITY_PX):
        self.target = target
        self.proximity = proximity
        self._observer: ProximityObserver | None = None

    @property
    def observer(self) -> ProximityObserver | None:
        return self._observer

    @property
    def bound(self) -> bool:
        return self._observer is not None and self._observer.active

    def bind(self, callback: LoadCallback) -> ProximityObserver:
        """Observe with `callback`; an identical callback keeps the current observer."""
        current = self._observer
        if current is not None and current.active and current.callback is callback:
            return current
        if current is not None:
            current.cancel()
        self._observer = arm(self.target, callback, self.proximity)
        return self._observer

    def notify(self, distance: float) -> bool:
        """Forward one visibility notification to the live observer."""
        if self._observer is None:
            return False
        return self._observer.observe(distance)

    def teardown(self) -> None:
        if self._observer is not None:
            self._observer.cancel()
            self._observer = None

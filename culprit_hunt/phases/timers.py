"""
Deadline timers polled by the driver.

Timers never run on their own thread. The driver calls TimerScheduler.tick()
(from a UI loop, an asyncio task, or a test with a fake clock) and every
timer whose deadline has passed fires exactly once, in deadline order.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, List, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class PhaseTimer:
    """A cancellable deadline with a callback."""
    key: Hashable
    deadline: float
    callback: Callable[[], None] = field(repr=False)
    cancelled: bool = False
    fired: bool = False

    @property
    def is_active(self) -> bool:
        return not self.cancelled and not self.fired

    def remaining(self, now: float) -> float:
        """Seconds left before the deadline, never negative."""
        return max(0.0, self.deadline - now)

    def is_expired(self, now: float) -> bool:
        return self.is_active and now >= self.deadline

    def cancel(self) -> None:
        self.cancelled = True


class TimerScheduler:
    """Keeps at most one active timer per key."""

    def __init__(self, clock: Clock = time.monotonic):
        self.clock = clock
        self._timers: Dict[Hashable, PhaseTimer] = {}
        # Set while tick() runs so callbacks measure from the tick time
        self._tick_now: Optional[float] = None

    def now(self) -> float:
        if self._tick_now is not None:
            return self._tick_now
        return self.clock()

    def schedule(self, key: Hashable, duration: float, callback: Callable[[], None]) -> PhaseTimer:
        """Start (or restart) the timer for `key`."""
        if duration <= 0:
            raise ValueError(f"Timer duration must be positive, got {duration}")
        self.cancel(key)
        timer = PhaseTimer(key=key, deadline=self.now() + duration, callback=callback)
        self._timers[key] = timer
        logger.debug("Timer %r scheduled for %.1fs", key, duration)
        return timer

    def cancel(self, key: Hashable) -> bool:
        """Cancel the timer for `key`. Returns True if one was active."""
        timer = self._timers.pop(key, None)
        if timer is None or not timer.is_active:
            return False
        timer.cancel()
        logger.debug("Timer %r cancelled", key)
        return True

    def cancel_all(self) -> None:
        for key in list(self._timers):
            self.cancel(key)

    def is_active(self, key: Hashable) -> bool:
        timer = self._timers.get(key)
        return timer is not None and timer.is_active

    def remaining(self, key: Hashable) -> Optional[float]:
        """Seconds left on the timer for `key`, or None if none is active."""
        timer = self._timers.get(key)
        if timer is None or not timer.is_active:
            return None
        return timer.remaining(self.now())

    def active_keys(self) -> List[Hashable]:
        return [key for key, timer in self._timers.items() if timer.is_active]

    def tick(self, now: Optional[float] = None) -> List[Hashable]:
        """
        Fire every expired timer. Returns the keys that fired.

        A callback may cancel or schedule other timers; a timer cancelled by
        an earlier callback in the same tick does not fire. Timers scheduled
        by a callback count their duration from `now`, not from the clock.
        """
        if now is None:
            now = self.now()
        expired = sorted(
            (timer for timer in self._timers.values() if timer.is_expired(now)),
            key=lambda timer: timer.deadline,
        )
        fired = []
        outer_now = self._tick_now
        self._tick_now = now
        try:
            for timer in expired:
                if not timer.is_active:
                    continue
                timer.fired = True
                if self._timers.get(timer.key) is timer:
                    del self._timers[timer.key]
                logger.debug("Timer %r fired", timer.key)
                timer.callback()
                fired.append(timer.key)
        finally:
            self._tick_now = outer_now
        return fired

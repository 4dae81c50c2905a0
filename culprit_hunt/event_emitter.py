"""
Event emitter delivering game notifications to the driver.
"""

import logging
from collections import deque
from threading import Lock
from typing import Callable, Deque, Iterable, List, Optional

from .core.events import GameEvent

logger = logging.getLogger(__name__)

Listener = Callable[[GameEvent], None]

DEFAULT_HISTORY_SIZE = 500


class EventEmitter:
    """Fans events out to listeners and keeps a bounded history."""

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE):
        self._listeners: List[Listener] = []
        self.history: Deque[GameEvent] = deque(maxlen=history_size)
        self._lock = Lock()

    def subscribe(self, listener: Listener) -> None:
        """Register a callable that receives every emitted event."""
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def emit(self, event: GameEvent) -> None:
        """Record an event and hand it to every listener."""
        with self._lock:
            self.history.append(event)
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                # Don't let rendering errors break the game
                logger.exception("Listener failed on %s event", event.kind)

    def emit_all(self, events: Iterable[GameEvent]) -> None:
        for event in events:
            self.emit(event)

    def get_history(self, kind: Optional[str] = None) -> List[GameEvent]:
        """Recorded events, optionally filtered by kind."""
        with self._lock:
            events = list(self.history)
        if kind is None:
            return events
        return [event for event in events if event.kind == kind]

    def clear(self) -> None:
        with self._lock:
            self.history.clear()

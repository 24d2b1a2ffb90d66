"""In-process event bus for scheduling progress notifications."""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Callable
from typing import Any

EventHandler = Callable[[dict[str, Any]], None]

# Subscribing to this name receives every event, with "event" added to the payload.
ANY_EVENT = "*"


class EventBus:
    """Dispatches scheduler events to subscribers by event name.

    Safe to emit from several threads; handlers are called one at a time.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._lock = threading.RLock()

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Register a callback for an event."""
        with self._lock:
            self._handlers[event_name].append(handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Emit an event to its subscribers, then to catch-all subscribers."""
        with self._lock:
            for handler in list(self._handlers.get(event_name, [])):
                handler(payload)
            if event_name != ANY_EVENT:
                for handler in list(self._handlers.get(ANY_EVENT, [])):
                    handler({"event": event_name, **payload})

"""In-process event bus connecting the tracker to its observers."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any

EventHandler = Callable[[dict[str, Any]], None]

ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
COMMAND_COMPLETED = "command_completed"
DAY_ROLLED_OVER = "day_rolled_over"


class EventBus:
    """Dispatches tracker events to subscribers by event name."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Register a callback for an event."""
        self._handlers[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Emit an event to all subscribers, in subscription order."""
        for handler in list(self._handlers.get(event_name, [])):
            handler(payload)

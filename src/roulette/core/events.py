"""
Event bus for the roulette engine.

Animators publish lifecycle events here; the presentation layer
subscribes to enable/disable controls and show results. Dispatch is
synchronous and runs inside the tick that produced the event.
"""

from dataclasses import dataclass, field
from typing import Any, Callable
from enum import Enum, auto
from collections import defaultdict
import logging
import time

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # Spin lifecycle
    SPIN_STARTED = auto()
    DECEL_STARTED = auto()
    STATE_CHANGED = auto()
    SPIN_FINALIZED = auto()
    NO_ELIGIBLE_ENTRIES = auto()

    # Per-tick presentation
    HIGHLIGHT_CHANGED = auto()
    BLINK_TOGGLED = auto()
    BLINK_ENDED = auto()

    # Editable list
    ROSTER_CHANGED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: Event type (EventType enum or custom string)
        data: Event payload
        source: Component that emitted the event
        timestamp: When event was created
    """
    type: EventType | str
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "system"
    timestamp: float = field(default_factory=time.time)


Handler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for component communication.

    Handlers are plain callables. A failing handler is logged and
    skipped so one bad subscriber cannot stall an animation tick.
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._handlers: dict[EventType | str, list[Handler]] = defaultdict(list)
        self._global_handlers: list[Handler] = []
        self._event_history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self,
        event_type: EventType | str,
        handler: Handler
    ) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Args:
            event_type: Type of event to listen for
            handler: Callback function

        Returns:
            Unsubscribe function
        """
        self._handlers[event_type].append(handler)
        logger.debug(f"Handler subscribed to {event_type}")

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Handler unsubscribed from {event_type}")

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """Subscribe to all events. Returns an unsubscribe function."""
        self._global_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._global_handlers:
                self._global_handlers.remove(handler)

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Emit an event to every matching handler immediately."""
        self._add_to_history(event)

        handlers = self._handlers.get(event.type, []) + self._global_handlers
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.type}: {e}")

    def _add_to_history(self, event: Event) -> None:
        """Add event to history, maintaining limit."""
        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

    def get_history(
        self,
        event_type: EventType | str | None = None,
        limit: int = 10
    ) -> list[Event]:
        """Get recent events from history."""
        history = self._event_history
        if event_type is not None:
            history = [e for e in history if e.type == event_type]
        return history[-limit:]

    def clear_history(self) -> None:
        """Clear event history."""
        self._event_history.clear()


def state_changed_event(running: bool, stop_enabled: bool, source: str) -> Event:
    """Create a running/stop-button state event."""
    return Event(
        EventType.STATE_CHANGED,
        data={"running": running, "stop_enabled": stop_enabled},
        source=source,
    )


def finalized_event(winner: str, source: str, **extra: Any) -> Event:
    """Create a spin-finalized event carrying the winner name."""
    return Event(EventType.SPIN_FINALIZED, data={"winner": winner, **extra}, source=source)


def no_eligible_event(source: str) -> Event:
    """Create the 'nothing enabled to spin' signal."""
    return Event(EventType.NO_ELIGIBLE_ENTRIES, source=source)

"""
Event bus for cooldown state changes.

Lets the settings screen and chat feedback react to recorded uses
without the cooldown manager knowing about them.

Usage:
    from .event_bus import get_event_bus, EventType

    bus = get_event_bus()
    bus.on(EventType.EVENT_RECORDED, my_handler)

    # Emitted by the cooldown manager
    bus.emit(EventType.EVENT_RECORDED, category="bad", day=12, uses=2)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Cooldown events that can be published."""

    # Usage events
    EVENT_RECORDED = "cooldown.event_recorded"
    COMMAND_RECORDED = "cooldown.command_recorded"
    PURCHASE_RECORDED = "cooldown.purchase_recorded"

    # Maintenance
    LEDGER_CLEANED = "cooldown.cleaned"

    # Save lifecycle
    SAVE_LOADED = "save.loaded"
    SAVE_SAVED = "save.saved"


@dataclass
class CooldownEvent:
    """
    Event payload for the event bus.

    Attributes:
        type: The event type (from EventType enum)
        data: Event-specific payload as dict
        save_id: ID of the save this event belongs to
        day: In-game day when the event occurred
        timestamp: When the event was emitted
    """

    type: EventType
    data: dict = field(default_factory=dict)
    save_id: str = ""
    day: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.data}"


EventHandler = Callable[[CooldownEvent], None]


class EventBus:
    """
    Synchronous event bus.

    Listeners are called immediately on emit(), in subscription order.
    """

    def __init__(self):
        self._listeners: dict[EventType, list[EventHandler]] = {}
        self._history: list[CooldownEvent] = []
        self._history_limit = 100

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe to an event type. Subscribing twice is a no-op."""
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        if handler not in self._listeners[event_type]:
            self._listeners[event_type].append(handler)

    def off(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe from an event type."""
        if event_type in self._listeners and handler in self._listeners[event_type]:
            self._listeners[event_type].remove(handler)

    def emit(
        self,
        event_type: EventType,
        save_id: str = "",
        day: int = 0,
        **data,
    ) -> CooldownEvent:
        """
        Emit an event to all subscribers.

        Returns:
            The emitted CooldownEvent (for chaining/testing)
        """
        event = CooldownEvent(
            type=event_type,
            data=data,
            save_id=save_id,
            day=day,
        )

        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit :]

        for handler in self._listeners.get(event_type, []):
            try:
                handler(event)
            except Exception:
                # One bad listener shouldn't break the others
                logger.exception(f"Error in handler for {event_type.value}")

        return event

    def get_history(self, event_type: EventType | None = None) -> list[CooldownEvent]:
        """Recent events, optionally filtered by type."""
        if event_type is None:
            return list(self._history)
        return [e for e in self._history if e.type == event_type]

    def listener_count(self, event_type: EventType) -> int:
        return len(self._listeners.get(event_type, []))


_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get the global event bus instance."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def reset_event_bus() -> None:
    """Reset the global event bus. Useful for testing."""
    global _event_bus
    _event_bus = None

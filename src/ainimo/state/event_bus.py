"""
Event bus for companion state changes.

Lets renderers and other listeners react to what the manager commits
without the engine knowing about them.

Usage:
    from .event_bus import get_event_bus, EventType

    bus = get_event_bus()
    bus.on(EventType.LEVEL_UP, my_handler)

    # In the manager, after committing new state
    bus.emit(EventType.LEVEL_UP, slot="default", level=5)

    def my_handler(event: GameEvent):
        print(f"Reached level {event.data['level']}")
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Events the manager publishes."""

    # Actions
    ACTION_PERFORMED = "action.performed"
    ACTION_REJECTED = "action.rejected"
    LEVEL_UP = "level.up"

    # Personality
    PERSONALITY_LOCKED = "personality.locked"

    # Achievements
    ACHIEVEMENT_UNLOCKED = "achievement.unlocked"

    # Mini-games
    MINIGAME_STARTED = "minigame.started"
    MINIGAME_COMPLETED = "minigame.completed"
    MINIGAME_CANCELLED = "minigame.cancelled"
    ITEM_DROPPED = "item.dropped"

    # Saves
    SAVE_CREATED = "save.created"
    SAVE_LOADED = "save.loaded"
    SAVE_SAVED = "save.saved"


@dataclass
class GameEvent:
    """
    Event payload for the event bus.

    Attributes:
        type: The event type
        data: Event-specific payload
        slot: Save slot the event belongs to
        timestamp: When the event was emitted
    """

    type: EventType
    data: dict = field(default_factory=dict)
    slot: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventBus:
    """
    Synchronous event bus.

    Listeners run immediately inside emit(), in subscription order.
    A failing listener is logged and the rest still run.
    """

    def __init__(self, history_limit: int = 100):
        self._listeners: dict[EventType, list[EventHandler]] = {}
        self._history: list[GameEvent] = []
        self._history_limit = history_limit

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe ``handler`` to ``event_type`` (once)."""
        handlers = self._listeners.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)

    def off(self, event_type: EventType, handler: EventHandler) -> None:
        if handler in self._listeners.get(event_type, []):
            self._listeners[event_type].remove(handler)

    def emit(self, event_type: EventType, slot: str = "", **data) -> GameEvent:
        """
        Emit an event to all subscribers.

        Returns:
            The emitted GameEvent (for chaining/testing)
        """
        event = GameEvent(type=event_type, data=data, slot=slot)

        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit:]

        for handler in list(self._listeners.get(event_type, [])):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Error in handler for {event_type.value}")

        return event

    def clear(self) -> None:
        """Remove all listeners and history."""
        self._listeners.clear()
        self._history.clear()

    def get_history(self, event_type: EventType | None = None) -> list[GameEvent]:
        if event_type is None:
            return list(self._history)
        return [e for e in self._history if e.type == event_type]

    def listener_count(self, event_type: EventType) -> int:
        return len(self._listeners.get(event_type, []))


_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Process-wide event bus (created on first use)."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def reset_event_bus() -> None:
    """Drop the global bus. Useful for testing."""
    global _event_bus
    _event_bus = None

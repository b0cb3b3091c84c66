"""Match event notifications.

The disease engine, every player turn and the match controller publish
events on a shared EventBus. Handlers run synchronously, in the order
they subscribed, at the moment the state changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional


class EventType(Enum):
    """Kinds of match events."""

    TURN_STARTED = "turn_started"
    TURN_ENDED = "turn_ended"
    PLAYER_CARDS_EXHAUSTED = "player_cards_exhausted"
    EPIDEMIC = "epidemic"
    OUTBREAK = "outbreak"
    OUTBREAK_LIMIT_REACHED = "outbreak_limit_reached"
    DISEASE_CUBES_EXHAUSTED = "disease_cubes_exhausted"
    DISEASE_CURED = "disease_cured"
    DISEASE_ERADICATED = "disease_eradicated"
    ALL_DISEASES_CURED = "all_diseases_cured"
    MATCH_ENDED = "match_ended"


# Events that end the match
LOSS_EVENTS = frozenset({
    EventType.OUTBREAK_LIMIT_REACHED,
    EventType.DISEASE_CUBES_EXHAUSTED,
    EventType.PLAYER_CARDS_EXHAUSTED,
})
WIN_EVENTS = frozenset({EventType.ALL_DISEASES_CURED})


@dataclass(frozen=True)
class MatchEvent:
    """A single notification.

    Attributes:
        event_type: What happened.
        payload: Event details (player name, city, color, counters).
    """

    event_type: EventType
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"event_type": self.event_type.value, "payload": dict(self.payload)}

    def __str__(self) -> str:
        details = ", ".join(f"{key}={value}" for key, value in self.payload.items())
        return f"{self.event_type.value}({details})"


EventHandler = Callable[[MatchEvent], None]


class EventBus:
    """Synchronous publish/subscribe channel with an event history."""

    def __init__(self):
        self._handlers: list[EventHandler] = []
        self._history: list[MatchEvent] = []

    def subscribe(self, handler: EventHandler) -> None:
        """Register a handler. Registering the same handler twice is a no-op."""
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        """Remove a handler if it is registered."""
        if handler in self._handlers:
            self._handlers.remove(handler)

    def publish(self, event_type: EventType, **payload: Any) -> MatchEvent:
        """Record an event and deliver it to every handler in order.

        Handler exceptions propagate to the publisher.

        Returns:
            The published event.
        """
        event = MatchEvent(event_type=event_type, payload=payload)
        self._history.append(event)
        for handler in list(self._handlers):
            handler(event)
        return event

    def get_history(self, event_type: Optional[EventType] = None) -> list[MatchEvent]:
        """Return recorded events, optionally only those of one type."""
        if event_type is None:
            return list(self._history)
        return [event for event in self._history if event.event_type == event_type]

    def clear_history(self) -> None:
        self._history.clear()

    def __len__(self) -> int:
        return len(self._history)

    def __repr__(self) -> str:
        return f"EventBus(handlers={len(self._handlers)}, events={len(self._history)})"

"""
Event bus for the lane runner.

Provides synchronous pub/sub between the simulation and its adapters.
Input events are queued and drained between ticks so every command lands
as one atomic mutation.
"""

from dataclasses import dataclass, field
from typing import Any, Callable
from enum import Enum, auto
from collections import defaultdict, deque
import logging
import time

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # Input events
    MOVE_LEFT = auto()
    MOVE_RIGHT = auto()
    JUMP = auto()
    SLIDE = auto()
    SLIDE_RELEASE = auto()
    START = auto()
    RESTART = auto()
    PAUSE = auto()
    RESUME = auto()

    # Game events
    STATE_CHANGED = auto()
    GAME_STARTED = auto()
    GAME_OVER = auto()
    COIN_COLLECTED = auto()
    POWERUP_COLLECTED = auto()
    SHIELD_ABSORBED = auto()

    # System events
    TICK = auto()
    SHUTDOWN = auto()


INPUT_EVENTS = frozenset({
    EventType.MOVE_LEFT,
    EventType.MOVE_RIGHT,
    EventType.JUMP,
    EventType.SLIDE,
    EventType.SLIDE_RELEASE,
    EventType.START,
    EventType.RESTART,
    EventType.PAUSE,
    EventType.RESUME,
})


@dataclass
class Event:
    """
    One message on the bus.

    Attributes:
        type: EventType, or a free-form string for adapter-defined events
        data: Payload, e.g. ``{"delta_ms": 16.7, "frame": 3}`` for TICK
        source: Who sent it ("input", "game", "autopilot", ...)
        timestamp: time.monotonic() at creation
    """
    type: EventType | str
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "system"
    timestamp: float = field(default_factory=time.monotonic)


Handler = Callable[[Event], None]
Unsubscribe = Callable[[], None]


class EventBus:
    """
    Synchronous publish/subscribe hub.

    ``emit`` dispatches at once. ``queue_event`` parks an event until the
    owner of the frame loop calls ``process_queue`` between ticks. A handler
    that raises is logged and the remaining handlers still run.
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._handlers: dict[EventType | str, list[Handler]] = defaultdict(list)
        self._wildcard: list[Handler] = []
        self._queue: deque[Event] = deque()
        self._history: deque[Event] = deque(maxlen=history_limit)

    def subscribe(self, event_type: EventType | str, handler: Handler) -> Unsubscribe:
        """Call ``handler`` for every event of ``event_type``."""
        bucket = self._handlers[event_type]
        bucket.append(handler)
        logger.debug(f"Subscribed {handler!r} to {event_type}")
        return lambda: self._detach(bucket, handler)

    def subscribe_all(self, handler: Handler) -> Unsubscribe:
        """Call ``handler`` for every event regardless of type."""
        self._wildcard.append(handler)
        return lambda: self._detach(self._wildcard, handler)

    @staticmethod
    def _detach(bucket: list[Handler], handler: Handler) -> None:
        if handler in bucket:
            bucket.remove(handler)

    def emit(self, event: Event) -> None:
        self._history.append(event)
        for handler in (*self._handlers.get(event.type, ()), *self._wildcard):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Handler {handler!r} failed on {event.type}: {e}")

    def queue_event(self, event: Event) -> None:
        self._queue.append(event)

    def process_queue(self) -> int:
        """Emit queued events in arrival order, including ones queued meanwhile.

        Returns how many were dispatched.
        """
        count = 0
        while self._queue:
            self.emit(self._queue.popleft())
            count += 1
        return count

    @property
    def pending(self) -> int:
        return len(self._queue)

    def handler_count(self, event_type: EventType | str) -> int:
        """Handlers subscribed to exactly this type, wildcards excluded."""
        return len(self._handlers.get(event_type, ()))

    def get_history(self, event_type: EventType | str | None = None, limit: int = 10) -> list[Event]:
        """Most recent events, oldest first, optionally of one type."""
        matching = [e for e in self._history if event_type is None or e.type == event_type]
        return matching[-limit:]

    def clear_history(self) -> None:
        self._history.clear()


def input_event(action: EventType, source: str = "input") -> Event:
    """Build a player or session command."""
    if action not in INPUT_EVENTS:
        raise ValueError(f"{action} is not an input event")
    return Event(action, source=source)


def tick_event(delta_ms: float, frame: int) -> Event:
    """Build the per-frame clock event."""
    return Event(EventType.TICK, data={"delta_ms": delta_ms, "frame": frame})

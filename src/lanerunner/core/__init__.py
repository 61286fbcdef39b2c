"""Core framework components for the lane runner."""

from .state import GameState, StateMachine
from .events import EventBus, Event, EventType
from .random_source import RandomSource
from .sinks import EffectsSink, UISink, NullUISink

__all__ = [
    "GameState",
    "StateMachine",
    "EventBus",
    "Event",
    "EventType",
    "RandomSource",
    "EffectsSink",
    "UISink",
    "NullUISink",
]

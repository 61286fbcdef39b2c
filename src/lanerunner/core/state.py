"""
Session state for a run.

    START ──> PLAYING <──> PAUSED
                 │  ^
                 v  │ restart
              GAME_OVER

Only PLAYING advances the simulation. Every other state ignores ticks.
"""

from enum import Enum, auto
from dataclasses import dataclass, field, fields
from typing import Callable, Any
import logging

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Where the session is."""
    START = auto()      # Title screen, nothing simulated yet
    PLAYING = auto()
    PAUSED = auto()
    GAME_OVER = auto()  # Waiting for restart


@dataclass
class StateContext:
    """Bookkeeping that survives transitions."""
    runs_started: int = 0
    last_result: dict[str, Any] = field(default_factory=dict)


StateListener = Callable[[GameState, GameState, StateContext], None]

_CONTEXT_FIELDS = frozenset(f.name for f in fields(StateContext))


class StateMachine:
    """
    Guards the session state.

    Moves outside ``ALLOWED`` are refused with a warning. Listeners run
    after each accepted move; one that raises is logged and skipped.
    """

    ALLOWED: dict[GameState, frozenset[GameState]] = {
        GameState.START: frozenset({GameState.PLAYING}),
        GameState.PLAYING: frozenset({GameState.PAUSED, GameState.GAME_OVER}),
        GameState.PAUSED: frozenset({GameState.PLAYING}),
        GameState.GAME_OVER: frozenset({GameState.PLAYING}),
    }

    def __init__(self, initial_state: GameState = GameState.START) -> None:
        self._initial_state = initial_state
        self._state = initial_state
        self._context = StateContext()
        self._listeners: list[StateListener] = []
        logger.debug(f"Session state starts at {initial_state.name}")

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def context(self) -> StateContext:
        return self._context

    def can_transition(self, to_state: GameState) -> bool:
        return to_state in self.ALLOWED.get(self._state, frozenset())

    def transition(self, to_state: GameState, **context_updates: Any) -> bool:
        """
        Move to ``to_state`` if allowed.

        Args:
            to_state: Requested state
            **context_updates: StateContext fields to overwrite on success

        Returns:
            False when the move is not allowed; nothing changes then
        """
        from_state = self._state
        if not self.can_transition(to_state):
            logger.warning(f"Invalid transition: {from_state.name} -> {to_state.name}")
            return False

        self._state = to_state
        self._update_context(context_updates)

        logger.info(f"Session {from_state.name} -> {to_state.name}")
        self._notify(from_state, to_state)
        return True

    def _update_context(self, updates: dict[str, Any]) -> None:
        for name, value in updates.items():
            if name not in _CONTEXT_FIELDS:
                logger.warning(f"Ignoring unknown context field {name!r}")
                continue
            # Copy mappings so callers cannot mutate stored results
            setattr(self._context, name, dict(value) if isinstance(value, dict) else value)

    def add_listener(self, callback: StateListener) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: StateListener) -> None:
        try:
            self._listeners.remove(callback)
        except ValueError:
            pass

    def reset(self) -> None:
        """Back to the initial state with an empty context."""
        from_state = self._state
        self._state = self._initial_state
        self._context = StateContext()
        logger.info(f"Session reset to {self._state.name}")
        self._notify(from_state, self._state)

    def _notify(self, from_state: GameState, to_state: GameState) -> None:
        for listener in tuple(self._listeners):
            try:
                listener(from_state, to_state, self._context)
            except Exception as e:
                logger.error(f"State listener {listener!r} failed: {e}")

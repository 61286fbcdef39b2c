"""
Headless loop driver.

Stands in for a window's frame clock: emits TICK events at a fixed delta,
drains queued input between ticks and can hand the controls to a simple
autopilot.
"""

import asyncio
import logging
from typing import Optional

from lanerunner.core.events import Event, EventBus, EventType, input_event, tick_event
from lanerunner.core.state import GameState
from lanerunner.game import GameController
from lanerunner.simulation.entities import ObstacleKind
from lanerunner.simulation.geometry import LANE_COUNT

logger = logging.getLogger(__name__)


class Autopilot:
    """Dodges whatever threatens the player's lane.

    Barriers and moving blocks count once they are within the lookahead
    window. Pits lie on the ground for their whole lifetime, so any pit in a
    lane blocks it. The player side-steps into a clear neighbouring lane and
    jumps when both neighbours are blocked.
    """

    def __init__(self, controller: GameController, lookahead: float = 160.0):
        self.controller = controller
        self.lookahead = lookahead

    def decide(self) -> list[Event]:
        game = self.controller
        if game.state in (GameState.START, GameState.GAME_OVER):
            return [input_event(EventType.START, source="autopilot")]
        if not game.is_playing:
            return []

        player = game.player
        threat = self._nearest_threat(player.lane)
        if threat is None:
            return []

        for lane in self._escape_lanes(player.lane):
            if self._nearest_threat(lane) is None:
                action = EventType.MOVE_LEFT if lane < player.lane else EventType.MOVE_RIGHT
                return [input_event(action, source="autopilot")]

        if not player.is_jumping:
            return [input_event(EventType.JUMP, source="autopilot")]
        return []

    def _nearest_threat(self, lane: int):
        player = self.controller.player
        top = player.y - player.height - self.lookahead
        nearest = None
        for obstacle in self.controller.obstacles.obstacles:
            if obstacle.lane != lane:
                continue
            if obstacle.kind == ObstacleKind.PIT:
                return obstacle
            if obstacle.y + obstacle.height < top or obstacle.y > player.y:
                continue
            if nearest is None or obstacle.y > nearest.y:
                nearest = obstacle
        return nearest

    @staticmethod
    def _escape_lanes(lane: int) -> list[int]:
        return [n for n in (lane - 1, lane + 1) if 0 <= n < LANE_COUNT]


class HeadlessRunner:
    """Drives a controller without any display."""

    def __init__(
        self,
        controller: GameController,
        event_bus: Optional[EventBus] = None,
        frame_ms: float = 1000.0 / 60.0,
        autopilot: Optional[Autopilot] = None,
        realtime: bool = False,
    ):
        self.controller = controller
        self.event_bus = event_bus or controller.event_bus
        self.frame_ms = frame_ms
        self.autopilot = autopilot
        self.realtime = realtime
        self._running = False
        self._frame_count = 0

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def queue_input(self, action: EventType) -> None:
        """Queue a command for the next tick boundary."""
        self.event_bus.queue_event(input_event(action))

    def step(self) -> None:
        """One frame: autopilot, drain input, tick."""
        if self.autopilot is not None:
            for event in self.autopilot.decide():
                self.event_bus.queue_event(event)

        self.event_bus.process_queue()
        self.event_bus.emit(tick_event(self.frame_ms, self._frame_count))
        self._frame_count += 1

    async def run(self, max_frames: Optional[int] = None, stop_on_game_over: bool = False) -> dict:
        """Main loop. Returns the result of the current or last run."""
        self._running = True
        unsubscribe = self.event_bus.subscribe(EventType.SHUTDOWN, lambda event: self.stop())
        logger.info("Headless runner started")

        try:
            while self._running:
                self.step()

                if stop_on_game_over and self.controller.state == GameState.GAME_OVER:
                    break
                if max_frames is not None and self._frame_count >= max_frames:
                    break

                # Yield to other tasks
                await asyncio.sleep(self.frame_ms / 1000.0 if self.realtime else 0)
        finally:
            unsubscribe()
            self._running = False

        logger.info(f"Headless runner stopped after {self._frame_count} frames")

        if self.controller.state == GameState.GAME_OVER:
            return dict(self.controller.state_machine.context.last_result)
        return self.controller.result()

    def stop(self) -> None:
        self._running = False

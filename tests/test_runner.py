from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from lanerunner.config.settings import Settings
from lanerunner.core.events import Event, EventBus, EventType
from lanerunner.core.random_source import RandomSource
from lanerunner.core.state import GameState
from lanerunner.game import GameController
from lanerunner.runner import Autopilot, HeadlessRunner
from lanerunner.simulation.entities import ObstacleKind
from lanerunner.simulation.geometry import Viewport

if TYPE_CHECKING:
    from conftest import RecordingUI


def _controller(ui: RecordingUI, seed: int = 3) -> GameController:
    return GameController(
        settings=Settings(),
        viewport=Viewport(800, 600),
        rng=RandomSource(seed=seed),
        event_bus=EventBus(),
        ui=ui,
    )


def test_step_drains_input_then_ticks(ui: RecordingUI) -> None:
    game = _controller(ui)
    runner = HeadlessRunner(game, frame_ms=100)

    runner.queue_input(EventType.START)
    runner.step()

    assert game.state == GameState.PLAYING
    assert game.stats.distance == 1
    assert runner.frame_count == 1


def test_run_stops_at_frame_limit(ui: RecordingUI) -> None:
    game = _controller(ui)
    runner = HeadlessRunner(game, frame_ms=16)
    runner.queue_input(EventType.START)

    result = asyncio.run(runner.run(max_frames=30))

    assert runner.frame_count == 30
    assert set(result) == {"score", "coins", "distance"}
    assert game.state == GameState.PLAYING


def test_autopilot_run_reports_a_result(ui: RecordingUI) -> None:
    game = _controller(ui, seed=8)
    runner = HeadlessRunner(game, frame_ms=1000 / 60, autopilot=Autopilot(game))

    result = asyncio.run(runner.run(max_frames=3000, stop_on_game_over=True))

    assert runner.frame_count <= 3000
    assert result["distance"] > 0
    if game.state == GameState.GAME_OVER:
        assert result == game.state_machine.context.last_result
        assert "show_game_over" in ui.names()


def test_autopilot_starts_the_game(ui: RecordingUI) -> None:
    game = _controller(ui)
    pilot = Autopilot(game)

    [event] = pilot.decide()
    assert event.type == EventType.START


def test_autopilot_sidesteps_barrier(ui: RecordingUI) -> None:
    game = _controller(ui)
    game.start()
    barrier = game.obstacles.spawn_obstacle(ObstacleKind.BARRIER, lane=1)
    barrier.y = game.player.y - 120

    [event] = Autopilot(game).decide()
    assert event.type in (EventType.MOVE_LEFT, EventType.MOVE_RIGHT)


def test_autopilot_leaves_lane_with_pit(ui: RecordingUI) -> None:
    game = _controller(ui)
    game.start()
    game.obstacles.spawn_obstacle(ObstacleKind.PIT, lane=1)
    game.obstacles.spawn_obstacle(ObstacleKind.PIT, lane=0)

    [event] = Autopilot(game).decide()
    assert event.type == EventType.MOVE_RIGHT


def test_autopilot_jumps_when_boxed_in(ui: RecordingUI) -> None:
    game = _controller(ui)
    game.start()
    for lane in range(3):
        game.obstacles.spawn_obstacle(ObstacleKind.BARRIER, lane=lane).y = game.player.y - 120

    [event] = Autopilot(game).decide()
    assert event.type == EventType.JUMP


def test_autopilot_idle_when_lane_is_clear(ui: RecordingUI) -> None:
    game = _controller(ui)
    game.start()
    game.obstacles.spawn_obstacle(ObstacleKind.BARRIER, lane=0).y = game.player.y - 100

    assert Autopilot(game).decide() == []


def test_shutdown_event_stops_the_loop(ui: RecordingUI) -> None:
    game = _controller(ui)
    runner = HeadlessRunner(game, frame_ms=16)
    game.event_bus.subscribe(
        EventType.TICK,
        lambda e: game.event_bus.emit(Event(EventType.SHUTDOWN)) if e.data["frame"] == 4 else None,
    )

    asyncio.run(runner.run(max_frames=100))

    assert runner.frame_count == 5


def test_run_releases_its_shutdown_handler(ui: RecordingUI) -> None:
    game = _controller(ui)
    runner = HeadlessRunner(game, frame_ms=16)
    assert game.event_bus.handler_count(EventType.SHUTDOWN) == 0

    asyncio.run(runner.run(max_frames=3))
    asyncio.run(runner.run(max_frames=6))

    assert runner.frame_count == 6
    assert game.event_bus.handler_count(EventType.SHUTDOWN) == 0

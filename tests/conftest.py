from __future__ import annotations

from typing import Any

import pytest

from lanerunner.core.random_source import RandomSource
from lanerunner.core.sinks import EffectsSink, UISink
from lanerunner.simulation.geometry import Viewport


class RecordingUI(UISink):
    """UI sink that keeps every call for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def update_stats(self, score: int, coins: int, distance: int) -> None:
        self.calls.append(("update_stats", (score, coins, distance)))

    def show_score_popup(self, points: int, x: float, y: float) -> None:
        self.calls.append(("show_score_popup", (points, x, y)))

    def flash_powerup_indicator(self, kind: str, duration_ms: float) -> None:
        self.calls.append(("flash_powerup_indicator", (kind, duration_ms)))

    def hide_powerup_indicator(self, kind: str) -> None:
        self.calls.append(("hide_powerup_indicator", (kind,)))

    def show_game_over(self, stats: dict[str, Any]) -> None:
        self.calls.append(("show_game_over", (dict(stats),)))


class RecordingEffects(EffectsSink):
    """Effects sink that only records requests."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def create_coin_effect(self, x: float, y: float) -> None:
        self.calls.append(("coin", (x, y)))

    def create_collision_effect(self, x: float, y: float) -> None:
        self.calls.append(("collision", (x, y)))

    def create_powerup_effect(self, x: float, y: float, color=None) -> None:
        self.calls.append(("powerup", (x, y, color)))

    def create_speed_trail(self, x: float, y: float) -> None:
        self.calls.append(("trail", (x, y)))

    def create_screen_shake(self, intensity: float, duration_ms: float) -> None:
        self.calls.append(("shake", (intensity, duration_ms)))


@pytest.fixture()
def viewport() -> Viewport:
    return Viewport(800, 600)


@pytest.fixture()
def rng() -> RandomSource:
    return RandomSource(seed=1234)


@pytest.fixture()
def ui() -> RecordingUI:
    return RecordingUI()


@pytest.fixture()
def effects_sink() -> RecordingEffects:
    return RecordingEffects()

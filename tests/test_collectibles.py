from __future__ import annotations

import math
from typing import TYPE_CHECKING

import pytest

from lanerunner.core.random_source import RandomSource
from lanerunner.simulation.collectibles import CoinPattern, CollectibleSpawner
from lanerunner.simulation.entities import CollectibleKind
from lanerunner.simulation.geometry import Viewport
from lanerunner.simulation.player import Player

if TYPE_CHECKING:
    from conftest import RecordingEffects


def _coins(spawner: CollectibleSpawner):
    return [c for c in spawner.collectibles if c.kind == CollectibleKind.COIN]


def test_coin_timer_spawns_at_interval(viewport: Viewport, rng: RandomSource) -> None:
    spawner = CollectibleSpawner(viewport, rng)

    spawner.update(799, speed=0)
    assert spawner.collectibles == []

    spawner.update(1, speed=0)
    assert len(_coins(spawner)) >= 1
    assert spawner.coin_timer == 0


def test_powerup_timer_spawns_independently(viewport: Viewport, rng: RandomSource) -> None:
    spawner = CollectibleSpawner(viewport, rng)

    spawner.update(8000, speed=0)

    powerups = [c for c in spawner.collectibles if c.kind.is_powerup]
    assert len(powerups) == 1
    assert powerups[0].width == powerups[0].height == 30
    assert powerups[0].y == -40
    assert spawner.powerup_timer == 0


def test_single_coin_shape(viewport: Viewport, rng: RandomSource) -> None:
    spawner = CollectibleSpawner(viewport, rng)
    coin = spawner.spawn_single_coin(lane=2)

    assert coin.x == pytest.approx(viewport.lane_center(2))
    assert coin.y == -30
    assert (coin.width, coin.height) == (20, 20)
    assert coin.value == 10
    assert not coin.collected


def test_vertical_pattern_is_a_column_of_four(viewport: Viewport, rng: RandomSource) -> None:
    spawner = CollectibleSpawner(viewport, rng)
    coins = spawner.spawn_coin_pattern(CoinPattern.VERTICAL)

    assert len(coins) == 4
    assert len({c.x for c in coins}) == 1
    assert [c.y for c in coins] == [-30, -70, -110, -150]
    assert [c.animation_time for c in coins] == [0, 200, 400, 600]


def test_horizontal_pattern_fills_every_lane(viewport: Viewport, rng: RandomSource) -> None:
    spawner = CollectibleSpawner(viewport, rng)
    coins = spawner.spawn_coin_pattern(CoinPattern.HORIZONTAL)

    assert [c.x for c in coins] == [viewport.lane_center(lane) for lane in range(3)]
    assert {c.y for c in coins} == {-30}
    assert all(0 <= c.animation_time < 1000 for c in coins)


def test_zigzag_pattern_steps_across_lanes(viewport: Viewport, rng: RandomSource) -> None:
    spawner = CollectibleSpawner(viewport, rng)
    coins = spawner.spawn_coin_pattern(CoinPattern.ZIGZAG)

    assert [c.x for c in coins] == [viewport.lane_center(lane) for lane in range(3)]
    assert [c.y for c in coins] == [-30, -80, -130]


def test_pattern_share_of_coin_spawns(viewport: Viewport) -> None:
    spawner = CollectibleSpawner(viewport, RandomSource(seed=11))

    batches = [spawner.spawn_coin() for _ in range(5000)]
    share = sum(1 for batch in batches if len(batch) > 1) / len(batches)

    assert share == pytest.approx(0.3, abs=0.03)


def test_items_scroll_animate_and_cull(viewport: Viewport, rng: RandomSource) -> None:
    spawner = CollectibleSpawner(viewport, rng)
    coin = spawner.spawn_single_coin(lane=0)

    spawner.update(16, speed=2.5)
    assert coin.y == pytest.approx(-27.5)
    assert coin.animation_time == pytest.approx(16)

    coin.y = viewport.height + 49
    spawner.update(0, speed=2)
    assert coin not in spawner.collectibles


def test_overlap_collects_coin_and_requests_effect(viewport: Viewport, rng: RandomSource, effects_sink: RecordingEffects) -> None:
    spawner = CollectibleSpawner(viewport, rng)
    player = Player(viewport)
    coin = spawner.spawn_single_coin(lane=1)
    coin.x, coin.y = player.x, player.y - 30

    collected = spawner.check_collisions(player, effects_sink)

    assert collected == [coin]
    assert coin.collected
    assert spawner.collectibles == []
    assert effects_sink.names() == ["coin"]


def test_overlap_collects_powerup(viewport: Viewport, rng: RandomSource, effects_sink: RecordingEffects) -> None:
    spawner = CollectibleSpawner(viewport, rng)
    player = Player(viewport)
    shield = spawner.spawn_powerup(CollectibleKind.SHIELD, lane=1)
    shield.x, shield.y = player.x - 10, player.y - 40

    assert spawner.check_collisions(player, effects_sink) == [shield]
    assert effects_sink.calls == [("powerup", (shield.x, shield.y, None))]


def test_magnet_reels_in_coin_then_captures_once(viewport: Viewport, rng: RandomSource, effects_sink: RecordingEffects) -> None:
    spawner = CollectibleSpawner(viewport, rng)
    player = Player(viewport)
    player.activate_magnet()
    coin = spawner.spawn_single_coin(lane=1)
    coin.x, coin.y = player.x + 100, player.y

    distances = []
    captured = []
    for _ in range(10):
        captured += spawner.check_collisions(player, effects_sink)
        if captured:
            break
        distances.append(math.hypot(player.x - coin.x, player.y - coin.y))

    assert captured == [coin]
    assert all(b < a for a, b in zip(distances, distances[1:]))
    assert distances[0] == pytest.approx(80)
    assert effects_sink.names() == ["coin"]

    # Never reported again
    assert spawner.check_collisions(player, effects_sink) == []


def test_magnet_ignores_coins_out_of_range(viewport: Viewport, rng: RandomSource, effects_sink: RecordingEffects) -> None:
    spawner = CollectibleSpawner(viewport, rng)
    player = Player(viewport)
    player.activate_magnet()
    coin = spawner.spawn_single_coin(lane=1)
    coin.x, coin.y = player.x + 101, player.y

    assert spawner.check_collisions(player, effects_sink) == []
    assert coin.x == player.x + 101


def test_magnet_does_not_pull_powerups(viewport: Viewport, rng: RandomSource, effects_sink: RecordingEffects) -> None:
    spawner = CollectibleSpawner(viewport, rng)
    player = Player(viewport)
    player.activate_magnet()
    speed = spawner.spawn_powerup(CollectibleKind.SPEED, lane=1)
    speed.x, speed.y = player.x + 60, player.y

    assert spawner.check_collisions(player, effects_sink) == []
    assert speed.x == player.x + 60


def test_no_pull_without_magnet(viewport: Viewport, rng: RandomSource, effects_sink: RecordingEffects) -> None:
    spawner = CollectibleSpawner(viewport, rng)
    player = Player(viewport)
    coin = spawner.spawn_single_coin(lane=1)
    coin.x, coin.y = player.x + 50, player.y

    spawner.check_collisions(player, effects_sink)
    assert coin.x == player.x + 50


def test_reset_clears_items_and_timers(viewport: Viewport, rng: RandomSource) -> None:
    spawner = CollectibleSpawner(viewport, rng)
    spawner.update(900, speed=1)
    spawner.spawn_powerup()

    spawner.reset()
    assert spawner.collectibles == []
    assert spawner.coin_timer == 0
    assert spawner.powerup_timer == 0


def test_explicit_lane_is_clamped(viewport: Viewport, rng: RandomSource) -> None:
    spawner = CollectibleSpawner(viewport, rng)

    coin = spawner.spawn_single_coin(lane=7)
    powerup = spawner.spawn_powerup(CollectibleKind.SHIELD, lane=-1)

    assert coin.x == pytest.approx(viewport.lane_center(2))
    assert powerup.x == pytest.approx(viewport.lane_center(0))
    assert 0 <= coin.x < viewport.width
    assert 0 <= powerup.x < viewport.width

"""Coins, power-ups and magnet attraction."""

import copy
import logging
import math
from enum import Enum
from typing import List, Optional

from lanerunner.config.settings import CollectibleSettings
from lanerunner.core.random_source import RandomSource
from lanerunner.core.sinks import EffectsSink
from lanerunner.simulation.entities import Collectible, CollectibleKind
from lanerunner.simulation.geometry import LANE_COUNT, Viewport, clamp_lane
from lanerunner.simulation.player import Player

logger = logging.getLogger(__name__)

POWERUP_KINDS = (CollectibleKind.MAGNET, CollectibleKind.SHIELD, CollectibleKind.SPEED)


class CoinPattern(Enum):
    HORIZONTAL = "horizontal"  # one coin per lane, same row
    VERTICAL = "vertical"      # column of four in one lane
    ZIGZAG = "zigzag"          # diagonal across the three lanes


class CollectibleSpawner:
    """Spawns coins and power-ups on two independent timers.

    Everything scrolls at the table speed. While the player's magnet is on,
    nearby coins are pulled toward the player a fixed fraction of the
    remaining offset per check and captured once close enough.
    """

    def __init__(
        self,
        viewport: Optional[Viewport] = None,
        rng: Optional[RandomSource] = None,
        settings: Optional[CollectibleSettings] = None,
    ):
        self.viewport = viewport or Viewport()
        self.rng = rng or RandomSource()
        self.settings = settings or CollectibleSettings()

        self.collectibles: List[Collectible] = []
        self.reset()

    def update(self, delta_ms: float, speed: float) -> None:
        delta_ms = max(0.0, delta_ms)
        self.coin_timer += delta_ms
        self.powerup_timer += delta_ms

        if self.coin_timer >= self.settings.coin_spawn_interval:
            self.spawn_coin()
            self.coin_timer = 0.0

        if self.powerup_timer >= self.settings.powerup_spawn_interval:
            self.spawn_powerup()
            self.powerup_timer = 0.0

        cutoff = self.viewport.height + self.settings.offscreen_margin
        for item in self.collectibles:
            item.y += speed
            item.animation_time += delta_ms

        self.collectibles = [c for c in self.collectibles if c.y <= cutoff]

    def spawn_coin(self) -> List[Collectible]:
        if self.rng.random() < self.settings.pattern_chance:
            return self.spawn_coin_pattern()
        return [self.spawn_single_coin()]

    def spawn_single_coin(self, lane: Optional[int] = None) -> Collectible:
        lane = self.rng.randrange(LANE_COUNT) if lane is None else clamp_lane(lane)
        return self._add_coin(lane, self.settings.coin_spawn_y, 0.0)

    def pick_pattern(self) -> CoinPattern:
        roll = self.rng.random()
        if roll < 0.33:
            return CoinPattern.HORIZONTAL
        if roll < 0.66:
            return CoinPattern.VERTICAL
        return CoinPattern.ZIGZAG

    def spawn_coin_pattern(self, pattern: Optional[CoinPattern] = None) -> List[Collectible]:
        if pattern is None:
            pattern = self.pick_pattern()

        cfg = self.settings
        start_y = cfg.coin_spawn_y
        coins: List[Collectible] = []

        if pattern == CoinPattern.HORIZONTAL:
            for lane in range(LANE_COUNT):
                coins.append(self._add_coin(lane, start_y, self.rng.random() * 1000))
        elif pattern == CoinPattern.VERTICAL:
            lane = self.rng.randrange(LANE_COUNT)
            for i in range(4):
                coins.append(self._add_coin(lane, start_y - i * cfg.vertical_spacing, i * 200.0))
        else:
            for i in range(3):
                coins.append(self._add_coin(i % LANE_COUNT, start_y - i * cfg.zigzag_spacing, i * 300.0))

        logger.debug(f"Spawned {pattern.value} coin pattern ({len(coins)} coins)")
        return coins

    def _add_coin(self, lane: int, y: float, phase: float) -> Collectible:
        size = self.settings.coin_size
        coin = Collectible(
            x=self.viewport.lane_center(lane),
            y=y,
            width=size,
            height=size,
            kind=CollectibleKind.COIN,
            value=self.settings.coin_value,
            animation_time=phase,
        )
        self.collectibles.append(coin)
        return coin

    def spawn_powerup(
        self,
        kind: Optional[CollectibleKind] = None,
        lane: Optional[int] = None,
    ) -> Collectible:
        lane = self.rng.randrange(LANE_COUNT) if lane is None else clamp_lane(lane)
        if kind is None:
            kind = self.rng.choice(POWERUP_KINDS)

        size = self.settings.powerup_size
        powerup = Collectible(
            x=self.viewport.lane_center(lane),
            y=self.settings.powerup_spawn_y,
            width=size,
            height=size,
            kind=kind,
            value=0,
        )
        self.collectibles.append(powerup)
        logger.debug(f"Spawned {kind.value} power-up in lane {lane}")
        return powerup

    def check_collisions(self, player: Player, effects: EffectsSink) -> List[Collectible]:
        """Collect everything the player touches or the magnet reels in.

        Collected items leave the live set, trigger an effect and are
        returned to the caller.
        """
        cfg = self.settings
        bounds = player.get_bounds()
        collected: List[Collectible] = []
        remaining: List[Collectible] = []

        for item in self.collectibles:
            if item.collected:
                continue

            take = bounds.overlaps(item.rect)

            if not take and item.kind == CollectibleKind.COIN and player.has_magnet:
                distance = math.hypot(player.x - item.x, player.y - item.y)
                if distance <= cfg.magnet_radius:
                    item.x += (player.x - item.x) * cfg.magnet_force
                    item.y += (player.y - item.y) * cfg.magnet_force
                    distance = math.hypot(player.x - item.x, player.y - item.y)
                    take = distance < cfg.capture_radius

            if take:
                item.collected = True
                collected.append(item)
                if item.kind == CollectibleKind.COIN:
                    effects.create_coin_effect(item.x, item.y)
                else:
                    effects.create_powerup_effect(item.x, item.y)
            else:
                remaining.append(item)

        self.collectibles = remaining
        return collected

    def set_viewport(self, viewport: Viewport) -> None:
        self.viewport = viewport

    def clear(self) -> None:
        self.collectibles = []
        self.coin_timer = 0.0
        self.powerup_timer = 0.0

    def reset(self) -> None:
        self.clear()

    def snapshot(self) -> List[Collectible]:
        return copy.deepcopy(self.collectibles)

"""Obstacle spawning, movement and hit detection."""

import copy
import logging
from typing import List, Optional

from lanerunner.config.settings import LimitSettings, ObstacleSettings
from lanerunner.core.random_source import RandomSource
from lanerunner.simulation.entities import Obstacle, ObstacleKind
from lanerunner.simulation.geometry import LANE_COUNT, Rect, Viewport, clamp_lane
from lanerunner.simulation.player import Player

logger = logging.getLogger(__name__)


class ObstacleSpawner:
    """Spawns obstacles on a timer and scrolls them down the lanes.

    Each spawn bumps the difficulty, which both shortens the spawn interval
    (down to a floor) and scales obstacle velocity. Difficulty grows without
    bound unless ``limits.max_difficulty`` is set.
    """

    def __init__(
        self,
        viewport: Optional[Viewport] = None,
        rng: Optional[RandomSource] = None,
        settings: Optional[ObstacleSettings] = None,
        limits: Optional[LimitSettings] = None,
    ):
        self.viewport = viewport or Viewport()
        self.rng = rng or RandomSource()
        self.settings = settings or ObstacleSettings()
        self.limits = limits or LimitSettings()

        self.obstacles: List[Obstacle] = []
        self.spawn_interval = self.settings.base_spawn_interval
        self.reset()

    def update(self, delta_ms: float, speed: float) -> None:
        self.spawn_timer += max(0.0, delta_ms)

        if self.spawn_timer >= self.spawn_interval:
            self.spawn_obstacle()
            self.spawn_timer = 0.0
            self._ramp_difficulty()

        velocity = speed * (1 + self.difficulty * self.settings.velocity_per_difficulty)
        cutoff = self.viewport.height + self.settings.offscreen_margin

        for obstacle in self.obstacles:
            obstacle.y += velocity
            if obstacle.kind == ObstacleKind.MOVING:
                self._bounce(obstacle)

        self.obstacles = [o for o in self.obstacles if o.y <= cutoff]

    def _ramp_difficulty(self) -> None:
        cfg = self.settings
        self.difficulty += cfg.difficulty_increment
        if self.limits.max_difficulty is not None:
            self.difficulty = min(self.difficulty, self.limits.max_difficulty)
        self.spawn_interval = max(
            cfg.min_spawn_interval,
            cfg.base_spawn_interval - self.difficulty * cfg.interval_per_difficulty,
        )

    def _bounce(self, obstacle: Obstacle) -> None:
        """Slide sideways, reversing at either edge of the obstacle's lane."""
        obstacle.x += obstacle.move_direction * obstacle.move_speed

        lane_left, lane_right = self.viewport.lane_bounds(obstacle.lane)
        if obstacle.x <= lane_left or obstacle.x + obstacle.width >= lane_right:
            obstacle.move_direction *= -1

    def pick_lane(self) -> int:
        """Uniform lane, re-rolled with some probability when it repeats."""
        while True:
            lane = self.rng.randrange(LANE_COUNT)
            if lane != self.last_spawn_lane:
                return lane
            if self.rng.random() >= self.settings.repeat_lane_reroll_chance:
                return lane

    def pick_kind(self) -> ObstacleKind:
        return ObstacleKind(self.rng.choice(self.settings.type_weights))

    def spawn_obstacle(self, kind: Optional[ObstacleKind] = None, lane: Optional[int] = None) -> Obstacle:
        lane = self.pick_lane() if lane is None else clamp_lane(lane)
        if kind is None:
            kind = self.pick_kind()

        self.last_spawn_lane = lane
        center = self.viewport.lane_center(lane)

        if kind == ObstacleKind.PIT:
            obstacle = Obstacle(
                x=center - 30, y=-20, width=60, height=20,
                lane=lane, kind=kind, color=(44, 62, 80),
            )
        elif kind == ObstacleKind.MOVING:
            obstacle = Obstacle(
                x=center - 25, y=-40, width=50, height=40,
                lane=lane, kind=kind, color=(155, 89, 182),
                move_direction=-1 if self.rng.random() < 0.5 else 1,
                move_speed=self.rng.uniform(self.settings.moving_speed_min, self.settings.moving_speed_max),
            )
        else:
            obstacle = Obstacle(
                x=center - 20, y=-50, width=40, height=60,
                lane=lane, kind=ObstacleKind.BARRIER, color=(231, 76, 60),
            )

        self.obstacles.append(obstacle)
        logger.debug(f"Spawned {obstacle.kind.value} in lane {lane}")
        return obstacle

    def collision_rect(self, obstacle: Obstacle) -> Rect:
        """Rectangle used for hit tests.

        Pits are anchored to the ground surface regardless of their travel
        position. Their y only drives culling.
        """
        if obstacle.kind == ObstacleKind.PIT:
            return Rect(
                obstacle.x,
                self.viewport.ground_y - obstacle.height,
                obstacle.width,
                obstacle.height,
            )
        return obstacle.rect

    def check_collisions(self, player: Player) -> Optional[Obstacle]:
        """First obstacle, in storage order, touching the player.

        Shielded players never register a hit. This does not consume the
        shield; the caller decides what a hit means.
        """
        if player.has_shield:
            return None

        bounds = player.get_bounds()
        for obstacle in self.obstacles:
            if obstacle.kind == ObstacleKind.PIT and player.is_jumping:
                continue
            if bounds.overlaps(self.collision_rect(obstacle)):
                return obstacle

        return None

    def set_viewport(self, viewport: Viewport) -> None:
        self.viewport = viewport

    def clear(self) -> None:
        """Drop all obstacles and restart the ramp. Keeps the spawn interval."""
        self.obstacles = []
        self.spawn_timer = 0.0
        self.difficulty = self.settings.initial_difficulty
        self.last_spawn_lane = -1

    def reset(self) -> None:
        self.clear()
        self.spawn_interval = self.settings.base_spawn_interval

    def snapshot(self) -> List[Obstacle]:
        return copy.deepcopy(self.obstacles)

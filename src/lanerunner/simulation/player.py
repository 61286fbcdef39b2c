"""Player kinematics: lane changes, jump, slide and power-up timers."""

import logging
import math
from typing import Optional

from lanerunner.config.settings import PlayerSettings
from lanerunner.simulation.entities import PlayerSnapshot, PowerUpKind
from lanerunner.simulation.geometry import LANE_COUNT, Rect, Viewport

logger = logging.getLogger(__name__)


class Player:
    """The avatar.

    Horizontal motion eases toward the target lane centre by a fixed
    fraction per tick. Vertical motion integrates a per-tick jump velocity
    with constant gravity. Timers (slide and power-ups) count down in
    milliseconds. Jumping and sliding are mutually exclusive, and each
    power-up is active exactly while its timer is positive.
    """

    def __init__(
        self,
        viewport: Optional[Viewport] = None,
        settings: Optional[PlayerSettings] = None,
    ):
        self.settings = settings or PlayerSettings()
        self.viewport = viewport or Viewport()

        self.width = self.settings.width
        self.height = self.settings.height

        self._power_timers: dict[PowerUpKind, float] = {kind: 0.0 for kind in PowerUpKind}
        self.reset()

    # Power-up flags are derived so they can never disagree with the timers
    @property
    def has_shield(self) -> bool:
        return self._power_timers[PowerUpKind.SHIELD] > 0

    @property
    def has_magnet(self) -> bool:
        return self._power_timers[PowerUpKind.MAGNET] > 0

    @property
    def has_speed_boost(self) -> bool:
        return self._power_timers[PowerUpKind.SPEED] > 0

    @property
    def shield_timer(self) -> float:
        return self._power_timers[PowerUpKind.SHIELD]

    @property
    def magnet_timer(self) -> float:
        return self._power_timers[PowerUpKind.MAGNET]

    @property
    def speed_timer(self) -> float:
        return self._power_timers[PowerUpKind.SPEED]

    # Commands. Each is a single atomic mutation, safe between ticks.
    def move_left(self) -> bool:
        if self.lane <= 0:
            return False
        self.lane -= 1
        self.target_x = self.viewport.lane_center(self.lane)
        return True

    def move_right(self) -> bool:
        if self.lane >= LANE_COUNT - 1:
            return False
        self.lane += 1
        self.target_x = self.viewport.lane_center(self.lane)
        return True

    def jump(self) -> bool:
        if self.is_jumping or self.is_sliding:
            return False
        self.is_jumping = True
        self.jump_velocity = -self.settings.jump_power
        return True

    def slide(self) -> bool:
        if self.is_jumping or self.is_sliding:
            return False
        self.is_sliding = True
        self.slide_timer = self.settings.slide_duration_ms
        return True

    def stop_sliding(self) -> None:
        """End the slide now, whatever is left on the timer."""
        self.is_sliding = False
        self.slide_timer = 0.0

    def activate_shield(self, duration_ms: Optional[float] = None) -> None:
        self.activate(PowerUpKind.SHIELD, duration_ms)

    def activate_magnet(self, duration_ms: Optional[float] = None) -> None:
        self.activate(PowerUpKind.MAGNET, duration_ms)

    def activate_speed_boost(self, duration_ms: Optional[float] = None) -> None:
        self.activate(PowerUpKind.SPEED, duration_ms)

    def activate(self, kind: PowerUpKind, duration_ms: Optional[float] = None) -> float:
        """Start a power-up, or restart its timer if already running.

        Re-activation replaces the remaining time with the new duration;
        durations never stack. Returns the duration applied.
        """
        if duration_ms is None:
            duration_ms = self.default_duration(kind)
        self._power_timers[kind] = max(0.0, float(duration_ms))
        logger.info(f"Power-up {kind.value} active for {duration_ms:.0f}ms")
        return self._power_timers[kind]

    def consume_shield(self) -> bool:
        """Spend the shield on a hit. Returns False if there was none."""
        if not self.has_shield:
            return False
        self._power_timers[PowerUpKind.SHIELD] = 0.0
        return True

    def default_duration(self, kind: PowerUpKind) -> float:
        return {
            PowerUpKind.SHIELD: self.settings.shield_duration_ms,
            PowerUpKind.MAGNET: self.settings.magnet_duration_ms,
            PowerUpKind.SPEED: self.settings.speed_duration_ms,
        }[kind]

    def update(self, delta_ms: float) -> None:
        delta_ms = max(0.0, delta_ms)

        # Lane change: proportional approach, snapping once close enough
        dx = self.target_x - self.x
        if abs(dx) > self.settings.snap_distance:
            self.x += dx * self.settings.lane_smoothing
        else:
            self.x = self.target_x

        if self.is_jumping:
            self.y += self.jump_velocity
            self.jump_velocity += self.settings.gravity

            if self.y >= self.ground_y:
                self.y = self.ground_y
                self.is_jumping = False
                self.jump_velocity = 0.0

        if self.is_sliding:
            self.slide_timer -= delta_ms
            if self.slide_timer <= 0:
                self.stop_sliding()

        for kind, remaining in self._power_timers.items():
            if remaining > 0:
                remaining -= delta_ms
                self._power_timers[kind] = remaining if remaining > 0 else 0.0
                if remaining <= 0:
                    logger.debug(f"Power-up {kind.value} expired")

        self.run_cycle += self.settings.animation_speed
        if self.run_cycle >= math.pi * 2:
            self.run_cycle = 0.0

    def get_bounds(self) -> Rect:
        """Hit-box. Sliding halves the height and drops it below the feet line."""
        height = self.height
        bottom = self.y

        if self.is_sliding:
            height = self.height * self.settings.slide_height_ratio
            bottom = self.y + (self.height - height)

        return Rect(
            x=self.x - self.width / 2,
            y=bottom - height,
            width=self.width,
            height=height,
        )

    def collides_with(self, rect: Rect) -> bool:
        return self.get_bounds().overlaps(rect)

    def set_viewport(self, viewport: Viewport) -> None:
        """Adopt new playfield geometry, keeping the current lane."""
        self.viewport = viewport
        self.ground_y = viewport.ground_y
        self.y = self.ground_y
        self.is_jumping = False
        self.jump_velocity = 0.0
        self.target_x = viewport.lane_center(self.lane)
        self.x = self.target_x

    def reset(self) -> None:
        """Back to spawn: centre lane, grounded, no power-ups."""
        self.lane = self.settings.start_lane
        self.x = self.viewport.lane_center(self.lane)
        self.target_x = self.x
        self.ground_y = self.viewport.ground_y
        self.y = self.ground_y
        self.is_jumping = False
        self.is_sliding = False
        self.jump_velocity = 0.0
        self.slide_timer = 0.0
        for kind in PowerUpKind:
            self._power_timers[kind] = 0.0
        self.run_cycle = 0.0

    def snapshot(self) -> PlayerSnapshot:
        return PlayerSnapshot(
            lane=self.lane,
            x=self.x,
            target_x=self.target_x,
            y=self.y,
            ground_y=self.ground_y,
            jump_velocity=self.jump_velocity,
            is_jumping=self.is_jumping,
            is_sliding=self.is_sliding,
            slide_timer=self.slide_timer,
            power_timers={kind.value: t for kind, t in self._power_timers.items()},
            run_cycle=self.run_cycle,
            bounds=self.get_bounds(),
        )

"""
Game settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested sections can be overridden with a double underscore, e.g.
``LANERUNNER_OBSTACLES__BASE_SPAWN_INTERVAL=1200``.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ViewportSettings(BaseSettings):
    """Initial playfield size."""

    width: float = Field(default=800.0, gt=0)
    height: float = Field(default=600.0, gt=0)


class PlayerSettings(BaseSettings):
    """Avatar geometry, kinematics and power-up durations."""

    width: float = 40.0
    height: float = 60.0
    start_lane: int = Field(default=1, ge=0, le=2)

    # Lane change smoothing (fraction of remaining offset per tick)
    lane_smoothing: float = Field(default=0.2, gt=0.0, le=1.0)
    snap_distance: float = 1.0

    # Vertical motion, per tick
    jump_power: float = 15.0
    gravity: float = 0.8

    slide_duration_ms: float = 500.0
    slide_height_ratio: float = Field(default=0.5, gt=0.0, le=1.0)

    # Power-ups
    shield_duration_ms: float = 5000.0
    magnet_duration_ms: float = 8000.0
    speed_duration_ms: float = 6000.0

    animation_speed: float = 0.2


class ObstacleSettings(BaseSettings):
    """Obstacle spawn cadence and difficulty ramp."""

    base_spawn_interval: float = 1500.0  # milliseconds
    min_spawn_interval: float = 800.0
    interval_per_difficulty: float = 100.0
    initial_difficulty: float = 1.0
    difficulty_increment: float = 0.001
    velocity_per_difficulty: float = 0.1

    repeat_lane_reroll_chance: float = Field(default=0.7, ge=0.0, lt=1.0)
    offscreen_margin: float = 100.0

    # Weighted type table: barrier twice as likely as pit or moving
    type_weights: tuple[Literal["barrier", "pit", "moving"], ...] = Field(
        default=("barrier", "barrier", "pit", "moving"), min_length=1
    )

    moving_speed_min: float = 1.0
    moving_speed_max: float = 3.0


class CollectibleSettings(BaseSettings):
    """Coin and power-up spawning plus magnet behaviour."""

    coin_spawn_interval: float = 800.0  # milliseconds
    powerup_spawn_interval: float = 8000.0
    pattern_chance: float = Field(default=0.3, ge=0.0, le=1.0)

    coin_size: float = 20.0
    coin_value: int = 10
    coin_spawn_y: float = -30.0
    powerup_size: float = 30.0
    powerup_spawn_y: float = -40.0

    vertical_spacing: float = 40.0
    zigzag_spacing: float = 50.0

    magnet_radius: float = 100.0
    capture_radius: float = 30.0
    magnet_force: float = Field(default=0.2, gt=0.0, le=1.0)

    offscreen_margin: float = 50.0


class EffectsSettings(BaseSettings):
    """Particle physics shared by all bursts."""

    gravity: float = 0.3
    trail_chance: float = Field(default=0.3, ge=0.0, le=1.0)
    collision_shake_intensity: float = 8.0
    collision_shake_duration_ms: float = 500.0


class ScoringSettings(BaseSettings):
    """Score, distance and speed progression."""

    base_speed: float = 2.0
    speed_per_distance: float = 0.001
    distance_interval_ms: float = 100.0
    score_per_coin: int = 10
    powerup_bonus: int = 50
    distance_milestone: int = 10
    milestone_bonus: int = 1


class LimitSettings(BaseSettings):
    """Optional ceilings. None keeps the unbounded behaviour."""

    max_difficulty: Optional[float] = None
    max_speed: Optional[float] = None
    max_particles: Optional[int] = Field(default=None, ge=0)
    max_delta_ms: Optional[float] = Field(default=None, gt=0)


class Settings(BaseSettings):
    """Main game settings."""

    model_config = SettingsConfigDict(
        env_prefix="LANERUNNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False
    seed: Optional[int] = None

    # Headless runner
    frame_ms: float = Field(default=1000.0 / 60.0, gt=0)
    max_frames: int = Field(default=3600, ge=0)
    autopilot: bool = True

    # Nested settings
    viewport: ViewportSettings = Field(default_factory=ViewportSettings)
    player: PlayerSettings = Field(default_factory=PlayerSettings)
    obstacles: ObstacleSettings = Field(default_factory=ObstacleSettings)
    collectibles: CollectibleSettings = Field(default_factory=CollectibleSettings)
    effects: EffectsSettings = Field(default_factory=EffectsSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    limits: LimitSettings = Field(default_factory=LimitSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

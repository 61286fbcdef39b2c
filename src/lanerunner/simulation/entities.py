"""
Game entity dataclasses.
"""

from dataclasses import dataclass, field
from enum import Enum

from lanerunner.simulation.geometry import Rect


class ObstacleKind(Enum):
    BARRIER = "barrier"
    PIT = "pit"
    MOVING = "moving"


class CollectibleKind(Enum):
    COIN = "coin"
    MAGNET = "magnet"
    SHIELD = "shield"
    SPEED = "speed"

    @property
    def is_powerup(self) -> bool:
        return self is not CollectibleKind.COIN


class PowerUpKind(Enum):
    SHIELD = "shield"
    MAGNET = "magnet"
    SPEED = "speed"


class ParticleKind(Enum):
    COIN = "coin"
    COLLISION = "collision"
    POWERUP = "powerup"
    TRAIL = "trail"


POWERUP_FOR_COLLECTIBLE = {
    CollectibleKind.MAGNET: PowerUpKind.MAGNET,
    CollectibleKind.SHIELD: PowerUpKind.SHIELD,
    CollectibleKind.SPEED: PowerUpKind.SPEED,
}


@dataclass
class Obstacle:
    """Something the player must avoid."""
    x: float
    y: float
    width: float
    height: float
    lane: int
    kind: ObstacleKind
    color: tuple = (231, 76, 60)
    # Moving obstacles only
    move_direction: int = 0
    move_speed: float = 0.0

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


@dataclass
class Collectible:
    """A coin or power-up travelling down a lane.

    x/y double as the AABB origin and as the point used for magnet
    distance checks.
    """
    x: float
    y: float
    width: float
    height: float
    kind: CollectibleKind
    value: int = 0
    animation_time: float = 0.0  # presentation only
    collected: bool = False

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


@dataclass
class Particle:
    """Short-lived visual particle. Life runs from its start value to 0."""
    x: float
    y: float
    vx: float
    vy: float
    life: float
    decay: float
    size: float
    color: tuple
    kind: ParticleKind = ParticleKind.COIN


@dataclass
class ScreenShake:
    """Decaying camera shake."""
    intensity: float
    duration_ms: float
    elapsed_ms: float = 0.0

    @property
    def progress(self) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return min(1.0, self.elapsed_ms / self.duration_ms)

    @property
    def is_done(self) -> bool:
        return self.elapsed_ms >= self.duration_ms

    @property
    def current_intensity(self) -> float:
        return self.intensity * (1.0 - self.progress)


@dataclass
class PlayerSnapshot:
    """Read-only copy of the player for presentation and comparison."""
    lane: int
    x: float
    target_x: float
    y: float
    ground_y: float
    jump_velocity: float
    is_jumping: bool
    is_sliding: bool
    slide_timer: float
    power_timers: dict[str, float] = field(default_factory=dict)
    run_cycle: float = 0.0
    bounds: Rect | None = None

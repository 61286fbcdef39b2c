"""Particle system for visual effects."""

from typing import Optional, List, Tuple
from dataclasses import dataclass
import copy
import logging

from lanerunner.config.settings import EffectsSettings, LimitSettings
from lanerunner.core.random_source import RandomSource
from lanerunner.core.sinks import EffectsSink
from lanerunner.simulation.entities import Particle, ParticleKind, ScreenShake

logger = logging.getLogger(__name__)

GOLD = (255, 215, 0)
RED = (255, 107, 107)
TEAL = (78, 205, 196)
WHITE = (255, 255, 255)

# Kinds that fall under per-tick gravity
GRAVITY_KINDS = frozenset({ParticleKind.COIN, ParticleKind.COLLISION})


@dataclass
class BurstConfig:
    """Configuration for one kind of particle burst.

    Velocities are per tick: vx in [-spread/2, spread/2), vy the same plus lift.
    """

    kind: ParticleKind
    count: int
    spread: float
    lift: float
    decay: float
    size_min: float
    size_range: float
    color: Tuple[int, int, int]
    life: float = 1.0


class ParticlePresets:
    """Factory for the game's burst configurations."""

    @staticmethod
    def coin() -> BurstConfig:
        """Gold sparkle for a collected coin."""
        return BurstConfig(
            kind=ParticleKind.COIN, count=8, spread=8, lift=-2, decay=0.02,
            size_min=2, size_range=4, color=GOLD,
        )

    @staticmethod
    def collision() -> BurstConfig:
        """Heavier red debris on a fatal hit."""
        return BurstConfig(
            kind=ParticleKind.COLLISION, count=12, spread=12, lift=-3, decay=0.03,
            size_min=3, size_range=6, color=RED,
        )

    @staticmethod
    def powerup(color: Optional[Tuple[int, int, int]] = None) -> BurstConfig:
        """Slow-fading float for power-ups and shield breaks."""
        return BurstConfig(
            kind=ParticleKind.POWERUP, count=10, spread=10, lift=-2, decay=0.015,
            size_min=3, size_range=5, color=color or TEAL,
        )

    @staticmethod
    def trail() -> BurstConfig:
        return BurstConfig(
            kind=ParticleKind.TRAIL, count=1, spread=2, lift=0, decay=0.04,
            size_min=1, size_range=3, color=WHITE, life=0.8,
        )


class EffectsEngine(EffectsSink):
    """Spawns, integrates and expires particles.

    Particles move a whole step per tick; life drops by the particle's decay
    each tick and the particle is removed on the first tick life reaches 0.
    The live set is unbounded unless ``limits.max_particles`` is set, in which
    case new particles are dropped once the cap is reached.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        settings: Optional[EffectsSettings] = None,
        limits: Optional[LimitSettings] = None,
    ):
        self.rng = rng or RandomSource()
        self.settings = settings or EffectsSettings()
        self.limits = limits or LimitSettings()
        self.particles: List[Particle] = []
        self.shake: Optional[ScreenShake] = None

    def burst(self, config: BurstConfig, x: float, y: float) -> int:
        """Emit a burst at a point. Returns how many particles were added."""
        added = 0
        for _ in range(config.count):
            if self._at_capacity():
                break
            self.particles.append(self._create_particle(config, x, y))
            added += 1
        return added

    def _at_capacity(self) -> bool:
        cap = self.limits.max_particles
        return cap is not None and len(self.particles) >= cap

    def _create_particle(self, cfg: BurstConfig, x: float, y: float) -> Particle:
        rng = self.rng
        return Particle(
            x=x,
            y=y,
            vx=(rng.random() - 0.5) * cfg.spread,
            vy=(rng.random() - 0.5) * cfg.spread + cfg.lift,
            life=cfg.life,
            decay=cfg.decay,
            size=rng.random() * cfg.size_range + cfg.size_min,
            color=cfg.color,
            kind=cfg.kind,
        )

    # EffectsSink
    def create_coin_effect(self, x: float, y: float) -> None:
        self.burst(ParticlePresets.coin(), x, y)

    def create_collision_effect(self, x: float, y: float) -> None:
        self.burst(ParticlePresets.collision(), x, y)

    def create_powerup_effect(
        self, x: float, y: float, color: Optional[Tuple[int, int, int]] = None
    ) -> None:
        self.burst(ParticlePresets.powerup(color), x, y)

    def create_speed_trail(self, x: float, y: float) -> None:
        if self._at_capacity():
            return
        cfg = ParticlePresets.trail()
        rng = self.rng
        self.particles.append(Particle(
            x=x + rng.random() * 20 - 10,
            y=y + rng.random() * 20 - 10,
            vx=-8 - rng.random() * 4,
            vy=(rng.random() - 0.5) * cfg.spread,
            life=cfg.life,
            decay=cfg.decay,
            size=rng.random() * cfg.size_range + cfg.size_min,
            color=cfg.color,
            kind=cfg.kind,
        ))

    def create_screen_shake(self, intensity: float, duration_ms: float) -> None:
        self.shake = ScreenShake(intensity=intensity, duration_ms=max(0.0, duration_ms))
        logger.debug(f"Screen shake {intensity} for {duration_ms}ms")

    def update(self, delta_ms: float = 0.0) -> None:
        """Advance every particle one tick and age the screen shake."""
        gravity = self.settings.gravity
        alive: List[Particle] = []

        for particle in self.particles:
            particle.x += particle.vx
            particle.y += particle.vy

            if particle.kind in GRAVITY_KINDS:
                particle.vy += gravity

            particle.life -= particle.decay
            if particle.life > 0:
                alive.append(particle)

        self.particles = alive
        self.age_shake(delta_ms)

    def age_shake(self, delta_ms: float) -> None:
        """Advance the screen shake alone, dropping it once finished."""
        if self.shake is None:
            return
        self.shake.elapsed_ms += max(0.0, delta_ms)
        if self.shake.is_done:
            self.shake = None

    def shake_offset(self) -> Tuple[float, float]:
        """Current camera offset, zero when no shake is running."""
        if self.shake is None:
            return 0.0, 0.0
        strength = self.shake.current_intensity
        return (
            (self.rng.random() - 0.5) * strength,
            (self.rng.random() - 0.5) * strength,
        )

    @property
    def active_count(self) -> int:
        return len(self.particles)

    def clear_particles(self) -> None:
        self.particles = []

    def clear(self) -> None:
        """Remove all particles and stop any shake."""
        self.clear_particles()
        self.shake = None

    def snapshot(self) -> List[Particle]:
        return copy.deepcopy(self.particles)

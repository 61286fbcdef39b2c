"""Visual effects for the lane runner."""

from lanerunner.animation.particles import (
    BurstConfig,
    EffectsEngine,
    ParticlePresets,
)

__all__ = [
    "BurstConfig",
    "EffectsEngine",
    "ParticlePresets",
]

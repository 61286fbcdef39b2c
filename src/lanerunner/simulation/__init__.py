"""Simulation components: player, spawners and their entities."""

from lanerunner.simulation.geometry import LANE_COUNT, Rect, Viewport
from lanerunner.simulation.entities import (
    Collectible,
    CollectibleKind,
    Obstacle,
    ObstacleKind,
    Particle,
    ParticleKind,
    PowerUpKind,
)
from lanerunner.simulation.player import Player
from lanerunner.simulation.obstacles import ObstacleSpawner
from lanerunner.simulation.collectibles import CoinPattern, CollectibleSpawner

__all__ = [
    "LANE_COUNT",
    "Rect",
    "Viewport",
    "Collectible",
    "CollectibleKind",
    "Obstacle",
    "ObstacleKind",
    "Particle",
    "ParticleKind",
    "PowerUpKind",
    "Player",
    "ObstacleSpawner",
    "CoinPattern",
    "CollectibleSpawner",
]

"""Configuration for the lane runner simulation."""

from lanerunner.config.settings import (
    Settings,
    ViewportSettings,
    PlayerSettings,
    ObstacleSettings,
    CollectibleSettings,
    EffectsSettings,
    ScoringSettings,
    LimitSettings,
    get_settings,
)

__all__ = [
    "Settings",
    "ViewportSettings",
    "PlayerSettings",
    "ObstacleSettings",
    "CollectibleSettings",
    "EffectsSettings",
    "ScoringSettings",
    "LimitSettings",
    "get_settings",
]

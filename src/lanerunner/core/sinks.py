"""
Abstract output interfaces for the simulation.

The simulation never touches presentation state directly. Adapters
(a window, a terminal, a test recorder) implement these contracts and
are passed in as capabilities.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

Color = tuple[int, int, int]


class EffectsSink(ABC):
    """Receives requests for transient visual effects."""

    @abstractmethod
    def create_coin_effect(self, x: float, y: float) -> None:
        """Burst for a collected coin."""
        ...

    @abstractmethod
    def create_collision_effect(self, x: float, y: float) -> None:
        """Burst for a fatal obstacle hit."""
        ...

    @abstractmethod
    def create_powerup_effect(
        self, x: float, y: float, color: Optional[Color] = None
    ) -> None:
        """Burst for a collected power-up or an absorbed hit."""
        ...

    @abstractmethod
    def create_speed_trail(self, x: float, y: float) -> None:
        """Single streak behind a boosted player."""
        ...

    @abstractmethod
    def create_screen_shake(self, intensity: float, duration_ms: float) -> None:
        """Shake the view, decaying to zero over the duration."""
        ...


class UISink(ABC):
    """Receives score and indicator updates for the HUD."""

    @abstractmethod
    def update_stats(self, score: int, coins: int, distance: int) -> None:
        """Refresh the score, coin and distance readouts."""
        ...

    @abstractmethod
    def show_score_popup(self, points: int, x: float, y: float) -> None:
        """Float a '+points' label at a playfield position."""
        ...

    @abstractmethod
    def flash_powerup_indicator(self, kind: str, duration_ms: float) -> None:
        """Show the indicator for a power-up for its duration."""
        ...

    @abstractmethod
    def hide_powerup_indicator(self, kind: str) -> None:
        """Hide a power-up indicator early."""
        ...

    @abstractmethod
    def show_game_over(self, stats: dict[str, Any]) -> None:
        """Present the final score, coins and distance."""
        ...


class NullUISink(UISink):
    """UI sink that discards everything. Used when running headless."""

    def update_stats(self, score: int, coins: int, distance: int) -> None:
        pass

    def show_score_popup(self, points: int, x: float, y: float) -> None:
        pass

    def flash_powerup_indicator(self, kind: str, duration_ms: float) -> None:
        pass

    def hide_powerup_indicator(self, kind: str) -> None:
        pass

    def show_game_over(self, stats: dict[str, Any]) -> None:
        pass

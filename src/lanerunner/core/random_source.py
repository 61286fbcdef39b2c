"""Seedable randomness shared by the spawners and the effects engine."""

from typing import Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class RandomSource:
    """Thin wrapper over a numpy Generator.

    Every random decision in the simulation goes through one instance so a
    run can be replayed from its seed.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return float(self._rng.random())

    def randrange(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        return int(self._rng.integers(0, n))

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        return float(self._rng.uniform(low, high))

    def choice(self, options: Sequence[T]) -> T:
        """Pick one element uniformly."""
        if not options:
            raise ValueError("Cannot choose from an empty sequence")
        return options[self.randrange(len(options))]

    def reseed(self, seed: Optional[int] = None) -> None:
        """Restart the stream, optionally with a new seed."""
        if seed is not None:
            self.seed = seed
        self._rng = np.random.default_rng(self.seed)

"""Lane runner: simulation core for a three-lane endless runner."""

__version__ = "0.1.0"

"""Playfield geometry: rectangles and the viewport."""

from dataclasses import dataclass

LANE_COUNT = 3


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle, top-left origin, y grows downward."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def overlaps(self, other: "Rect") -> bool:
        """Strict overlap test. Touching edges do not count."""
        return (
            self.x < other.right
            and self.right > other.x
            and self.y < other.bottom
            and self.bottom > other.y
        )


@dataclass(frozen=True)
class Viewport:
    """Immutable playfield extent.

    Components derive lane geometry from it and receive a fresh value when
    the host resizes; they never mutate it.
    """

    width: float = 800.0
    height: float = 600.0
    ground_offset: float = 100.0

    @property
    def lane_width(self) -> float:
        return self.width / LANE_COUNT

    @property
    def ground_y(self) -> float:
        """Vertical reference the player stands on."""
        return self.height - self.ground_offset

    def lane_center(self, lane: int) -> float:
        return self.lane_width * clamp_lane(lane) + self.lane_width / 2

    def lane_bounds(self, lane: int) -> tuple[float, float]:
        left = self.lane_width * clamp_lane(lane)
        return left, left + self.lane_width


def clamp_lane(lane: int) -> int:
    return max(0, min(LANE_COUNT - 1, int(lane)))

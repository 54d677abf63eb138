"""Geometry value types shared by the positioning engine."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """2D vector for coordinate pairs.

    Used for any x/y coordinate pair across different spaces:
    - Screen pixels (offsets applied to a sprite instance)
    - Normalized coordinates (0-1 within a diamond quad or sprite rectangle)
    - Sprite canvas pixels (top-left origin)
    """
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))

    def __add__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self.x + other.x, self.y + other.y)

    def scaled(self, factor: float) -> 'Vec2':
        return Vec2(self.x * factor, self.y * factor)


@dataclass(frozen=True)
class Size:
    """Pixel dimensions of a sprite frame."""
    width: int
    height: int

    def __iter__(self):
        return iter((self.width, self.height))


@dataclass(frozen=True)
class Rect:
    """Axis-aligned pixel rectangle (top-left origin, Y-down)."""
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

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def point_at(self, ratio_x: float, ratio_y: float) -> Vec2:
        """Pixel position of a 0-1 ratio pair inside this rectangle."""
        return Vec2(self.x + ratio_x * self.width, self.y + ratio_y * self.height)

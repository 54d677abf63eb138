"""
Isometric Asset Editor - Anchor Data Model

Two independent anchor systems decide where a sprite sits on the grid:
- Grid anchor: WHERE on the diamond cell the sprite is pinned
- Sprite anchor: WHICH point of the sprite (full canvas or trimmed box) lands there

Coordinates are normalized to 0-1. Grid coordinates are relative to the
bounding quad of the diamond (north vertex at (0.5, 0), east at (1, 0.5)).
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Tuple

from constants import DEFAULT_GRID_ANCHOR, DEFAULT_SPRITE_ANCHOR


class GridAnchorPoint(Enum):
    CENTER = 'center'
    NORTH_EDGE = 'north_edge'
    EAST_EDGE = 'east_edge'
    SOUTH_EDGE = 'south_edge'
    WEST_EDGE = 'west_edge'
    NORTH_CORNER = 'north_corner'
    EAST_CORNER = 'east_corner'
    SOUTH_CORNER = 'south_corner'
    WEST_CORNER = 'west_corner'
    CUSTOM = 'custom'


class SpriteAnchorPoint(Enum):
    TOP_LEFT = 'top_left'
    TOP_CENTER = 'top_center'
    TOP_RIGHT = 'top_right'
    MIDDLE_LEFT = 'middle_left'
    CENTER = 'center'
    MIDDLE_RIGHT = 'middle_right'
    BOTTOM_LEFT = 'bottom_left'
    BOTTOM_CENTER = 'bottom_center'
    BOTTOM_RIGHT = 'bottom_right'
    CUSTOM = 'custom'


class AnchorRect(Enum):
    """Which rectangle the sprite anchor ratios are measured against."""
    FULL_CANVAS = 'full_canvas'
    BOUNDING_BOX = 'bounding_box'


# Diamond vertices on the bounding quad; edges are midpoints of the sides
# (north edge = NW side, east = NE, south = SE, west = SW).
GRID_POINT_COORDS: Dict[GridAnchorPoint, Tuple[float, float]] = {
    GridAnchorPoint.CENTER: (0.5, 0.5),
    GridAnchorPoint.NORTH_CORNER: (0.5, 0.0),
    GridAnchorPoint.EAST_CORNER: (1.0, 0.5),
    GridAnchorPoint.SOUTH_CORNER: (0.5, 1.0),
    GridAnchorPoint.WEST_CORNER: (0.0, 0.5),
    GridAnchorPoint.NORTH_EDGE: (0.25, 0.25),
    GridAnchorPoint.EAST_EDGE: (0.75, 0.25),
    GridAnchorPoint.SOUTH_EDGE: (0.75, 0.75),
    GridAnchorPoint.WEST_EDGE: (0.25, 0.75),
}

SPRITE_POINT_COORDS: Dict[SpriteAnchorPoint, Tuple[float, float]] = {
    SpriteAnchorPoint.TOP_LEFT: (0.0, 0.0),
    SpriteAnchorPoint.TOP_CENTER: (0.5, 0.0),
    SpriteAnchorPoint.TOP_RIGHT: (1.0, 0.0),
    SpriteAnchorPoint.MIDDLE_LEFT: (0.0, 0.5),
    SpriteAnchorPoint.CENTER: (0.5, 0.5),
    SpriteAnchorPoint.MIDDLE_RIGHT: (1.0, 0.5),
    SpriteAnchorPoint.BOTTOM_LEFT: (0.0, 1.0),
    SpriteAnchorPoint.BOTTOM_CENTER: (0.5, 1.0),
    SpriteAnchorPoint.BOTTOM_RIGHT: (1.0, 1.0),
}


def _check_unit(name: str, value: float) -> float:
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1], got {value}")
    return value


@dataclass(frozen=True)
class GridAnchorConfig:
    """Grid attachment point. x/y only matter when point is CUSTOM."""
    point: GridAnchorPoint = GridAnchorPoint.CENTER
    x: float = DEFAULT_GRID_ANCHOR[0]
    y: float = DEFAULT_GRID_ANCHOR[1]
    use_default: bool = True

    def __post_init__(self):
        object.__setattr__(self, 'x', _check_unit('grid anchor x', self.x))
        object.__setattr__(self, 'y', _check_unit('grid anchor y', self.y))

    @property
    def coords(self) -> Tuple[float, float]:
        """Effective normalized position within the diamond's bounding quad."""
        if self.point is GridAnchorPoint.CUSTOM:
            return (self.x, self.y)
        return GRID_POINT_COORDS[self.point]


@dataclass(frozen=True)
class SpriteAnchorConfig:
    """Point on the sprite that aligns with the grid anchor."""
    x: float = DEFAULT_SPRITE_ANCHOR[0]
    y: float = DEFAULT_SPRITE_ANCHOR[1]
    use_default: bool = True
    rect: AnchorRect = AnchorRect.BOUNDING_BOX
    point: SpriteAnchorPoint = SpriteAnchorPoint.BOTTOM_CENTER

    def __post_init__(self):
        object.__setattr__(self, 'x', _check_unit('sprite anchor x', self.x))
        object.__setattr__(self, 'y', _check_unit('sprite anchor y', self.y))

    @property
    def use_bounding_box_anchor(self) -> bool:
        return self.rect is AnchorRect.BOUNDING_BOX

    def with_point(self, point: SpriteAnchorPoint, x: float = None, y: float = None) -> 'SpriteAnchorConfig':
        """Select a named point (overwrites x/y) or CUSTOM (keeps or sets x/y)."""
        if point is SpriteAnchorPoint.CUSTOM:
            new_x = self.x if x is None else x
            new_y = self.y if y is None else y
        else:
            new_x, new_y = SPRITE_POINT_COORDS[point]
        return replace(self, point=point, x=new_x, y=new_y, use_default=False)

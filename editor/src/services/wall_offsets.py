"""Wall-relative offsets for edge-anchored assets.

The total offset is a sum of independent terms, each a magnitude times a
unit vector that depends on which edge of the cell the wall sits on:

- along edge: parallel to the wall
- toward center: perpendicular to the wall, into the cell
- diagonal A / B: paired magnitudes (classic 8 / 3) along two 45 degree axes;
  north and east walls halve A when the A-division flag is on
- manual NE / NW diagonals along the 30 degree isometric axes
- manual horizontal shift

Every term is scaled by sprite_scale * zoom. Tiles get a zero offset.
"""

import math
from dataclasses import dataclass
from typing import Dict, Tuple

from constants import ISOMETRIC_AXIS_DEGREES, WALL_DIAGONAL_A_DEFAULT, WALL_DIAGONAL_B_DEFAULT
from models.direction import Direction
from models.positioning import PositioningSettings
from models.transform import Vec2


@dataclass(frozen=True)
class WallBasis:
    along_edge: Vec2
    toward_center: Vec2
    diagonal_a_angle: float
    diagonal_b_angle: float
    b_sign: float
    halves_a: bool

    @property
    def diagonal_a(self) -> Vec2:
        return Vec2(math.cos(self.diagonal_a_angle), math.sin(self.diagonal_a_angle))

    @property
    def diagonal_b(self) -> Vec2:
        return Vec2(math.cos(self.diagonal_b_angle), math.sin(self.diagonal_b_angle))

    def a_sign(self, use_a_division: bool) -> float:
        if self.halves_a:
            return -0.5 if use_a_division else -1.0
        return 1.0


_QUARTER = math.pi / 4
_HALF = math.pi / 2

WALL_BASES: Dict[Direction, WallBasis] = {
    Direction.NORTH: WallBasis(Vec2(1, 0), Vec2(0, 1), _QUARTER, -_QUARTER, -1.0, True),
    Direction.EAST: WallBasis(Vec2(0, 1), Vec2(-1, 0), _HALF + _QUARTER, _HALF - _QUARTER, 1.0, True),
    Direction.SOUTH: WallBasis(Vec2(-1, 0), Vec2(0, -1), math.pi + _QUARTER, math.pi - _QUARTER, 1.0, False),
    Direction.WEST: WallBasis(Vec2(0, -1), Vec2(1, 0), -_HALF + _QUARTER, -_HALF - _QUARTER, -1.0, False),
}


@dataclass(frozen=True)
class WallOffset:
    """Screen-pixel offset with the contribution of each term."""
    x: float = 0.0
    y: float = 0.0
    along_edge: Vec2 = Vec2(0.0, 0.0)
    toward_center: Vec2 = Vec2(0.0, 0.0)
    diagonal_a: Vec2 = Vec2(0.0, 0.0)
    diagonal_b: Vec2 = Vec2(0.0, 0.0)
    manual_diagonal: Vec2 = Vec2(0.0, 0.0)
    manual_horizontal: Vec2 = Vec2(0.0, 0.0)

    @property
    def vector(self) -> Vec2:
        return Vec2(self.x, self.y)


def manual_diagonal_offset(north_east: float, north_west: float) -> Vec2:
    """Unscaled sum of the NE and NW manual diagonal offsets."""
    angle = math.radians(ISOMETRIC_AXIS_DEGREES)
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    return Vec2(north_east * cos_a - north_west * cos_a,
                -north_east * sin_a - north_west * sin_a)


def compute_wall_offset(settings: PositioningSettings, wall_direction: Direction,
                        sprite_scale: float = 1.0, zoom: float = 1.0) -> WallOffset:
    """Total wall-relative offset for one bundle and wall edge.

    Args:
        settings: Bundle holding the wall offset fields
        wall_direction: Edge of the cell the wall sits on
        sprite_scale: Global sprite scale
        zoom: View zoom

    Returns:
        WallOffset in screen pixels
    """
    if not settings.asset_type.is_edge_anchored:
        return WallOffset()

    basis = WALL_BASES[Direction.from_value(wall_direction)]
    factor = sprite_scale * zoom

    along = basis.along_edge.scaled(settings.relative_along_edge_offset * factor)
    toward = basis.toward_center.scaled(settings.relative_toward_center_offset * factor)
    a_magnitude = settings.relative_diagonal_a_offset * basis.a_sign(settings.use_a_division_for_north_east)
    diag_a = basis.diagonal_a.scaled(a_magnitude * factor)
    diag_b = basis.diagonal_b.scaled(settings.relative_diagonal_b_offset * basis.b_sign * factor)
    manual_diag = manual_diagonal_offset(
        settings.manual_diagonal_north_east_offset,
        settings.manual_diagonal_north_west_offset,
    ).scaled(factor)
    manual_horizontal = Vec2(settings.manual_horizontal_offset * factor, 0.0)

    total = along + toward + diag_a + diag_b + manual_diag + manual_horizontal
    return WallOffset(
        x=total.x, y=total.y,
        along_edge=along, toward_center=toward,
        diagonal_a=diag_a, diagonal_b=diag_b,
        manual_diagonal=manual_diag, manual_horizontal=manual_horizontal,
    )


def classic_diagonal_vector(wall_direction: Direction, use_a_division: bool = True,
                            a: float = WALL_DIAGONAL_A_DEFAULT,
                            b: float = WALL_DIAGONAL_B_DEFAULT) -> Tuple[float, float]:
    """Unscaled A/B contribution for a wall edge (useful for previews)."""
    basis = WALL_BASES[Direction.from_value(wall_direction)]
    diag = basis.diagonal_a.scaled(a * basis.a_sign(use_a_division)) + basis.diagonal_b.scaled(b * basis.b_sign)
    return diag.x, diag.y

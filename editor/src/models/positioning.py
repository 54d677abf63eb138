"""
Isometric Asset Editor - Positioning Settings Model

One PositioningSettings bundle describes how a sprite is placed for one
direction (or for all directions when shared). Bundles are immutable: every
edit produces a new object via dataclasses.replace, so holders can detect
changes by identity and readers always see a consistent snapshot.

Orthogonal choices are explicit enums instead of independent booleans:
- BiasSource: AUTO (tiles only) or MANUAL
- AnchorRect: full canvas or trimmed bounding box (see models.anchors)
- DiagonalADivision: halve the A magnitude for north/east walls or not
- SnapPosition: above or below the grid level

The legacy boolean names are kept as read-only properties because the
persisted sprite config documents use them.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from constants import (
    DEFAULT_TILE_HORIZONTAL_OFFSET, DEFAULT_OTHER_HORIZONTAL_OFFSET,
    DEFAULT_SCALE, DEFAULT_ALPHA, DEFAULT_TINT,
    WALL_DIAGONAL_A_DEFAULT, WALL_DIAGONAL_B_DEFAULT,
)
from models.anchors import (
    GridAnchorConfig, GridAnchorPoint, SpriteAnchorConfig, SpriteAnchorPoint, AnchorRect,
    GRID_POINT_COORDS,
)
from models.direction import Direction
from models.transform import Rect, Size


class InvalidSettingsError(ValueError):
    """Raised when a settings combination is not representable for an asset type."""


class AssetType(Enum):
    """Determines rendering behavior and which settings are meaningful."""
    TILE = 'tile'    # Center-anchored grid assets (floors, blocks)
    WALL = 'wall'    # Edge-anchored grid assets (walls, fences)
    STAIR = 'stair'  # Multi-level connectors

    @property
    def is_edge_anchored(self) -> bool:
        return self is not AssetType.TILE


class BiasSource(Enum):
    AUTO = 'auto'
    MANUAL = 'manual'


class DiagonalADivision(Enum):
    HALVE_NORTH_EAST = 'halve_north_east'
    FULL = 'full'


class SnapPosition(Enum):
    ABOVE = 'above'
    BELOW = 'below'


@dataclass(frozen=True)
class SpriteBoundingBox:
    """Cached trim data for a sprite frame.

    anchor_offset_x/y are the bounding box offset divided by the original
    frame dimension.
    """
    original_width: int
    original_height: int
    bounding_x: int
    bounding_y: int
    bounding_width: int
    bounding_height: int
    anchor_offset_x: float
    anchor_offset_y: float

    @classmethod
    def from_rect(cls, original: Size, box: Rect) -> 'SpriteBoundingBox':
        return cls(
            original_width=int(original.width),
            original_height=int(original.height),
            bounding_x=int(box.x),
            bounding_y=int(box.y),
            bounding_width=int(box.width),
            bounding_height=int(box.height),
            anchor_offset_x=box.x / original.width if original.width else 0.0,
            anchor_offset_y=box.y / original.height if original.height else 0.0,
        )

    @property
    def rect(self) -> Rect:
        return Rect(self.bounding_x, self.bounding_y, self.bounding_width, self.bounding_height)

    @property
    def canvas(self) -> Rect:
        return Rect(0, 0, self.original_width, self.original_height)


@dataclass(frozen=True)
class PositioningSettings:
    """Positioning bundle for one direction (or all directions when shared)."""
    asset_type: AssetType = AssetType.TILE

    # Legacy margins: retained and persisted, no longer applied
    margin_up: float = 0
    margin_down: float = 0
    margin_left: float = 0
    margin_right: float = 0

    # Vertical bias
    auto_computed_vertical_bias: float = 0
    bias_source: BiasSource = BiasSource.AUTO
    manual_vertical_bias: float = 0

    # Anchors
    grid_anchor: GridAnchorConfig = field(default_factory=GridAnchorConfig)
    sprite_anchor: SpriteAnchorConfig = field(default_factory=SpriteAnchorConfig)

    # Transform
    horizontal_offset: float = DEFAULT_TILE_HORIZONTAL_OFFSET
    vertical_offset: float = 0
    scale_x: float = DEFAULT_SCALE
    scale_y: float = DEFAULT_SCALE
    keep_proportions: bool = True
    rotation: float = 0
    alpha: float = DEFAULT_ALPHA
    tint: int = DEFAULT_TINT
    z_index: int = 0

    # Above/below grid snapping
    snap_position: SnapPosition = SnapPosition.ABOVE
    snap_above_y_offset: float = 0

    # Wall-only offsets
    manual_horizontal_offset: float = 0
    manual_diagonal_north_east_offset: float = 0
    manual_diagonal_north_west_offset: float = 0
    relative_along_edge_offset: float = 0
    relative_toward_center_offset: float = 0
    relative_diagonal_a_offset: float = 0
    relative_diagonal_b_offset: float = 0
    a_division: DiagonalADivision = DiagonalADivision.HALVE_NORTH_EAST
    use_sprite_trimming_for_walls: bool = False

    sprite_bounding_box: Optional[SpriteBoundingBox] = None

    def __post_init__(self):
        if self.bias_source is BiasSource.AUTO and self.asset_type is not AssetType.TILE:
            raise InvalidSettingsError(
                f"Auto-computed vertical bias is only available for tiles, not {self.asset_type.value}"
            )
        # Trimming is meaningless while a tile derives its bias automatically
        if self.asset_type is AssetType.TILE and self.bias_source is BiasSource.AUTO:
            object.__setattr__(self, 'use_sprite_trimming_for_walls', False)

    # ========================================
    # Legacy flag views
    # ========================================

    @property
    def use_auto_computed(self) -> bool:
        return self.bias_source is BiasSource.AUTO

    @property
    def use_above_positioning(self) -> bool:
        return self.snap_position is SnapPosition.ABOVE

    @property
    def use_a_division_for_north_east(self) -> bool:
        return self.a_division is DiagonalADivision.HALVE_NORTH_EAST

    @property
    def effective_vertical_bias(self) -> float:
        """Bias the renderer should apply: auto value in AUTO mode, manual otherwise."""
        if self.bias_source is BiasSource.AUTO:
            return self.auto_computed_vertical_bias
        return self.manual_vertical_bias


# ========================================
# Defaults per asset type
# ========================================

_WALL_EDGE_BY_DIRECTION = {
    Direction.NORTH: GridAnchorPoint.NORTH_EDGE,
    Direction.EAST: GridAnchorPoint.EAST_EDGE,
    Direction.SOUTH: GridAnchorPoint.SOUTH_EDGE,
    Direction.WEST: GridAnchorPoint.WEST_EDGE,
}


def default_grid_anchor(asset_type: AssetType, wall_direction: Optional[Direction] = None) -> GridAnchorConfig:
    """Canonical grid anchor: diamond center for tiles/stairs, the wall's edge for walls.

    Walls without a specific direction (shared bundles) use the south edge.
    """
    if asset_type is AssetType.WALL:
        point = _WALL_EDGE_BY_DIRECTION.get(wall_direction, GridAnchorPoint.SOUTH_EDGE)
        x, y = GRID_POINT_COORDS[point]
        return GridAnchorConfig(point=point, x=x, y=y, use_default=True)
    return GridAnchorConfig(point=GridAnchorPoint.CENTER, x=0.5, y=0.5, use_default=True)


def default_sprite_anchor(asset_type: AssetType, wall_direction: Optional[Direction] = None) -> SpriteAnchorConfig:
    """Bottom-center of the trimmed sprite for every asset type."""
    return SpriteAnchorConfig(
        x=0.5, y=1.0, use_default=True,
        rect=AnchorRect.BOUNDING_BOX,
        point=SpriteAnchorPoint.BOTTOM_CENTER,
    )


def create_default_settings(asset_type: AssetType = AssetType.TILE,
                            wall_direction: Optional[Direction] = None) -> PositioningSettings:
    """Fresh bundle for an asset type before any sprite has been analyzed.

    Bias values stay 0 until real sprite dimensions are known.
    """
    is_tile = asset_type is AssetType.TILE
    return PositioningSettings(
        asset_type=asset_type,
        auto_computed_vertical_bias=0,
        bias_source=BiasSource.AUTO if is_tile else BiasSource.MANUAL,
        manual_vertical_bias=0,
        grid_anchor=default_grid_anchor(asset_type, wall_direction),
        sprite_anchor=default_sprite_anchor(asset_type, wall_direction),
        horizontal_offset=DEFAULT_TILE_HORIZONTAL_OFFSET if is_tile else DEFAULT_OTHER_HORIZONTAL_OFFSET,
        relative_diagonal_a_offset=0 if is_tile else WALL_DIAGONAL_A_DEFAULT,
        relative_diagonal_b_offset=0 if is_tile else WALL_DIAGONAL_B_DEFAULT,
        a_division=DiagonalADivision.HALVE_NORTH_EAST,
        use_sprite_trimming_for_walls=asset_type is AssetType.WALL,
    )

"""
Typed update commands for PositioningSettings.

Each command is a small frozen dataclass covering one settings domain
(anchors, bias, transform, wall offsets, trimming). apply_command() is the
only way the editor changes a bundle, and it always returns a new bundle.
"""
from dataclasses import dataclass, replace
from typing import Optional, Union

from constants import WALL_DIAGONAL_A_DEFAULT, WALL_DIAGONAL_B_DEFAULT
from models.anchors import (
    AnchorRect, GridAnchorConfig, GridAnchorPoint, SpriteAnchorPoint, GRID_POINT_COORDS,
)
from models.direction import Direction
from models.positioning import (
    BiasSource, DiagonalADivision, InvalidSettingsError, PositioningSettings,
    SnapPosition, SpriteBoundingBox, default_grid_anchor, default_sprite_anchor,
)


# ========================================
# Anchor commands
# ========================================

@dataclass(frozen=True)
class SetGridAnchor:
    point: GridAnchorPoint
    x: Optional[float] = None
    y: Optional[float] = None


@dataclass(frozen=True)
class SetSpriteAnchor:
    point: SpriteAnchorPoint
    x: Optional[float] = None
    y: Optional[float] = None


@dataclass(frozen=True)
class SetAnchorRect:
    rect: AnchorRect


@dataclass(frozen=True)
class RestoreDefaultAnchors:
    wall_direction: Optional[Direction] = None


# ========================================
# Bias commands
# ========================================

@dataclass(frozen=True)
class SetBiasSource:
    source: BiasSource


@dataclass(frozen=True)
class SetManualVerticalBias:
    value: float


@dataclass(frozen=True)
class SetMargins:
    up: float = 0
    down: float = 0
    left: float = 0
    right: float = 0


# ========================================
# Transform commands
# ========================================

@dataclass(frozen=True)
class SetOffsets:
    horizontal: Optional[float] = None
    vertical: Optional[float] = None


@dataclass(frozen=True)
class SetScale:
    scale_x: float
    scale_y: Optional[float] = None


@dataclass(frozen=True)
class SetKeepProportions:
    enabled: bool


@dataclass(frozen=True)
class SetAppearance:
    rotation: Optional[float] = None
    alpha: Optional[float] = None
    tint: Optional[int] = None


@dataclass(frozen=True)
class SetSnapPosition:
    position: SnapPosition
    snap_above_y_offset: Optional[float] = None


# ========================================
# Wall commands
# ========================================

@dataclass(frozen=True)
class SetWallOffsets:
    manual_horizontal: Optional[float] = None
    manual_diagonal_north_east: Optional[float] = None
    manual_diagonal_north_west: Optional[float] = None
    along_edge: Optional[float] = None
    toward_center: Optional[float] = None
    diagonal_a: Optional[float] = None
    diagonal_b: Optional[float] = None
    a_division: Optional[DiagonalADivision] = None


@dataclass(frozen=True)
class ResetWallClassicDefaults:
    pass


@dataclass(frozen=True)
class SetSpriteTrimming:
    enabled: bool


@dataclass(frozen=True)
class SetBoundingBox:
    box: Optional[SpriteBoundingBox]


SettingsCommand = Union[
    SetGridAnchor, SetSpriteAnchor, SetAnchorRect, RestoreDefaultAnchors,
    SetBiasSource, SetManualVerticalBias, SetMargins,
    SetOffsets, SetScale, SetKeepProportions, SetAppearance, SetSnapPosition,
    SetWallOffsets, ResetWallClassicDefaults, SetSpriteTrimming, SetBoundingBox,
]


def _pick(new, old):
    return old if new is None else new


def _require_edge_anchored(settings: PositioningSettings, command) -> None:
    if not settings.asset_type.is_edge_anchored:
        raise InvalidSettingsError(
            f"{type(command).__name__} only applies to edge-anchored assets, not {settings.asset_type.value}"
        )


def reset_wall_classic_defaults(settings: PositioningSettings) -> PositioningSettings:
    """A=8, B=3, relative along/center offsets 0, A-division on; manual offsets untouched."""
    return replace(
        settings,
        relative_diagonal_a_offset=WALL_DIAGONAL_A_DEFAULT,
        relative_diagonal_b_offset=WALL_DIAGONAL_B_DEFAULT,
        relative_along_edge_offset=0,
        relative_toward_center_offset=0,
        a_division=DiagonalADivision.HALVE_NORTH_EAST,
    )


def apply_command(settings: PositioningSettings, command: SettingsCommand) -> PositioningSettings:
    """Produce the bundle that results from applying command to settings.

    Raises:
        InvalidSettingsError: If the command would create a combination the
            asset type cannot represent (auto bias on a wall, wall offsets on a tile)
        TypeError: For an unknown command type
    """
    if isinstance(command, SetGridAnchor):
        if command.point is GridAnchorPoint.CUSTOM:
            grid = GridAnchorConfig(
                point=GridAnchorPoint.CUSTOM,
                x=_pick(command.x, settings.grid_anchor.x),
                y=_pick(command.y, settings.grid_anchor.y),
                use_default=False,
            )
        else:
            x, y = GRID_POINT_COORDS[command.point]
            grid = GridAnchorConfig(point=command.point, x=x, y=y, use_default=False)
        return replace(settings, grid_anchor=grid)

    if isinstance(command, SetSpriteAnchor):
        return replace(settings, sprite_anchor=settings.sprite_anchor.with_point(command.point, command.x, command.y))

    if isinstance(command, SetAnchorRect):
        # Ratios stay put; only the rectangle they are measured against changes
        return replace(settings, sprite_anchor=replace(settings.sprite_anchor, rect=command.rect))

    if isinstance(command, RestoreDefaultAnchors):
        return replace(
            settings,
            grid_anchor=default_grid_anchor(settings.asset_type, command.wall_direction),
            sprite_anchor=default_sprite_anchor(settings.asset_type, command.wall_direction),
        )

    if isinstance(command, SetBiasSource):
        return replace(settings, bias_source=command.source)

    if isinstance(command, SetManualVerticalBias):
        return replace(settings, manual_vertical_bias=command.value, bias_source=BiasSource.MANUAL)

    if isinstance(command, SetMargins):
        return replace(
            settings,
            margin_up=command.up, margin_down=command.down,
            margin_left=command.left, margin_right=command.right,
        )

    if isinstance(command, SetOffsets):
        return replace(
            settings,
            horizontal_offset=_pick(command.horizontal, settings.horizontal_offset),
            vertical_offset=_pick(command.vertical, settings.vertical_offset),
        )

    if isinstance(command, SetScale):
        scale_x = command.scale_x
        if settings.keep_proportions:
            scale_y = scale_x
        else:
            scale_y = _pick(command.scale_y, settings.scale_y)
        return replace(settings, scale_x=scale_x, scale_y=scale_y)

    if isinstance(command, SetKeepProportions):
        if command.enabled:
            return replace(settings, keep_proportions=True, scale_y=settings.scale_x)
        return replace(settings, keep_proportions=False)

    if isinstance(command, SetAppearance):
        alpha = settings.alpha if command.alpha is None else max(0.0, min(1.0, float(command.alpha)))
        return replace(
            settings,
            rotation=_pick(command.rotation, settings.rotation),
            alpha=alpha,
            tint=_pick(command.tint, settings.tint),
        )

    if isinstance(command, SetSnapPosition):
        return replace(
            settings,
            snap_position=command.position,
            snap_above_y_offset=_pick(command.snap_above_y_offset, settings.snap_above_y_offset),
        )

    if isinstance(command, SetWallOffsets):
        _require_edge_anchored(settings, command)
        return replace(
            settings,
            manual_horizontal_offset=_pick(command.manual_horizontal, settings.manual_horizontal_offset),
            manual_diagonal_north_east_offset=_pick(command.manual_diagonal_north_east,
                                                    settings.manual_diagonal_north_east_offset),
            manual_diagonal_north_west_offset=_pick(command.manual_diagonal_north_west,
                                                    settings.manual_diagonal_north_west_offset),
            relative_along_edge_offset=_pick(command.along_edge, settings.relative_along_edge_offset),
            relative_toward_center_offset=_pick(command.toward_center, settings.relative_toward_center_offset),
            relative_diagonal_a_offset=_pick(command.diagonal_a, settings.relative_diagonal_a_offset),
            relative_diagonal_b_offset=_pick(command.diagonal_b, settings.relative_diagonal_b_offset),
            a_division=_pick(command.a_division, settings.a_division),
        )

    if isinstance(command, ResetWallClassicDefaults):
        _require_edge_anchored(settings, command)
        return reset_wall_classic_defaults(settings)

    if isinstance(command, SetSpriteTrimming):
        return replace(settings, use_sprite_trimming_for_walls=command.enabled)

    if isinstance(command, SetBoundingBox):
        return replace(settings, sprite_bounding_box=command.box)

    raise TypeError(f"Unknown settings command: {type(command).__name__}")

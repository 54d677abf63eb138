"""Sprite placement.

Combines the resolved anchors, the vertical bias, the per-bundle offsets,
the wall-relative offset and the global view scale into the values a
renderer applies to one sprite instance sitting at a grid cell center.

Legacy margins are not applied.
"""

import math
from dataclasses import dataclass
from typing import Optional

from constants import FALLBACK_VERTICAL_BIAS, ZOOM_MAX, ZOOM_MIN
from models.direction import Direction
from models.positioning import PositioningSettings, SnapPosition
from models.transform import Size, Vec2
from models.view_scaling import ViewScalingState
from services.anchor_resolver import resolve_anchors
from services.wall_offsets import compute_wall_offset
from utils.coordinate_transforms import grid_point_to_pixel_offset


@dataclass(frozen=True)
class SpritePlacement:
    anchor: Vec2
    offset: Vec2
    scale: Vec2
    rotation_radians: float
    alpha: float
    tint: int
    grid_offset: Vec2 = Vec2(0.0, 0.0)
    bias_offset: float = 0.0
    wall_offset: Vec2 = Vec2(0.0, 0.0)


def placement_vertical_bias(settings: PositioningSettings) -> float:
    """Bias used for placement; a bundle with no bias at all gets the fallback."""
    return settings.effective_vertical_bias or FALLBACK_VERTICAL_BIAS


def compute_placement(settings: PositioningSettings, view: ViewScalingState,
                      direction: Direction = Direction.SOUTH,
                      snap_position: Optional[SnapPosition] = None,
                      zoom: float = 1.0,
                      wall_direction: Optional[Direction] = None,
                      canvas: Optional[Size] = None) -> SpritePlacement:
    """Compute how to draw one sprite instance.

    Args:
        settings: Resolved bundle for (asset, direction)
        view: Global view scaling state
        direction: Facing of the instance
        snap_position: Instance snap position; defaults to the bundle's
        zoom: View zoom, clamped to ZOOM_MIN-ZOOM_MAX
        wall_direction: Edge a wall sits on; defaults to direction
        canvas: Full frame size when no bounding box is cached

    Returns:
        SpritePlacement with the offset measured from the cell center
    """
    zoom = max(ZOOM_MIN, min(ZOOM_MAX, zoom))
    sprite_scale = view.sprite_scale
    anchors = resolve_anchors(settings, canvas)

    grid_x, grid_y = grid_point_to_pixel_offset(
        anchors.grid_point.x, anchors.grid_point.y, view.grid_diamond_width, zoom)
    grid_offset = Vec2(grid_x, grid_y)

    position = settings.snap_position if snap_position is None else snap_position
    bias_offset = 0.0
    if position is SnapPosition.ABOVE:
        bias = placement_vertical_bias(settings)
        bias_offset = (bias + settings.snap_above_y_offset) * sprite_scale * zoom

    wall_offset = Vec2(0.0, 0.0)
    if settings.asset_type.is_edge_anchored:
        edge = direction if wall_direction is None else wall_direction
        wall_offset = compute_wall_offset(settings, edge, sprite_scale, zoom).vector

    offset = Vec2(
        grid_offset.x + settings.horizontal_offset * zoom + wall_offset.x,
        grid_offset.y + bias_offset + settings.vertical_offset * zoom + wall_offset.y,
    )

    final_scale = sprite_scale * zoom
    if settings.keep_proportions:
        scale = Vec2(final_scale * settings.scale_x, final_scale * settings.scale_x)
    else:
        scale = Vec2(final_scale * settings.scale_x, final_scale * settings.scale_y)

    return SpritePlacement(
        anchor=anchors.canvas_anchor,
        offset=offset,
        scale=scale,
        rotation_radians=math.radians(settings.rotation),
        alpha=settings.alpha,
        tint=settings.tint,
        grid_offset=grid_offset,
        bias_offset=bias_offset,
        wall_offset=wall_offset,
    )

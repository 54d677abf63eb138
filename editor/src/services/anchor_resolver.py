"""Anchor resolution.

Turns the grid anchor and sprite anchor of a settings bundle into normalized
coordinates for the renderer:
- grid_point: position inside the diamond's bounding quad
- sprite_point: ratio inside the requested rectangle (canvas or trimmed box)
- sprite_pixel: that ratio as a pixel in the sprite canvas
- canvas_anchor: sprite_pixel as a ratio of the full canvas, which is what
  a renderer sets as the sprite's anchor
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from models.anchors import AnchorRect, GridAnchorConfig, SpriteAnchorConfig
from models.direction import Direction
from models.positioning import (
    AssetType, PositioningSettings, SpriteBoundingBox, default_grid_anchor, default_sprite_anchor,
)
from models.transform import Rect, Size, Vec2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedAnchors:
    grid_point: Vec2
    sprite_point: Vec2
    rect: Rect
    sprite_pixel: Vec2
    canvas_anchor: Vec2


def resolve_grid_point(grid_anchor: GridAnchorConfig) -> Vec2:
    return Vec2(*grid_anchor.coords)


def anchor_rect(sprite_anchor: SpriteAnchorConfig, canvas: Size,
                bounding_box: Optional[SpriteBoundingBox]) -> Rect:
    """Rectangle the sprite anchor ratios are measured against.

    Falls back to the full canvas when a trimmed box is requested but none
    has been computed yet.
    """
    if sprite_anchor.rect is AnchorRect.BOUNDING_BOX and bounding_box is not None:
        return bounding_box.rect
    return Rect(0, 0, canvas.width, canvas.height)


def resolve_anchors(settings: PositioningSettings, canvas: Optional[Size] = None) -> ResolvedAnchors:
    """Resolve both anchor systems of a bundle.

    Args:
        settings: Bundle holding grid_anchor, sprite_anchor and (optionally)
            the cached sprite_bounding_box
        canvas: Full frame size; defaults to the size stored in the bounding box

    Returns:
        ResolvedAnchors
    """
    box = settings.sprite_bounding_box
    if canvas is None:
        canvas = Size(box.original_width, box.original_height) if box else Size(1, 1)

    anchor = settings.sprite_anchor
    rect = anchor_rect(anchor, canvas, box)
    if anchor.rect is AnchorRect.BOUNDING_BOX and box is None:
        logger.debug("Bounding box anchor requested without a cached box, using full canvas")

    pixel = rect.point_at(anchor.x, anchor.y)
    canvas_anchor = Vec2(
        pixel.x / canvas.width if canvas.width else anchor.x,
        pixel.y / canvas.height if canvas.height else anchor.y,
    )
    return ResolvedAnchors(
        grid_point=resolve_grid_point(settings.grid_anchor),
        sprite_point=Vec2(anchor.x, anchor.y),
        rect=rect,
        sprite_pixel=pixel,
        canvas_anchor=canvas_anchor,
    )


def default_anchors(asset_type: AssetType,
                    wall_direction: Optional[Direction] = None) -> Tuple[GridAnchorConfig, SpriteAnchorConfig]:
    """Canonical (grid, sprite) anchors for an asset type."""
    return default_grid_anchor(asset_type, wall_direction), default_sprite_anchor(asset_type, wall_direction)


def wall_sprite_anchor(direction: Direction) -> Vec2:
    """Full-canvas anchor a renderer uses for an untrimmed wall frame.

    North/south faces hang from their bottom-left corner, east/west faces
    from their bottom-right corner.
    """
    if Direction.from_value(direction) in (Direction.NORTH, Direction.SOUTH):
        return Vec2(0.0, 1.0)
    return Vec2(1.0, 1.0)

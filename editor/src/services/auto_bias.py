"""Auto-computed vertical bias.

A sprite standing on the isometric grid must be lifted by the part of its
height that is not covered by the diamond footprint:

    raw_bias = height - width / 2

The raw value is then rounded with the globally selected RoundingPolicy.
SNAP_TO_NEAREST picks the closest value of a two-element target table; ties
go to the first (lower) target. Two tables exist: the per-sprite-type
calculator snaps to GENERIC_SNAP_TARGETS, the asset-level calculator snaps
tiles to TILE_SNAP_TARGETS.

Legacy margins are not subtracted.
"""

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Mapping, Optional, Sequence

from constants import (
    DEFAULT_OTHER_HORIZONTAL_OFFSET, DEFAULT_TILE_HORIZONTAL_OFFSET, GENERIC_SNAP_TARGETS,
    TILE_SNAP_TARGETS, PLACEHOLDER_SPRITE_HEIGHT, PLACEHOLDER_SPRITE_WIDTH,
)
from models.positioning import AssetType, BiasSource, PositioningSettings

logger = logging.getLogger(__name__)


class RoundingPolicy(Enum):
    ROUND_DOWN = 'round_down'
    ROUND_UP = 'round_up'
    SNAP_TO_NEAREST = 'snap_to_nearest'


@dataclass(frozen=True)
class AutoPositioning:
    raw_bias: float
    auto_computed_vertical_bias: int
    horizontal_offset: int


def raw_vertical_bias(width: float, height: float) -> float:
    return height - width / 2


def snap_to_nearest(value: float, targets: Sequence[float]) -> float:
    """Closest target; on equal distance the earlier target wins.

    Raises:
        ValueError: If targets is empty
    """
    if not targets:
        raise ValueError("At least one snap target is required")
    closest = targets[0]
    min_distance = abs(value - closest)
    for target in targets[1:]:
        distance = abs(value - target)
        if distance < min_distance:
            min_distance = distance
            closest = target
    return closest


def compute_vertical_bias(width: float, height: float,
                          policy: RoundingPolicy = RoundingPolicy.SNAP_TO_NEAREST,
                          snap_targets: Sequence[float] = GENERIC_SNAP_TARGETS) -> int:
    """Rounded vertical bias for a sprite of the given pixel size.

    Args:
        width: Sprite frame width in pixels
        height: Sprite frame height in pixels
        policy: Rounding policy
        snap_targets: Table used by SNAP_TO_NEAREST

    Returns:
        Bias in whole pixels
    """
    raw = raw_vertical_bias(width, height)
    policy = RoundingPolicy(policy)
    if policy is RoundingPolicy.ROUND_UP:
        return math.ceil(raw)
    if policy is RoundingPolicy.SNAP_TO_NEAREST:
        snapped = snap_to_nearest(raw, snap_targets)
        logger.debug(f"Snap-to-nearest: computed {raw:.1f} -> snapped to {snapped}")
        return int(snapped)
    return math.floor(raw)


def calculate_sprite_type_positioning(width: float, height: float,
                                      policy: RoundingPolicy = RoundingPolicy.SNAP_TO_NEAREST) -> AutoPositioning:
    """Per-sprite-type calculator (generic snap table, tile horizontal offset)."""
    bias = compute_vertical_bias(width, height, policy, GENERIC_SNAP_TARGETS)
    return AutoPositioning(raw_vertical_bias(width, height), bias, DEFAULT_TILE_HORIZONTAL_OFFSET)


def calculate_auto_positioning(width: float = PLACEHOLDER_SPRITE_WIDTH,
                               height: float = PLACEHOLDER_SPRITE_HEIGHT,
                               asset_type: AssetType = AssetType.TILE,
                               policy: RoundingPolicy = RoundingPolicy.SNAP_TO_NEAREST,
                               snap_targets: Optional[Sequence[float]] = None) -> AutoPositioning:
    """Asset-level calculator.

    Tiles snap against TILE_SNAP_TARGETS unless another table is given.
    Horizontal offset defaults to 1 for tiles and 0 for every other type.
    """
    if snap_targets is None:
        snap_targets = TILE_SNAP_TARGETS if asset_type is AssetType.TILE else GENERIC_SNAP_TARGETS
    bias = compute_vertical_bias(width, height, policy, snap_targets)
    horizontal = DEFAULT_TILE_HORIZONTAL_OFFSET if asset_type is AssetType.TILE else DEFAULT_OTHER_HORIZONTAL_OFFSET
    logger.debug(f"Auto positioning {width}x{height} ({asset_type.value}, {RoundingPolicy(policy).value}): "
                 f"bias {bias}, horizontal offset {horizontal}")
    return AutoPositioning(raw_vertical_bias(width, height), bias, horizontal)


def apply_auto_positioning(settings: PositioningSettings, result: AutoPositioning) -> PositioningSettings:
    """Write a calculation into a bundle.

    Both the cached auto bias and the manual bias receive the value, so
    turning auto mode off starts from the last computed bias.
    """
    return replace(
        settings,
        auto_computed_vertical_bias=result.auto_computed_vertical_bias,
        manual_vertical_bias=result.auto_computed_vertical_bias,
        horizontal_offset=result.horizontal_offset,
    )


def recalculate_all(configs: Mapping[str, PositioningSettings], provider,
                    policy: RoundingPolicy,
                    snap_targets: Sequence[float] = GENERIC_SNAP_TARGETS) -> Dict[str, PositioningSettings]:
    """Recompute the auto bias of every AUTO bundle after a policy change.

    Args:
        configs: Sprite name -> bundle
        provider: SpriteProvider used for frame sizes
        policy: New rounding policy
        snap_targets: Table used by SNAP_TO_NEAREST

    Returns:
        New mapping; MANUAL bundles and sprites without a known frame size
        are carried over unchanged
    """
    updated = {}
    for name, settings in configs.items():
        if settings.bias_source is not BiasSource.AUTO:
            updated[name] = settings
            continue
        size = provider.get_frame_size(name)
        if size is None:
            logger.warning(f"Could not get sprite frame size for {name}, keeping bias "
                           f"{settings.auto_computed_vertical_bias}")
            updated[name] = settings
            continue
        bias = compute_vertical_bias(size.width, size.height, policy, snap_targets)
        logger.debug(f"Recalculated {name}: {settings.auto_computed_vertical_bias} -> {bias}px")
        updated[name] = replace(settings, auto_computed_vertical_bias=bias)
    return updated

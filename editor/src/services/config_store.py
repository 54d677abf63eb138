"""
Isometric Asset Editor - Sprite Configuration Store

This module persists per-sprite positioning documents as JSON files:

    <root>/configs/<spriteType>s/<spriteName>.json

Documents use the camelCase keys and legacy boolean flags of the editor's
file format; directional settings are keyed by the integer direction
encoding ("0".."3"). Loading a sprite with no document creates, saves and
returns a default one. Failures are logged and reported as None/False.
"""

import json
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from constants import (
    CONFIG_DIR_NAME, CONFIG_SCHEMA_VERSION, SPRITE_TYPE_BLOCK, SPRITE_TYPE_WALL,
    WALL_DIAGONAL_A_DEFAULT, WALL_DIAGONAL_B_DEFAULT,
)
from models.anchors import (
    AnchorRect, GridAnchorConfig, GridAnchorPoint, SpriteAnchorConfig, SpriteAnchorPoint,
    SPRITE_POINT_COORDS,
)
from models.direction import Direction, DirectionMap
from models.directional import DirectionalBehavior, SettingsMode
from models.positioning import (
    AssetType, BiasSource, DiagonalADivision, PositioningSettings, SnapPosition, SpriteBoundingBox,
    create_default_settings,
)
from services.bounding_box import extract_bounding_box, to_sprite_bounding_box

logger = logging.getLogger(__name__)

SPRITE_TYPE_TO_ASSET_TYPE = {
    SPRITE_TYPE_BLOCK: AssetType.TILE,
    SPRITE_TYPE_WALL: AssetType.WALL,
}


# ========================================
# Settings <-> document dictionaries
# ========================================

def bounding_box_to_dict(box: SpriteBoundingBox) -> dict:
    return {
        'originalWidth': box.original_width,
        'originalHeight': box.original_height,
        'boundingX': box.bounding_x,
        'boundingY': box.bounding_y,
        'boundingWidth': box.bounding_width,
        'boundingHeight': box.bounding_height,
        'anchorOffsetX': box.anchor_offset_x,
        'anchorOffsetY': box.anchor_offset_y,
    }


def bounding_box_from_dict(data: Optional[dict]) -> Optional[SpriteBoundingBox]:
    if not data:
        return None
    return SpriteBoundingBox(
        original_width=int(data['originalWidth']),
        original_height=int(data['originalHeight']),
        bounding_x=int(data['boundingX']),
        bounding_y=int(data['boundingY']),
        bounding_width=int(data['boundingWidth']),
        bounding_height=int(data['boundingHeight']),
        anchor_offset_x=float(data.get('anchorOffsetX', 0.0)),
        anchor_offset_y=float(data.get('anchorOffsetY', 0.0)),
    )


def settings_to_dict(settings: PositioningSettings) -> dict:
    """Serialize a bundle with the document's key names."""
    data = {
        'assetType': settings.asset_type.value,
        'invisibleMarginUp': settings.margin_up,
        'invisibleMarginDown': settings.margin_down,
        'invisibleMarginLeft': settings.margin_left,
        'invisibleMarginRight': settings.margin_right,
        'autoComputedVerticalBias': settings.auto_computed_vertical_bias,
        'useAutoComputed': settings.use_auto_computed,
        'manualVerticalBias': settings.manual_vertical_bias,
        'gridAnchor': {
            'gridAnchorPoint': settings.grid_anchor.point.value,
            'gridAnchorX': settings.grid_anchor.x,
            'gridAnchorY': settings.grid_anchor.y,
            'useDefaultGridAnchor': settings.grid_anchor.use_default,
        },
        'spriteAnchor': {
            'spriteAnchorPoint': settings.sprite_anchor.point.value,
            'spriteAnchorX': settings.sprite_anchor.x,
            'spriteAnchorY': settings.sprite_anchor.y,
            'useDefaultSpriteAnchor': settings.sprite_anchor.use_default,
            'useBoundingBoxAnchor': settings.sprite_anchor.use_bounding_box_anchor,
        },
        'horizontalOffset': settings.horizontal_offset,
        'verticalOffset': settings.vertical_offset,
        'scaleX': settings.scale_x,
        'scaleY': settings.scale_y,
        'keepProportions': settings.keep_proportions,
        'rotation': settings.rotation,
        'alpha': settings.alpha,
        'tint': settings.tint,
        'zIndex': settings.z_index,
        'useAbovePositioning': settings.use_above_positioning,
        'snapAboveYOffset': settings.snap_above_y_offset,
        'manualHorizontalOffset': settings.manual_horizontal_offset,
        'manualDiagonalNorthEastOffset': settings.manual_diagonal_north_east_offset,
        'manualDiagonalNorthWestOffset': settings.manual_diagonal_north_west_offset,
        'relativeAlongEdgeOffset': settings.relative_along_edge_offset,
        'relativeTowardCenterOffset': settings.relative_toward_center_offset,
        'relativeDiagonalAOffset': settings.relative_diagonal_a_offset,
        'relativeDiagonalBOffset': settings.relative_diagonal_b_offset,
        'useADivisionForNorthEast': settings.use_a_division_for_north_east,
        'useSpriteTrimmingForWalls': settings.use_sprite_trimming_for_walls,
    }
    if settings.sprite_bounding_box is not None:
        data['spriteBoundingBox'] = bounding_box_to_dict(settings.sprite_bounding_box)
    return data


def _sprite_point_for(data: dict, x: float, y: float) -> SpriteAnchorPoint:
    if 'spriteAnchorPoint' in data:
        return SpriteAnchorPoint(data['spriteAnchorPoint'])
    for point, coords in SPRITE_POINT_COORDS.items():
        if coords == (x, y):
            return point
    return SpriteAnchorPoint.CUSTOM


def settings_from_dict(data: dict, asset_type: AssetType = None) -> PositioningSettings:
    """Build a bundle from a document dictionary.

    Missing keys take the asset type's defaults. A wall document claiming
    auto bias is read as manual, since auto bias only exists for tiles.
    """
    if asset_type is None:
        asset_type = AssetType(data.get('assetType', AssetType.TILE.value))
    defaults = create_default_settings(asset_type)
    is_tile = asset_type is AssetType.TILE

    use_auto = bool(data.get('useAutoComputed', defaults.use_auto_computed))
    if use_auto and not is_tile:
        logger.warning(f"Ignoring auto-computed bias for {asset_type.value} settings")
        use_auto = False

    grid_data = data.get('gridAnchor') or {}
    grid_anchor = defaults.grid_anchor
    if grid_data:
        grid_anchor = GridAnchorConfig(
            point=GridAnchorPoint(grid_data.get('gridAnchorPoint', defaults.grid_anchor.point.value)),
            x=grid_data.get('gridAnchorX', defaults.grid_anchor.x),
            y=grid_data.get('gridAnchorY', defaults.grid_anchor.y),
            use_default=grid_data.get('useDefaultGridAnchor', True),
        )

    sprite_data = data.get('spriteAnchor') or {}
    sprite_anchor = defaults.sprite_anchor
    if sprite_data:
        x = sprite_data.get('spriteAnchorX', defaults.sprite_anchor.x)
        y = sprite_data.get('spriteAnchorY', defaults.sprite_anchor.y)
        use_bbox = sprite_data.get('useBoundingBoxAnchor', defaults.sprite_anchor.use_bounding_box_anchor)
        sprite_anchor = SpriteAnchorConfig(
            x=x, y=y,
            use_default=sprite_data.get('useDefaultSpriteAnchor', True),
            rect=AnchorRect.BOUNDING_BOX if use_bbox else AnchorRect.FULL_CANVAS,
            point=_sprite_point_for(sprite_data, x, y),
        )

    use_a_division = data.get('useADivisionForNorthEast', True)
    use_above = data.get('useAbovePositioning', True)

    return PositioningSettings(
        asset_type=asset_type,
        margin_up=data.get('invisibleMarginUp', 0),
        margin_down=data.get('invisibleMarginDown', 0),
        margin_left=data.get('invisibleMarginLeft', 0),
        margin_right=data.get('invisibleMarginRight', 0),
        auto_computed_vertical_bias=data.get('autoComputedVerticalBias', 0),
        bias_source=BiasSource.AUTO if use_auto else BiasSource.MANUAL,
        manual_vertical_bias=data.get('manualVerticalBias', 0),
        grid_anchor=grid_anchor,
        sprite_anchor=sprite_anchor,
        horizontal_offset=data.get('horizontalOffset', defaults.horizontal_offset),
        vertical_offset=data.get('verticalOffset', 0),
        scale_x=data.get('scaleX', defaults.scale_x),
        scale_y=data.get('scaleY', defaults.scale_y),
        keep_proportions=data.get('keepProportions', True),
        rotation=data.get('rotation', 0),
        alpha=data.get('alpha', defaults.alpha),
        tint=data.get('tint', defaults.tint),
        z_index=data.get('zIndex', 0),
        snap_position=SnapPosition.ABOVE if use_above else SnapPosition.BELOW,
        snap_above_y_offset=data.get('snapAboveYOffset', 0),
        manual_horizontal_offset=data.get('manualHorizontalOffset', 0),
        manual_diagonal_north_east_offset=data.get('manualDiagonalNorthEastOffset', 0),
        manual_diagonal_north_west_offset=data.get('manualDiagonalNorthWestOffset', 0),
        relative_along_edge_offset=data.get('relativeAlongEdgeOffset', 0),
        relative_toward_center_offset=data.get('relativeTowardCenterOffset', 0),
        relative_diagonal_a_offset=data.get(
            'relativeDiagonalAOffset', 0 if is_tile else WALL_DIAGONAL_A_DEFAULT),
        relative_diagonal_b_offset=data.get(
            'relativeDiagonalBOffset', 0 if is_tile else WALL_DIAGONAL_B_DEFAULT),
        a_division=DiagonalADivision.HALVE_NORTH_EAST if use_a_division else DiagonalADivision.FULL,
        use_sprite_trimming_for_walls=data.get(
            'useSpriteTrimmingForWalls', defaults.use_sprite_trimming_for_walls),
        sprite_bounding_box=bounding_box_from_dict(data.get('spriteBoundingBox')),
    )


# ========================================
# Documents
# ========================================

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class SpriteConfiguration:
    sprite_name: str
    sprite_type: str
    behavior: DirectionalBehavior
    version: str = CONFIG_SCHEMA_VERSION
    last_modified: str = ''
    sprite_bounding_box: Optional[SpriteBoundingBox] = None

    @property
    def cache_key(self) -> str:
        return f"{self.sprite_type}:{self.sprite_name}"

    @property
    def asset_type(self) -> AssetType:
        return SPRITE_TYPE_TO_ASSET_TYPE[self.sprite_type]

    def to_dict(self) -> dict:
        data = {
            'spriteName': self.sprite_name,
            'spriteType': self.sprite_type,
            'version': self.version,
            'lastModified': self.last_modified,
            'useSharedSettings': self.behavior.use_shared_settings,
            'sharedSettings': settings_to_dict(self.behavior.shared),
            'directionalSettings': {
                str(int(direction)): settings_to_dict(settings)
                for direction, settings in self.behavior.directional
            },
        }
        if self.sprite_bounding_box is not None:
            data['spriteBoundingBox'] = bounding_box_to_dict(self.sprite_bounding_box)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'SpriteConfiguration':
        """Parse a document.

        Raises:
            ValueError: If the sprite type is unknown
            KeyError: If required keys are missing
        """
        sprite_type = data['spriteType']
        if sprite_type not in SPRITE_TYPE_TO_ASSET_TYPE:
            raise ValueError(f"Unknown sprite type: {sprite_type!r}")
        asset_type = SPRITE_TYPE_TO_ASSET_TYPE[sprite_type]

        shared = settings_from_dict(data.get('sharedSettings') or {}, asset_type)
        raw_directional = data.get('directionalSettings') or {}
        parsed = {Direction.from_value(key): value for key, value in raw_directional.items()}
        directional = DirectionMap.build(
            lambda d: settings_from_dict(parsed[d], asset_type) if d in parsed else shared
        )
        mode = SettingsMode.SHARED if data.get('useSharedSettings', True) else SettingsMode.PER_DIRECTION
        if mode is SettingsMode.SHARED:
            behavior = DirectionalBehavior.create_shared(shared)
        else:
            behavior = DirectionalBehavior(mode, shared, directional)

        return cls(
            sprite_name=data['spriteName'],
            sprite_type=sprite_type,
            behavior=behavior,
            version=data.get('version', CONFIG_SCHEMA_VERSION),
            last_modified=data.get('lastModified', ''),
            sprite_bounding_box=bounding_box_from_dict(data.get('spriteBoundingBox')),
        )


def create_default_config(sprite_name: str, sprite_type: str) -> SpriteConfiguration:
    """Default document: shared mode, auto bias for blocks, classic A/B for walls."""
    asset_type = SPRITE_TYPE_TO_ASSET_TYPE[sprite_type]
    return SpriteConfiguration(
        sprite_name=sprite_name,
        sprite_type=sprite_type,
        behavior=DirectionalBehavior.create_default(asset_type),
        last_modified=_now_iso(),
    )


def with_bounding_box(config: SpriteConfiguration, box: SpriteBoundingBox) -> SpriteConfiguration:
    """Set the document box and copy it into every bundle that has none."""
    behavior = config.behavior.map_all(
        lambda settings: settings if settings.sprite_bounding_box is not None
        else replace(settings, sprite_bounding_box=box))
    return replace(config, behavior=behavior, sprite_bounding_box=box)


class SpriteConfigStore:
    """JSON file store for sprite configuration documents with an in-memory cache."""

    def __init__(self, root, provider=None):
        """
        Args:
            root: Directory holding the configs/ tree
            provider: Optional SpriteProvider used to fill in missing bounding boxes
        """
        self.root = Path(root)
        self.provider = provider
        self._cache: Dict[str, SpriteConfiguration] = {}

    def config_path(self, sprite_name: str, sprite_type: str) -> Path:
        return self.root / CONFIG_DIR_NAME / f"{sprite_type}s" / f"{sprite_name}.json"

    def get_cached(self, sprite_name: str, sprite_type: str) -> Optional[SpriteConfiguration]:
        return self._cache.get(f"{sprite_type}:{sprite_name}")

    def clear_cache(self):
        self._cache.clear()

    def load(self, sprite_name: str, sprite_type: str) -> Optional[SpriteConfiguration]:
        """Load a sprite's document, creating a default one if none exists.

        A document without a bounding box gets one from the provider (when
        attached); the document box is then copied into every bundle that
        lacks one.

        Returns:
            SpriteConfiguration, or None if the file could not be read or parsed
        """
        key = f"{sprite_type}:{sprite_name}"
        if key in self._cache:
            return self._cache[key]

        path = self.config_path(sprite_name, sprite_type)
        if not path.exists():
            logger.info(f"No config for {key}, creating default")
            config = self._fill_bounding_box(create_default_config(sprite_name, sprite_type))
            self.save(config)
            return self._cache.get(key, config)

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = SpriteConfiguration.from_dict(json.load(f))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to load config for {key}: {e}")
            return None

        if config.sprite_bounding_box is None:
            filled = self._fill_bounding_box(config)
            if filled.sprite_bounding_box is not None:
                self.save(filled)
                return self._cache.get(key, filled)
        else:
            config = with_bounding_box(config, config.sprite_bounding_box)

        self._cache[key] = config
        return config

    def _fill_bounding_box(self, config: SpriteConfiguration) -> SpriteConfiguration:
        if self.provider is None:
            return config
        box = to_sprite_bounding_box(extract_bounding_box(self.provider, config.sprite_name))
        if box is None:
            logger.warning(f"Could not compute bounding box for {config.cache_key}")
            return config
        return with_bounding_box(config, box)

    def save(self, config: SpriteConfiguration) -> bool:
        """Write a document, stamping lastModified.

        Returns:
            True on success
        """
        stamped = replace(config, last_modified=_now_iso())
        path = self.config_path(config.sprite_name, config.sprite_type)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(stamped.to_dict(), f, indent=2)
        except (OSError, TypeError) as e:
            logger.error(f"Failed to save config for {config.cache_key}: {e}")
            return False

        logger.debug(f"Saved config for {config.cache_key} to {path}")
        self._cache[config.cache_key] = stamped
        return True

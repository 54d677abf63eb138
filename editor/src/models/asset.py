"""
Isometric Asset Editor - Asset Definition Model

An AssetDefinition ties identity and categorization to the positioning data
(DirectionalBehavior) that the engine computes. Like the settings bundles it
is immutable; edits go through dataclasses.replace and produce a new object.
"""
import random
import string
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from models.direction import Direction
from models.directional import DirectionalBehavior
from models.positioning import AssetType, SnapPosition


class AssetCategory(Enum):
    TILE = 'tile'
    WALL = 'wall'
    STAIR = 'stair'
    DECORATION = 'decoration'
    FURNITURE = 'furniture'
    VEGETATION = 'vegetation'
    EFFECT = 'effect'
    UTILITY = 'utility'


class ProcessingOperationType(Enum):
    RESIZE = 'resize'
    CROP = 'crop'
    ROTATE = 'rotate'
    FLIP = 'flip'
    COLOR_ADJUST = 'color_adjust'
    FILTER = 'filter'
    OVERLAY = 'overlay'
    MASK = 'mask'
    COMPOSITE = 'composite'


@dataclass(frozen=True)
class ProcessingOperation:
    """Source image operation. Stored with the asset but not executable yet."""
    id: str
    type: ProcessingOperationType
    enabled: bool = True
    parameters: Dict[str, Any] = field(default_factory=dict)
    order: int = 0

    def apply(self, image):
        raise NotImplementedError(f"Processing operation '{self.type.value}' is coming soon")


@dataclass(frozen=True)
class ZLayerContribution:
    snap_position: SnapPosition = SnapPosition.ABOVE
    z_offset: int = 0
    affects_occlusion_calculation: bool = False
    occlusion_priority: int = 0


@dataclass(frozen=True)
class WallConfiguration:
    wall_direction: Direction = Direction.NORTH
    wall_type: str = 'default'
    blocks_movement: bool = True


@dataclass(frozen=True)
class AssetDefinition:
    id: str
    display_name: str
    category: AssetCategory
    subcategory: str
    asset_type: AssetType
    directional_behavior: DirectionalBehavior
    version: int = 1
    created_at: str = ''
    last_modified: str = ''
    source_image_path: str = ''
    source_sprite_name: str = ''
    processing_operations: Tuple[ProcessingOperation, ...] = ()
    z_contribution: ZLayerContribution = field(default_factory=ZLayerContribution)
    wall_configuration: Optional[WallConfiguration] = None
    tags: Tuple[str, ...] = ()
    is_valid: bool = False
    validation_errors: Tuple[str, ...] = ()

    def touch(self, **changes) -> 'AssetDefinition':
        """Copy with changes applied and last_modified stamped."""
        return replace(self, last_modified=_now_iso(), **changes)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_base36(value: int) -> str:
    digits = string.digits + string.ascii_lowercase
    if value == 0:
        return '0'
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(digits[rem])
    return ''.join(reversed(out))


def generate_asset_id() -> str:
    """asset_<base36 millisecond timestamp>_<8 random base36 chars>"""
    stamp = _to_base36(int(time.time() * 1000))
    suffix = ''.join(random.choices(string.digits + string.ascii_lowercase, k=8))
    return f"asset_{stamp}_{suffix}"


def asset_type_for_category(category: AssetCategory) -> AssetType:
    if category is AssetCategory.WALL:
        return AssetType.WALL
    if category is AssetCategory.STAIR:
        return AssetType.STAIR
    return AssetType.TILE


def create_default_asset(category: AssetCategory = AssetCategory.TILE,
                         subcategory: str = 'floor') -> AssetDefinition:
    """New, not-yet-valid asset in shared mode with type defaults."""
    asset_type = asset_type_for_category(category)
    now = _now_iso()
    return AssetDefinition(
        id=generate_asset_id(),
        display_name='New Asset',
        category=category,
        subcategory=subcategory,
        asset_type=asset_type,
        directional_behavior=DirectionalBehavior.create_default(asset_type),
        created_at=now,
        last_modified=now,
        wall_configuration=WallConfiguration() if category is AssetCategory.WALL else None,
        is_valid=False,
        validation_errors=('Source image not selected',),
    )


def validate_asset(asset: AssetDefinition) -> ValidationResult:
    """Collect human-readable problems with an asset. Never raises."""
    errors = []
    if not (asset.display_name or '').strip():
        errors.append('Display name is required')
    if not asset.source_image_path:
        errors.append('Source image is required')
    if not asset.category:
        errors.append('Category is required')
    if not (asset.subcategory or '').strip():
        errors.append('Subcategory is required')
    return ValidationResult(is_valid=not errors, errors=errors)


def with_validation(asset: AssetDefinition) -> AssetDefinition:
    result = validate_asset(asset)
    return replace(asset, is_valid=result.is_valid, validation_errors=tuple(result.errors))

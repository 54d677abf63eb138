"""
Isometric Asset Editor - View Scaling (Ratio Lock)

Grid diamond width, global sprite scale and the per-level vertical offsets
of the Z layers are kept proportional while the ratio lock is on. Every
locked edit derives the dependent quantities from the BASE values, never
from the previous current values, so repeated edits do not accumulate
rounding error.

ViewScalingState is immutable. Each operation returns a new state.
"""
import logging
import math
from dataclasses import dataclass, replace
from typing import Tuple

from constants import (
    BASE_GRID_DIAMOND_WIDTH, BASE_SPRITE_SCALE, DEFAULT_RATIO_LOCKED,
    DEFAULT_Z_LAYER_SETTINGS, SPRITE_SCALE_MIN, SPRITE_SCALE_MAX,
)


_logger = logging.getLogger('ViewScaling')


@dataclass(frozen=True)
class ZLayerHeight:
    z: int
    vertical_offset: int
    name: str
    color: int

    def to_dict(self) -> dict:
        return {'z': self.z, 'verticalOffset': self.vertical_offset, 'name': self.name, 'color': self.color}

    @classmethod
    def from_dict(cls, data: dict) -> 'ZLayerHeight':
        return cls(
            z=int(data['z']),
            vertical_offset=int(data.get('verticalOffset', 0)),
            name=data.get('name', f"Level {data['z']}"),
            color=int(data.get('color', 0x444444)),
        )


def default_z_layer_heights() -> Tuple[ZLayerHeight, ...]:
    return tuple(ZLayerHeight.from_dict(entry) for entry in DEFAULT_Z_LAYER_SETTINGS)


def _clamp_sprite_scale(value: float) -> float:
    return max(SPRITE_SCALE_MIN, min(SPRITE_SCALE_MAX, float(value)))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _scale_layers(base: Tuple[ZLayerHeight, ...], ratio: float) -> Tuple[ZLayerHeight, ...]:
    return tuple(replace(layer, vertical_offset=_round_half_up(layer.vertical_offset * ratio)) for layer in base)


@dataclass(frozen=True)
class ViewScalingState:
    """Grid/sprite/Z-layer scale read by the renderer."""
    grid_diamond_width: float = BASE_GRID_DIAMOND_WIDTH
    sprite_scale: float = BASE_SPRITE_SCALE
    base_grid_diamond_width: float = BASE_GRID_DIAMOND_WIDTH
    base_sprite_scale: float = BASE_SPRITE_SCALE
    is_ratio_locked: bool = DEFAULT_RATIO_LOCKED
    z_layer_heights: Tuple[ZLayerHeight, ...] = default_z_layer_heights()
    base_z_layer_heights: Tuple[ZLayerHeight, ...] = default_z_layer_heights()

    @property
    def ratio(self) -> float:
        """Current grid width relative to its base."""
        if not self.base_grid_diamond_width:
            return 1.0
        return self.grid_diamond_width / self.base_grid_diamond_width

    # ========================================
    # Driving edits
    # ========================================

    def set_grid_diamond_width(self, width: float) -> 'ViewScalingState':
        """Change the grid width; when locked, sprite scale and layer offsets follow.

        Args:
            width: New diamond width in pixels

        Returns:
            New state
        """
        if not self.is_ratio_locked:
            _logger.debug(f"Grid width {width} (unlocked, base updated)")
            return replace(self, grid_diamond_width=width, base_grid_diamond_width=width)

        ratio = width / self.base_grid_diamond_width
        _logger.debug(f"Grid width {width} (locked, ratio {ratio:.4f})")
        return replace(
            self,
            grid_diamond_width=width,
            sprite_scale=self.base_sprite_scale * ratio,
            z_layer_heights=_scale_layers(self.base_z_layer_heights, ratio),
        )

    def set_sprite_scale(self, scale: float) -> 'ViewScalingState':
        """Change the sprite scale (clamped to 0.1-5.0); when locked, grid width
        (rounded to whole pixels) and layer offsets follow.
        """
        scale = _clamp_sprite_scale(scale)
        if not self.is_ratio_locked:
            _logger.debug(f"Sprite scale {scale} (unlocked, base updated)")
            return replace(self, sprite_scale=scale, base_sprite_scale=scale)

        ratio = scale / self.base_sprite_scale
        _logger.debug(f"Sprite scale {scale} (locked, ratio {ratio:.4f})")
        return replace(
            self,
            sprite_scale=scale,
            grid_diamond_width=_round_half_up(self.base_grid_diamond_width * ratio),
            z_layer_heights=_scale_layers(self.base_z_layer_heights, ratio),
        )

    def set_z_layer_height(self, index: int, vertical_offset: int) -> 'ViewScalingState':
        """Set one layer's offset. Unlocked edits also move that layer's base."""
        if not 0 <= index < len(self.z_layer_heights):
            _logger.warning(f"Ignoring Z layer height for unknown layer index {index}")
            return self

        layers = list(self.z_layer_heights)
        layers[index] = replace(layers[index], vertical_offset=vertical_offset)
        changes = {'z_layer_heights': tuple(layers)}
        if not self.is_ratio_locked and index < len(self.base_z_layer_heights):
            base = list(self.base_z_layer_heights)
            base[index] = replace(base[index], vertical_offset=vertical_offset)
            changes['base_z_layer_heights'] = tuple(base)
        return replace(self, **changes)

    # ========================================
    # Base management
    # ========================================

    def capture_base_values(self) -> 'ViewScalingState':
        """Snapshot the current values as the new base."""
        return replace(
            self,
            base_grid_diamond_width=self.grid_diamond_width,
            base_sprite_scale=self.sprite_scale,
            base_z_layer_heights=self.z_layer_heights,
        )

    def reset_base_values(self) -> 'ViewScalingState':
        """Restore factory values for both base and current."""
        factory = default_z_layer_heights()
        return replace(
            self,
            grid_diamond_width=BASE_GRID_DIAMOND_WIDTH,
            sprite_scale=BASE_SPRITE_SCALE,
            base_grid_diamond_width=BASE_GRID_DIAMOND_WIDTH,
            base_sprite_scale=BASE_SPRITE_SCALE,
            z_layer_heights=factory,
            base_z_layer_heights=factory,
        )

    def reset_z_layer_heights(self) -> 'ViewScalingState':
        factory = default_z_layer_heights()
        return replace(self, z_layer_heights=factory, base_z_layer_heights=factory)

    def set_ratio_locked(self, locked: bool) -> 'ViewScalingState':
        return replace(self, is_ratio_locked=bool(locked))

    def toggle_ratio_lock(self) -> 'ViewScalingState':
        return self.set_ratio_locked(not self.is_ratio_locked)

    def to_dict(self) -> dict:
        return {
            'gridDiamondWidth': self.grid_diamond_width,
            'spriteScale': self.sprite_scale,
            'baseGridDiamondWidth': self.base_grid_diamond_width,
            'baseSpriteScale': self.base_sprite_scale,
            'isRatioLocked': self.is_ratio_locked,
            'zLayerHeights': [layer.to_dict() for layer in self.z_layer_heights],
            'baseZLayerHeights': [layer.to_dict() for layer in self.base_z_layer_heights],
        }

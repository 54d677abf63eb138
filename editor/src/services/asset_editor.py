"""
Isometric Asset Editor - Asset Editing Session

AssetEditor owns the asset being authored and the direction currently
selected in the editor. Every mutation builds a new AssetDefinition (the
models are immutable) and then notifies listeners with it.

Sprite-derived values (auto bias, bounding box) are recomputed on source
assignment, on explicit recalculation and on a rounding-policy change.
Failures to read the sprite are reported as diagnostics; defaults are kept.
"""

import logging
import time
from dataclasses import replace

from constants import PLACEHOLDER_SPRITE_HEIGHT, PLACEHOLDER_SPRITE_WIDTH
from models.asset import AssetDefinition, ValidationResult, validate_asset, with_validation
from models.commands import RestoreDefaultAnchors, SettingsCommand, apply_command
from models.direction import Direction
from models.directional import SettingsMode
from models.positioning import AssetType, BiasSource, InvalidSettingsError, PositioningSettings
from models.transform import Size
from services.auto_bias import (
    AutoPositioning, RoundingPolicy, apply_auto_positioning, calculate_auto_positioning,
)
from services.bounding_box import extract_with_retry, to_sprite_bounding_box
from utils import metadata_cache
from utils.logger import loggerRaise, report_diagnostic


class AssetEditor:
    """Editing session for one asset"""

    def __init__(self, asset: AssetDefinition, provider=None,
                 policy: RoundingPolicy = RoundingPolicy.SNAP_TO_NEAREST, sleep=time.sleep):
        """
        Args:
            asset: Asset to edit
            provider: SpriteProvider for frame sizes and pixels (optional)
            policy: Global rounding policy for the auto bias
            sleep: Sleep used between bounding box retries
        """
        self.asset = asset
        self.provider = provider
        self.policy = RoundingPolicy(policy)
        self.selected_direction = Direction.NORTH
        self._sleep = sleep
        self._listeners = []
        self._logger = logging.getLogger('AssetEditor')

    # ========================================
    # Listeners
    # ========================================

    def add_listener(self, callback):
        """
        Add a listener to be notified when the asset changes

        Args:
            callback: Function receiving the new AssetDefinition
        """
        self._listeners.append(callback)

    def remove_listener(self, callback):
        """Remove a listener"""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify_listeners(self):
        for callback in self._listeners:
            try:
                callback(self.asset)
            except Exception as e:
                self._logger.error(f"Error notifying listener: {e}")

    def _set_asset(self, asset: AssetDefinition):
        self.asset = asset
        self._notify_listeners()

    def _update_behavior(self, behavior):
        self._set_asset(self.asset.touch(directional_behavior=behavior))

    # ========================================
    # Selection and reads
    # ========================================

    @property
    def asset_type(self) -> AssetType:
        return self.asset.asset_type

    def select_direction(self, direction):
        self.selected_direction = Direction.from_value(direction)
        self._logger.debug(f"Selected direction {self.selected_direction.name}")

    def current_settings(self) -> PositioningSettings:
        return self.asset.directional_behavior.current(self.selected_direction)

    def settings_for(self, direction) -> PositioningSettings:
        return self.asset.directional_behavior.resolve(Direction.from_value(direction))

    # ========================================
    # Edits
    # ========================================

    def apply(self, command: SettingsCommand) -> PositioningSettings:
        """Apply a typed update to the bundle being edited.

        Returns:
            The new current bundle

        Raises:
            InvalidSettingsError: If the command does not fit the asset type
        """
        try:
            behavior = self.asset.directional_behavior.update_current(
                self.selected_direction, lambda settings: apply_command(settings, command))
        except InvalidSettingsError as e:
            loggerRaise(e, f"Cannot apply {type(command).__name__} to a {self.asset_type.value}", "Invalid setting")
        self._logger.debug(f"Applied {type(command).__name__} ({self.selected_direction.name})")
        self._update_behavior(behavior)
        return self.current_settings()

    def restore_default_anchors(self) -> PositioningSettings:
        """Reset anchors to the asset type defaults.

        Walls in per-direction mode get the edge matching the selected direction.
        """
        behavior = self.asset.directional_behavior
        wall_direction = None
        if self.asset_type is AssetType.WALL and behavior.mode is SettingsMode.PER_DIRECTION:
            wall_direction = self.selected_direction
        return self.apply(RestoreDefaultAnchors(wall_direction))

    def toggle_shared_mode(self) -> SettingsMode:
        behavior = self.asset.directional_behavior.toggle_mode(self.selected_direction)
        self._logger.info(f"Settings mode is now {behavior.mode.value}")
        self._update_behavior(behavior)
        return behavior.mode

    # ========================================
    # Sprite-derived values
    # ========================================

    def _frame_size(self, sprite_name: str) -> Size:
        size = self.provider.get_frame_size(sprite_name) if self.provider and sprite_name else None
        if size is None:
            self._logger.warning(f"Frame size unavailable for {sprite_name!r}, using placeholder")
            return Size(PLACEHOLDER_SPRITE_WIDTH, PLACEHOLDER_SPRITE_HEIGHT)
        return size

    def _auto_positioning(self, sprite_name: str) -> AutoPositioning:
        size = self._frame_size(sprite_name)
        return calculate_auto_positioning(size.width, size.height, self.asset_type, self.policy)

    def _extract_box(self, sprite_name: str):
        if self.provider is None or not sprite_name:
            return None
        result = extract_with_retry(self.provider, sprite_name, sleep=self._sleep)
        if not result.ok:
            report_diagnostic('Bounding box unavailable', f"{sprite_name}: {result.error}")
            return None
        return to_sprite_bounding_box(result)

    def assign_source_sprite(self, sprite_name: str, source_path: str = None) -> AssetDefinition:
        """Use a sprite as the asset's source.

        The auto bias and the bounding box are computed once and written into
        the shared bundle and every directional bundle; the asset is then
        revalidated.
        """
        positioning = self._auto_positioning(sprite_name)
        box = self._extract_box(sprite_name)

        def update(settings):
            if box is not None:
                settings = replace(settings, sprite_bounding_box=box)
            return apply_auto_positioning(settings, positioning)

        behavior = self.asset.directional_behavior.map_all(update)
        asset = self.asset.touch(
            directional_behavior=behavior,
            source_sprite_name=sprite_name,
            source_image_path=source_path or sprite_name,
        )
        self._logger.info(f"Assigned source sprite {sprite_name}: bias {positioning.auto_computed_vertical_bias}")
        self._set_asset(with_validation(asset))
        return self.asset

    def recalculate(self) -> PositioningSettings:
        """Recompute the auto bias for the bundle being edited only."""
        positioning = self._auto_positioning(self.asset.source_sprite_name)
        behavior = self.asset.directional_behavior.update_current(
            self.selected_direction, lambda settings: apply_auto_positioning(settings, positioning))
        self._update_behavior(behavior)
        return self.current_settings()

    def refresh_bounding_box(self) -> bool:
        """Re-extract the bounding box, bypassing the cache.

        Returns:
            True if a new box was stored in every bundle
        """
        sprite_name = self.asset.source_sprite_name
        metadata_cache.forget_bounding_box(sprite_name)
        box = self._extract_box(sprite_name)
        if box is None:
            return False
        behavior = self.asset.directional_behavior.map_all(
            lambda settings: replace(settings, sprite_bounding_box=box))
        self._update_behavior(behavior)
        return True

    def set_rounding_policy(self, policy: RoundingPolicy):
        """Change the global rounding policy and recompute every AUTO bundle."""
        self.policy = RoundingPolicy(policy)
        if not self.asset.source_sprite_name:
            return
        bias = self._auto_positioning(self.asset.source_sprite_name).auto_computed_vertical_bias

        def update(settings):
            if settings.bias_source is not BiasSource.AUTO:
                return settings
            return replace(settings, auto_computed_vertical_bias=bias)

        self._logger.debug(f"Rounding policy {self.policy.value}: auto bias {bias}")
        self._update_behavior(self.asset.directional_behavior.map_all(update))

    def validate(self) -> ValidationResult:
        result = validate_asset(self.asset)
        self._set_asset(with_validation(self.asset))
        return result

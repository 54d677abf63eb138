"""
Shared vs per-direction positioning settings.

DirectionalBehavior always holds all four directional bundles. In shared mode
they mirror the shared bundle, so switching to per-direction mode never loses
data; switching back to shared promotes the selected direction's bundle.

Every read and write of "the current bundle" goes through the same branch on
the mode, which is what keeps the mirrors in sync.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional

from models.direction import Direction, DirectionMap
from models.positioning import AssetType, PositioningSettings, create_default_settings


_logger = logging.getLogger('DirectionalBehavior')

SettingsUpdate = Callable[[PositioningSettings], PositioningSettings]


class SettingsMode(Enum):
    SHARED = 'shared'
    PER_DIRECTION = 'per_direction'


@dataclass(frozen=True)
class DirectionalBehavior:
    mode: SettingsMode
    shared: PositioningSettings
    directional: DirectionMap

    @classmethod
    def create_shared(cls, shared: PositioningSettings) -> 'DirectionalBehavior':
        """Shared-mode behavior whose four directional entries mirror shared."""
        return cls(SettingsMode.SHARED, shared, DirectionMap.filled(shared))

    @classmethod
    def create_default(cls, asset_type: AssetType) -> 'DirectionalBehavior':
        """Shared-mode behavior with asset-type defaults.

        The shared bundle uses the type's generic defaults; the directional
        entries mirror it until the user switches to per-direction mode.
        """
        return cls.create_shared(create_default_settings(asset_type))

    @property
    def use_shared_settings(self) -> bool:
        return self.mode is SettingsMode.SHARED

    # ========================================
    # Resolution
    # ========================================

    def resolve(self, direction: Direction) -> PositioningSettings:
        """Effective bundle for rendering a sprite facing direction."""
        if self.mode is SettingsMode.SHARED:
            return self.shared
        return self.directional[direction]

    def current(self, selected: Direction) -> PositioningSettings:
        """Bundle being edited for the currently selected direction."""
        return self.resolve(selected)

    # ========================================
    # Mutation (returns new objects)
    # ========================================

    def update_current(self, selected: Direction, update: SettingsUpdate) -> 'DirectionalBehavior':
        """Apply update to the bundle being edited.

        Shared mode writes the shared bundle and refreshes the mirrors;
        per-direction mode writes exactly the selected direction.
        """
        if self.mode is SettingsMode.SHARED:
            new_shared = update(self.shared)
            return replace(self, shared=new_shared, directional=DirectionMap.filled(new_shared))
        new_bundle = update(self.directional[selected])
        return replace(self, directional=self.directional.replace(selected, new_bundle))

    def map_all(self, update: SettingsUpdate) -> 'DirectionalBehavior':
        """Apply update to the shared bundle and every directional bundle."""
        return replace(self, shared=update(self.shared), directional=self.directional.map(update))

    def with_mode(self, mode: SettingsMode, selected: Optional[Direction] = None) -> 'DirectionalBehavior':
        """Switch mode.

        PER_DIRECTION -> SHARED copies the selected direction's bundle into
        shared and into all four directional entries. SHARED -> PER_DIRECTION
        only flips the mode; the mirrors already hold the shared values.
        """
        if mode is self.mode:
            return self
        if mode is SettingsMode.SHARED:
            if selected is None:
                raise ValueError("A selected direction is required when switching to shared mode")
            promoted = self.directional[selected]
            _logger.debug(f"Switching to shared settings from {Direction(selected).name}")
            return DirectionalBehavior(SettingsMode.SHARED, promoted, DirectionMap.filled(promoted))
        _logger.debug("Switching to per-direction settings")
        return replace(self, mode=SettingsMode.PER_DIRECTION)

    def toggle_mode(self, selected: Direction) -> 'DirectionalBehavior':
        target = SettingsMode.PER_DIRECTION if self.mode is SettingsMode.SHARED else SettingsMode.SHARED
        return self.with_mode(target, selected)

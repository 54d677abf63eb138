"""
Isometric Asset Editor - Data Models

This module contains the immutable data model for asset positioning.
This is the MODEL layer; the engines that compute values live in services/.

Public API: the settings bundle, directional behavior, asset definition and
view scaling state.
"""

from .direction import Direction, DirectionMap
from .positioning import (
    AssetType, BiasSource, InvalidSettingsError, PositioningSettings,
    SpriteBoundingBox, create_default_settings,
)
from .directional import DirectionalBehavior, SettingsMode
from .asset import AssetDefinition, create_default_asset, validate_asset
from .view_scaling import ViewScalingState

__all__ = [
    'Direction', 'DirectionMap',
    'AssetType', 'BiasSource', 'InvalidSettingsError', 'PositioningSettings',
    'SpriteBoundingBox', 'create_default_settings',
    'DirectionalBehavior', 'SettingsMode',
    'AssetDefinition', 'create_default_asset', 'validate_asset',
    'ViewScalingState',
]

"""
Tests for the auto-computed vertical bias.

raw_bias = height - width / 2, rounded by the global policy.
"""
import pytest
from dataclasses import replace

from constants import GENERIC_SNAP_TARGETS, TILE_SNAP_TARGETS
from models.positioning import AssetType, BiasSource
from services.auto_bias import (
    RoundingPolicy, apply_auto_positioning, calculate_auto_positioning,
    calculate_sprite_type_positioning, compute_vertical_bias, raw_vertical_bias,
    recalculate_all, snap_to_nearest,
)


# ══════════════════════════════════════════════════════════════════════════
# Rounding Policies
# ══════════════════════════════════════════════════════════════════════════

class TestRoundingPolicies:

    def test_raw_bias(self):
        assert raw_vertical_bias(128, 196) == 132
        assert raw_vertical_bias(101, 100) == 49.5

    def test_round_down_128x196(self):
        result = calculate_sprite_type_positioning(128, 196, RoundingPolicy.ROUND_DOWN)
        assert result.auto_computed_vertical_bias == 132
        assert result.horizontal_offset == 1

    def test_snap_128x196_generic_table(self):
        # |132 - 36| = 96, |132 - 196| = 64
        assert compute_vertical_bias(128, 196, RoundingPolicy.SNAP_TO_NEAREST, GENERIC_SNAP_TARGETS) == 196

    @pytest.mark.parametrize("policy,expected", [
        (RoundingPolicy.ROUND_DOWN, 49),
        (RoundingPolicy.ROUND_UP, 50),
    ])
    def test_fractional_raw_bias(self, policy, expected):
        assert compute_vertical_bias(101, 100, policy) == expected

    def test_policy_accepts_string_value(self):
        assert compute_vertical_bias(101, 100, 'round_up') == 50

    def test_result_is_int(self):
        assert isinstance(compute_vertical_bias(128, 196, RoundingPolicy.SNAP_TO_NEAREST), int)


# ══════════════════════════════════════════════════════════════════════════
# Snap To Nearest
# ══════════════════════════════════════════════════════════════════════════

class TestSnapToNearest:

    def test_tie_goes_to_first_target(self):
        assert snap_to_nearest(116, (36, 196)) == 36

    def test_tie_from_sprite_dimensions(self):
        # 196 - 160 / 2 = 116, equidistant from 36 and 196
        assert compute_vertical_bias(160, 196, RoundingPolicy.SNAP_TO_NEAREST) == 36

    @pytest.mark.parametrize("value,expected", [
        (0, 36),
        (115, 36),
        (117, 196),
        (500, 196),
        (-20, 36),
    ])
    def test_nearest(self, value, expected):
        assert snap_to_nearest(value, GENERIC_SNAP_TARGETS) == expected

    def test_empty_targets_raise(self):
        with pytest.raises(ValueError):
            snap_to_nearest(10, ())


# ══════════════════════════════════════════════════════════════════════════
# Asset-Level Calculator
# ══════════════════════════════════════════════════════════════════════════

class TestCalculateAutoPositioning:

    def test_tiles_use_tile_table(self):
        # |132 - 44| = 88, |132 - 204| = 72
        result = calculate_auto_positioning(128, 196, AssetType.TILE, RoundingPolicy.SNAP_TO_NEAREST)
        assert result.auto_computed_vertical_bias == 204
        assert result.raw_bias == 132

    def test_tile_table_tie(self):
        # 200 - 152 / 2 = 124, equidistant from 44 and 204
        result = calculate_auto_positioning(152, 200, AssetType.TILE, RoundingPolicy.SNAP_TO_NEAREST)
        assert result.auto_computed_vertical_bias == TILE_SNAP_TARGETS[0]

    def test_other_types_use_generic_table(self):
        result = calculate_auto_positioning(128, 196, AssetType.WALL, RoundingPolicy.SNAP_TO_NEAREST)
        assert result.auto_computed_vertical_bias == 196

    def test_round_down_ignores_table(self):
        result = calculate_auto_positioning(128, 196, AssetType.TILE, RoundingPolicy.ROUND_DOWN)
        assert result.auto_computed_vertical_bias == 132

    @pytest.mark.parametrize("asset_type,expected", [
        (AssetType.TILE, 1),
        (AssetType.WALL, 0),
        (AssetType.STAIR, 0),
    ])
    def test_horizontal_offset(self, asset_type, expected):
        assert calculate_auto_positioning(128, 196, asset_type).horizontal_offset == expected

    def test_placeholder_size(self):
        # 100 - 50 = 50 -> nearest of (44, 204)
        assert calculate_auto_positioning().auto_computed_vertical_bias == 44

    def test_explicit_table(self):
        result = calculate_auto_positioning(128, 196, AssetType.TILE, snap_targets=(100, 140))
        assert result.auto_computed_vertical_bias == 140

    def test_idempotent(self):
        first = calculate_auto_positioning(77, 203, AssetType.TILE, RoundingPolicy.ROUND_UP)
        second = calculate_auto_positioning(77, 203, AssetType.TILE, RoundingPolicy.ROUND_UP)
        assert first == second


# ══════════════════════════════════════════════════════════════════════════
# Writing Results Into Bundles
# ══════════════════════════════════════════════════════════════════════════

class TestApplyAutoPositioning:

    def test_writes_auto_and_manual_bias(self, tile_settings):
        result = calculate_auto_positioning(128, 196, AssetType.TILE, RoundingPolicy.ROUND_DOWN)
        settings = apply_auto_positioning(tile_settings, result)
        assert settings.auto_computed_vertical_bias == 132
        assert settings.manual_vertical_bias == 132
        assert settings.horizontal_offset == 1
        assert settings.effective_vertical_bias == 132

    def test_does_not_touch_vertical_offset(self, tile_settings):
        settings = replace(tile_settings, vertical_offset=7)
        result = calculate_auto_positioning(128, 196, AssetType.TILE)
        assert apply_auto_positioning(settings, result).vertical_offset == 7

    def test_does_not_mutate_input(self, tile_settings):
        apply_auto_positioning(tile_settings, calculate_auto_positioning(128, 196))
        assert tile_settings.auto_computed_vertical_bias == 0


class TestRecalculateAll:

    def test_only_auto_bundles_change(self, provider, tile_settings, wall_settings):
        manual = replace(tile_settings, bias_source=BiasSource.MANUAL, auto_computed_vertical_bias=5)
        configs = {
            'tall_block': tile_settings,
            'crate': manual,
            'stone_wall': wall_settings,
        }
        updated = recalculate_all(configs, provider, RoundingPolicy.ROUND_DOWN)
        assert updated['tall_block'].auto_computed_vertical_bias == 132
        assert updated['crate'] is manual
        assert updated['stone_wall'] is wall_settings

    def test_missing_sprite_keeps_bundle(self, provider, tile_settings):
        settings = replace(tile_settings, auto_computed_vertical_bias=12)
        updated = recalculate_all({'missing': settings}, provider, RoundingPolicy.ROUND_DOWN)
        assert updated['missing'].auto_computed_vertical_bias == 12

    def test_policy_switch(self, provider, tile_settings):
        configs = {'tall_block': tile_settings}
        down = recalculate_all(configs, provider, RoundingPolicy.ROUND_DOWN)
        snapped = recalculate_all(down, provider, RoundingPolicy.SNAP_TO_NEAREST)
        assert down['tall_block'].auto_computed_vertical_bias == 132
        assert snapped['tall_block'].auto_computed_vertical_bias == 196

    def test_input_mapping_untouched(self, provider, tile_settings):
        configs = {'tall_block': tile_settings}
        recalculate_all(configs, provider, RoundingPolicy.ROUND_DOWN)
        assert configs['tall_block'] is tile_settings

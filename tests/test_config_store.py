"""
Tests for the per-sprite JSON configuration store.

Documents live at <root>/configs/<spriteType>s/<spriteName>.json, use the
editor's camelCase keys and key directional settings by "0".."3".
"""
import json
import pytest
from dataclasses import replace

from models.anchors import GridAnchorPoint, SpriteAnchorPoint
from models.commands import SetGridAnchor, SetOffsets, SetWallOffsets, apply_command
from models.direction import Direction
from models.directional import SettingsMode
from models.positioning import AssetType, BiasSource, DiagonalADivision, SpriteBoundingBox
from models.transform import Rect, Size, Vec2
from services.anchor_resolver import resolve_anchors
from services.config_store import (
    SpriteConfigStore, SpriteConfiguration, create_default_config, settings_from_dict, settings_to_dict,
)


# ══════════════════════════════════════════════════════════════════════════
# Default Documents
# ══════════════════════════════════════════════════════════════════════════

class TestDefaultCreation:

    def test_path_layout(self, config_store, tmp_path):
        assert config_store.config_path('stone', 'block') == tmp_path / 'configs' / 'blocks' / 'stone.json'
        assert config_store.config_path('brick', 'wall') == tmp_path / 'configs' / 'walls' / 'brick.json'

    def test_missing_file_creates_default(self, config_store):
        config = config_store.load('stone', 'block')
        assert config is not None
        assert config_store.config_path('stone', 'block').is_file()
        assert config.behavior.mode is SettingsMode.SHARED
        assert config.behavior.shared.bias_source is BiasSource.AUTO
        assert config.version == '1.0.0'
        assert config.last_modified

    def test_default_wall(self, config_store):
        shared = config_store.load('brick', 'wall').behavior.shared
        assert shared.asset_type is AssetType.WALL
        assert shared.bias_source is BiasSource.MANUAL
        assert (shared.relative_diagonal_a_offset, shared.relative_diagonal_b_offset) == (8, 3)
        assert shared.a_division is DiagonalADivision.HALVE_NORTH_EAST
        assert shared.use_sprite_trimming_for_walls is True
        assert shared.grid_anchor.point is GridAnchorPoint.SOUTH_EDGE

    def test_document_keys(self, config_store):
        config_store.load('stone', 'block')
        with open(config_store.config_path('stone', 'block'), encoding='utf-8') as f:
            data = json.load(f)
        assert data['spriteName'] == 'stone'
        assert data['spriteType'] == 'block'
        assert data['useSharedSettings'] is True
        assert sorted(data['directionalSettings']) == ['0', '1', '2', '3']
        shared = data['sharedSettings']
        assert shared['useAutoComputed'] is True
        assert shared['useAbovePositioning'] is True
        assert shared['gridAnchor']['gridAnchorPoint'] == 'center'
        assert shared['spriteAnchor']['useBoundingBoxAnchor'] is True


# ══════════════════════════════════════════════════════════════════════════
# Load / Save
# ══════════════════════════════════════════════════════════════════════════

class TestLoadSave:

    def test_cache_hit(self, config_store):
        first = config_store.load('stone', 'block')
        assert config_store.load('stone', 'block') is first
        assert config_store.get_cached('stone', 'block') is first

    def test_save_stamps_last_modified(self, config_store):
        config = create_default_config('stone', 'block')
        config = SpriteConfiguration(config.sprite_name, config.sprite_type, config.behavior)
        assert config.last_modified == ''
        assert config_store.save(config)
        assert config_store.get_cached('stone', 'block').last_modified != ''

    def test_per_direction_round_trip(self, config_store):
        config = create_default_config('brick', 'wall')
        behavior = config.behavior.with_mode(SettingsMode.PER_DIRECTION)
        behavior = behavior.update_current(
            Direction.EAST, lambda s: apply_command(s, SetWallOffsets(along_edge=6, a_division=DiagonalADivision.FULL)))
        behavior = behavior.update_current(
            Direction.WEST, lambda s: apply_command(s, SetGridAnchor(GridAnchorPoint.CUSTOM, 0.1, 0.9)))
        config = SpriteConfiguration(config.sprite_name, config.sprite_type, behavior)

        assert config_store.save(config)
        config_store.clear_cache()
        loaded = config_store.load('brick', 'wall')

        assert loaded.behavior == behavior
        assert loaded.behavior.resolve(Direction.EAST).relative_along_edge_offset == 6
        assert loaded.behavior.resolve(Direction.WEST).grid_anchor.coords == (0.1, 0.9)
        assert loaded.behavior.resolve(Direction.NORTH) == behavior.shared

    def test_shared_round_trip(self, config_store):
        config = create_default_config('stone', 'block')
        behavior = config.behavior.update_current(Direction.NORTH, lambda s: apply_command(s, SetOffsets(vertical=3)))
        config_store.save(SpriteConfiguration('stone', 'block', behavior))
        config_store.clear_cache()
        loaded = config_store.load('stone', 'block')
        for _, settings in loaded.behavior.directional:
            assert settings.vertical_offset == 3

    def test_fills_missing_bounding_box(self, config_store):
        config_store.save(create_default_config('crate', 'block'))
        config_store.clear_cache()
        loaded = config_store.load('crate', 'block')
        box = loaded.sprite_bounding_box
        assert (box.bounding_x, box.bounding_y, box.bounding_width, box.bounding_height) == (10, 20, 60, 50)
        with open(config_store.config_path('crate', 'block'), encoding='utf-8') as f:
            assert json.load(f)['spriteBoundingBox']['boundingX'] == 10
        for settings in (loaded.behavior.shared,) + loaded.behavior.directional.values():
            assert settings.sprite_bounding_box == box
        assert resolve_anchors(loaded.behavior.shared).sprite_pixel == Vec2(40, 70)

    def test_default_document_gets_bounding_box(self, config_store):
        config = config_store.load('crate', 'block')
        assert config.sprite_bounding_box.bounding_width == 60
        assert config.behavior.directional[Direction.WEST].sprite_bounding_box.bounding_height == 50

    def test_document_box_copied_into_bundles(self, tmp_path):
        box = SpriteBoundingBox.from_rect(Size(100, 100), Rect(10, 20, 60, 50))
        store = SpriteConfigStore(tmp_path)
        store.save(replace(create_default_config('crate', 'block'), sprite_bounding_box=box))
        store.clear_cache()
        loaded = store.load('crate', 'block')
        assert loaded.behavior.shared.sprite_bounding_box == box
        assert loaded.behavior.directional[Direction.EAST].sprite_bounding_box == box

    def test_corrupt_document(self, config_store):
        path = config_store.config_path('stone', 'block')
        path.parent.mkdir(parents=True)
        path.write_text('{ not json', encoding='utf-8')
        assert config_store.load('stone', 'block') is None

    def test_unknown_sprite_type_in_document(self, config_store):
        path = config_store.config_path('stone', 'block')
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({'spriteName': 'stone', 'spriteType': 'roof'}), encoding='utf-8')
        assert config_store.load('stone', 'block') is None

    def test_save_failure(self, config_store, tmp_path):
        (tmp_path / 'configs').mkdir()
        (tmp_path / 'configs' / 'blocks').write_text('in the way')
        assert config_store.save(create_default_config('stone', 'block')) is False
        assert config_store.get_cached('stone', 'block') is None


# ══════════════════════════════════════════════════════════════════════════
# Settings Dictionaries
# ══════════════════════════════════════════════════════════════════════════

class TestSettingsDict:

    def test_missing_keys_take_defaults(self):
        wall = settings_from_dict({}, AssetType.WALL)
        assert (wall.relative_diagonal_a_offset, wall.relative_diagonal_b_offset) == (8, 3)
        assert wall.a_division is DiagonalADivision.HALVE_NORTH_EAST
        tile = settings_from_dict({}, AssetType.TILE)
        assert tile.bias_source is BiasSource.AUTO
        assert tile.relative_diagonal_a_offset == 0

    def test_wall_claiming_auto_bias_read_as_manual(self):
        wall = settings_from_dict({'useAutoComputed': True, 'manualVerticalBias': 40}, AssetType.WALL)
        assert wall.bias_source is BiasSource.MANUAL
        assert wall.effective_vertical_bias == 40

    def test_legacy_flags(self):
        settings = settings_from_dict({
            'useAbovePositioning': False,
            'useADivisionForNorthEast': False,
            'spriteAnchor': {'spriteAnchorX': 0.0, 'spriteAnchorY': 1.0, 'useBoundingBoxAnchor': False},
        }, AssetType.WALL)
        assert settings.use_above_positioning is False
        assert settings.a_division is DiagonalADivision.FULL
        assert settings.sprite_anchor.point is SpriteAnchorPoint.BOTTOM_LEFT
        assert settings.sprite_anchor.use_bounding_box_anchor is False

    def test_asset_type_from_document(self, wall_settings):
        assert settings_from_dict(settings_to_dict(wall_settings)) == wall_settings

    @pytest.mark.parametrize("sprite_type", ['block', 'wall'])
    def test_document_round_trip(self, sprite_type):
        config = create_default_config('x', sprite_type)
        assert SpriteConfiguration.from_dict(config.to_dict()) == config

    def test_unknown_sprite_type(self):
        with pytest.raises(ValueError):
            SpriteConfiguration.from_dict({'spriteName': 'x', 'spriteType': 'roof'})

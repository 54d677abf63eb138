"""
Tests for sprite placement: grid anchor offset, vertical bias, offsets,
wall offset and global view scale combined.
"""
import math
import pytest

from models.anchors import AnchorRect
from models.commands import (
    SetAnchorRect, SetAppearance, SetKeepProportions, SetManualVerticalBias, SetScale, SetSnapPosition,
    apply_command,
)
from models.direction import Direction
from models.positioning import AssetType, SnapPosition
from models.transform import Size, Vec2
from models.view_scaling import ViewScalingState
from services.auto_bias import RoundingPolicy, apply_auto_positioning, calculate_auto_positioning
from services.placement import compute_placement, placement_vertical_bias
from utils.coordinate_transforms import (
    diamond_corners, grid_point_to_pixel_offset, grid_to_isometric, isometric_to_grid,
)

R = math.sqrt(0.5)


@pytest.fixture
def biased_tile(tile_settings):
    """Tile with the 128x196 bias (132) under ROUND_DOWN"""
    result = calculate_auto_positioning(128, 196, AssetType.TILE, RoundingPolicy.ROUND_DOWN)
    return apply_auto_positioning(tile_settings, result)


# ══════════════════════════════════════════════════════════════════════════
# Coordinate Transforms
# ══════════════════════════════════════════════════════════════════════════

class TestCoordinateTransforms:

    def test_grid_to_isometric(self):
        assert grid_to_isometric(1, 0, 400) == (200, 100)
        assert grid_to_isometric(1, 1, 400) == (0, 200)

    @pytest.mark.parametrize("cell", [(0, 0), (1, 0), (3, 2), (-2, 5)])
    def test_isometric_round_trip(self, cell):
        assert isometric_to_grid(*grid_to_isometric(*cell, 400), 400) == cell

    def test_diamond_corners(self):
        corners = diamond_corners(0, 0, 400)
        assert corners['north'] == (0, -100)
        assert corners['east'] == (200, 0)

    def test_grid_point_offsets(self):
        assert grid_point_to_pixel_offset(0.5, 0.5, 400) == (0, 0)
        assert grid_point_to_pixel_offset(0.75, 0.75, 400) == (100, 50)
        assert grid_point_to_pixel_offset(0.5, 0.0, 400, zoom=2.0) == (0, -200)


# ══════════════════════════════════════════════════════════════════════════
# Tiles
# ══════════════════════════════════════════════════════════════════════════

class TestTilePlacement:

    def test_above_grid(self, biased_tile):
        placement = compute_placement(biased_tile, ViewScalingState(), canvas=Size(128, 196))
        assert placement.grid_offset == Vec2(0, 0)
        assert placement.bias_offset == 132
        assert placement.offset == Vec2(1, 132)
        assert placement.anchor == Vec2(0.5, 1.0)
        assert placement.scale == Vec2(1.0, 1.0)

    def test_below_grid(self, biased_tile):
        settings = apply_command(biased_tile, SetSnapPosition(SnapPosition.BELOW))
        placement = compute_placement(settings, ViewScalingState(), canvas=Size(128, 196))
        assert placement.bias_offset == 0
        assert placement.offset == Vec2(1, 0)

    def test_instance_snap_overrides_bundle(self, biased_tile):
        placement = compute_placement(biased_tile, ViewScalingState(), snap_position=SnapPosition.BELOW)
        assert placement.bias_offset == 0

    def test_snap_above_offset(self, biased_tile):
        settings = apply_command(biased_tile, SetSnapPosition(SnapPosition.ABOVE, snap_above_y_offset=4))
        assert compute_placement(settings, ViewScalingState()).bias_offset == 136

    def test_zero_bias_falls_back(self, tile_settings):
        assert placement_vertical_bias(tile_settings) == 36
        assert compute_placement(tile_settings, ViewScalingState()).bias_offset == 36

    def test_manual_bias(self, biased_tile):
        settings = apply_command(biased_tile, SetManualVerticalBias(20))
        assert compute_placement(settings, ViewScalingState()).bias_offset == 20

    def test_view_scale_and_zoom(self, biased_tile):
        view = ViewScalingState().set_sprite_scale(0.5)
        placement = compute_placement(biased_tile, view, zoom=2.0)
        assert placement.bias_offset == pytest.approx(132)
        assert placement.offset.x == pytest.approx(2)
        assert placement.scale == Vec2(1.0, 1.0)

    @pytest.mark.parametrize("zoom,clamped", [(20.0, 5.0), (0.01, 0.1)])
    def test_zoom_clamped(self, biased_tile, zoom, clamped):
        placement = compute_placement(biased_tile, ViewScalingState(), zoom=zoom)
        assert placement.scale.x == pytest.approx(clamped)

    def test_independent_scale(self, biased_tile):
        settings = apply_command(biased_tile, SetKeepProportions(False))
        settings = apply_command(settings, SetScale(1.0, 2.0))
        assert compute_placement(settings, ViewScalingState()).scale == Vec2(1.0, 2.0)

    def test_appearance(self, biased_tile):
        settings = apply_command(biased_tile, SetAppearance(rotation=90, alpha=0.5, tint=0x00FF00))
        placement = compute_placement(settings, ViewScalingState())
        assert placement.rotation_radians == pytest.approx(math.pi / 2)
        assert (placement.alpha, placement.tint) == (0.5, 0x00FF00)

    def test_full_canvas_anchor(self, biased_tile):
        settings = apply_command(biased_tile, SetAnchorRect(AnchorRect.FULL_CANVAS))
        assert compute_placement(settings, ViewScalingState(), canvas=Size(64, 64)).anchor == Vec2(0.5, 1.0)


# ══════════════════════════════════════════════════════════════════════════
# Walls
# ══════════════════════════════════════════════════════════════════════════

class TestWallPlacement:

    def test_south_wall(self, wall_settings):
        placement = compute_placement(wall_settings, ViewScalingState(), Direction.SOUTH)
        assert placement.grid_offset == Vec2(100, 50)
        assert placement.wall_offset.x == pytest.approx(-11 * R)
        assert placement.offset.x == pytest.approx(100 - 11 * R)
        assert placement.offset.y == pytest.approx(50 + 36 - 5 * R)

    def test_wall_direction_overrides_facing(self, wall_settings):
        placement = compute_placement(wall_settings, ViewScalingState(), Direction.SOUTH,
                                      wall_direction=Direction.WEST)
        assert placement.wall_offset.x == pytest.approx(11 * R)

    def test_tile_has_no_wall_offset(self, biased_tile):
        assert compute_placement(biased_tile, ViewScalingState()).wall_offset == Vec2(0.0, 0.0)

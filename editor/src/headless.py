"""Headless positioning tool: CLI entry point.

Analyzes isometric sprite sheets (one row of four frames: N, E, S, W) and
prints the default positioning settings the editor would derive for them,
or prints the view scaling state produced by a ratio-locked edit.

Usage:
    python editor/src/headless.py analyze <sheet.png> [--asset-type tile|wall|stair]
                                          [--policy POLICY] [--json]
    python editor/src/headless.py scale (--grid-width N | --sprite-scale S) [--unlocked]
    python editor/src/headless.py --version

Examples:
    python editor/src/headless.py analyze sprites/blocks/stone_floor.png
    python editor/src/headless.py analyze stone_wall --sprites-root sprites/walls --asset-type wall
    python editor/src/headless.py scale --grid-width 200 --json
"""

import sys
import os
import argparse
import json
import logging

# Add editor/src to path so imports work
_src_dir = os.path.dirname(os.path.abspath(__file__))
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)


def _open_sheet(sheet: str, sprites_root: str = None):
    """Resolve a sheet argument to (provider, sprite_name).

    Args:
        sheet: Path to a PNG sheet, or a sprite name when sprites_root is given.
        sprites_root: Directory holding <name>.png sheets.
    """
    from services.sprite_provider import SpriteSheetProvider

    if sprites_root:
        return SpriteSheetProvider(sprites_root), sheet
    path = os.path.abspath(sheet)
    name = os.path.splitext(os.path.basename(path))[0]
    return SpriteSheetProvider(os.path.dirname(path)), name


def _analyze(args) -> int:
    from models.positioning import AssetType, create_default_settings
    from services.auto_bias import RoundingPolicy, apply_auto_positioning, calculate_auto_positioning
    from services.bounding_box import extract_bounding_box, to_sprite_bounding_box
    from services.config_store import settings_to_dict
    from dataclasses import replace

    provider, name = _open_sheet(args.sheet, args.sprites_root)
    if not provider.has_sprite(name):
        print(f"Error: Sprite sheet not found: {provider.sheet_path(name)}")
        return 1
    size = provider.get_frame_size(name) if provider.load(name) else None
    if size is None:
        print(f"Error: Could not read sprite sheet: {provider.sheet_path(name)}")
        return 1

    asset_type = AssetType(args.asset_type)
    policy = RoundingPolicy(args.policy)
    positioning = calculate_auto_positioning(size.width, size.height, asset_type, policy)

    result = extract_bounding_box(provider, name, use_cache=False)
    if not result.ok:
        logging.getLogger('headless').warning(f"Bounding box unavailable for {name}: {result.error}")

    settings = apply_auto_positioning(create_default_settings(asset_type), positioning)
    box = to_sprite_bounding_box(result)
    if box is not None:
        settings = replace(settings, sprite_bounding_box=box)

    if args.json:
        print(json.dumps({
            'spriteName': name,
            'frameWidth': size.width,
            'frameHeight': size.height,
            'rawVerticalBias': positioning.raw_bias,
            'policy': policy.value,
            'settings': settings_to_dict(settings),
        }, indent=2))
        return 0

    print(f"Sprite:        {name} ({size.width}x{size.height} per frame)")
    print(f"Asset type:    {asset_type.value}")
    print(f"Raw bias:      {positioning.raw_bias:g}")
    print(f"Vertical bias: {positioning.auto_computed_vertical_bias} ({policy.value})")
    print(f"H offset:      {positioning.horizontal_offset}")
    if box is not None:
        print(f"Bounding box:  x={box.bounding_x} y={box.bounding_y} "
              f"w={box.bounding_width} h={box.bounding_height}")
    else:
        print(f"Bounding box:  none ({result.error or 'fully transparent'})")
    return 0


def _scale(args) -> int:
    from models.view_scaling import ViewScalingState

    state = ViewScalingState(is_ratio_locked=not args.unlocked)
    if args.grid_width is not None:
        state = state.set_grid_diamond_width(args.grid_width)
    else:
        state = state.set_sprite_scale(args.sprite_scale)

    if args.json:
        print(json.dumps(state.to_dict(), indent=2))
        return 0

    print(f"Grid width:   {state.grid_diamond_width:g}")
    print(f"Sprite scale: {state.sprite_scale:g}")
    print(f"Ratio lock:   {'on' if state.is_ratio_locked else 'off'}")
    for layer in state.z_layer_heights:
        print(f"  {layer.name:<8} z={layer.z} offset={layer.vertical_offset}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    from version import get_version
    from services.auto_bias import RoundingPolicy
    from constants import DEFAULT_ROUNDING_POLICY

    parser = argparse.ArgumentParser(
        description='Compute isometric asset positioning without the editor UI.',
    )
    parser.add_argument('--version', action='version', version=get_version())
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    sub = parser.add_subparsers(dest='command', required=True)

    analyze = sub.add_parser('analyze', help='Derive default positioning for a sprite sheet.')
    analyze.add_argument('sheet', help='Path to a sprite sheet PNG (or a sprite name with --sprites-root).')
    analyze.add_argument('--sprites-root', default=None, help='Directory holding <name>.png sheets.')
    analyze.add_argument('--asset-type', choices=['tile', 'wall', 'stair'], default='tile')
    analyze.add_argument(
        '--policy',
        choices=[p.value for p in RoundingPolicy],
        default=DEFAULT_ROUNDING_POLICY,
        help='Vertical bias rounding policy (default: snap_to_nearest).',
    )
    analyze.add_argument('--json', action='store_true', help='Print JSON instead of text.')

    scale = sub.add_parser('scale', help='Apply a ratio-locked view scaling edit.')
    group = scale.add_mutually_exclusive_group(required=True)
    group.add_argument('--grid-width', type=float, help='New grid diamond width in pixels.')
    group.add_argument('--sprite-scale', type=float, help='New global sprite scale.')
    scale.add_argument('--unlocked', action='store_true', help='Edit with the ratio lock off.')
    scale.add_argument('--json', action='store_true', help='Print JSON instead of text.')
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    if args.command == 'analyze':
        return _analyze(args)
    return _scale(args)


if __name__ == '__main__':
    sys.exit(main())

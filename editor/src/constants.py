"""
Isometric Asset Editor - Constants and Configuration

This module contains all constant values used by the positioning engine:
- Direction encoding
- Vertical bias rounding tables
- Wall-relative offset defaults (A/B system)
- Ratio lock factory base values and Z-layer heights
- Clamping ranges
- Persistence and retry settings
"""

# ======================================================================
# DIRECTIONS
# ======================================================================
# Integer encoding used in the persisted sprite config documents
DIRECTION_NORTH = 0
DIRECTION_EAST = 1
DIRECTION_SOUTH = 2
DIRECTION_WEST = 3
DIRECTION_COUNT = 4

# Sprite sheets hold one frame per direction in a single row, in this order
SHEET_FRAME_ORDER = (DIRECTION_NORTH, DIRECTION_EAST, DIRECTION_SOUTH, DIRECTION_WEST)

# Frame used to represent a sprite when analyzing its bounds
BOUNDING_BOX_REFERENCE_DIRECTION = DIRECTION_SOUTH

# ======================================================================
# VERTICAL BIAS COMPUTATION
# ======================================================================
# Snap targets for the per-sprite-type calculator (garden base / garden decoration)
GENERIC_SNAP_TARGETS = (36, 196)

# Snap targets for the asset-level calculator (tiles)
TILE_SNAP_TARGETS = (44, 204)

# Default rounding policy (value of RoundingPolicy)
DEFAULT_ROUNDING_POLICY = 'snap_to_nearest'

# Bias used at placement time when a bundle carries no bias at all
FALLBACK_VERTICAL_BIAS = 36

# Sprite dimensions assumed before a real sprite is assigned
PLACEHOLDER_SPRITE_WIDTH = 100
PLACEHOLDER_SPRITE_HEIGHT = 100

# ======================================================================
# WALL-RELATIVE OFFSETS (A/B SYSTEM)
# ======================================================================
WALL_DIAGONAL_A_DEFAULT = 8
WALL_DIAGONAL_B_DEFAULT = 3
WALL_USE_A_DIVISION_DEFAULT = True

# Manual diagonal offsets run along the 30 degree isometric axes
ISOMETRIC_AXIS_DEGREES = 30.0

# ======================================================================
# POSITIONING DEFAULTS
# ======================================================================
DEFAULT_TILE_HORIZONTAL_OFFSET = 1
DEFAULT_OTHER_HORIZONTAL_OFFSET = 0
DEFAULT_SCALE = 1.0
DEFAULT_ALPHA = 1.0
DEFAULT_TINT = 0xFFFFFF
DEFAULT_SPRITE_ANCHOR = (0.5, 1.0)  # bottom center
DEFAULT_GRID_ANCHOR = (0.5, 0.5)    # diamond center

# ======================================================================
# VIEW SCALING (RATIO LOCK)
# ======================================================================
BASE_GRID_DIAMOND_WIDTH = 400
BASE_SPRITE_SCALE = 1.0
DEFAULT_RATIO_LOCKED = True

SPRITE_SCALE_MIN = 0.1
SPRITE_SCALE_MAX = 5.0
ZOOM_MIN = 0.1
ZOOM_MAX = 5.0

DEFAULT_Z_LAYER_SETTINGS = [
    {'z': 0, 'verticalOffset': 0, 'name': 'Ground', 'color': 0x444444},
    {'z': 1, 'verticalOffset': 36, 'name': 'Level 1', 'color': 0x666666},
    {'z': 2, 'verticalOffset': 196, 'name': 'Level 2', 'color': 0x888888},
]

# ======================================================================
# BOUNDING BOX EXTRACTION
# ======================================================================
# Pixels with alpha strictly above this value count as visible
ALPHA_VISIBILITY_THRESHOLD = 0

# Caller-side retry schedule (seconds) while a texture is still loading
BOUNDING_BOX_RETRY_DELAYS = (0.0, 0.1, 0.4)

# Error tags returned by the extractor
ERROR_SPRITE_NOT_FOUND = 'Sprite not found'
ERROR_TEXTURE_NOT_LOADED = 'Texture not loaded'
ERROR_RASTER_UNAVAILABLE = 'Rasterization unavailable'

# ======================================================================
# PERSISTENCE
# ======================================================================
CONFIG_SCHEMA_VERSION = '1.0.0'
CONFIG_DIR_NAME = 'configs'
SPRITE_TYPE_BLOCK = 'block'
SPRITE_TYPE_WALL = 'wall'
SPRITE_SHEET_EXTENSION = '.png'

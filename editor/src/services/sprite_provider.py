"""Sprite frame providers.

The positioning engine never loads images itself; it asks a provider for a
frame size or a rasterized frame. SpriteSheetProvider decodes PNG sprite
sheets with Pillow (one row of four frames: N, E, S, W) into numpy RGBA
arrays. InMemorySpriteProvider serves frames that are already in memory.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
from PIL import Image

from constants import SHEET_FRAME_ORDER, DIRECTION_COUNT, SPRITE_SHEET_EXTENSION
from models.direction import Direction
from models.transform import Size

logger = logging.getLogger(__name__)


class RasterizationUnavailable(RuntimeError):
    """Raised by a provider that cannot produce pixel buffers at all."""


class SpriteProvider:
    """Interface consumed by the bounding box extractor and auto bias pass."""

    def has_sprite(self, name: str) -> bool:
        raise NotImplementedError

    def is_loaded(self, name: str) -> bool:
        raise NotImplementedError

    def get_frame_size(self, name: str) -> Optional[Size]:
        """Size of one directional frame, or None if the sprite is unknown."""
        raise NotImplementedError

    def get_raster_frame(self, name: str, direction: Direction) -> Optional[np.ndarray]:
        """(H, W, 4) uint8 RGBA pixels for one frame, or None if not ready."""
        raise NotImplementedError


class InMemorySpriteProvider(SpriteProvider):
    """Provider over frames already held as numpy arrays.

    A sprite can be registered with its frames withheld to model a texture
    that is still loading; mark_loaded() makes them available.
    """

    def __init__(self):
        self._frames: Dict[str, Dict[Direction, np.ndarray]] = {}
        self._loaded: Dict[str, bool] = {}

    def add_sprite(self, name: str, frames, loaded: bool = True):
        """Register a sprite.

        Args:
            name: Sprite identifier
            frames: Either a single array used for every direction, or a
                dict mapping Direction to array
            loaded: Whether frames are served immediately
        """
        if isinstance(frames, np.ndarray):
            frames = {direction: frames for direction in Direction}
        self._frames[name] = {Direction.from_value(d): np.asarray(f) for d, f in frames.items()}
        self._loaded[name] = loaded

    def mark_loaded(self, name: str):
        if name in self._loaded:
            self._loaded[name] = True

    def has_sprite(self, name: str) -> bool:
        return name in self._frames

    def is_loaded(self, name: str) -> bool:
        return self._loaded.get(name, False)

    def get_frame_size(self, name: str) -> Optional[Size]:
        frames = self._frames.get(name)
        if not frames:
            return None
        frame = next(iter(frames.values()))
        return Size(int(frame.shape[1]), int(frame.shape[0]))

    def get_raster_frame(self, name: str, direction: Direction) -> Optional[np.ndarray]:
        if not self.is_loaded(name):
            return None
        return self._frames[name].get(Direction.from_value(direction))


class SpriteSheetProvider(SpriteProvider):
    """Pillow-backed provider for sprite sheets under <root>/<category>/<name>.png.

    Frame sizes are read from the PNG header without decoding pixels; frames
    are only decoded after load(name).
    """

    def __init__(self, root, category: str = ''):
        self.root = Path(root)
        self.category = category
        self._frames: Dict[str, List[np.ndarray]] = {}
        self._sizes: Dict[str, Size] = {}

    def sheet_path(self, name: str) -> Path:
        directory = self.root / self.category if self.category else self.root
        return directory / f"{name}{SPRITE_SHEET_EXTENSION}"

    def discover(self, category: str = None) -> List[str]:
        """List sprite names available in a category directory.

        Returns:
            Sorted list of sprite names (file stems)
        """
        category = self.category if category is None else category
        directory = self.root / category if category else self.root
        if not directory.is_dir():
            logger.warning(f"Sprite directory not found: {directory}")
            return []
        return sorted(p.stem for p in directory.glob(f"*{SPRITE_SHEET_EXTENSION}"))

    def has_sprite(self, name: str) -> bool:
        return name in self._frames or self.sheet_path(name).is_file()

    def is_loaded(self, name: str) -> bool:
        return name in self._frames

    def get_frame_size(self, name: str) -> Optional[Size]:
        if name in self._sizes:
            return self._sizes[name]
        path = self.sheet_path(name)
        if not path.is_file():
            return None
        try:
            with Image.open(path) as img:
                size = Size(img.width // DIRECTION_COUNT, img.height)
        except OSError as e:
            logger.error(f"Error reading sprite sheet {path}: {e}")
            return None
        self._sizes[name] = size
        return size

    def load(self, name: str) -> bool:
        """Decode a sheet and slice it into four directional frames.

        Returns:
            True if the frames are now available
        """
        if name in self._frames:
            return True
        path = self.sheet_path(name)
        try:
            with Image.open(path) as img:
                img = img.convert('RGBA')
        except (OSError, ValueError) as e:
            logger.error(f"Error loading sprite sheet from {path}: {e}")
            return False

        sheet = np.array(img)
        frame_width = sheet.shape[1] // DIRECTION_COUNT
        self._frames[name] = [
            sheet[:, index * frame_width:(index + 1) * frame_width, :]
            for index in range(DIRECTION_COUNT)
        ]
        self._sizes[name] = Size(frame_width, sheet.shape[0])
        logger.debug(f"Loaded sprite sheet {name}: {frame_width}x{sheet.shape[0]} per frame")
        return True

    def get_raster_frame(self, name: str, direction: Direction) -> Optional[np.ndarray]:
        frames = self._frames.get(name)
        if frames is None:
            return None
        return frames[SHEET_FRAME_ORDER.index(int(Direction.from_value(direction)))]

    def unload(self, name: str):
        self._frames.pop(name, None)

"""Bounding box extraction for sprite frames.

Scans a rasterized frame for the smallest axis-aligned rectangle that holds
every visible pixel (alpha above ALPHA_VISIBILITY_THRESHOLD). The scan is
exact, one pixel per sample.

Failures are returned as tagged results and never raised: callers fall back
to the full canvas and surface a diagnostic. Retrying while a texture is
still loading is the caller's job; extract_with_retry() implements the
usual schedule.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np

from constants import (
    ALPHA_VISIBILITY_THRESHOLD, BOUNDING_BOX_REFERENCE_DIRECTION, BOUNDING_BOX_RETRY_DELAYS,
    ERROR_SPRITE_NOT_FOUND, ERROR_TEXTURE_NOT_LOADED, ERROR_RASTER_UNAVAILABLE,
)
from models.direction import Direction
from models.positioning import SpriteBoundingBox
from models.transform import Rect, Size
from services.sprite_provider import RasterizationUnavailable, SpriteProvider
from utils import metadata_cache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundingBoxResult:
    original: Size
    bounding_box: Optional[Rect] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_not_ready(self) -> bool:
        return self.error == ERROR_TEXTURE_NOT_LOADED


def scan_alpha_bounds(pixels: np.ndarray, threshold: int = ALPHA_VISIBILITY_THRESHOLD) -> Optional[Rect]:
    """Find the visible-pixel rectangle of a frame.

    Args:
        pixels: (H, W, 4) RGBA array or (H, W) alpha array
        threshold: Alpha values strictly above this count as visible

    Returns:
        Rect in frame pixels, or None if every pixel is transparent

    Raises:
        ValueError: If the array does not have an image shape
    """
    pixels = np.asarray(pixels)
    if pixels.ndim == 3 and pixels.shape[2] == 4:
        alpha = pixels[:, :, 3]
    elif pixels.ndim == 2:
        alpha = pixels
    else:
        raise ValueError(f"Expected (H, W, 4) or (H, W) pixels, got shape {pixels.shape}")

    visible = alpha > threshold
    rows = np.flatnonzero(visible.any(axis=1))
    if rows.size == 0:
        return None
    cols = np.flatnonzero(visible.any(axis=0))

    top, bottom = int(rows[0]), int(rows[-1])
    left, right = int(cols[0]), int(cols[-1])
    return Rect(left, top, right - left + 1, bottom - top + 1)


def extract_bounding_box(provider: SpriteProvider, sprite_name: str,
                         direction: Direction = Direction(BOUNDING_BOX_REFERENCE_DIRECTION),
                         use_cache: bool = True) -> BoundingBoxResult:
    """Compute the trimmed rectangle of one sprite frame.

    SOUTH is the representative frame unless another direction is given.
    Successful results are cached per sprite name and direction.

    Returns:
        BoundingBoxResult; error is one of the tags in constants or
        "Error: <message>" for anything unexpected
    """
    if use_cache:
        cached = metadata_cache.get_bounding_box(sprite_name, direction)
        if cached is not None:
            return cached

    empty = Size(0, 0)
    try:
        size = provider.get_frame_size(sprite_name)
        if size is None or size.width == 0 or size.height == 0:
            return BoundingBoxResult(empty, None, ERROR_SPRITE_NOT_FOUND)

        pixels = provider.get_raster_frame(sprite_name, direction)
        if pixels is None:
            return BoundingBoxResult(size, None, ERROR_TEXTURE_NOT_LOADED)

        box = scan_alpha_bounds(pixels)
    except RasterizationUnavailable as e:
        logger.warning(f"Rasterization unavailable for {sprite_name}: {e}")
        return BoundingBoxResult(empty, None, ERROR_RASTER_UNAVAILABLE)
    except Exception as e:
        logger.error(f"Bounding box extraction failed for {sprite_name}: {e}")
        return BoundingBoxResult(empty, None, f"Error: {e}")

    result = BoundingBoxResult(size, box)
    logger.debug(f"Bounding box for {sprite_name}: {box} in {size.width}x{size.height}")
    metadata_cache.store_bounding_box(sprite_name, direction, result)
    return result


def extract_with_retry(provider: SpriteProvider, sprite_name: str,
                       delays: Sequence[float] = BOUNDING_BOX_RETRY_DELAYS,
                       sleep: Callable[[float], None] = time.sleep,
                       direction: Direction = Direction(BOUNDING_BOX_REFERENCE_DIRECTION)) -> BoundingBoxResult:
    """Extract, retrying only while the texture reports "not loaded".

    Args:
        delays: Wait before each attempt (first is usually 0)
        sleep: Injectable sleep function

    Returns:
        The first non-"not loaded" result, or the last result once delays run out
    """
    result = None
    for attempt, delay in enumerate(delays):
        if delay:
            sleep(delay)
        result = extract_bounding_box(provider, sprite_name, direction)
        if not result.is_not_ready:
            return result
        logger.debug(f"Texture for {sprite_name} not ready (attempt {attempt + 1}/{len(delays)})")
    if result is None:
        result = extract_bounding_box(provider, sprite_name, direction)
    return result


def to_sprite_bounding_box(result: BoundingBoxResult) -> Optional[SpriteBoundingBox]:
    """Cacheable record for a successful extraction, None otherwise."""
    if not result.ok or result.bounding_box is None:
        return None
    return SpriteBoundingBox.from_rect(result.original, result.bounding_box)

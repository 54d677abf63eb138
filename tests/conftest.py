"""
Shared fixtures for isometric asset positioning tests.

Provides fresh settings bundles, synthetic RGBA frames, an in-memory sprite
provider and a temporary config store.
"""
import sys
import os
import pytest
import numpy as np

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))


# ── Synthetic frames ────────────────────────────────────────────────────

def make_frame(width, height, box=None):
    """RGBA frame, fully transparent except for an opaque box (x, y, w, h)."""
    frame = np.zeros((height, width, 4), dtype=np.uint8)
    if box is not None:
        x, y, w, h = box
        frame[y:y + h, x:x + w] = (200, 120, 40, 255)
    return frame


@pytest.fixture(autouse=True)
def _clear_bounding_box_cache():
    """Bounding box results are cached globally; isolate every test."""
    from utils import metadata_cache
    metadata_cache.clear_cache()
    yield
    metadata_cache.clear_cache()


@pytest.fixture
def tile_settings():
    """Fresh tile bundle"""
    from models.positioning import AssetType, create_default_settings
    return create_default_settings(AssetType.TILE)


@pytest.fixture
def wall_settings():
    """Fresh wall bundle (shared, south edge)"""
    from models.positioning import AssetType, create_default_settings
    return create_default_settings(AssetType.WALL)


@pytest.fixture
def trimmed_frame():
    """100x100 canvas with visible pixels in (10, 20, 60, 50)"""
    return make_frame(100, 100, (10, 20, 60, 50))


@pytest.fixture
def provider(trimmed_frame):
    """In-memory provider with a trimmed sprite, a 128x196 block and a loading sprite"""
    from services.sprite_provider import InMemorySpriteProvider
    p = InMemorySpriteProvider()
    p.add_sprite('crate', trimmed_frame)
    p.add_sprite('tall_block', make_frame(128, 196, (0, 4, 128, 192)))
    p.add_sprite('loading', trimmed_frame, loaded=False)
    return p


@pytest.fixture
def config_store(tmp_path, provider):
    """Config store writing under a temporary directory"""
    from services.config_store import SpriteConfigStore
    return SpriteConfigStore(tmp_path, provider)

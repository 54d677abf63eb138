"""Global bounding box cache for sprite frames.

Trimming a sprite frame needs a full pixel scan, so results are cached per
sprite name and facing direction for the entire application lifecycle.
Entries are overwritten by later extractions (last write wins).
"""

from typing import Optional, Dict, Tuple

# Global cache, keyed by (sprite name, direction index)
_BOUNDING_BOXES: Dict[Tuple[str, int], object] = {}


def get_bounding_box(sprite_name: str, direction: int) -> Optional[object]:
	"""Get the cached extraction result for one frame of a sprite.

	Args:
		sprite_name: Sprite identifier (e.g., 'stone_floor_01')
		direction: Direction index of the frame (0-3)

	Returns:
		Cached BoundingBoxResult or None if not cached
	"""
	return _BOUNDING_BOXES.get((sprite_name, int(direction)))


def store_bounding_box(sprite_name: str, direction: int, result) -> None:
	"""Cache an extraction result, replacing any previous entry."""
	_BOUNDING_BOXES[(sprite_name, int(direction))] = result


def has_bounding_box(sprite_name: str, direction: Optional[int] = None) -> bool:
	if direction is not None:
		return (sprite_name, int(direction)) in _BOUNDING_BOXES
	return any(name == sprite_name for name, _ in _BOUNDING_BOXES)


def forget_bounding_box(sprite_name: str) -> None:
	"""Drop every cached frame of a sprite."""
	for key in [key for key in _BOUNDING_BOXES if key[0] == sprite_name]:
		del _BOUNDING_BOXES[key]


def clear_cache():
	"""Clear the bounding box cache (useful for testing or reloading)."""
	_BOUNDING_BOXES.clear()

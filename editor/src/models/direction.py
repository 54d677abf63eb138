"""
Compass directions and a fixed-size per-direction container.

Every asset carries exactly four directional bundles. DirectionMap stores them
in a tuple indexed by Direction so an incomplete set cannot be constructed.
"""
from enum import IntEnum
from typing import Callable, Generic, Iterator, Tuple, TypeVar, Union

from constants import DIRECTION_NORTH, DIRECTION_EAST, DIRECTION_SOUTH, DIRECTION_WEST, DIRECTION_COUNT


T = TypeVar('T')
U = TypeVar('U')


class Direction(IntEnum):
    """Facing of an isometric sprite frame (integer values match the JSON encoding)."""
    NORTH = DIRECTION_NORTH
    EAST = DIRECTION_EAST
    SOUTH = DIRECTION_SOUTH
    WEST = DIRECTION_WEST

    @classmethod
    def from_value(cls, value: Union[int, str, 'Direction']) -> 'Direction':
        """Parse a direction from an int, a numeric JSON key ("2") or a name ("south").

        Raises:
            ValueError: If the value does not name a direction
        """
        if isinstance(value, Direction):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.lstrip('-').isdigit():
                return cls(int(text))
            try:
                return cls[text.upper()]
            except KeyError:
                raise ValueError(f"Unknown direction: {value!r}") from None
        return cls(int(value))

    @property
    def is_north_or_east(self) -> bool:
        return self in (Direction.NORTH, Direction.EAST)


class DirectionMap(Generic[T]):
    """Immutable container holding exactly one value per Direction."""

    __slots__ = ('_values',)

    def __init__(self, north: T, east: T, south: T, west: T):
        self._values: Tuple[T, T, T, T] = (north, east, south, west)

    @classmethod
    def filled(cls, value: T) -> 'DirectionMap[T]':
        """Map with the same value for every direction."""
        return cls(value, value, value, value)

    @classmethod
    def build(cls, factory: Callable[[Direction], T]) -> 'DirectionMap[T]':
        """Map built by calling factory once per direction."""
        return cls(*(factory(direction) for direction in Direction))

    def __getitem__(self, direction: Direction) -> T:
        return self._values[Direction.from_value(direction)]

    def __iter__(self) -> Iterator[Tuple[Direction, T]]:
        return iter(zip(Direction, self._values))

    def __len__(self) -> int:
        return DIRECTION_COUNT

    def __eq__(self, other) -> bool:
        if not isinstance(other, DirectionMap):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        items = ', '.join(f"{d.name}={v!r}" for d, v in self)
        return f"DirectionMap({items})"

    def values(self) -> Tuple[T, T, T, T]:
        return self._values

    def replace(self, direction: Direction, value: T) -> 'DirectionMap[T]':
        """Return a new map with one direction's value swapped."""
        values = list(self._values)
        values[Direction.from_value(direction)] = value
        return DirectionMap(*values)

    def map(self, fn: Callable[[T], U]) -> 'DirectionMap[U]':
        return DirectionMap(*(fn(value) for value in self._values))

"""Cell coordinates and the four cardinal directions.

Uses the screen coordinate system: X axis points right and Y axis points down.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import NamedTuple

from fogmaze.types import CellCoord


class Direction(Enum):
    """One of the four cardinal steps. The value is the ``(dx, dy)`` offset."""

    UP = (0, -1)
    RIGHT = (1, 0)
    DOWN = (0, 1)
    LEFT = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def opposite(self) -> Direction:
        return _OPPOSITE[self]

    def rotate_clockwise(self) -> Direction:
        return _CLOCKWISE[self]

    def rotate_anticlockwise(self) -> Direction:
        return _ANTICLOCKWISE[self]

    def __repr__(self) -> str:
        return f"Direction.{self.name}"


# Canonical enumeration order. Neighbor iteration everywhere follows it, which
# makes carving and traversal reproducible for a given RNG stream.
DIRECTIONS: tuple[Direction, ...] = (
    Direction.UP,
    Direction.RIGHT,
    Direction.DOWN,
    Direction.LEFT,
)

_OPPOSITE = {
    Direction.UP: Direction.DOWN,
    Direction.RIGHT: Direction.LEFT,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
}
_CLOCKWISE = {
    Direction.UP: Direction.RIGHT,
    Direction.RIGHT: Direction.DOWN,
    Direction.DOWN: Direction.LEFT,
    Direction.LEFT: Direction.UP,
}
_ANTICLOCKWISE = {after: before for before, after in _CLOCKWISE.items()}


class Coord(NamedTuple):
    """Immutable cell position. Compares and hashes like a plain ``(x, y)``."""

    x: CellCoord
    y: CellCoord

    def advance(self, direction: Direction) -> Coord:
        """Return the neighboring cell one step towards ``direction``."""
        return Coord(self.x + direction.dx, self.y + direction.dy)

    def neighbors(self) -> Iterator[tuple[Direction, Coord]]:
        """Yield ``(direction, neighbor)`` pairs in canonical order."""
        for direction in DIRECTIONS:
            yield direction, self.advance(direction)

    def __add__(self, other: Direction | tuple[int, int]) -> Coord:  # type: ignore[override]
        if isinstance(other, Direction):
            return self.advance(other)
        return Coord(self.x + other[0], self.y + other[1])

    def __sub__(self, other: tuple[int, int]) -> Coord:
        return Coord(self.x - other[0], self.y - other[1])

    def __neg__(self) -> Coord:
        return Coord(-self.x, -self.y)

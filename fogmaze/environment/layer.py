from __future__ import annotations

from collections.abc import Iterable, Iterator

import numpy as np

from fogmaze.errors import InvariantViolation
from fogmaze.geometry import Coord, Direction
from fogmaze.util.dsu import DisjointSets


class Layer:
    """One complete maze grid: a set of cells, passages and connectivity.

    Membership and passages are stored in boolean arrays covering the bounding
    box of the shape the layer was built from, indexed ``[x - x0, y - y0]``
    like the game maps. Each cell only stores its passages towards RIGHT and
    DOWN; a passage towards LEFT or UP is the neighbor's RIGHT or DOWN flag,
    so the two sides of a wall can never disagree.

    Every opened passage also unions the two cells in a :class:`DisjointSets`,
    which answers "are these cells connected" in near-constant time. Passages
    are never closed, so connectivity only grows.
    """

    def __init__(self, shape: Iterable[tuple[int, int]]) -> None:
        cells = {Coord(x, y) for x, y in shape}
        if not cells:
            raise ValueError("A layer needs at least one cell")

        xs = [c.x for c in cells]
        ys = [c.y for c in cells]
        self._x0 = min(xs)
        self._y0 = min(ys)
        self.width = max(xs) - self._x0 + 1
        self.height = max(ys) - self._y0 + 1

        self._cells = np.zeros((self.width, self.height), dtype=bool, order="F")
        self._passage_right = np.zeros_like(self._cells)
        self._passage_down = np.zeros_like(self._cells)
        for cell in cells:
            self._cells[cell.x - self._x0, cell.y - self._y0] = True

        self._dsu = DisjointSets()

    @property
    def bounds(self) -> tuple[Coord, Coord]:
        """Inclusive ``(top_left, bottom_right)`` corners of the bounding box."""
        return (
            Coord(self._x0, self._y0),
            Coord(self._x0 + self.width - 1, self._y0 + self.height - 1),
        )

    def _index(self, coord: tuple[int, int]) -> tuple[int, int] | None:
        ix = coord[0] - self._x0
        iy = coord[1] - self._y0
        if 0 <= ix < self.width and 0 <= iy < self.height:
            return ix, iy
        return None

    def has(self, coord: tuple[int, int]) -> bool:
        index = self._index(coord)
        return index is not None and bool(self._cells[index])

    def add(self, coord: tuple[int, int]) -> None:
        """Add a cell inside the bounding box the layer was built with."""
        index = self._index(coord)
        if index is None:
            raise ValueError(f"{coord} is outside the layer bounds {self.bounds}")
        self._cells[index] = True

    def passable(self, start: tuple[int, int], direction: Direction) -> bool:
        """Return True if a passage leads from ``start`` towards ``direction``."""
        if direction in (Direction.LEFT, Direction.UP):
            return self.passable(Coord(*start).advance(direction), direction.opposite())

        index = self._index(start)
        if index is None or not self._cells[index]:
            return False
        if direction is Direction.RIGHT:
            return bool(self._passage_right[index])
        return bool(self._passage_down[index])

    def join(self, start: tuple[int, int], direction: Direction) -> None:
        """Open the passage from ``start`` towards ``direction``.

        Joining an already open passage is a no-op. Both cells must belong to
        the layer; anything else means the caller has a bug.
        """
        if direction in (Direction.LEFT, Direction.UP):
            self.join(Coord(*start).advance(direction), direction.opposite())
            return

        destination = Coord(*start).advance(direction)
        index = self._index(start)
        if index is None or not self._cells[index] or not self.has(destination):
            raise InvariantViolation(
                f"Trying to join {tuple(start)} with {tuple(destination)} "
                "which is outside the layer"
            )

        if direction is Direction.RIGHT:
            self._passage_right[index] = True
        else:
            self._passage_down[index] = True
        self._dsu.union(start, destination)

    def connect(self, a: tuple[int, int], b: tuple[int, int]) -> None:
        """Mark two cells as reachable from each other without a passage.

        Used to treat several spawn points as one tree while carving.
        """
        if not self.has(a) or not self.has(b):
            raise InvariantViolation(f"Cannot connect {a} and {b}: not in the layer")
        self._dsu.union(a, b)

    def reachable(self, a: tuple[int, int], b: tuple[int, int]) -> bool:
        return self._dsu.equiv(a, b)

    def cells(self) -> list[Coord]:
        """All cells of the layer, sorted by x then y."""
        return [
            Coord(int(ix) + self._x0, int(iy) + self._y0)
            for ix, iy in np.argwhere(self._cells)
        ]

    def edge_count(self) -> int:
        """Number of open passages."""
        return int(self._passage_right.sum() + self._passage_down.sum())

    def __len__(self) -> int:
        return int(self._cells.sum())

    def __contains__(self, coord: object) -> bool:
        return isinstance(coord, tuple) and len(coord) == 2 and self.has(coord)

    def __iter__(self) -> Iterator[Coord]:
        return iter(self.cells())

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from fogmaze.environment.shapes import make_circle
from fogmaze.geometry import Coord

_NEIGHBORHOOD = tuple((dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1))


@dataclass(frozen=True)
class Region:
    """An immutable set of cells plus the ring of cells around it.

    The boundary is every cell in the 3x3 neighborhood of some cell of the
    region that is not itself part of the region (diagonals included).

    Regions are used as the player's visibility footprint and as the area
    copied verbatim from one layer into the next when grafting.
    """

    cells: frozenset[Coord]
    boundary: frozenset[Coord]

    @classmethod
    def from_cells(cls, cells: Iterable[tuple[int, int]]) -> Region:
        cell_set = frozenset(Coord(x, y) for x, y in cells)
        dilated = {
            Coord(c.x + dx, c.y + dy) for c in cell_set for dx, dy in _NEIGHBORHOOD
        }
        return cls(cells=cell_set, boundary=frozenset(dilated - cell_set))

    def shifted_by(self, offset: tuple[int, int]) -> Region:
        """Return a copy of this region translated by ``offset``."""
        return Region(
            cells=frozenset(c + offset for c in self.cells),
            boundary=frozenset(c + offset for c in self.boundary),
        )

    def covers(self, coord: tuple[int, int], origin: tuple[int, int] = (0, 0)) -> bool:
        """Return True if ``coord`` is a cell or boundary cell of the region
        translated to ``origin``.

        Equivalent to ``shifted_by(origin)`` followed by two membership tests,
        without building the translated sets.
        """
        local = Coord(coord[0] - origin[0], coord[1] - origin[1])
        return local in self.cells or local in self.boundary

    def __len__(self) -> int:
        return len(self.cells)


def make_visible_area(radius: int) -> Region:
    """Region the player can see when standing at the origin."""
    return Region.from_cells(make_circle(radius))

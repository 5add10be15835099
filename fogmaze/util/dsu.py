"""Ordinal bijection and a lazily growing disjoint-set union.

Layers are sparse and may extend to arbitrary (including negative)
coordinates, so the union-find does not preallocate a grid. Instead every
coordinate is mapped to a unique non-negative integer and classes are
allocated the first time a coordinate takes part in a union.

Signed integers are zig-zag encoded::

    0, -1, 1, -2, 2, ...  ->  0, 1, 2, 3, 4, ...

and pairs of non-negative integers are enumerated diagonally::

    y
    3  6
    2  3  7
    1  1  4  8
    0  0  2  5  9 ...
       0  1  2  3   x
"""

from __future__ import annotations

from math import isqrt

from fogmaze.types import CellCoord


def ordinal(number: int) -> int:
    """Map a signed integer to a non-negative one (zig-zag encoding)."""
    if number >= 0:
        return number * 2
    return -number * 2 - 1


def from_ordinal(value: int) -> int:
    """Inverse of :func:`ordinal`."""
    if value < 0:
        raise ValueError(f"Ordinals are non-negative, got {value}")
    if value % 2 == 0:
        return value // 2
    return -((value + 1) // 2)


def pair_ordinal(a: int, b: int) -> int:
    """Map a pair of non-negative integers to a single non-negative integer."""
    if a < 0 or b < 0:
        raise ValueError(f"Pair components must be non-negative, got ({a}, {b})")
    diagonal = a + b
    return diagonal * (diagonal + 1) // 2 + a


def pair_from_ordinal(value: int) -> tuple[int, int]:
    """Inverse of :func:`pair_ordinal`."""
    if value < 0:
        raise ValueError(f"Ordinals are non-negative, got {value}")
    diagonal = (isqrt(8 * value + 1) - 1) // 2
    a = value - diagonal * (diagonal + 1) // 2
    return a, diagonal - a


def coord_ordinal(x: CellCoord, y: CellCoord) -> int:
    """Map a signed coordinate pair to a unique non-negative integer."""
    return pair_ordinal(ordinal(x), ordinal(y))


def coord_from_ordinal(value: int) -> tuple[CellCoord, CellCoord]:
    """Inverse of :func:`coord_ordinal`."""
    a, b = pair_from_ordinal(value)
    return from_ordinal(a), from_ordinal(b)


class DisjointSets:
    """Union-find over signed coordinate pairs.

    Classes live in dense parallel lists; ``_slots`` maps a coordinate's
    ordinal to its slot and grows on demand. Unions are never undone, so
    connectivity only ever increases.
    """

    def __init__(self) -> None:
        self._slots: dict[int, int] = {}
        self._parent: list[int] = []
        self._size: list[int] = []

    def __len__(self) -> int:
        """Number of coordinates that have taken part in a union."""
        return len(self._parent)

    def _slot(self, coord: tuple[CellCoord, CellCoord]) -> int | None:
        return self._slots.get(coord_ordinal(coord[0], coord[1]))

    def _allocate(self, coord: tuple[CellCoord, CellCoord]) -> int:
        key = coord_ordinal(coord[0], coord[1])
        slot = self._slots.get(key)
        if slot is None:
            slot = len(self._parent)
            self._slots[key] = slot
            self._parent.append(slot)
            self._size.append(1)
        return slot

    def _find(self, slot: int) -> int:
        root = slot
        while self._parent[root] != root:
            root = self._parent[root]
        # Path compression
        while self._parent[slot] != root:
            self._parent[slot], slot = root, self._parent[slot]
        return root

    def union(
        self, a: tuple[CellCoord, CellCoord], b: tuple[CellCoord, CellCoord]
    ) -> None:
        """Merge the classes of ``a`` and ``b``, allocating them if needed."""
        root_a = self._find(self._allocate(a))
        root_b = self._find(self._allocate(b))
        if root_a == root_b:
            return
        if self._size[root_a] < self._size[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        self._size[root_a] += self._size[root_b]

    def equiv(
        self, a: tuple[CellCoord, CellCoord], b: tuple[CellCoord, CellCoord]
    ) -> bool:
        """Return True if ``a`` and ``b`` belong to the same class.

        A coordinate that never took part in a union is only equivalent to
        itself.
        """
        if tuple(a) == tuple(b):
            return True
        slot_a = self._slot(a)
        slot_b = self._slot(b)
        if slot_a is None or slot_b is None:
            return False
        return self._find(slot_a) == self._find(slot_b)

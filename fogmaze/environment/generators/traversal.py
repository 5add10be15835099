"""Escapability analysis of a carved layer.

A single depth-first walk over the passage tree records, for every cell, its
depth and the direction it was reached from. It also finds the cells where a
new layer can be grafted without the player noticing.

A cell ``a`` is *escapable* once the walk, still inside ``a``'s subtree, reaches
a cell ``c`` (the *witness*) that lies outside the visibility footprint centered
on ``a`` and whose four neighbors all belong to the layer. A new layer can
then copy the footprint around ``a`` and start carving from ``c``, which the
player standing at ``a`` cannot see.

To find witnesses the walk keeps an *active visibility trace*: the ancestors
on the current path that have not found their witness yet. Entering a cell
checks it against every member of the trace.

The 4-neighbor test on the witness is a heuristic. It works well for round
shapes, but a graft attempt can still fail; callers retry with a new seed.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from fogmaze.environment.layer import Layer
from fogmaze.environment.region import Region
from fogmaze.errors import InvariantViolation
from fogmaze.geometry import Coord, Direction


@dataclass(slots=True)
class CoordInfo:
    """What the traversal learned about one cell.

    Attributes:
        depth: Number of passages between the cell and the traversal root.
        came_from: Direction pointing back towards the parent cell, or None
            for the root of a first layer.
        escapable: The witness cell proving this cell is a graft point, or
            None if there is none in its subtree.
        has_escapable_below: Whether any descendant is escapable.
    """

    depth: int
    came_from: Direction | None
    escapable: Coord | None = None
    has_escapable_below: bool = False


@dataclass
class TraversalInfo:
    """Result of traversing one layer.

    Attributes:
        root: The cell the traversal started from.
        coords: Per-cell annotations for every visited cell.
        leaf_escapables: Escapable cells without escapable descendants, in the
            order the walk finished them. These are the graft candidates.
    """

    root: Coord
    coords: dict[Coord, CoordInfo] = field(default_factory=dict)
    leaf_escapables: list[Coord] = field(default_factory=list)

    def deepest_cell(self) -> Coord:
        """The visited cell farthest from the root (first one on ties)."""
        return max(self.coords, key=lambda c: self.coords[c].depth)

    def deepest_leaf_escapable(self) -> Coord | None:
        if not self.leaf_escapables:
            return None
        return max(self.leaf_escapables, key=lambda c: self.coords[c].depth)


@dataclass(slots=True)
class _Frame:
    coord: Coord
    depth: int
    directions: Iterator[Direction]


def _children_order(came_from: Direction) -> Iterator[Direction]:
    """Clockwise from just after the parent direction, parent excluded."""
    direction = came_from.rotate_clockwise()
    while direction != came_from:
        yield direction
        direction = direction.rotate_clockwise()


class Traversal:
    """Iterative depth-first walk that fills a :class:`TraversalInfo`.

    The walk keeps its own stack instead of recursing, so long corridors do
    not hit the interpreter's recursion limit, and :meth:`walk` can be
    stopped half-way to inspect the trace.
    """

    def __init__(self, layer: Layer, visible_area: Region, info: TraversalInfo) -> None:
        self.layer = layer
        self.visible_area = visible_area
        self.info = info
        self.trace: set[Coord] = set()

    def _can_be_witness(self, cell: Coord) -> bool:
        # Only checks the four closest cells. Good enough for simple layer
        # shapes, not a guarantee that carving from here reaches the edge.
        return all(self.layer.has(neighbor) for _, neighbor in cell.neighbors())

    def _enter(self, coord: Coord, came_from: Direction, depth: int) -> _Frame:
        if coord in self.info.coords:
            raise InvariantViolation(f"Layer contains a loop through {tuple(coord)}")
        self.info.coords[coord] = CoordInfo(depth=depth, came_from=came_from)

        if self._can_be_witness(coord):
            escaped = [
                ancestor
                for ancestor in self.trace
                if not self.visible_area.covers(coord, origin=ancestor)
            ]
            for ancestor in escaped:
                ancestor_info = self.info.coords.get(ancestor)
                if ancestor_info is None:
                    raise InvariantViolation(
                        f"Visibility trace holds unvisited cell {tuple(ancestor)}"
                    )
                ancestor_info.escapable = coord
                self.trace.discard(ancestor)
        self.trace.add(coord)

        return _Frame(coord=coord, depth=depth, directions=_children_order(came_from))

    def _leave(self, frame: _Frame) -> None:
        coord_info = self.info.coords[frame.coord]
        if coord_info.escapable is not None and not coord_info.has_escapable_below:
            self.info.leaf_escapables.append(frame.coord)
        self.trace.discard(frame.coord)

    def walk(
        self, start: tuple[int, int], came_from: Direction, depth: int = 0
    ) -> Iterator[Coord]:
        """Traverse the subtree of ``start`` that does not lie towards ``came_from``.

        Yields every cell as it is entered.
        """
        stack = [self._enter(Coord(*start), came_from, depth)]
        yield stack[0].coord

        while stack:
            frame = stack[-1]
            direction = next(frame.directions, None)

            if direction is None:
                stack.pop()
                self._leave(frame)
                if stack:
                    child_info = self.info.coords[frame.coord]
                    if (
                        child_info.has_escapable_below
                        or child_info.escapable is not None
                    ):
                        self.info.coords[stack[-1].coord].has_escapable_below = True
                continue

            if self.layer.passable(frame.coord, direction):
                child = frame.coord.advance(direction)
                stack.append(self._enter(child, direction.opposite(), frame.depth + 1))
                yield child


def traverse(
    layer: Layer,
    root: tuple[int, int],
    came_from: Direction | None,
    visible_area: Region,
) -> TraversalInfo:
    """Walk the whole tree reachable from ``root`` and find graft points.

    Args:
        layer: A fully carved layer.
        root: The cell to start from.
        came_from: Direction of the root's parent edge, which is not walked.
            None for a first layer: the root is then split in two, walking
            everything except DOWN first, then the DOWN neighbor on its own.
        visible_area: Visibility footprint centered on the origin.

    Returns:
        The collected :class:`TraversalInfo`.
    """
    root = Coord(*root)
    info = TraversalInfo(root=root)
    traversal = Traversal(layer, visible_area, info)

    if came_from is not None:
        for _ in traversal.walk(root, came_from):
            pass
        return info

    back = Direction.DOWN
    for _ in traversal.walk(root, back):
        pass
    if layer.passable(root, back):
        for _ in traversal.walk(root.advance(back), back.opposite(), depth=1):
            pass
    info.coords[root].came_from = None
    return info


def get_path_to(
    start: tuple[int, int], target: tuple[int, int], info: TraversalInfo
) -> list[Direction]:
    """Directions leading from ``start`` down the tree to ``target``."""
    start = Coord(*start)
    cell = Coord(*target)
    path: list[Direction] = []
    while cell != start:
        cell_info = info.coords.get(cell)
        if cell_info is None or cell_info.came_from is None:
            raise InvariantViolation(
                f"{tuple(target)} is not below {tuple(start)} in the traversal"
            )
        path.append(cell_info.came_from.opposite())
        cell = cell.advance(cell_info.came_from)
    path.reverse()
    return path

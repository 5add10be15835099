"""Shared assertions over carved layers."""

from __future__ import annotations

from collections import deque

from fogmaze.environment.layer import Layer
from fogmaze.geometry import DIRECTIONS, Coord, Direction


def passage_count(layer: Layer) -> int:
    """Count open passages by probing every cell (independent of edge_count)."""
    count = 0
    for cell in layer.cells():
        for direction in DIRECTIONS:
            if layer.passable(cell, direction):
                count += 1
    # Every passage was seen from both of its ends.
    return count // 2


def walk_passages(layer: Layer, start: tuple[int, int]) -> set[Coord]:
    """Cells reachable from ``start`` by walking open passages (BFS)."""
    start = Coord(*start)
    seen = {start}
    queue = deque([start])
    while queue:
        cell = queue.popleft()
        for direction, neighbor in cell.neighbors():
            if layer.passable(cell, direction) and neighbor not in seen:
                seen.add(neighbor)
                queue.append(neighbor)
    return seen


def corridor(length: int) -> Layer:
    """A vertical corridor ``(0, 0) .. (0, length - 1)`` with every cell joined."""
    layer = Layer([(0, y) for y in range(length)])
    for y in range(1, length):
        layer.join((0, y), Direction.UP)
    return layer

"""Maze generation algorithms for fogmaze.

- carve: growing-tree carving of a single layer
- traverse: escapability analysis that finds graft points
- MazeBuilder (in ``builder``): assembles layers into a Maze

``builder`` is not re-exported here because it depends on ``fogmaze.maze``,
which itself imports the traversal types from this package.
"""

from .carving import carve, expand_randomly, possible_moves
from .settings import GenerationSettings
from .traversal import CoordInfo, Traversal, TraversalInfo, get_path_to, traverse

__all__ = [
    "CoordInfo",
    "GenerationSettings",
    "Traversal",
    "TraversalInfo",
    "carve",
    "expand_randomly",
    "get_path_to",
    "possible_moves",
    "traverse",
]

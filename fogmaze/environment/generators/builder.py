"""Assembling a maze out of grafted layers.

The first layer is carved over the level shape from the spawn point. Every
further layer is grafted onto an existing one at a *leaf-escapable* cell
(see :mod:`~fogmaze.environment.generators.traversal`):

1. the visible footprint around the branch cell is copied verbatim from the
   source layer, so nothing the player could have seen changes;
2. the tree path from the branch cell to its witness is carved open;
3. the rest of the layer is carved from the witness, never touching the
   copied footprint;
4. a transition is installed on the branch cell's parent edge, so stepping
   onto the branch cell switches to the new layer and stepping back off it
   returns.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from fogmaze import config
from fogmaze.environment.generators.carving import carve
from fogmaze.environment.generators.settings import GenerationSettings
from fogmaze.environment.generators.traversal import (
    TraversalInfo,
    get_path_to,
    traverse,
)
from fogmaze.environment.layer import Layer
from fogmaze.errors import InvariantViolation
from fogmaze.geometry import DIRECTIONS, Coord, Direction
from fogmaze.maze import ForwardedTo, Maze
from fogmaze.types import LayerIndex, Stage
from fogmaze.util.rng import RNG, RNGProvider

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when a layer cannot be grafted where it was requested.

    This is expected from time to time: not every carved layer has enough
    graft points. The build should be retried with a fresh random stream.
    """

    pass


class MazeBuilder:
    """Generates the layers of one maze.

    The builder owns its maze until :meth:`into_maze` hands it over. Every
    operation either completes or raises before touching the maze, so a
    failed graft never leaves a half-linked layer behind.
    """

    def __init__(
        self,
        shape: Iterable[tuple[int, int]],
        rng: RNG,
        settings: GenerationSettings | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            shape: Cells every layer of the maze is carved over.
            rng: Random stream for all carving done by this builder.
            settings: Generation tuning; defaults come from ``config``.
        """
        self.shape = [Coord(x, y) for x, y in shape]
        if not self.shape:
            raise ValueError("Cannot build a maze over an empty shape")
        self.rng = rng
        self.settings = settings if settings is not None else GenerationSettings()
        self._maze: Maze | None = None

    @classmethod
    def for_stage(
        cls,
        shape: Iterable[tuple[int, int]],
        stage: Stage,
        attempt: int = 0,
        settings: GenerationSettings | None = None,
    ) -> MazeBuilder:
        """Create a builder whose random stream is derived from ``stage``.

        Each ``attempt`` gets an independent stream, so retrying a failed
        build is still reproducible.
        """
        provider = RNGProvider(master_seed=stage)
        rng = provider.get(f"{config.BUILD_RNG_DOMAIN}.{attempt}")
        return cls(shape, rng, settings)

    @property
    def maze(self) -> Maze:
        if self._maze is None:
            raise RuntimeError("Generate the first layer before growing the maze")
        return self._maze

    def _new_layer(self) -> Layer:
        return Layer(self.shape)

    def _traverse(
        self, layer: Layer, root: Coord, came_from: Direction | None = None
    ) -> TraversalInfo:
        return traverse(layer, root, came_from, self.settings.visible_area)

    # -------------------------------------------------------------------------
    # First layer
    # -------------------------------------------------------------------------

    def generate_first_layer(self, spawn: tuple[int, int]) -> LayerIndex:
        """Carve the first layer from ``spawn`` and start a maze with it."""
        return self.generate_first_layer_from_multiple([spawn])

    def generate_first_layer_from_multiple(
        self, spawns: Sequence[tuple[int, int]]
    ) -> LayerIndex:
        """Carve the first layer from several spawn points at once.

        The spawn points are treated as already connected, so each of them
        grows its own tree and the trees never merge. The player starts at
        the first spawn point.
        """
        if self._maze is not None:
            raise RuntimeError("The first layer has already been generated")
        if not spawns:
            raise ValueError("At least one spawn point is required")

        spawn_points = [Coord(x, y) for x, y in spawns]
        layer = self._new_layer()
        for spawn in spawn_points:
            if not layer.has(spawn):
                raise ValueError(f"Spawn point {tuple(spawn)} is not part of the shape")
        for other in spawn_points[1:]:
            layer.connect(spawn_points[0], other)

        carve(
            layer,
            spawn_points,
            self.rng,
            chance_to_be_next=self.settings.chance_to_be_next,
        )
        info = self._traverse(layer, spawn_points[0])
        self._maze = Maze(layer, info, spawn_points[0])

        logger.debug(
            f"First layer: {len(layer)} cells, "
            f"{len(info.leaf_escapables)} graft candidates"
        )
        return 0

    # -------------------------------------------------------------------------
    # Grafting
    # -------------------------------------------------------------------------

    def _graft_point(
        self, source_index: LayerIndex, branch: Coord
    ) -> tuple[Direction, Coord]:
        """Return the parent direction and witness of a graft point.

        Raises:
            GenerationError: If ``branch`` is unusable as a graft point.
        """
        branch_info = self.maze.maze_layer(source_index).info.coords.get(branch)
        if branch_info is None:
            raise GenerationError(f"{tuple(branch)} was not reached by the traversal")
        came_from = branch_info.came_from
        if came_from is None:
            raise GenerationError(f"{tuple(branch)} has no parent edge to graft on")
        escape = branch_info.escapable
        if escape is None:
            raise GenerationError(
                f"Could not find any escape cell from {tuple(branch)}"
            )
        return came_from, escape

    def add_layer(
        self, source_index: LayerIndex, branch: tuple[int, int]
    ) -> LayerIndex:
        """Graft a new layer onto ``source_index`` at the ``branch`` cell.

        Raises:
            GenerationError: If ``branch`` has no parent edge or no witness.
        """
        maze = self.maze
        source = maze.maze_layer(source_index)
        branch = Coord(*branch)

        came_from, escape = self._graft_point(source_index, branch)

        path = get_path_to(branch, escape, source.info)
        region = self.settings.visible_area.shifted_by(branch)

        layer = self._new_layer()
        self._copy_region(source.layer, layer, region.cells, region.boundary)

        cell = branch
        for direction in path:
            layer.join(cell, direction)
            cell = cell.advance(direction)

        carve(
            layer,
            [escape],
            self.rng,
            blocked=region.cells,
            chance_to_be_next=self.settings.chance_to_be_next,
        )
        info = self._traverse(layer, branch, came_from)

        forwarded = []
        for coord in region.cells:
            if not layer.has(coord):
                continue
            content = source.content(coord)
            if isinstance(content, ForwardedTo):
                forwarded.append((coord, content.layer_index))
            else:
                forwarded.append((coord, source_index))

        new_index = maze.add_layer(layer, info, source_index, forwarded)
        parent = branch.advance(came_from)
        maze.add_transition(parent, came_from.opposite(), source_index, new_index)

        logger.debug(
            f"Grafted layer {new_index} onto layer {source_index} at {tuple(branch)} "
            f"(escape {tuple(escape)}, {len(info.leaf_escapables)} graft candidates)"
        )
        return new_index

    @staticmethod
    def _copy_region(
        source: Layer,
        target: Layer,
        cells: Iterable[Coord],
        boundary: Iterable[Coord],
    ) -> None:
        """Copy every passage of ``source`` that starts inside ``cells``."""
        cells = list(cells)
        for coord in [*cells, *boundary]:
            if source.has(coord) and not target.has(coord):
                raise InvariantViolation(
                    f"Copied cell {tuple(coord)} is missing from the new layer"
                )
        for coord in cells:
            if not source.has(coord):
                continue
            for direction in DIRECTIONS:
                if source.passable(coord, direction):
                    target.join(coord, direction)

    def _leaf_escapables(self, layer_index: LayerIndex, needed: int) -> list[Coord]:
        info = self.maze.maze_layer(layer_index).info
        if len(info.leaf_escapables) < needed:
            raise GenerationError(
                f"Layer {layer_index} has {len(info.leaf_escapables)} graft "
                f"candidates, {needed} needed"
            )
        return info.leaf_escapables

    def _add_layers(
        self, layer_index: LayerIndex, branches: list[Coord]
    ) -> list[LayerIndex]:
        # Validate every branch first so a fork is grafted entirely or not at all.
        for branch in branches:
            self._graft_point(layer_index, branch)
        return [self.add_layer(layer_index, branch) for branch in branches]

    def add_layer_from_deepest_point(self, layer_index: LayerIndex) -> LayerIndex:
        """Graft at the deepest graft candidate, extending the longest corridor."""
        info = self.maze.maze_layer(layer_index).info
        branch = info.deepest_leaf_escapable()
        if branch is None:
            raise GenerationError(f"Layer {layer_index} has no graft candidates")
        return self.add_layer(layer_index, branch)

    def fork_to_two_layers(
        self, layer_index: LayerIndex
    ) -> tuple[LayerIndex, LayerIndex]:
        """Graft at the first and the last graft candidate.

        Returns:
            ``(first, last)`` layer indices.
        """
        candidates = self._leaf_escapables(layer_index, 2)
        first, last = self._add_layers(layer_index, [candidates[0], candidates[-1]])
        return first, last

    def fork_to_three_layers(
        self, layer_index: LayerIndex
    ) -> tuple[LayerIndex, LayerIndex, LayerIndex]:
        """Graft at the first, the last and the deepest in-between graft candidate.

        Returns:
            ``(first, last, middle)`` layer indices.
        """
        candidates = self._leaf_escapables(layer_index, 3)
        coords = self.maze.maze_layer(layer_index).info.coords
        middle = max(candidates[1:-1], key=lambda c: coords[c].depth)
        first, last, middle_index = self._add_layers(
            layer_index, [candidates[0], candidates[-1], middle]
        )
        return first, last, middle_index

    # -------------------------------------------------------------------------
    # Finishing
    # -------------------------------------------------------------------------

    def set_finish_at_deepest_point(self, layer_index: LayerIndex) -> Coord:
        """Put the finish on the cell of ``layer_index`` farthest from its root."""
        finish = self.maze.maze_layer(layer_index).info.deepest_cell()
        self.maze.set_finish(finish, layer_index)
        return finish

    def into_maze(self) -> Maze:
        """Hand the maze over. The builder cannot be used afterwards."""
        maze = self.maze
        self._maze = None
        return maze

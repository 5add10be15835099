"""Runtime maze: the layer graph and the player walking through it."""

from __future__ import annotations

from typing import TypeAlias

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto

from fogmaze.environment.generators.traversal import TraversalInfo
from fogmaze.environment.layer import Layer
from fogmaze.errors import InvariantViolation
from fogmaze.geometry import Coord, Direction
from fogmaze.types import LayerIndex

logger = logging.getLogger(__name__)


class CellState(Enum):
    """Player progress markup of a single cell."""

    UNTOUCHED = auto()
    VISITED = auto()
    FINISH = auto()


class MoveResult(Enum):
    MOVED_TO_UNTOUCHED = auto()
    MOVED_TO_VISITED = auto()
    FINISH = auto()
    BLOCKED = auto()  # No passage in that direction


@dataclass(frozen=True, slots=True)
class Owned:
    """The cell's state is stored in this layer."""

    state: CellState = CellState.UNTOUCHED


@dataclass(frozen=True, slots=True)
class ForwardedTo:
    """The cell shares its state with the same cell of another layer.

    Cells copied from a source layer during a graft are the same cells the
    player already saw, so their visited markup lives in one place.
    """

    layer_index: LayerIndex


CellContent: TypeAlias = Owned | ForwardedTo


@dataclass(frozen=True, slots=True)
class Transition:
    dest_layer: LayerIndex


@dataclass
class MazeLayer:
    """A layer as part of a maze.

    Attributes:
        layer: The carved layer. Its passages never change after generation.
        info: Traversal of the layer from ``info.root``.
        parent_layer_index: Layer this one was grafted onto, None for the
            first layer.
        transitions: Cells where stepping in switches the active layer.
        contents: Per-cell markup; cells missing from the dict are untouched.
    """

    layer: Layer
    info: TraversalInfo
    parent_layer_index: LayerIndex | None = None
    transitions: dict[Coord, Transition] = field(default_factory=dict)
    contents: dict[Coord, CellContent] = field(default_factory=dict)

    def content(self, coord: Coord) -> CellContent:
        if not self.layer.has(coord):
            raise KeyError(coord)
        return self.contents.get(coord, Owned())


class Maze:
    """Holds the layer graph and the player's position in it.

    The layer list is append-only. Only :meth:`try_move` and the two
    convenience moves change the player state, and they are the sole mutators
    once the builder hands the maze over.

    Two direction stacks track the way back to the start and the way to the
    finish. Every move is pushed, unless it cancels the last entry, in which
    case that entry is popped, so walking back and forth does not grow them.
    """

    def __init__(
        self, layer: Layer, info: TraversalInfo, spawn_point: tuple[int, int]
    ) -> None:
        spawn_point = Coord(*spawn_point)
        if not layer.has(spawn_point):
            raise ValueError(
                f"Spawn point {tuple(spawn_point)} is not part of the layer"
            )

        self._layers: list[MazeLayer] = [MazeLayer(layer=layer, info=info)]
        self._position = spawn_point
        self._current_layer_index: LayerIndex = 0
        self._path_from_start: list[Direction] = []
        self._path_from_finish: list[Direction] = []
        self._finish: tuple[Coord, LayerIndex] | None = None
        self._on_position_updated()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def position(self) -> Coord:
        return self._position

    @property
    def current_layer_index(self) -> LayerIndex:
        return self._current_layer_index

    @property
    def current_layer(self) -> Layer:
        return self._layers[self._current_layer_index].layer

    @property
    def current_layer_info(self) -> TraversalInfo:
        return self._layers[self._current_layer_index].info

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    @property
    def finish(self) -> tuple[Coord, LayerIndex] | None:
        return self._finish

    @property
    def path_from_start(self) -> tuple[Direction, ...]:
        return tuple(self._path_from_start)

    @property
    def path_from_finish(self) -> tuple[Direction, ...]:
        return tuple(self._path_from_finish)

    def maze_layer(self, index: LayerIndex) -> MazeLayer:
        return self._layers[index]

    def _resolve(
        self, coord: Coord, layer_index: LayerIndex
    ) -> tuple[Coord, LayerIndex]:
        """Return the ``(coord, layer)`` that actually owns the cell's state."""
        content = self._layers[layer_index].content(coord)
        if isinstance(content, ForwardedTo):
            return coord, content.layer_index
        return coord, layer_index

    def cell_state(
        self, coord: tuple[int, int], layer_index: LayerIndex | None = None
    ) -> CellState:
        """Markup of a cell, following a forwarded cell to its owner."""
        if layer_index is None:
            layer_index = self._current_layer_index
        coord, owner = self._resolve(Coord(*coord), layer_index)
        content = self._layers[owner].content(coord)
        if not isinstance(content, Owned):
            raise InvariantViolation(
                f"Cell {tuple(coord)} of layer {owner} is forwarded more than once"
            )
        return content.state

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def add_layer(
        self,
        layer: Layer,
        info: TraversalInfo,
        parent_layer_index: LayerIndex,
        forwarded: Iterable[tuple[tuple[int, int], LayerIndex]] = (),
    ) -> LayerIndex:
        """Append a layer to the graph.

        Args:
            layer: The carved layer.
            info: Its traversal.
            parent_layer_index: The layer it was grafted onto.
            forwarded: ``(coord, owner_layer)`` pairs of cells whose state is
                shared with another layer. The owner must hold the state
                itself: chains of forwarding are rejected.

        Returns:
            The index of the new layer.
        """
        if not 0 <= parent_layer_index < len(self._layers):
            raise IndexError(f"No layer {parent_layer_index} to graft onto")

        maze_layer = MazeLayer(
            layer=layer, info=info, parent_layer_index=parent_layer_index
        )
        for (x, y), owner in forwarded:
            coord = Coord(x, y)
            owner_content = self._layers[owner].content(coord)
            if not isinstance(owner_content, Owned):
                raise InvariantViolation(
                    f"Cannot forward {tuple(coord)} to layer {owner}: "
                    f"it is forwarded to layer {owner_content.layer_index}"
                )
            if not layer.has(coord):
                raise InvariantViolation(
                    f"Forwarded cell {tuple(coord)} is not in the layer"
                )
            maze_layer.contents[coord] = ForwardedTo(owner)

        self._layers.append(maze_layer)
        return len(self._layers) - 1

    def add_transition(
        self,
        coord: tuple[int, int],
        direction: Direction,
        from_index: LayerIndex,
        to_index: LayerIndex,
    ) -> None:
        """Link two layers across the passage from ``coord`` towards ``direction``.

        Stepping from ``coord`` into the next cell while in ``from_index``
        switches to ``to_index``; stepping back onto ``coord`` while in
        ``to_index`` switches back.
        """
        coord = Coord(*coord)
        source = self._layers[from_index]
        destination = self._layers[to_index]
        for maze_layer, index in ((source, from_index), (destination, to_index)):
            if not maze_layer.layer.passable(coord, direction):
                raise InvariantViolation(
                    f"No passage from {tuple(coord)} towards {direction.name} "
                    f"in layer {index}"
                )

        source.transitions[coord.advance(direction)] = Transition(dest_layer=to_index)
        destination.transitions[coord] = Transition(dest_layer=from_index)

    def set_finish(self, coord: tuple[int, int], layer_index: LayerIndex) -> None:
        """Mark the finish cell and compute the way from the player to it."""
        if self._finish is not None:
            raise InvariantViolation("Finish is already set")
        coord = Coord(*coord)
        self._set_state(coord, layer_index, CellState.FINISH)
        self._finish = (coord, layer_index)
        self._update_path_from_finish(coord, layer_index)

    def _set_state(
        self, coord: Coord, layer_index: LayerIndex, state: CellState
    ) -> None:
        coord, owner = self._resolve(coord, layer_index)
        self._layers[owner].contents[coord] = Owned(state)

    def _update_path_from_finish(self, finish: Coord, finish_layer: LayerIndex) -> None:
        """Walk parent links from the finish up to the player.

        The walk follows ``came_from`` inside a layer. At the root of a
        grafted layer it continues in the parent layer, where the root cell
        has the same position.
        """
        self._path_from_finish.clear()
        position = finish
        layer_index = finish_layer
        while layer_index != self._current_layer_index or position != self._position:
            maze_layer = self._layers[layer_index]
            parent_index = maze_layer.parent_layer_index
            if position == maze_layer.info.root and parent_index is not None:
                layer_index = parent_index
                continue

            cell_info = maze_layer.info.coords.get(position)
            if cell_info is None or cell_info.came_from is None:
                raise InvariantViolation(
                    f"Finish {tuple(finish)} in layer {finish_layer} is not "
                    f"reachable back to the player"
                )
            self._path_from_finish.append(cell_info.came_from)
            position = position.advance(cell_info.came_from)

    # -------------------------------------------------------------------------
    # Moving
    # -------------------------------------------------------------------------

    def _on_position_updated(self) -> None:
        current = self._layers[self._current_layer_index]
        transition = current.transitions.get(self._position)
        if transition is not None:
            logger.debug(
                f"Switching from layer {self._current_layer_index} to "
                f"{transition.dest_layer} at {tuple(self._position)}"
            )
            self._current_layer_index = transition.dest_layer

        if self.cell_state(self._position) is CellState.UNTOUCHED:
            self._set_state(
                self._position, self._current_layer_index, CellState.VISITED
            )

    @staticmethod
    def _update_path(path: list[Direction], direction: Direction) -> None:
        if path and path[-1] == direction.opposite():
            path.pop()
        else:
            path.append(direction)

    def try_move(self, direction: Direction) -> MoveResult:
        """Move the player one cell if there is a passage."""
        if not self.current_layer.passable(self._position, direction):
            return MoveResult.BLOCKED

        new_position = self._position.advance(direction)
        state = self.cell_state(new_position)

        self._position = new_position
        self._update_path(self._path_from_start, direction)
        self._update_path(self._path_from_finish, direction)
        self._on_position_updated()

        if state is CellState.FINISH:
            return MoveResult.FINISH
        if state is CellState.VISITED:
            return MoveResult.MOVED_TO_VISITED
        return MoveResult.MOVED_TO_UNTOUCHED

    def try_move_towards_start(self) -> MoveResult:
        if not self._path_from_start:
            return MoveResult.BLOCKED
        return self.try_move(self._path_from_start[-1].opposite())

    def try_move_towards_finish(self) -> MoveResult:
        if not self._path_from_finish:
            return MoveResult.BLOCKED
        return self.try_move(self._path_from_finish[-1].opposite())

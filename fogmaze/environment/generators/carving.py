"""Growing-tree maze carving.

The carver keeps a stack of frontier cells. Each round it drops exhausted
cells from the top of the stack, then walks the stack from the top and gives
every cell a fixed chance to be the one that grows next. The first cell that
wins the roll opens a passage to a random legal neighbor, and that neighbor is
pushed on top of the stack.

With a high chance the top cell almost always wins and the result looks like a
randomized depth-first carve: long winding corridors. With a low chance older
cells get picked more often and the maze becomes bushy around the spawn
points.

A passage is only opened between cells that are not yet connected, so the
carved passages always form a forest (a single tree per spawn group).
"""

from __future__ import annotations

from collections.abc import Collection, Iterable

from fogmaze import config
from fogmaze.environment.layer import Layer
from fogmaze.geometry import DIRECTIONS, Coord, Direction
from fogmaze.util.rng import RNG


def possible_moves(
    layer: Layer, cell: Coord, blocked: Collection[Coord] = frozenset()
) -> list[Direction]:
    """Directions in which ``cell`` may be expanded, in canonical order."""
    moves = []
    for direction in DIRECTIONS:
        neighbor = cell.advance(direction)
        if (
            layer.has(neighbor)
            and neighbor not in blocked
            and not layer.reachable(cell, neighbor)
        ):
            moves.append(direction)
    return moves


def expand_randomly(
    layer: Layer, cell: Coord, rng: RNG, blocked: Collection[Coord] = frozenset()
) -> Coord | None:
    """Open a passage from ``cell`` to a random legal neighbor.

    Returns:
        The newly connected neighbor, or None if ``cell`` cannot grow.
    """
    moves = possible_moves(layer, cell, blocked)
    if not moves:
        return None
    direction = rng.choice(moves)
    layer.join(cell, direction)
    return cell.advance(direction)


def carve(
    layer: Layer,
    spawns: Iterable[tuple[int, int]],
    rng: RNG,
    blocked: Collection[Coord] = frozenset(),
    chance_to_be_next: float = config.CHANCE_TO_BE_NEXT,
) -> None:
    """Carve a maze into ``layer`` growing from ``spawns``.

    Args:
        layer: The layer to carve. Existing passages are kept and treated as
            already connected.
        spawns: Cells the carving starts from.
        rng: Random stream; the same stream state always yields the same maze.
        blocked: Cells that must not receive any new passage.
        chance_to_be_next: Probability for each frontier cell to be picked as
            the next one to grow.
    """
    stack = [Coord(x, y) for x, y in spawns]
    for spawn in stack:
        if not layer.has(spawn):
            raise ValueError(f"Spawn point {tuple(spawn)} is not part of the layer")

    while stack:
        while stack and not possible_moves(layer, stack[-1], blocked):
            stack.pop()

        new_cell = None
        for cell in reversed(stack):
            if rng.random() < chance_to_be_next:
                new_cell = expand_randomly(layer, cell, rng, blocked)
                break

        if new_cell is not None:
            stack.append(new_cell)

"""Tests for growing-tree carving."""

from __future__ import annotations

import random

import pytest

from fogmaze.environment.generators.carving import (
    carve,
    expand_randomly,
    possible_moves,
)
from fogmaze.environment.layer import Layer
from fogmaze.environment.shapes import make_circle, make_rectangle, make_ring
from fogmaze.geometry import DIRECTIONS, Coord, Direction
from tests.helpers import passage_count, walk_passages


class TestPossibleMoves:
    def test_corner_of_fresh_layer(self) -> None:
        layer = Layer(make_rectangle(3, 3))
        assert possible_moves(layer, Coord(0, 0)) == [Direction.RIGHT, Direction.DOWN]

    def test_connected_neighbors_are_excluded(self) -> None:
        layer = Layer(make_rectangle(3, 3))
        layer.join((0, 0), Direction.RIGHT)
        assert possible_moves(layer, Coord(0, 0)) == [Direction.DOWN]

    def test_blocked_neighbors_are_excluded(self) -> None:
        layer = Layer(make_rectangle(3, 3))
        assert possible_moves(layer, Coord(0, 0), blocked={Coord(0, 1)}) == [
            Direction.RIGHT
        ]


class TestExpandRandomly:
    def test_opens_a_passage(self, rng: random.Random) -> None:
        layer = Layer(make_rectangle(3, 3))
        new_cell = expand_randomly(layer, Coord(1, 1), rng)

        assert new_cell is not None
        assert layer.reachable((1, 1), new_cell)
        assert layer.edge_count() == 1

    def test_returns_none_when_stuck(self, rng: random.Random) -> None:
        layer = Layer([(0, 0)])
        assert expand_randomly(layer, Coord(0, 0), rng) is None


class TestCarve:
    @pytest.mark.parametrize(
        "shape",
        [make_circle(10), make_ring(4, 12), make_rectangle(15, 7)],
        ids=["circle", "ring", "rectangle"],
    )
    def test_result_is_a_spanning_tree(
        self, shape: list[Coord], rng: random.Random
    ) -> None:
        layer = Layer(shape)
        spawn = shape[len(shape) // 2]
        carve(layer, [spawn], rng)

        assert layer.edge_count() == len(layer) - 1
        assert passage_count(layer) == layer.edge_count()
        assert walk_passages(layer, spawn) == set(layer.cells())
        assert all(layer.reachable(spawn, cell) for cell in layer.cells())

    def test_same_stream_gives_same_maze(self) -> None:
        shape = make_circle(8)
        first = Layer(shape)
        second = Layer(shape)
        carve(first, [(0, 0)], random.Random(99))
        carve(second, [(0, 0)], random.Random(99))

        assert first.edge_count() == second.edge_count()
        for cell in shape:
            for direction in (Direction.RIGHT, Direction.DOWN):
                assert first.passable(cell, direction) == second.passable(
                    cell, direction
                )

    def test_chance_one_is_a_depth_first_carve(self, rng: random.Random) -> None:
        layer = Layer(make_rectangle(6, 6))
        carve(layer, [(0, 0)], rng, chance_to_be_next=1.0)
        assert layer.edge_count() == 35

    def test_blocked_cells_get_no_passages(self, rng: random.Random) -> None:
        shape = make_rectangle(9, 9)
        blocked = {Coord(x, 4) for x in range(0, 9)}
        layer = Layer(shape)
        carve(layer, [(0, 0)], rng, blocked=blocked)

        for cell in blocked:
            assert not any(layer.passable(cell, d) for d in DIRECTIONS)
        # The wall of blocked cells splits the rectangle in two.
        assert walk_passages(layer, (0, 0)) == {
            Coord(x, y) for x in range(9) for y in range(4)
        }

    def test_multiple_spawns_connected_up_front_form_a_forest(
        self, rng: random.Random
    ) -> None:
        layer = Layer(make_rectangle(10, 10))
        spawns = [(0, 0), (9, 9)]
        layer.connect(*spawns)
        carve(layer, spawns, rng)

        assert layer.edge_count() == len(layer) - 2
        left = walk_passages(layer, (0, 0))
        right = walk_passages(layer, (9, 9))
        assert not left & right
        assert left | right == set(layer.cells())

    def test_existing_passages_are_kept(self, rng: random.Random) -> None:
        layer = Layer(make_rectangle(5, 5))
        layer.join((0, 0), Direction.RIGHT)
        layer.join((1, 0), Direction.RIGHT)
        carve(layer, [(2, 0)], rng)

        assert layer.passable((0, 0), Direction.RIGHT)
        assert layer.passable((1, 0), Direction.RIGHT)
        assert layer.edge_count() == len(layer) - 1

    def test_spawn_outside_the_layer_is_rejected(self, rng: random.Random) -> None:
        layer = Layer(make_rectangle(3, 3))
        with pytest.raises(ValueError):
            carve(layer, [(7, 7)], rng)

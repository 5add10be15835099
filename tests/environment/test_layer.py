"""Tests for the Layer grid."""

from __future__ import annotations

import pytest

from fogmaze.environment.layer import Layer
from fogmaze.environment.shapes import make_rectangle
from fogmaze.errors import InvariantViolation
from fogmaze.geometry import DIRECTIONS, Coord, Direction


@pytest.fixture
def square() -> Layer:
    return Layer(make_rectangle(3, 3))


class TestMembership:
    def test_shape_cells_are_members(self, square: Layer) -> None:
        assert len(square) == 9
        assert square.has((0, 0))
        assert square.has((2, 2))
        assert not square.has((3, 0))
        assert not square.has((-1, 0))
        assert (1, 1) in square
        assert "nonsense" not in square

    def test_empty_shape_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            Layer([])

    def test_negative_coordinates(self) -> None:
        layer = Layer([(-5, -5), (-4, -5)])
        assert layer.has((-5, -5))
        assert layer.bounds == ((-5, -5), (-4, -5))

    def test_add_inside_bounds(self) -> None:
        layer = Layer([(0, 0), (2, 2)])
        assert not layer.has((1, 1))
        layer.add((1, 1))
        assert layer.has((1, 1))

    def test_add_outside_bounds_is_rejected(self) -> None:
        layer = Layer([(0, 0), (2, 2)])
        with pytest.raises(ValueError):
            layer.add((3, 3))

    def test_cells_are_sorted(self) -> None:
        layer = Layer([(1, 0), (0, 1), (0, 0), (1, -1)])
        assert layer.cells() == [(0, 0), (0, 1), (1, -1), (1, 0)]
        assert list(layer) == layer.cells()


class TestPassages:
    def test_new_layer_has_no_passages(self, square: Layer) -> None:
        assert square.edge_count() == 0
        for cell in square.cells():
            assert not any(square.passable(cell, d) for d in DIRECTIONS)

    @pytest.mark.parametrize("direction", DIRECTIONS)
    def test_join_is_symmetric(self, square: Layer, direction: Direction) -> None:
        center = Coord(1, 1)
        square.join(center, direction)

        assert square.passable(center, direction)
        assert square.passable(center.advance(direction), direction.opposite())
        assert square.edge_count() == 1

    def test_join_is_idempotent(self, square: Layer) -> None:
        square.join((0, 0), Direction.RIGHT)
        square.join((1, 0), Direction.LEFT)
        assert square.edge_count() == 1

    def test_join_outside_the_layer_is_an_invariant_violation(
        self, square: Layer
    ) -> None:
        with pytest.raises(InvariantViolation):
            square.join((0, 0), Direction.UP)
        with pytest.raises(InvariantViolation):
            square.join((2, 2), Direction.RIGHT)
        with pytest.raises(InvariantViolation):
            square.join((5, 5), Direction.LEFT)

    def test_join_across_a_hole_is_an_invariant_violation(self) -> None:
        layer = Layer([(0, 0), (2, 0)])
        with pytest.raises(InvariantViolation):
            layer.join((0, 0), Direction.RIGHT)

    def test_passable_from_outside_is_false(self, square: Layer) -> None:
        assert not square.passable((-1, 0), Direction.RIGHT)
        assert not square.passable((0, 0), Direction.LEFT)

    def test_join_from_outside_into_the_layer_is_an_invariant_violation(
        self, square: Layer
    ) -> None:
        with pytest.raises(InvariantViolation):
            square.join((-1, 0), Direction.RIGHT)
        with pytest.raises(InvariantViolation):
            square.join((1, -1), Direction.DOWN)
        assert square.edge_count() == 0


class TestReachability:
    def test_join_connects_cells(self, square: Layer) -> None:
        square.join((0, 0), Direction.RIGHT)
        square.join((1, 0), Direction.DOWN)

        assert square.reachable((0, 0), (1, 1))
        assert not square.reachable((0, 0), (2, 2))
        assert square.reachable((2, 2), (2, 2))

    def test_connect_without_passage(self, square: Layer) -> None:
        square.connect((0, 0), (2, 2))

        assert square.reachable((0, 0), (2, 2))
        assert square.edge_count() == 0

    def test_connect_outside_the_layer_is_an_invariant_violation(
        self, square: Layer
    ) -> None:
        with pytest.raises(InvariantViolation):
            square.connect((0, 0), (9, 9))

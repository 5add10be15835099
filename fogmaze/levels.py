"""Level catalog and retrying level generation.

A level generator turns a stage number into a maze. Builds are reproducible:
the stage is the master seed, and each retry attempt draws from its own
stream (see :meth:`MazeBuilder.for_stage`).

Grafting can fail when a carved layer happens to have too few graft points.
That is expected, so :func:`generate_level` simply rebuilds the whole level
with the next attempt's stream until it succeeds.
"""

from __future__ import annotations

import abc
import logging

from fogmaze import config
from fogmaze.environment.generators.builder import GenerationError, MazeBuilder
from fogmaze.environment.generators.settings import GenerationSettings
from fogmaze.environment.shapes import make_circle, make_ring
from fogmaze.geometry import Coord
from fogmaze.maze import Maze
from fogmaze.types import LevelId, Stage

logger = logging.getLogger(__name__)


class LevelGenerator(abc.ABC):
    """Abstract base class for level kinds."""

    level_id: LevelId

    def __init__(self, settings: GenerationSettings | None = None) -> None:
        self.settings = settings

    def builder(self, shape: list[Coord], stage: Stage, attempt: int) -> MazeBuilder:
        return MazeBuilder.for_stage(shape, stage, attempt, self.settings)

    @abc.abstractmethod
    def build(self, stage: Stage, attempt: int = 0) -> Maze:
        """Build the maze for ``stage`` using the stream of ``attempt``.

        Raises:
            GenerationError: If this attempt could not place its grafts.
        """
        raise NotImplementedError


class PlainLevel(LevelGenerator):
    """A single round layer with the finish at its deepest cell."""

    level_id = "plain"

    def build(self, stage: Stage, attempt: int = 0) -> Maze:
        radius = config.PLAIN_LEVEL_BASE_RADIUS + stage
        builder = self.builder(make_circle(radius), stage, attempt)
        first = builder.generate_first_layer((0, 0))
        builder.set_finish_at_deepest_point(first)
        return builder.into_maze()


class BranchingLevel(LevelGenerator):
    """A three-way fork, then a long chain of grafts down one of the branches."""

    level_id = "branching"

    def build(self, stage: Stage, attempt: int = 0) -> Maze:
        radius = config.BRANCHING_LEVEL_BASE_RADIUS + stage
        builder = self.builder(make_circle(radius), stage, attempt)
        first = builder.generate_first_layer((0, 0))
        _, last, _ = builder.fork_to_three_layers(first)
        for _ in range(config.BRANCHING_LEVEL_CHAIN_LENGTH):
            last = builder.add_layer_from_deepest_point(last)
        builder.set_finish_at_deepest_point(last)
        return builder.into_maze()


class RingLevel(LevelGenerator):
    """A ring-shaped maze that keeps going around through new layers."""

    level_id = "ring"

    def build(self, stage: Stage, attempt: int = 0) -> Maze:
        outer = config.RING_LEVEL_BASE_OUTER_RADIUS + stage
        shape = make_ring(config.RING_LEVEL_INNER_RADIUS, outer)
        builder = self.builder(shape, stage, attempt)
        # Spawn on the ring itself, halfway between its edges.
        spawn = (0, -(config.RING_LEVEL_INNER_RADIUS + outer) // 2)
        last = builder.generate_first_layer(spawn)
        for _ in range(config.RING_LEVEL_CHAIN_LENGTH):
            last = builder.add_layer_from_deepest_point(last)
        builder.set_finish_at_deepest_point(last)
        return builder.into_maze()


LEVELS: dict[LevelId, type[LevelGenerator]] = {
    level.level_id: level for level in (PlainLevel, BranchingLevel, RingLevel)
}


def get_level(
    level_id: LevelId, settings: GenerationSettings | None = None
) -> LevelGenerator:
    """Instantiate a level generator by id.

    Raises:
        ValueError: If the level id is not recognized.
    """
    try:
        level_class = LEVELS[level_id]
    except KeyError:
        raise ValueError(f"Unknown level id: {level_id!r}") from None
    return level_class(settings)


def generate_level(generator: LevelGenerator, stage: Stage) -> Maze:
    """Build a level, retrying with a fresh stream until it succeeds.

    There is no attempt limit: failures are rare and independent, so a loop
    that keeps failing points at a generator bug that the logs will show.
    """
    attempt = 0
    while True:
        try:
            maze = generator.build(stage, attempt)
        except GenerationError as e:
            logger.debug(
                f"Level {generator.level_id!r} stage {stage} attempt {attempt} "
                f"failed: {e}"
            )
            attempt += 1
            if attempt % config.GENERATION_RETRY_WARN_EVERY == 0:
                logger.warning(
                    f"Level {generator.level_id!r} stage {stage} still failing "
                    f"after {attempt} attempts"
                )
            continue

        logger.info(
            f"Generated level {generator.level_id!r} stage {stage}: "
            f"{maze.layer_count} layers after {attempt + 1} attempt(s)"
        )
        return maze

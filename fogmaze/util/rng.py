"""Deterministic random number generation with isolated streams.

Every build gets its own provider seeded from the level stage, and every
consumer inside a build draws from a named stream derived from that seed. This
ensures that:

1. A level is fully reproducible from its stage number
2. A retried build attempt draws from a fresh, independent stream
3. Adding a consumer doesn't shift the sequences seen by the others

Usage:
    provider = RNGProvider(master_seed=stage)
    stream = provider.get(f"maze.build.{attempt}")
    builder = MazeBuilder(shape, stream)

There is no module-level provider: whoever starts a build owns its RNG, and
hands it over together with the rest of the build state.

Domain naming convention (hierarchical):
    - "maze.build.0", "maze.build.1", ... (one per retry attempt)
    - "bench.carving"
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, TypeAlias, TypeVar

if TYPE_CHECKING:
    from fogmaze.types import RandomSeed

T = TypeVar("T")


class RNGStream:
    """The random stream of one domain.

    Exposes only the draws the generators make, so every consumer of a build
    stream is visible here.
    """

    def __init__(self, domain: str, rng: Random) -> None:
        self._domain = domain
        self._rng = rng

    @property
    def domain(self) -> str:
        return self._domain

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng.random()

    def choice(self, seq: Sequence[T]) -> T:
        """Return random element from non-empty sequence."""
        return self._rng.choice(seq)


# Type alias for functions that accept either Random or RNGStream.
# Use this in type hints: `def foo(rng: RNG) -> int:`
RNG: TypeAlias = Random | RNGStream


class RNGProvider:
    """Provides isolated RNG streams for the parts of one build.

    Each domain gets its own Random instance derived deterministically
    from the master seed. Domains are identified by string names.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, RNGStream] = {}

    @property
    def master_seed(self) -> RandomSeed:
        return self._master_seed

    def get(self, domain: str) -> RNGStream:
        """Get the RNG stream for the named domain.

        Asking for the same domain twice returns the same stream, so draws
        continue where the previous consumer left off.

        Args:
            domain: Hierarchical name like "maze.build.0"
        """
        if domain not in self._streams:
            self._streams[domain] = RNGStream(domain, self._make_random(domain))
        return self._streams[domain]

    def _make_random(self, domain: str) -> Random:
        if self._master_seed is None:
            # No seed: use system entropy for non-deterministic behavior
            return Random()
        # Use crc32 instead of hash() - hash() is randomized per Python
        # session via PYTHONHASHSEED, which would break cross-session
        # determinism
        return Random(zlib.crc32(f"{self._master_seed}:{domain}".encode()))

from __future__ import annotations

from typing import TypeAlias

# =============================================================================
# SPATIAL TYPES
# =============================================================================

CellCoord: TypeAlias = int  # Always integer cell position, may be negative

# =============================================================================
# GENERATION TYPES
# =============================================================================

# Index of a layer inside a Maze. Layers are append-only, so an index stays
# valid for the lifetime of the maze.
LayerIndex: TypeAlias = int

# Difficulty stage of a level. Also used as the master seed of a build, so the
# same stage always produces the same maze.
Stage: TypeAlias = int

# Identifier of a level kind in the level catalog (e.g. "plain", "branching").
LevelId: TypeAlias = str

# Random seed for deterministic generation.
# Can be an int for numeric seeds or a descriptive string like "burrito1".
RandomSeed: TypeAlias = int | str | None

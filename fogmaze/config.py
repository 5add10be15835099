"""
Configuration constants.

Centralizes the tuning values of maze generation. Nothing in the core reads
these directly during generation: they seed the defaults of
``GenerationSettings`` and the level catalog, which are passed explicitly.
"""

# =============================================================================
# VISIBILITY
# =============================================================================

# Radius (in cells) of the area the player can see around themselves.
# Shared with the fog-of-war renderer: a graft is only invisible if the
# builder and the renderer agree on this value.
VISIBILITY_RADIUS = 12

# =============================================================================
# MAZE GENERATION
# =============================================================================

# Probability that a frontier cell becomes the next one to grow.
# Higher values give long corridors (close to a randomized depth-first carve),
# lower values give many short branches clustered around the spawn points.
CHANCE_TO_BE_NEXT = 0.07

# RNG domain used for builds. The attempt number is appended so every retry
# gets an independent, still reproducible stream.
BUILD_RNG_DOMAIN = "maze.build"

# =============================================================================
# LEVELS
# =============================================================================

PLAIN_LEVEL_BASE_RADIUS = 12
BRANCHING_LEVEL_BASE_RADIUS = 17
BRANCHING_LEVEL_CHAIN_LENGTH = 6

RING_LEVEL_INNER_RADIUS = 6
RING_LEVEL_BASE_OUTER_RADIUS = 24
RING_LEVEL_CHAIN_LENGTH = 3

# Emit a warning every N failed attempts in addition to the per-attempt
# debug message, so a stalled retry loop is visible in the logs.
GENERATION_RETRY_WARN_EVERY = 10

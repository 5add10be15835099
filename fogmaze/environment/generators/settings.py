from __future__ import annotations

from dataclasses import dataclass, field

from fogmaze import config
from fogmaze.environment.region import Region, make_visible_area


@dataclass(frozen=True)
class GenerationSettings:
    """Tuning values for one build, passed explicitly to the builder.

    Attributes:
        visibility_radius: Radius of the area the player can see. Grafts are
            placed so that the seam lies outside this area.
        chance_to_be_next: Per-cell probability used by the carving loop when
            picking the next frontier cell to grow.
        visible_area: The visibility footprint around the origin, computed
            from ``visibility_radius``.
    """

    visibility_radius: int = config.VISIBILITY_RADIUS
    chance_to_be_next: float = config.CHANCE_TO_BE_NEXT
    visible_area: Region = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.visibility_radius < 1:
            raise ValueError(
                f"visibility_radius must be positive, got {self.visibility_radius}"
            )
        if not 0.0 < self.chance_to_be_next <= 1.0:
            raise ValueError(
                f"chance_to_be_next must be in (0, 1], got {self.chance_to_be_next}"
            )
        object.__setattr__(
            self, "visible_area", make_visible_area(self.visibility_radius)
        )

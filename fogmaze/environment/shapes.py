"""Cell sets that layers are built over.

These are pure geometry: each function returns the cells of a shape centered
on the origin, sorted by x then y so that building a layer from them is
reproducible.
"""

from __future__ import annotations

import math

import numpy as np

from fogmaze.geometry import Coord


def _grid(
    x_range: tuple[int, int], y_range: tuple[int, int]
) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(xs, ys)`` arrays spanning the inclusive ranges, indexed ``[x, y]``."""
    return np.meshgrid(
        np.arange(x_range[0], x_range[1] + 1),
        np.arange(y_range[0], y_range[1] + 1),
        indexing="ij",
    )


def _coords(xs: np.ndarray, ys: np.ndarray, mask: np.ndarray) -> list[Coord]:
    return [Coord(int(x), int(y)) for x, y in zip(xs[mask], ys[mask], strict=True)]


def _erode(mask: np.ndarray) -> np.ndarray:
    """Cells of ``mask`` whose whole 3x3 neighborhood is inside ``mask``."""
    padded = np.pad(mask, 1, constant_values=False)
    width, height = mask.shape
    result = np.ones_like(mask)
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            result &= padded[1 + dx : 1 + dx + width, 1 + dy : 1 + dy + height]
    return result


def make_circle(radius: int) -> list[Coord]:
    """Cells strictly inside a circle of ``radius`` around the origin."""
    xs, ys = _grid((-radius, radius), (-radius, radius))
    return _coords(xs, ys, xs**2 + ys**2 < radius**2)


def make_ring(inner_radius: int, outer_radius: int) -> list[Coord]:
    """Cells between two concentric circles (inner edge included)."""
    xs, ys = _grid((-outer_radius, outer_radius), (-outer_radius, outer_radius))
    r_sqr = xs**2 + ys**2
    return _coords(xs, ys, (r_sqr < outer_radius**2) & (r_sqr >= inner_radius**2))


def make_rectangle(width: int, height: int) -> list[Coord]:
    """Cells of a ``width`` x ``height`` rectangle with its top-left at the origin."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Rectangle size must be positive, got {width}x{height}")
    xs, ys = _grid((0, width - 1), (0, height - 1))
    return _coords(xs, ys, np.ones_like(xs, dtype=bool))


def make_lemniscate(size: float, breadth: int) -> list[Coord]:
    """A figure-eight band: the lemniscate of Bernoulli thickened by ``breadth``."""
    t = np.linspace(0.0, math.pi / 2.0, int(size))
    d = 1.0 + np.sin(t) ** 2
    # Components are non-negative, so floor(v + 0.5) rounds half away from zero.
    curve_x = np.floor(size * np.cos(t) / d + 0.5).astype(int)
    curve_y = np.floor(size * np.sin(t) * np.cos(t) / d + 0.5).astype(int)

    curve: set[tuple[int, int]] = set()
    for x, y in zip(curve_x.tolist(), curve_y.tolist(), strict=True):
        curve.update(((x, y), (-x, y), (x, -y), (-x, -y)))

    brush = make_circle(breadth)
    cells = {Coord(x + bx, y + by) for x, y in curve for bx, by in brush}
    return sorted(cells)


def make_hourglass(radius: int) -> list[Coord]:
    """Two round bulbs joined by a narrow waist, with a partly hollow outline.

    The outline of the full hourglass is always present; the top bulb is only
    filled down to ``radius`` cells above the waist and the bottom bulb only
    keeps a central spine and a funnel of cells near its bottom.
    """
    circle_center_y = int(math.sqrt(2) * radius)
    half_height = circle_center_y + radius

    xs, ys = _grid((-radius, radius), (-half_height, half_height))
    ax = np.abs(xs)
    ay = np.abs(ys)
    waist = (ay >= ax) & (ax + ay <= circle_center_y)
    bulbs = (ay - circle_center_y) ** 2 + ax**2 < radius**2
    outer = waist | bulbs

    border = outer & ~_erode(outer)
    top = (ys < 0) & (ys > -radius)
    bottom = (ys >= 0) & ((xs == 0) | (ys * 5 > ax * 2 + radius * 5))
    return _coords(xs, ys, border | (outer & (top | bottom)))

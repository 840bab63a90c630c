"""
Potential landscape: the static level potential and the per-step cache.

The level potential is authored once (cones and wells), then shifted so that
its maximum is 0; positive potentials make the explicit scheme misbehave.
Every step the cache is rebuilt as level potential plus a planar "tilt", the
tipped-table bias steered by two slopes in [-1, 1].
"""

import logging
import numpy as np

from quantum_wave.constants import DEFAULT_MAX_TILT
from quantum_wave.grid import Grid

logger = logging.getLogger(__name__)


def _radius_grid(width, height, center):
    """Euclidean distance of every cell to center, shape (height, width)."""
    xs = np.arange(width) - center[0]
    ys = np.arange(height) - center[1]
    return np.sqrt(xs[None, :] ** 2 + ys[:, None] ** 2)


def _check_radius(radius):
    if not radius > 0:
        raise ValueError(f'radius must be positive, got {radius}')


class Potential:
    def __init__(self, width: int, height: int, max_tilt: float = DEFAULT_MAX_TILT):
        self.level = Grid.floats(width, height)
        self.cache = Grid.floats(width, height)
        self.max_tilt = max_tilt

    @property
    def width(self):
        return self.level.width

    @property
    def height(self):
        return self.level.height

    def add_cone(self, center, radius: float, depth: float):
        """Add r/radius*depth inside the disc of given radius around center."""
        _check_radius(radius)
        r = _radius_grid(self.width, self.height, center)
        inside = r < radius
        self.level.view()[inside] += (r / radius * depth)[inside]

    def add_well(self, center, radius: float, core_pot: float):
        """Add a parabolic well inside radius with a -a/r tail outside it.

        Inside: b*(r**2 - 3*radius**2), outside: -a/r, with
        b = -core_pot/3/radius**2 and a = 2*b*radius**2. The exact centre is
        always inside a positive radius, so the tail never divides by zero.
        """
        _check_radius(radius)
        b = -core_pot / 3.0 / radius / radius
        a = 2.0 * b * radius * radius
        r = _radius_grid(self.width, self.height, center)
        inside = r < radius
        contribution = np.empty_like(r)
        contribution[inside] = b * (r[inside] ** 2 - 3.0 * radius * radius)
        contribution[~inside] = -a / r[~inside]
        self.level.view()[...] += contribution

    def ensure_no_positive_potential(self):
        """Shift the level potential so that its maximum is exactly 0."""
        max_pot = self.level.max()
        self.level.data -= max_pot
        logger.debug('level potential shifted by %.6g', -max_pot)
        return max_pot

    def tilt_changes(self, x_slope: float, y_slope: float):
        """(right_change, down_change): potential change across the width and the height.

        A combined slope above 1 is scaled down so that
        |right_change| + |down_change| never exceeds max_tilt.
        """
        total_slope = abs(x_slope) + abs(y_slope)
        tilt = self.max_tilt if total_slope <= 1.0 else self.max_tilt / total_slope

        largest_dim = max(self.width, self.height)
        right_change = -x_slope * tilt * (self.width / largest_dim)
        down_change = -y_slope * tilt * (self.height / largest_dim)
        return right_change, down_change

    def tilt_corners(self, x_slope: float, y_slope: float):
        """Corner tilt potentials (top_left, top_right, bottom_left, bottom_right),
        shifted so the largest one is 0.
        """
        right_change, down_change = self.tilt_changes(x_slope, y_slope)
        corners = (
            -right_change - down_change,
            right_change - down_change,
            -right_change + down_change,
            right_change + down_change,
        )
        top = max(corners)
        return tuple(c - top for c in corners)

    def tilt_field(self, x_slope: float, y_slope: float) -> np.ndarray:
        """Planar tilt over the interior cells, shape (height-2, width-2).

        Starts from the shifted top-left corner and advances by right_change/width
        per column and down_change/height per row, so the whole field spans at
        most max_tilt and stays non-positive.
        """
        right_change, down_change = self.tilt_changes(x_slope, y_slope)
        top_left = self.tilt_corners(x_slope, y_slope)[0]
        w, h = self.width, self.height
        x_step = right_change / w
        y_step = down_change / h
        # cell (x, y) sits (x + 1) column steps and (y + 1) row steps from the corner
        cols = x_step * np.arange(2, w)
        rows = top_left + y_step * np.arange(2, h)
        return rows[:, None] + cols[None, :]

    def reset_potential_cache(self, x_slope: float = 0.0, y_slope: float = 0.0):
        cache = self.cache.view()
        level = self.level.view()
        cache[...] = level
        cache[1:-1, 1:-1] = self.tilt_field(x_slope, y_slope) + level[1:-1, 1:-1]
        return self.cache

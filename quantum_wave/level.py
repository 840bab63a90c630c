"""
Mask builders for level authoring.

Each function returns a boolean numpy array of shape (height, width) that can
be handed to `Universe.add_walls` or `Universe.add_sinks`. Coordinates are
grid cells, x along columns and y along rows.
"""

from __future__ import annotations
from typing import List, Tuple
import numpy as np
from matplotlib.path import Path

Vertex = Tuple[float, float]


def _cell_centers(width, height):
    return np.meshgrid(np.arange(width), np.arange(height))


def circle_mask(width: int, height: int, center: Vertex, radius: float) -> np.ndarray:
    X, Y = _cell_centers(width, height)
    return (X - center[0]) ** 2 + (Y - center[1]) ** 2 <= radius ** 2


def rect_mask(width: int, height: int, x0: int, y0: int, x1: int, y1: int) -> np.ndarray:
    """Cells with x0 <= x < x1 and y0 <= y < y1."""
    mask = np.zeros((height, width), dtype=bool)
    mask[max(y0, 0):max(y1, 0), max(x0, 0):max(x1, 0)] = True
    return mask


def ellipse_mask(width: int, height: int, center: Vertex, rx: float, ry: float,
                 angle: float = 0.0) -> np.ndarray:
    """Ellipse with semi-axes rx (along x) and ry, rotated by angle degrees CCW."""
    theta = np.deg2rad(angle)
    cos_t = np.cos(theta)
    sin_t = np.sin(theta)
    X, Y = _cell_centers(width, height)
    x = X - center[0]
    y = Y - center[1]
    # rotate by -theta into the ellipse frame
    xr = cos_t * x + sin_t * y
    yr = -sin_t * x + cos_t * y
    return (xr / rx) ** 2 + (yr / ry) ** 2 <= 1.0


def polygon_mask(width: int, height: int, vertices: List[Vertex]) -> np.ndarray:
    """Cells whose centre lies inside the polygon given as [(x, y), ...]."""
    path = Path(vertices)
    X, Y = _cell_centers(width, height)
    pts = np.vstack((X.ravel(), Y.ravel())).T
    return path.contains_points(pts).reshape((height, width))


def rotated_rect_mask(width: int, height: int, center: Vertex, rect_width: float,
                      rect_height: float, angle: float = 0.0) -> np.ndarray:
    theta = np.deg2rad(angle)
    cos_t = np.cos(theta)
    sin_t = np.sin(theta)
    w2 = rect_width / 2.0
    h2 = rect_height / 2.0
    corners = []
    for dx, dy in [(-w2, -h2), (w2, -h2), (w2, h2), (-w2, h2)]:
        corners.append((center[0] + cos_t * dx - sin_t * dy,
                        center[1] + sin_t * dx + cos_t * dy))
    return polygon_mask(width, height, corners)


def border_mask(width: int, height: int, pad: int) -> np.ndarray:
    """Ring of cells within pad cells of the grid edge; the usual sink layer."""
    X, Y = _cell_centers(width, height)
    dist = np.minimum(np.minimum(X, Y), np.minimum(width - 1 - X, height - 1 - Y))
    return dist < pad

"""
Absorbing boundary: the sink multiplier field.

Every cell gets a damping factor in [0, 1] derived from its grid distance
(4-connected, unit steps) to the nearest free cell, i.e. a cell that is
neither a wall nor a sink. Free cells keep 1.0; cells deep inside a sink
region approach 0 so that waves entering it fade out instead of reflecting,
a geometric stand-in for a perfectly matched layer.
"""

from collections import deque
import logging
import numpy as np

from quantum_wave.constants import SUDDENNESS
from quantum_wave.coord import Coord
from quantum_wave.grid import Grid

logger = logging.getLogger(__name__)


def sink_distances(walls: Grid, sinks: Grid) -> Grid:
    """Multi-source flood fill from every free cell.

    Returns a float grid of distances; cells that no free cell reaches stay
    at +inf. The frontier is FIFO: with uniform edge weights the first
    committed distance of a cell is already its minimum, so a priority queue
    would only add cost.
    """
    if not walls.same_shape(sinks):
        raise ValueError(f'wall mask {walls.shape} and sink mask {sinks.shape} differ in shape')
    width, height = walls.width, walls.height
    dist = Grid(width, np.full(width * height, np.inf))

    queue = deque()
    blocked = walls.data | sinks.data
    for i in np.flatnonzero(~blocked):
        queue.append((Coord(int(i) % width, int(i) // width), 0))

    while queue:
        coord, d = queue.popleft()
        i = coord.index(width)
        if dist.data[i] > d:
            dist.data[i] = d
            for n in dist.valid_neighbors(coord):
                queue.append((n, d + 1))
    return dist


def distances_to_multiplier(dist: Grid, suddenness: float = SUDDENNESS) -> Grid:
    """exp(-(d/2)**2 * suddenness) for every cell; inf maps to 0."""
    return Grid(dist.width, np.exp(-((dist.data / 2.0) ** 2) * suddenness))


def compute_sink_multiplier(walls: Grid, sinks: Grid, suddenness: float = SUDDENNESS) -> Grid:
    dist = sink_distances(walls, sinks)
    mult = distances_to_multiplier(dist, suddenness)
    finite = dist.data[np.isfinite(dist.data)]
    logger.debug(
        'sink multiplier: %d sink cells, max depth %s, min multiplier %.4g',
        int(np.count_nonzero(sinks.data)),
        int(finite.max()) if finite.size else 'n/a',
        mult.min(),
    )
    if finite.size < dist.data.size:
        logger.warning('%d cells are not connected to any free cell; their multiplier is 0',
                       dist.data.size - finite.size)
    return mult

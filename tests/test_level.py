import sys
import os
import numpy as np

# Ensure the repository root is in sys.path for imports
root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if root not in sys.path:
    sys.path.insert(0, root)

from quantum_wave.level import (
    border_mask, circle_mask, ellipse_mask, polygon_mask, rect_mask, rotated_rect_mask,
)
from quantum_wave.probe import NormProbe, Probe
from quantum_wave.universe import Universe


def test_border_mask_ring():
    mask = border_mask(6, 5, pad=1)
    assert mask.shape == (5, 6)
    assert np.count_nonzero(mask) == 2 * 6 + 2 * 5 - 4
    assert not mask[1:-1, 1:-1].any()
    assert np.count_nonzero(border_mask(10, 10, pad=2)) == 100 - 36


def test_rect_and_circle():
    mask = rect_mask(8, 6, 2, 1, 5, 3)
    assert np.count_nonzero(mask) == 3 * 2
    assert mask[1, 2] and mask[2, 4] and not mask[3, 2]
    circle = circle_mask(11, 11, (5, 5), 1.0)
    assert np.count_nonzero(circle) == 5
    assert circle[5, 5] and circle[4, 5] and not circle[4, 4]


def test_ellipse_orientation():
    # semi-axis 4 along x, 1 along y
    mask = ellipse_mask(15, 15, (7, 7), rx=4, ry=1)
    assert mask[7, 11] and not mask[9, 7]
    rotated = ellipse_mask(15, 15, (7, 7), rx=4, ry=1, angle=90)
    assert rotated[11, 7] and not rotated[7, 9]


def test_polygon_masks():
    tri = polygon_mask(20, 20, [(2, 2), (17, 2), (2, 17)])
    assert tri[5, 5]
    assert not tri[15, 15]
    rect = rotated_rect_mask(20, 20, (10, 10), 8, 2, angle=0)
    assert rect[10, 12] and not rect[13, 10]


def test_masks_drive_universe():
    u = Universe(12, 12)
    u.add_walls(circle_mask(12, 12, (6, 6), 2))
    u.add_sinks(border_mask(12, 12, pad=2))
    u.setup()
    assert u.is_wall((6, 6))
    assert u.sink_mult.get((0, 0)) < u.sink_mult.get((1, 1)) < 1.0


def test_probes_record_one_sample_per_step():
    u = Universe(10, 10)
    u.add_gaussian((5, 5), sigma=1.0)
    u.setup()
    probe = Probe(xs=[5], ys=[5])
    norm = NormProbe()

    def record(universe, t):
        probe.capture(universe)
        norm.capture(universe)

    probe.capture(u)
    assert probe.get_signal()[0] == np.abs(u.quantum.get((5, 5))) ** 2
    u.run(3, callback=record)
    assert probe.get_signal().shape == (4,)
    assert norm.get_signal().shape == (3,)
    assert (norm.get_signal() > 0).all()

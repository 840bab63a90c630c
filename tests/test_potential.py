import sys
import os
import pytest
import numpy as np

# Ensure the repository root is in sys.path for imports
root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if root not in sys.path:
    sys.path.insert(0, root)

from quantum_wave.coord import Coord
from quantum_wave.potential import Potential


def test_cone_values():
    p = Potential(5, 5)
    p.add_cone((2, 2), radius=3.0, depth=1.0)
    assert p.level.get(Coord(2, 2)) == 0.0
    assert p.level.get(Coord(3, 2)) == pytest.approx(1.0 / 3.0)
    # r = sqrt(8) < 3
    assert p.level.get(Coord(0, 0)) == pytest.approx(np.sqrt(8) / 3.0)
    # r = 3 is outside the disc
    p2 = Potential(7, 7)
    p2.add_cone((3, 3), radius=3.0, depth=1.0)
    assert p2.level.get(Coord(0, 3)) == 0.0


def test_well_values_and_centre():
    p = Potential(9, 9)
    p.add_well((4, 4), radius=2.0, core_pot=3.0)
    b = -3.0 / 3.0 / 4.0
    a = 2.0 * b * 4.0
    assert p.level.get(Coord(4, 4)) == pytest.approx(b * (-12.0))
    assert p.level.get(Coord(5, 4)) == pytest.approx(b * (1.0 - 12.0))
    assert p.level.get(Coord(8, 4)) == pytest.approx(-a / 4.0)
    assert np.isfinite(p.level.data).all()


def test_degenerate_radius_rejected():
    p = Potential(5, 5)
    with pytest.raises(ValueError):
        p.add_well((2, 2), radius=0.0, core_pot=1.0)
    with pytest.raises(ValueError):
        p.add_cone((2, 2), radius=0.0, depth=1.0)
    with pytest.raises(ValueError):
        p.add_cone((2, 2), radius=-1.0, depth=1.0)


def test_ensure_no_positive_potential():
    p = Potential(5, 5)
    p.add_cone((2, 2), radius=3.0, depth=1.0)
    p.add_well((2, 2), radius=3.0, core_pot=1.0)
    before = p.level.data.copy()
    p.ensure_no_positive_potential()
    after = p.level.data
    assert after.max() == pytest.approx(0.0, abs=1e-5)
    np.testing.assert_allclose(after[:, None] - after[None, :],
                               before[:, None] - before[None, :], atol=1e-9)


def test_flat_table_leaves_level_untouched():
    p = Potential(6, 5)
    p.add_well((2, 2), radius=2.0, core_pot=1.0)
    p.ensure_no_positive_potential()
    cache = p.reset_potential_cache(0.0, 0.0)
    assert np.array_equal(cache.data, p.level.data)


def test_tilt_corners():
    p = Potential(10, 10, max_tilt=2.5)
    assert p.tilt_corners(1.0, 0.0) == pytest.approx((0.0, -5.0, 0.0, -5.0))
    assert p.tilt_corners(0.0, -1.0) == pytest.approx((-5.0, -5.0, 0.0, 0.0))
    # combined slope 2 halves the tilt
    assert p.tilt_corners(1.0, 1.0) == pytest.approx((0.0, -2.5, -2.5, -5.0))
    assert max(p.tilt_corners(0.3, -0.7)) == 0.0


def test_tilt_scales_with_aspect():
    p = Potential(20, 10, max_tilt=1.0)
    # the short side gets half of the drop
    tl, tr, bl, br = p.tilt_corners(0.0, 1.0)
    assert tl - bl == pytest.approx(1.0)


def test_x_tilt_interpolates_interior():
    width, height = 8, 6
    p = Potential(width, height, max_tilt=1.0)
    cache = p.reset_potential_cache(1.0, 0.0).view()
    interior = cache[1:-1, 1:-1]
    # constant along y, decreasing along x, never positive
    assert np.allclose(interior, interior[0][None, :])
    assert (np.diff(interior[0]) < 0).all()
    assert (interior <= 0).all()
    # one step of right_change / width per column, counted from the corner
    step = -1.0 / width
    assert interior[0, 0] == pytest.approx(2 * step)
    assert interior[0, -1] == pytest.approx(step * (width - 1))
    # edge ring holds the level potential only
    assert (cache[0, :] == 0).all() and (cache[-1, :] == 0).all()
    assert (cache[:, 0] == 0).all() and (cache[:, -1] == 0).all()


@pytest.mark.parametrize('size', [(10, 10), (20, 10), (7, 12)])
@pytest.mark.parametrize('slopes', [(1.0, 0.0), (0.0, -1.0), (1.0, 1.0), (-1.0, 0.5), (-0.6, -0.4)])
def test_tilt_span_bounded_by_max_tilt(size, slopes):
    max_tilt = 2.5
    p = Potential(*size, max_tilt=max_tilt)
    interior = p.reset_potential_cache(*slopes).view()[1:-1, 1:-1]
    assert interior.max() - interior.min() <= max_tilt + 1e-12
    assert (interior <= 0).all()
    right_change, down_change = p.tilt_changes(*slopes)
    assert abs(right_change) + abs(down_change) <= max_tilt + 1e-12


def test_diagonal_tilt_span():
    p = Potential(10, 10, max_tilt=2.5)
    interior = p.reset_potential_cache(1.0, 1.0).view()[1:-1, 1:-1]
    # half of max_tilt per axis, seven of the ten steps per axis inside the ring
    assert interior[0, 0] == pytest.approx(-0.25 - 0.25)
    assert interior[-1, -1] == pytest.approx(-1.25 * 0.9 - 1.25 * 0.9)
    assert interior.max() - interior.min() == pytest.approx(2 * 1.25 * 0.7)


def test_cache_adds_level_potential():
    p = Potential(7, 7, max_tilt=1.0)
    p.add_cone((3, 3), radius=2.0, depth=-1.0)
    p.ensure_no_positive_potential()
    tilt = p.tilt_field(0.5, 0.5)
    cache = p.reset_potential_cache(0.5, 0.5).view()
    np.testing.assert_allclose(cache[1:-1, 1:-1], tilt + p.level.view()[1:-1, 1:-1])

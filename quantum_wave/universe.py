"""
The simulated universe: a complex wavefunction on a 2D grid with walls,
absorbing sinks and a tunable potential landscape.

The update is an explicit split-step scheme for a Schrödinger-like equation
with a 4-point Laplacian:

    re' = m * (im + dt * (-0.5 * lap(re) + V * re))
    im' = m * (re + dt * (-0.5 * lap(im) + V * im))

where m is the sink multiplier and V the potential cache. Only interior cells
that are not walls evolve; the outer ring is a fixed boundary.

Two update orders are available:

- ``scheme='snapshot'`` (default): every neighbor is read from the previous
  timestep (vectorized, double buffered).
- ``scheme='in_place'``: cells are rewritten in row-major order while the
  scan runs, so later cells see already-updated top/left neighbors. This is
  the reference scan order of the browser version of this simulator.

Typical use:

    u = Universe(60, 60)
    u.add_sinks(border_mask(60, 60, pad=6))
    u.add_gaussian((20, 30), sigma=3.0, fx=4.0)
    u.setup()
    u.run(100)
"""

import logging
import numpy as np

from quantum_wave import color
from quantum_wave.boundary import compute_sink_multiplier
from quantum_wave.constants import (
    DEFAULT_DT, DEFAULT_MAX_TILT, SUDDENNESS,
    TOGGLE_SIGMA, TOGGLE_FX, TOGGLE_FY, TOGGLE_AMPLITUDE,
)
from quantum_wave.coord import Coord
from quantum_wave.grid import Grid
from quantum_wave.injector import add_gaussian
from quantum_wave.potential import Potential

logger = logging.getLogger(__name__)

SCHEMES = ('snapshot', 'in_place')


class Universe:
    def __init__(self, width, height, dt=DEFAULT_DT, max_tilt=DEFAULT_MAX_TILT,
                 scheme='snapshot', suddenness=SUDDENNESS):
        if scheme not in SCHEMES:
            raise ValueError(f'unknown update scheme {scheme!r}, expected one of {SCHEMES}')
        self.width = width
        self.height = height
        self.dt = dt
        self.scheme = scheme
        self.suddenness = suddenness

        self.quantum = Grid.complexes(width, height)
        self.walls = Grid.bools(width, height)
        self.sinks = Grid.bools(width, height)
        self.sink_mult = Grid.floats(width, height)
        self.potential = Potential(width, height, max_tilt=max_tilt)
        self._check_shapes()

        self.ready = False
        self.time = 0.0
        self.steps = 0
        self._initial = None
        self._boundary_stale = False
        self._warned_unstable = False

    def _check_shapes(self):
        fields = {
            'quantum': self.quantum,
            'walls': self.walls,
            'sinks': self.sinks,
            'sink_mult': self.sink_mult,
            'potential_level': self.potential.level,
            'potential_cache': self.potential.cache,
        }
        for name, grid in fields.items():
            if grid.shape != (self.height, self.width):
                raise ValueError(
                    f'field {name} has shape {grid.shape}, expected {(self.height, self.width)}')

    @property
    def max_tilt(self):
        return self.potential.max_tilt

    @max_tilt.setter
    def max_tilt(self, value):
        self.potential.max_tilt = value

    @property
    def potential_level(self) -> Grid:
        return self.potential.level

    @property
    def potential_cache(self) -> Grid:
        return self.potential.cache

    # ---- lifecycle --------------------------------------------------------

    def setup(self):
        """One-time precomputation; must run before the first step."""
        self._refresh_boundary()
        self.potential.ensure_no_positive_potential()
        self._initial = self.quantum.copy()
        self.ready = True
        logger.info('universe %dx%d ready: dt=%g, max_tilt=%g, %d walls, %d sinks, scheme=%s',
                    self.width, self.height, self.dt, self.max_tilt,
                    int(np.count_nonzero(self.walls.data)),
                    int(np.count_nonzero(self.sinks.data)), self.scheme)

    def reset(self):
        """Restore the wavefunction captured by setup()."""
        self._require_ready('reset')
        self.quantum = self._initial.copy()
        self._zero_walls()
        self.time = 0.0
        self.steps = 0

    def step(self, x_slope=0.0, y_slope=0.0):
        self._require_ready('step')
        if self._boundary_stale:
            self._refresh_boundary()
        self.potential.reset_potential_cache(x_slope, y_slope)
        if self.scheme == 'snapshot':
            self._step_snapshot()
        else:
            self._step_in_place()
        self.time += self.dt
        self.steps += 1
        self._check_finite()

    def run(self, steps, callback=None, x_slope=0.0, y_slope=0.0):
        """Run the given number of steps.
        callback(universe, tstep) is called after every step when given.
        """
        for t in range(steps):
            self.step(x_slope, y_slope)
            if callback is not None:
                callback(self, t)

    def _require_ready(self, what):
        if not self.ready:
            raise RuntimeError(f'Universe.{what}() called before setup()')

    # ---- update rules -----------------------------------------------------

    def _step_snapshot(self):
        dt = self.dt
        psi = self.quantum.view()
        re = psi.real.copy()
        im = psi.imag.copy()
        mult = self.sink_mult.view()[1:-1, 1:-1]
        pot = self.potential.cache.view()[1:-1, 1:-1]

        lap_re = re[:-2, 1:-1] + re[2:, 1:-1] + re[1:-1, :-2] + re[1:-1, 2:] - 4.0 * re[1:-1, 1:-1]
        lap_im = im[:-2, 1:-1] + im[2:, 1:-1] + im[1:-1, :-2] + im[1:-1, 2:] - 4.0 * im[1:-1, 1:-1]

        new = np.empty(mult.shape, dtype=np.complex128)
        new.real = mult * (im[1:-1, 1:-1] + dt * (-0.5 * lap_re + pot * re[1:-1, 1:-1]))
        new.imag = mult * (re[1:-1, 1:-1] + dt * (-0.5 * lap_im + pot * im[1:-1, 1:-1]))

        free = ~self.walls.view()[1:-1, 1:-1]
        psi[1:-1, 1:-1][free] = new[free]

    def _step_in_place(self):
        # flat indices; x and y ranges keep every neighbor in bounds
        dt = self.dt
        w = self.width
        q = self.quantum.data
        walls = self.walls.data
        mult = self.sink_mult.data
        pot = self.potential.cache.data
        for y in range(1, self.height - 1):
            for x in range(1, w - 1):
                i = x + w * y
                if walls[i]:
                    continue
                cx = q[i]
                top, bottom, left, right = q[i - w], q[i + w], q[i - 1], q[i + 1]
                re = mult[i] * (cx.imag + dt * (
                    -0.5 * (top.real + bottom.real + left.real + right.real - 4.0 * cx.real)
                    + pot[i] * cx.real))
                im = mult[i] * (cx.real + dt * (
                    -0.5 * (top.imag + bottom.imag + left.imag + right.imag - 4.0 * cx.imag)
                    + pot[i] * cx.imag))
                q[i] = complex(re, im)

    def _check_finite(self):
        if self._warned_unstable:
            return
        if not np.isfinite(self.quantum.data).all():
            self._warned_unstable = True
            logger.warning('non-finite wavefunction values after step %d (dt=%g); '
                           'the scheme is unstable for this setup', self.steps, self.dt)

    # ---- walls and sinks --------------------------------------------------

    def _refresh_boundary(self):
        self.sink_mult = compute_sink_multiplier(self.walls, self.sinks, self.suddenness)
        self._zero_walls()
        self._boundary_stale = False

    def _zero_walls(self):
        self.quantum.data[self.walls.data] = 0.0

    def is_wall(self, coord) -> bool:
        return bool(self.walls.get(coord))

    def is_sink(self, coord) -> bool:
        return bool(self.sinks.get(coord))

    def set_wall(self, coord, value=True):
        self.walls.set(coord, value)
        self._boundary_stale = self.ready
        if self.ready and value:
            self._zero_walls()

    def set_sink(self, coord, value=True):
        self.sinks.set(coord, value)
        self._boundary_stale = self.ready

    def _mask(self, mask):
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != (self.height, self.width):
            raise ValueError(f'mask shape {mask.shape} does not match universe {(self.height, self.width)}')
        return mask.reshape(-1)

    def add_walls(self, mask):
        self.walls.data |= self._mask(mask)
        self._boundary_stale = self.ready
        if self.ready:
            self._zero_walls()

    def add_sinks(self, mask):
        self.sinks.data |= self._mask(mask)
        self._boundary_stale = self.ready

    # ---- wavefunction and potentials --------------------------------------

    def add_gaussian(self, center, sigma, fx=0.0, fy=0.0, amplitude_scale=1.0):
        add_gaussian(self.quantum, center, sigma, fx, fy, amplitude_scale)
        if self.ready:
            self._zero_walls()

    def toggle_cell(self, row, column):
        """Interactive perturbation: drop a packet at the clicked cell."""
        self.add_gaussian(Coord(column, row), TOGGLE_SIGMA, TOGGLE_FX, TOGGLE_FY, TOGGLE_AMPLITUDE)

    def add_potential_cone(self, center, radius, depth):
        self.potential.add_cone(center, radius, depth)
        if self.ready:
            self.potential.ensure_no_positive_potential()

    def add_potential_well(self, center, radius, core_pot):
        self.potential.add_well(center, radius, core_pot)
        if self.ready:
            self.potential.ensure_no_positive_potential()

    def ensure_no_positive_potential(self):
        return self.potential.ensure_no_positive_potential()

    def reset_potential_cache(self, x_slope=0.0, y_slope=0.0):
        return self.potential.reset_potential_cache(x_slope, y_slope)

    def total_probability(self) -> float:
        return float(np.sum(np.abs(self.quantum.data) ** 2))

    # ---- renderer accessors -----------------------------------------------

    def cells(self) -> bytes:
        """Flat RGB bytes of the wavefunction, row-major."""
        return color.complex_to_rgb(self.quantum.data).tobytes()

    def potential_level_pixels(self) -> bytes:
        return color.grayscale(self.potential.level.data).tobytes()

    def potential_cache_pixels(self) -> bytes:
        return color.grayscale(self.potential.cache.data).tobytes()

# =============================================================================
# CONSTANTS: Default Simulation Parameters
# =============================================================================
"""
Default parameters for the quantum wave simulator.

Every value here is only a default: `Universe`, `compute_sink_multiplier` and
the colour helpers accept keyword overrides.
"""

import numpy as np

# =============================================================================
# Time stepping
# =============================================================================
DEFAULT_DT = 0.1            # timestep used by Universe.step
DEFAULT_MAX_TILT = 2.5      # bound on the total potential drop of a tilt

# =============================================================================
# Absorbing boundary
# =============================================================================
# multiplier = exp(-(distance / 2)**2 * SUDDENNESS)
SUDDENNESS = 0.005

# =============================================================================
# Interactive perturbation (Universe.toggle_cell)
# =============================================================================
TOGGLE_SIGMA = 2.0
TOGGLE_FX = 0.0
TOGGLE_FY = 0.0
TOGGLE_AMPLITUDE = 1.0

# =============================================================================
# Rendering
# =============================================================================
LIGHTNESS_PER_MAGNITUDE = 0.5   # HSL lightness reached at |psi| == 1
TWO_PI = 2 * np.pi

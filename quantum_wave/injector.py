"""
Gaussian wave packets.

A packet is superposed (added, never overwritten) onto the interior of a
complex field. fx and fy are plane-wave modulations in cycles per grid
width/height; fx = fy = 0 gives a purely real, radially symmetric bump.
"""

import numpy as np

from quantum_wave.constants import TWO_PI
from quantum_wave.grid import Grid


def gaussian_packet(width, height, center, sigma, fx=0.0, fy=0.0, amplitude_scale=1.0):
    """Complex packet values over the full grid, shape (height, width)."""
    if not sigma > 0:
        raise ValueError(f'sigma must be positive, got {sigma}')
    amplitude = amplitude_scale * TWO_PI
    denom = 4.0 * sigma * sigma

    X, Y = np.meshgrid(np.arange(width, dtype=float), np.arange(height, dtype=float))
    r2 = (X - center[0]) ** 2 + (Y - center[1]) ** 2
    envelope = amplitude * np.exp(-r2 / denom)
    phase_x = TWO_PI * fx * X / width
    phase_y = TWO_PI * fy * Y / height
    re = envelope * np.cos(phase_x) * np.cos(phase_y)
    im = envelope * np.sin(phase_x) * np.sin(phase_y)
    return re + 1j * im


def add_gaussian(field: Grid, center, sigma, fx=0.0, fy=0.0, amplitude_scale=1.0):
    """Add a packet to every interior cell of field; the border ring is left alone."""
    packet = gaussian_packet(field.width, field.height, center, sigma, fx, fy, amplitude_scale)
    field.view()[1:-1, 1:-1] += packet[1:-1, 1:-1]
    return field

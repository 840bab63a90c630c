"""
Byte buffers for an external renderer.

- `complex_to_rgb`: phase -> hue, magnitude -> lightness (HSL), inverted so
  that an empty field is white. Exactly zero values get zero saturation
  since their phase is undefined.
- `grayscale`: 255 - v*255 clipped to [0, 255], on three channels.
"""

import numpy as np
from matplotlib.colors import hsv_to_rgb

from quantum_wave.constants import LIGHTNESS_PER_MAGNITUDE


def hsl_to_rgb(h, s, l):
    """Vectorized HSL -> RGB, all channels in [0, 1]; goes through HSV."""
    h, s, l = np.broadcast_arrays(np.asarray(h, float), np.asarray(s, float), np.asarray(l, float))
    v = l + s * np.minimum(l, 1.0 - l)
    with np.errstate(divide='ignore', invalid='ignore'):
        s_v = np.where(v > 0, 2.0 * (1.0 - l / np.where(v > 0, v, 1.0)), 0.0)
    hsv = np.stack([h % 1.0, np.clip(s_v, 0.0, 1.0), np.clip(v, 0.0, 1.0)], axis=-1)
    return hsv_to_rgb(hsv)


def complex_to_rgb(values, lightness_per_magnitude=LIGHTNESS_PER_MAGNITUDE):
    """uint8 array of shape values.shape + (3,)."""
    values = np.asarray(values, dtype=np.complex128)
    magnitude = np.abs(values)
    hue = (np.degrees(np.angle(values)) + 360.0) % 360.0 / 360.0
    saturation = np.where(magnitude == 0, 0.0, 1.0)
    lightness = np.clip(magnitude * lightness_per_magnitude, 0.0, 1.0)
    rgb = np.rint(hsl_to_rgb(hue, saturation, lightness) * 255.0).astype(np.uint8)
    return 255 - rgb


def grayscale(values):
    """uint8 array of shape values.shape + (3,)."""
    values = np.asarray(values, dtype=float)
    level = np.clip(255.0 - values * 255.0, 0.0, 255.0)
    level = np.where(np.isnan(level), 0.0, level).astype(np.uint8)
    return np.repeat(level[..., None], 3, axis=-1)

"""
Example: a wave packet crossing a small level with a wall, a potential well
and an absorbing sink border.

Usage:
    python examples/simulate_level.py

This script runs a short simulation, saves a GIF of the wavefunction colours
(phase -> hue, magnitude -> lightness), plots the probability recorded by a
probe and its frequency spectrum.
"""

import sys
import os
import logging
import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path
import imageio

# Ensure the project root is on sys.path when running this script directly
root_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if root_path not in sys.path:
    sys.path.insert(0, root_path)

from quantum_wave.universe import Universe
from quantum_wave.level import border_mask, rect_mask
from quantum_wave.probe import Probe, NormProbe

logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

OUT_DIR = Path(__file__).resolve().parent / "outputs"
OUT_DIR.mkdir(exist_ok=True)

# Level setup
width, height = 120, 90
u = Universe(width, height, dt=0.1, max_tilt=2.5)
u.add_sinks(border_mask(width, height, pad=10))
# a wall with a slit in the middle
u.add_walls(rect_mask(width, height, 70, 0, 72, height // 2 - 4))
u.add_walls(rect_mask(width, height, 70, height // 2 + 4, 72, height))
u.add_potential_well((95, height // 2), radius=8.0, core_pot=1.0)

# packet moving to the right
u.add_gaussian((35, height // 2), sigma=4.0, fx=8.0, fy=0.0, amplitude_scale=0.2)
u.setup()

probe = Probe(xs=[90], ys=[height // 2])
norm = NormProbe()

frames = []
# scale factor to enlarge the GIF pixels
scale = 4


def save_frame(tstep):
    img = np.frombuffer(u.cells(), dtype=np.uint8).reshape(height, width, 3)
    frames.append(np.kron(img, np.ones((scale, scale, 1), dtype=np.uint8)))


def step_and_record(universe, tstep):
    probe.capture(universe)
    norm.capture(universe)
    if tstep % 5 == 0:
        save_frame(tstep)


# Run simulation; tilt the table slightly to the right
nsteps = 600
u.run(nsteps, callback=step_and_record, x_slope=0.2)

gif_path = OUT_DIR / 'wave_level.gif'
imageio.mimsave(gif_path, frames, fps=20)
print('Saved animation to:', gif_path)

# Probability at the probe and in the whole universe
signal = probe.get_signal()
fig, (ax_p, ax_n) = plt.subplots(1, 2, figsize=(9, 3.5))
ax_p.plot(signal)
ax_p.set_title('Probe |psi|^2')
ax_p.set_xlabel('Time step')
ax_n.plot(norm.get_signal())
ax_n.set_title('Total probability')
ax_n.set_xlabel('Time step')
for ax in (ax_p, ax_n):
    ax.grid(True)
plt.tight_layout()
plt.savefig(OUT_DIR / 'probe_signal.png')
print('Saved probe signal plot')

# Frequency content of the probe signal
from scipy.fftpack import fft, fftfreq
sig = signal - np.mean(signal)
N = sig.size
freqs = fftfreq(N, d=u.dt)
S = np.abs(fft(sig))

mask = freqs >= 0
plt.figure()
plt.plot(freqs[mask], 20*np.log10(S[mask] + 1e-12))
plt.title('Probe - Frequency')
plt.xlabel('Frequency')
plt.ylabel('Amplitude (dB)')
plt.grid(True)
plt.tight_layout()
plt.savefig(OUT_DIR / 'probe_spectrum.png')
print('Saved probe spectrum plot')

# Static potential landscape
plt.figure()
im = plt.imshow(u.potential_level.view(), cmap='viridis')
plt.imshow(np.ma.masked_where(~u.walls.view(), u.walls.view()), cmap='gray_r', alpha=1.0)
plt.colorbar(im)
plt.title('Level potential and walls')
plt.savefig(OUT_DIR / 'level_potential.png')
print('Saved level potential')

print('Done')

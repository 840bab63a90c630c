"""
Probes: record a time signal from a running universe.
"""

import numpy as np


class Probe:
    """Mean probability density |psi|^2 over a set of cells, one sample per capture."""

    def __init__(self, xs, ys):
        self.xs = np.array(xs)
        self.ys = np.array(ys)
        self.record = []

    def capture(self, universe):
        vals = universe.quantum.view()[self.ys, self.xs]
        self.record.append(float(np.mean(np.abs(vals) ** 2)))

    def get_signal(self):
        return np.array(self.record)


class NormProbe:
    """Total probability sum(|psi|^2) per capture; it decays as sinks absorb the wave."""

    def __init__(self):
        self.record = []

    def capture(self, universe):
        self.record.append(universe.total_probability())

    def get_signal(self):
        return np.array(self.record)

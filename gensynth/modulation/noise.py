"""
1D value noise.

A fast sine-based lattice hash blended with smoothstep. Output is in [0, 1),
continuous, and reproducible for the same input. Accepts scalars or numpy
arrays; a scalar input returns a plain float.

Not statistically rigorous - it only needs to look organic.
"""

import numpy as np

HASH_FREQUENCY = 127.1
HASH_AMPLITUDE = 43758.5453123


def fract(x):
    return x - np.floor(x)


def smoothstep(t):
    return t * t * (3.0 - 2.0 * t)


def lerp(a, b, t):
    return a + (b - a) * t


def hash1(index):
    """Pseudo-random value in [0, 1) for a lattice point."""
    return fract(np.sin(np.asarray(index, dtype=np.float64) * HASH_FREQUENCY) * HASH_AMPLITUDE)


def noise1(value):
    """Value noise at a domain position (scalar or array)."""
    x = np.asarray(value, dtype=np.float64)
    i0 = np.floor(x)
    t = smoothstep(x - i0)
    result = lerp(hash1(i0), hash1(i0 + 1.0), t)
    if result.ndim == 0:
        return float(result)
    return result

# uniform_worldgen/noise.py

"""
================================================================================
NOISE SAMPLING UTILITIES
================================================================================
A deterministic 2D Perlin noise source that evaluates one point at a time, so
it can back the per-cell sampling callbacks consumed by uniform_noise.

Data Contract:
---------------
- Inputs:
    - p: A permutation table from make_permutation_table (512 ints).
    - x, y: Scalar sample coordinates (already divided by the feature scale).
    - octaves, persistence, lacunarity: Standard fractal noise parameters.
- Outputs:
    - A float, roughly in [-1, 1] per octave of unit amplitude.
- Side Effects: None.
- Invariants: The same table and coordinates always give the same value.
================================================================================
"""

import numpy as np
from numba import njit

_GRADIENT_VECTORS = np.array([[0, 1], [0, -1], [1, 0], [-1, 0]])


def make_permutation_table(seed: int) -> np.ndarray:
    """Shuffles 0..255 with the seed and repeats it to avoid index wrapping."""
    p = np.arange(256, dtype=np.int64)
    rng = np.random.default_rng(seed)
    rng.shuffle(p)
    return np.concatenate([p, p])


@njit
def _lerp(a, b, t):
    return a + t * (b - a)


@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)


@njit
def _gradient(h, x, y):
    g = _GRADIENT_VECTORS[h % 4]
    return g[0] * x + g[1] * y


@njit
def _perlin_octave(p, x, y):
    xi = int(np.floor(x))
    yi = int(np.floor(y))
    xf = x - xi
    yf = y - yi

    px0 = xi % 256
    px1 = (px0 + 1) % 256
    py0 = yi % 256
    py1 = (py0 + 1) % 256

    g00 = _gradient(p[p[px0] + py0], xf, yf)
    g01 = _gradient(p[p[px0] + py1], xf, yf - 1)
    g10 = _gradient(p[p[px1] + py0], xf - 1, yf)
    g11 = _gradient(p[p[px1] + py1], xf - 1, yf - 1)

    u = _fade(xf)
    return _lerp(_lerp(g00, g10, u), _lerp(g01, g11, u), _fade(yf))


@njit
def perlin_noise_at(p, x, y, octaves=1, persistence=0.5, lacunarity=2.0):
    """Fractal Perlin noise at a single point."""
    value = 0.0
    amplitude = 1.0
    frequency = 1.0
    for _ in range(octaves):
        value += _perlin_octave(p, x * frequency, y * frequency) * amplitude
        amplitude *= persistence
        frequency *= lacunarity
    return value

# uniform_worldgen/irwin_hall.py

"""
================================================================================
WEIGHTED IRWIN-HALL CDF
================================================================================
Computes the cumulative distribution function of the weighted sum of N
independent random variables, each uniformly distributed on [0, 1]. For each
variable k, weights[k] is the (strictly positive) weight given to samples[k].

If the samples really are independent and uniform, the result of
cdf_irwin_hall is itself uniformly distributed, while preserving the
information of the original weighted sum. This is what lets the generator
combine several uniformized channels and get a uniform channel back.

Summing uniform variables over *different* ranges is considerably harder than
the same-range (plain Irwin-Hall) case. Sadooghi-Alvandi, Nematollahi & Habibi
(2009), "On the Distribution of the Sum of Independent Uniform Random
Variables", Statistical Papers 50, 171-175, derive the exact density; its
integral gives, with A = prod(a_k):

    F(x) = 1 / (A * N!) * sum over subsets S of {1..N} of
           (-1)^|S| * max(0, x - sum_{k in S} a_k)^N

Data Contract:
---------------
- Inputs:
    - weights: N strictly positive, finite floats, 1 <= N <= MAX_IRWIN_HALL_TERMS.
    - samples: N floats, nominally drawn from Uniform(0, 1).
- Outputs:
    - A float in [0, 1], up to floating point rounding.
- Side Effects: None.
- Complexity: O(2^N * N). N must be small and fixed by the caller.
================================================================================
"""

import numpy as np
from numba import njit

from . import config as DEFAULTS
from .errors import IrwinHallDomainError


@njit
def _weighted_irwin_hall_cdf(weights, x):
    """
    Iterates the whole power set of the weights as the integers 0..2^N - 1,
    reading subset membership from the bits. The parity of the subset size
    decides the sign of its term.
    """
    n = weights.shape[0]
    total = 0.0
    for subset in range(1 << n):
        k = 0
        subset_sum = 0.0
        for i in range(n):
            if subset & (1 << i):
                k += 1
                subset_sum += weights[i]
        z = x - subset_sum
        if z <= 0.0:
            continue
        term = z ** n
        if k & 1:
            total -= term
        else:
            total += term

    weight_product = 1.0
    factorial = 1.0
    for i in range(n):
        weight_product *= weights[i]
        factorial *= i + 1
    return total / weight_product / factorial


@njit
def _weighted_irwin_hall_columns(weights, channels):
    n, cells = channels.shape
    out = np.empty(cells)
    for c in range(cells):
        x = 0.0
        for k in range(n):
            x += weights[k] * channels[k, c]
        out[c] = _weighted_irwin_hall_cdf(weights, x)
    return out


def _validate_weights(weights) -> np.ndarray:
    weights = np.ascontiguousarray(weights, dtype=np.float64)
    if weights.ndim != 1 or weights.size < 1:
        raise IrwinHallDomainError("At least one weight is required")
    if weights.size > DEFAULTS.MAX_IRWIN_HALL_TERMS:
        raise IrwinHallDomainError(
            f"{weights.size} terms exceeds the supported maximum of "
            f"{DEFAULTS.MAX_IRWIN_HALL_TERMS}"
        )
    if not np.all(np.isfinite(weights)) or np.any(weights <= 0.0):
        raise IrwinHallDomainError(f"Weights must be finite and strictly positive, got {weights.tolist()}")
    return weights


def cdf_irwin_hall_at(weights, x: float) -> float:
    """Evaluates the weighted Irwin-Hall CDF at an arbitrary threshold x."""
    weights = _validate_weights(weights)
    if np.isnan(x):
        raise IrwinHallDomainError("Cannot evaluate the CDF at NaN")
    return float(_weighted_irwin_hall_cdf(weights, float(x)))


def cdf_irwin_hall(weights, samples) -> float:
    """
    Evaluates the CDF of sum(weights[k] * U_k) at the realized weighted sum
    of samples. The result may overshoot [0, 1] by rounding error; callers
    that need a strict range should clip.
    """
    weights = _validate_weights(weights)
    samples = np.asarray(samples, dtype=np.float64)
    if samples.shape != weights.shape:
        raise IrwinHallDomainError(
            f"Expected {weights.size} samples, got shape {samples.shape}"
        )
    if np.any(np.isnan(samples)):
        raise IrwinHallDomainError("Samples must not contain NaN")
    x = float(np.dot(weights, samples))
    return float(_weighted_irwin_hall_cdf(weights, x))


def uniformize_weighted_sum(weights, channels) -> np.ndarray:
    """
    Applies cdf_irwin_hall to every cell of a stack of uniform channels.

    Args:
        weights: N strictly positive weights.
        channels: Array of shape (N, cells); row k holds the uniform samples
            weighted by weights[k].

    Returns:
        np.ndarray: One re-uniformized value per cell.
    """
    weights = _validate_weights(weights)
    channels = np.ascontiguousarray(channels, dtype=np.float64)
    if channels.ndim != 2 or channels.shape[0] != weights.size:
        raise IrwinHallDomainError(
            f"Expected channels of shape ({weights.size}, cells), got {channels.shape}"
        )
    if np.any(np.isnan(channels)):
        raise IrwinHallDomainError("Channels must not contain NaN")
    return _weighted_irwin_hall_columns(weights, channels)

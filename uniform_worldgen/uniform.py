# uniform_worldgen/uniform.py

"""
================================================================================
UNIFORM NOISE (RANK TRANSFORM)
================================================================================
Computes the inverse cumulative distribution function of an arbitrary noise
function the hard way: every cell of the world is sampled up front, the
samples are sorted, and each cell is replaced by its position in the sorted
order divided by the number of samples. If a cell maps to p, approximately
(100 * p)% of cells have a lower value.

This lets the generator work with uniformly distributed channels no matter
how skewed the underlying noise function is (billow noise, for example, is
heavily biased towards 0), so that channels can be combined with weighted
sums and thresholded without arbitrary cutoff points.

Data Contract:
---------------
- Inputs:
    - grid: A GridIndex fixing width and height.
    - sample_fn(index, position) -> float | None: Pure sampling function.
      None marks the cell as absent; a present NaN is a contract violation.
- Outputs:
    - An InverseCdf: float64 array of shape (width * height, 2). Column 0 is
      the rank fraction in (0, 1], column 1 the original sampled value.
      Absent cells hold (0.0, 0.0).
      The array is read-only.
- Side Effects: Debug logging only.
- Invariants: Ties are broken by flat index, so the output is reproducible
  regardless of the sorting implementation.
================================================================================
"""

import logging
import math
from typing import Callable, Optional

import numpy as np

from . import config as DEFAULTS
from .errors import NaNSampleError
from .grid import GridIndex

logger = logging.getLogger(__name__)

SampleFn = Callable[[int, tuple[float, float]], Optional[float]]

# Column layout of an InverseCdf array.
FRACTION_COLUMN = 0
VALUE_COLUMN = 1


def fractions(inverse_cdf: np.ndarray) -> np.ndarray:
    """View of the rank fractions of an InverseCdf."""
    return inverse_cdf[:, FRACTION_COLUMN]


def values(inverse_cdf: np.ndarray) -> np.ndarray:
    """View of the cached noise values of an InverseCdf."""
    return inverse_cdf[:, VALUE_COLUMN]


def _rank_order(indices: np.ndarray, samples: np.ndarray) -> np.ndarray:
    """
    Sort permutation for the key (value, index). np.lexsort sorts by the last
    key first, so the index only decides between equal values.
    """
    return np.lexsort((indices, samples))


def uniformize_field(field: np.ndarray, present: np.ndarray = None) -> np.ndarray:
    """
    Rank-transforms an already sampled field.

    Args:
        field (np.ndarray): Noise values, flat or 2D (flattened row-major so
            that positions match flat grid indices).
        present (np.ndarray, optional): Boolean mask of the same shape. Cells
            where it is False are absent and excluded from ranking.

    Returns:
        np.ndarray: The InverseCdf of the field.
    """
    samples = np.asarray(field, dtype=np.float64).ravel()
    if present is None:
        mask = np.ones(samples.shape, dtype=bool)
    else:
        mask = np.asarray(present, dtype=bool).ravel()
        if mask.shape != samples.shape:
            raise ValueError(
                f"Presence mask has {mask.size} cells but the field has {samples.size}"
            )

    indices = np.flatnonzero(mask)
    present_samples = samples[indices]

    nan_positions = np.flatnonzero(np.isnan(present_samples))
    if nan_positions.size:
        raise NaNSampleError(int(indices[nan_positions[0]]))

    inverse_cdf = np.zeros((samples.size, 2), dtype=np.float64)
    total = indices.size
    logger.debug(f"Ranking {total} present samples out of {samples.size} cells.")
    # With nothing to rank every cell keeps the (0.0, 0.0) absent marker.
    if total:
        order = _rank_order(indices, present_samples)
        ranked_indices = indices[order]
        inverse_cdf[ranked_indices, FRACTION_COLUMN] = np.arange(1, total + 1, dtype=np.float64) / total
        inverse_cdf[ranked_indices, VALUE_COLUMN] = present_samples[order]

    # Immutable once built; consumers share the same array.
    inverse_cdf.flags.writeable = False
    return inverse_cdf


def uniform_noise(
    grid: GridIndex,
    sample_fn: SampleFn,
    cell_size: tuple = DEFAULTS.CHUNK_SIZE_BLOCKS
) -> np.ndarray:
    """
    Samples sample_fn once for every cell of the grid and returns the
    InverseCdf of the results.

    sample_fn receives the flat index of the cell (the same index used to
    address the returned array) and, for convenience, the world-space position
    of the cell. If it returns None the cell is set to (0.0, 0.0) and ignored
    when computing the uniform range, so the fractions of other cells are
    relative to the present samples only. If it returns NaN, NaNSampleError is
    raised and no result is produced.

    The second column caches the sampled value so that later stages use
    exactly the value that was ranked.
    """
    samples = np.zeros(grid.size, dtype=np.float64)
    present = np.zeros(grid.size, dtype=bool)

    for index in range(grid.size):
        sample = sample_fn(index, grid.position_of(index, cell_size))
        if sample is None:
            continue
        if math.isnan(sample):
            raise NaNSampleError(index)
        samples[index] = sample
        present[index] = True

    return uniformize_field(samples, present)

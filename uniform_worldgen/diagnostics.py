# uniform_worldgen/diagnostics.py

"""
Uniformity diagnostics for InverseCdf arrays. Used by the bake tool to confirm
that every channel actually spans (0, 1] evenly.
"""

import numpy as np
from scipy import stats

from .uniform import fractions


def _present_fractions(inverse_cdf: np.ndarray) -> np.ndarray:
    # Present cells always have a fraction > 0; absent ones are exactly 0.
    all_fractions = fractions(inverse_cdf)
    return all_fractions[all_fractions > 0.0]


def uniformity_report(inverse_cdf: np.ndarray) -> dict:
    """
    Summarizes an InverseCdf: how many cells were ranked, the range of their
    fractions, their ten-bin histogram, and the Kolmogorov-Smirnov distance
    to Uniform(0, 1).
    The KS fields are None when no cell was present.
    """
    present = _present_fractions(inverse_cdf)
    report = {
        'present_count': int(present.size),
        'absent_count': int(len(inverse_cdf) - present.size),
        'min_fraction': float(present.min()) if present.size else None,
        'max_fraction': float(present.max()) if present.size else None,
        'ks_statistic': None,
        'ks_pvalue': None,
        'histogram': fraction_histogram(inverse_cdf).tolist(),
    }
    if present.size:
        result = stats.kstest(present, 'uniform')
        report['ks_statistic'] = float(result.statistic)
        report['ks_pvalue'] = float(result.pvalue)
    return report


def fraction_histogram(inverse_cdf: np.ndarray, bins: int = 10) -> np.ndarray:
    """Counts of present fractions in equal-width bins over [0, 1]."""
    counts, _ = np.histogram(_present_fractions(inverse_cdf), bins=bins, range=(0.0, 1.0))
    return counts

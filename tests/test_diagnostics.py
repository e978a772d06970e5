import numpy as np
import pytest

from uniform_worldgen.diagnostics import fraction_histogram, uniformity_report
from uniform_worldgen.uniform import uniformize_field


def test_report_of_fully_present_channel() -> None:
    inverse_cdf = uniformize_field(np.random.default_rng(0).standard_normal(500))
    report = uniformity_report(inverse_cdf)
    assert report["present_count"] == 500
    assert report["absent_count"] == 0
    assert report["min_fraction"] == pytest.approx(1 / 500)
    assert report["max_fraction"] == 1.0
    # Rank fractions are as close to uniform as a sample of 500 can be.
    assert report["ks_statistic"] <= 1 / 500 + 1e-12
    assert report["ks_pvalue"] > 0.99
    assert len(report["histogram"]) == 10
    assert sum(report["histogram"]) == 500


def test_report_counts_absent_cells() -> None:
    present = np.array([True, False, True, False, True])
    report = uniformity_report(uniformize_field(np.arange(5.0), present))
    assert report["present_count"] == 3
    assert report["absent_count"] == 2


def test_report_of_empty_channel() -> None:
    report = uniformity_report(uniformize_field(np.zeros(4), np.zeros(4, dtype=bool)))
    assert report["present_count"] == 0
    assert report["absent_count"] == 4
    assert report["min_fraction"] is None
    assert report["ks_statistic"] is None
    assert report["ks_pvalue"] is None
    assert report["histogram"] == [0] * 10


def test_histogram_is_flat_for_rank_fractions() -> None:
    inverse_cdf = uniformize_field(np.random.default_rng(1).exponential(size=1000))
    counts = fraction_histogram(inverse_cdf, bins=10)
    assert counts.sum() == 1000
    assert np.all(np.abs(counts - 100) <= 1)


def test_histogram_ignores_absent_cells() -> None:
    present = np.array([True] * 4 + [False] * 6)
    counts = fraction_histogram(uniformize_field(np.arange(10.0), present), bins=4)
    assert counts.sum() == 4

import math
from itertools import combinations

import numpy as np
import pytest

from uniform_worldgen import config as DEFAULTS
from uniform_worldgen.errors import IrwinHallDomainError
from uniform_worldgen.irwin_hall import cdf_irwin_hall, cdf_irwin_hall_at, uniformize_weighted_sum


def brute_force_cdf(weights, x):
    """Direct transcription of the subset sum using itertools."""
    n = len(weights)
    total = 0.0
    for k in range(n + 1):
        for subset in combinations(weights, k):
            total += (-1) ** k * max(0.0, x - sum(subset)) ** n
    return total / (math.prod(weights) * math.factorial(n))


@pytest.mark.parametrize("u,expected", [(0.0, 0.0), (0.5, 0.5), (1.0, 1.0), (0.25, 0.25)])
def test_single_uniform_is_identity(u: float, expected: float) -> None:
    assert cdf_irwin_hall([1.0], [u]) == pytest.approx(expected, abs=1e-12)


def test_two_equal_weights_median_is_half() -> None:
    assert cdf_irwin_hall([1.0, 1.0], [0.5, 0.5]) == pytest.approx(0.5, abs=1e-12)


def test_two_equal_weights_triangular_cdf() -> None:
    # Sum of two uniforms: F(x) = x^2 / 2 for x <= 1, 1 - (2 - x)^2 / 2 above.
    assert cdf_irwin_hall([1.0, 1.0], [0.3, 0.2]) == pytest.approx(0.125)
    assert cdf_irwin_hall([1.0, 1.0], [0.9, 0.6]) == pytest.approx(1 - 0.5 ** 2 / 2)


@pytest.mark.parametrize("weights", [[1.0, 2.0], [0.3, 0.7, 1.5], [2.0, 0.5, 1.0, 0.25], [1.0] * 5])
def test_cdf_is_symmetric_about_half_the_total_weight(weights) -> None:
    assert cdf_irwin_hall_at(weights, sum(weights) / 2) == pytest.approx(0.5, abs=1e-9)


@pytest.mark.parametrize("weights", [[0.5], [1.0, 3.0], [0.3, 0.7, 1.5], [1.2, 0.4, 0.9, 2.2, 0.6]])
def test_matches_brute_force_subset_sum(weights) -> None:
    for x in np.linspace(-0.5, sum(weights) + 0.5, 23):
        assert cdf_irwin_hall_at(weights, x) == pytest.approx(brute_force_cdf(weights, x), abs=1e-9)


def test_cdf_endpoints_and_monotonicity() -> None:
    weights = [0.4, 1.1, 0.8]
    xs = np.linspace(0.0, sum(weights), 50)
    cdf = [cdf_irwin_hall_at(weights, x) for x in xs]
    assert cdf[0] == pytest.approx(0.0, abs=1e-12)
    assert cdf[-1] == pytest.approx(1.0, abs=1e-9)
    assert all(b >= a - DEFAULTS.CDF_TOLERANCE for a, b in zip(cdf, cdf[1:]))


def test_matches_monte_carlo_distribution() -> None:
    rng = np.random.default_rng(2024)
    weights = np.array([0.3, 0.7, 1.5])
    sums = rng.random((200_000, 3)) @ weights
    for x in (0.5, 1.0, 1.25, 2.0):
        assert cdf_irwin_hall_at(weights, x) == pytest.approx(np.mean(sums <= x), abs=0.005)


def test_results_are_bounded() -> None:
    rng = np.random.default_rng(5)
    for n in range(1, 8):
        weights = rng.uniform(0.5, 2.0, size=n)
        for _ in range(20):
            value = cdf_irwin_hall(weights, rng.random(n))
            assert -1e-6 <= value <= 1 + 1e-6


def test_result_is_uniform_for_uniform_inputs() -> None:
    rng = np.random.default_rng(9)
    weights = [1.0, 0.5]
    results = uniformize_weighted_sum(weights, rng.random((2, 20_000)))
    counts, _ = np.histogram(results, bins=10, range=(0.0, 1.0))
    assert counts.min() > 1700 and counts.max() < 2300


def test_uniformize_weighted_sum_matches_scalar_evaluator() -> None:
    rng = np.random.default_rng(1)
    weights = [0.8, 1.3, 0.2]
    channels = rng.random((3, 40))
    combined = uniformize_weighted_sum(weights, channels)
    expected = [cdf_irwin_hall(weights, channels[:, c]) for c in range(40)]
    np.testing.assert_allclose(combined, expected, rtol=0, atol=1e-12)


def test_uniformize_weighted_sum_handles_empty_channels() -> None:
    assert uniformize_weighted_sum([1.0, 1.0], np.empty((2, 0))).shape == (0,)


def test_many_equal_terms_median_is_half() -> None:
    n = 12
    assert cdf_irwin_hall([1.0] * n, [0.5] * n) == pytest.approx(0.5, abs=1e-9)


@pytest.mark.parametrize("weights", [[0.0, 1.0], [-1.0], [1.0, float("inf")], [float("nan")]])
def test_non_positive_or_non_finite_weights_are_rejected(weights) -> None:
    with pytest.raises(IrwinHallDomainError):
        cdf_irwin_hall(weights, [0.5] * len(weights))


def test_empty_weights_are_rejected() -> None:
    with pytest.raises(IrwinHallDomainError):
        cdf_irwin_hall([], [])


def test_too_many_terms_are_rejected() -> None:
    n = DEFAULTS.MAX_IRWIN_HALL_TERMS + 1
    with pytest.raises(IrwinHallDomainError):
        cdf_irwin_hall([1.0] * n, [0.5] * n)


def test_mismatched_lengths_are_rejected() -> None:
    with pytest.raises(IrwinHallDomainError):
        cdf_irwin_hall([1.0, 1.0], [0.5])


def test_nan_samples_are_rejected() -> None:
    with pytest.raises(IrwinHallDomainError):
        cdf_irwin_hall([1.0, 1.0], [0.5, float("nan")])
    with pytest.raises(IrwinHallDomainError):
        cdf_irwin_hall_at([1.0], float("nan"))


def test_channels_shape_must_match_weights() -> None:
    with pytest.raises(IrwinHallDomainError):
        uniformize_weighted_sum([1.0, 1.0], np.zeros((3, 4)))


def test_domain_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        cdf_irwin_hall([-2.0], [0.5])

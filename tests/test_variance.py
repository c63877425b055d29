import numpy as np
import pytest

from trend_explorer.analytics.variance import (
    ZERO_VARIANCES,
    VarianceParameters,
    heuristic_variances,
    population_std,
)


def test_population_std_matches_numpy():
    values = [1.0, 2.0, 4.0, 8.0]
    assert population_std(values) == pytest.approx(np.std(values))


def test_population_std_short_series_is_zero():
    assert population_std([]) == 0.0
    assert population_std([42.0]) == 0.0


def test_heuristic_variances_scale_with_sigma():
    values = [100.0, 105.0, 110.0, 115.0, 120.0]
    sigma = np.std(values)
    params = heuristic_variances(values)
    assert params.sigma2_epsilon == pytest.approx((0.5 * sigma) ** 2)
    assert params.sigma2_eta == pytest.approx((0.1 * sigma) ** 2)
    assert params.sigma2_zeta == pytest.approx((0.05 * sigma) ** 2)
    assert params.sigma2_epsilon > params.sigma2_eta > params.sigma2_zeta > 0


def test_constant_series_is_degenerate():
    params = heuristic_variances([7.0] * 6)
    assert params == ZERO_VARIANCES
    assert params.is_degenerate


def test_to_dict_keys():
    params = VarianceParameters(1.0, 0.5, 0.25)
    assert params.to_dict() == {"sigma2_epsilon": 1.0, "sigma2_eta": 0.5, "sigma2_zeta": 0.25}
    assert not params.is_degenerate

import math

import numpy as np
import pytest

from swiftpricing.shannon_gbm import (
    ShannonResult,
    gbm_characteristic,
    payoff_coefficient,
    price_gbm_call,
    scaling_function,
)

REFERENCE = 6.6383090775296700


def test_scaling_function_at_own_node():
    assert scaling_function(2, 3, 3 / 4) == pytest.approx(2.0)


def test_scaling_function_vanishes_at_other_nodes():
    assert scaling_function(2, 3, 1.0) == pytest.approx(0.0, abs=1e-12)
    assert scaling_function(0, 0, 5.0) == pytest.approx(0.0, abs=1e-12)


def test_characteristic_is_one_at_origin():
    assert gbm_characteristic(0.0, 0.1, 0.25, 1.0, -0.2) == pytest.approx(1.0)


def test_characteristic_symmetry_and_bound():
    w = np.linspace(0.1, 20.0, 7)
    plus = gbm_characteristic(w, 0.1, 0.25, 1.0, -0.2)
    minus = gbm_characteristic(-w, 0.1, 0.25, 1.0, -0.2)
    assert np.allclose(minus, np.conj(plus))
    assert np.all(np.abs(plus) <= 1.0)


def test_payoff_coefficient_zero_on_empty_interval():
    assert payoff_coefficient(3, 2, 0, 8) == pytest.approx(0.0, abs=1e-14)


def test_payoff_coefficient_rejects_no_levels():
    with pytest.raises(ValueError):
        payoff_coefficient(1, 2, 5, 0)


def test_price_matches_reference_at_fine_scale():
    result = price_gbm_call(100.0, 120.0, 0.1, 0.25, 1.0, scale=5)
    assert isinstance(result, ShannonResult)
    assert result.price == pytest.approx(REFERENCE, abs=1e-3)


def test_default_scale_close_to_reference():
    result = price_gbm_call(100.0, 120.0, 0.1, 0.25, 1.0)
    assert result.scale == 2
    assert result.price == pytest.approx(REFERENCE, abs=0.1)


def test_density_area_near_one():
    result = price_gbm_call(100.0, 120.0, 0.1, 0.25, 1.0, scale=5)
    assert result.density_area() == pytest.approx(1.0, abs=1e-3)
    assert len(result.coefficients) == result.max_k - result.min_k + 1


def test_density_peak_matches_normal():
    sigma = 0.25
    result = price_gbm_call(100.0, 120.0, 0.1, sigma, 1.0, scale=5)
    mean = math.log(100.0 / 120.0) + (0.1 - 0.5 * sigma**2)
    peak = 1.0 / (sigma * math.sqrt(2.0 * math.pi))
    assert result.density(mean) == pytest.approx(peak, rel=1e-3)
    values = result.density(np.array([mean - 0.5, mean + 0.5]))
    assert values[0] == pytest.approx(values[1], rel=1e-3)


def test_price_monotone_in_strike_and_volatility():
    low_strike = price_gbm_call(100.0, 100.0, 0.1, 0.25, 1.0, scale=4).price
    high_strike = price_gbm_call(100.0, 120.0, 0.1, 0.25, 1.0, scale=4).price
    high_vol = price_gbm_call(100.0, 120.0, 0.1, 0.35, 1.0, scale=4).price
    assert low_strike > high_strike
    assert high_vol > high_strike


@pytest.mark.parametrize(
    "kwargs",
    [
        {"spot": 100.0, "strike": -1.0, "rate": 0.1, "sigma": 0.25, "expiry": 1.0},
        {"spot": 100.0, "strike": 120.0, "rate": 0.1, "sigma": 0.0, "expiry": 1.0},
        {"spot": 100.0, "strike": 120.0, "rate": 0.1, "sigma": 0.25, "expiry": 0.0},
    ],
)
def test_invalid_inputs_rejected(kwargs):
    with pytest.raises(ValueError):
        price_gbm_call(**kwargs)
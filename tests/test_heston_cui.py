import math

import numpy as np
import pytest

from swiftpricing.heston_cui import (
    HestonParameters,
    MarketData,
    heston_integrands,
    heston_prices,
)

PARAMS = HestonParameters(3.0, 0.10, 0.25, -0.8, 0.08)

REFERENCE = [
    (0.9371, 0.119047619047619, 0.0803314),
    (0.9956, 0.119047619047619, 0.0429609),
    (1.0427, 0.119047619047619, 0.0225191),
    (1.2287, 0.119047619047619, 0.000331382),
    (0.8603, 0.238095238095238, 0.154888),
    (0.9868, 0.238095238095238, 0.0657904),
    (1.0766, 1.42857142857143, 0.123913),
    (1.5328, 1.42857142857143, 0.0232216),
]


@pytest.mark.parametrize("strike, expiry, expected", REFERENCE)
def test_reference_prices(strike, expiry, expected):
    market = MarketData(1.0, 0.02, (expiry,), (strike,))
    (price,) = heston_prices(PARAMS, market)
    assert price == pytest.approx(expected, rel=1e-5)


def test_prices_respect_no_arbitrage_bounds():
    strikes = (0.8, 0.9, 1.0, 1.1, 1.2)
    expiries = (0.5,) * len(strikes)
    market = MarketData(1.0, 0.02, expiries, strikes)
    prices = heston_prices(PARAMS, market)
    assert len(prices) == len(strikes)
    for k, price in zip(strikes, prices):
        lower = max(1.0 - k * math.exp(-0.02 * 0.5), 0.0)
        assert lower - 1e-10 <= price <= 1.0


def test_prices_decrease_with_strike():
    strikes = (0.7, 0.85, 1.0, 1.15, 1.3)
    market = MarketData(1.0, 0.02, (1.0,) * len(strikes), strikes)
    prices = heston_prices(PARAMS, market)
    assert all(a > b for a, b in zip(prices, prices[1:]))


def test_prices_accept_plain_tuple_parameters():
    market = MarketData(1.0, 0.02, (0.5, 1.0), (1.0, 1.1))
    assert heston_prices(tuple(PARAMS), market) == pytest.approx(
        heston_prices(PARAMS, market)
    )


def test_integrands_scalar_matches_array():
    nodes = np.array([0.1, 0.5, 0.9])
    arrays = heston_integrands(nodes, PARAMS, 1.05, 0.5, 1.0, 0.02)
    for idx, u in enumerate(nodes):
        scalars = heston_integrands(float(u), PARAMS, 1.05, 0.5, 1.0, 0.02)
        assert len(scalars) == 4
        for component, value in zip(arrays, scalars):
            assert isinstance(value, float)
            assert component[idx] == pytest.approx(value)


def test_integrands_are_finite():
    values = heston_integrands(np.linspace(0.01, 0.99, 20), PARAMS, 1.0, 1.0, 1.0, 0.02)
    assert all(np.all(np.isfinite(v)) for v in values)


def test_market_length_mismatch_raises():
    with pytest.raises(ValueError):
        MarketData(1.0, 0.02, (0.5, 1.0), (1.0,))


def test_market_rejects_non_positive_strike():
    with pytest.raises(ValueError):
        MarketData(1.0, 0.02, (0.5,), (0.0,))


def test_market_length_and_normalisation():
    market = MarketData(1.0, 0.02, [1, 2], [1, 2])
    assert len(market) == 2
    assert market.expiries == (1.0, 2.0)


def test_parameters_unpack_in_order():
    assert tuple(PARAMS) == (3.0, 0.10, 0.25, -0.8, 0.08)
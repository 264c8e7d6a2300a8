import pytest

from swiftpricing.calibration import (
    CalibrationResult,
    StopReason,
    calibrate,
    main,
    reference_market,
)
from swiftpricing.heston_cui import HestonParameters, MarketData, heston_prices

TRUE = HestonParameters(3.0, 0.10, 0.25, -0.8, 0.08)


@pytest.fixture
def small_market():
    full = reference_market()
    return MarketData(
        spot=full.spot,
        rate=full.rate,
        expiries=full.expiries[:5],
        strikes=full.strikes[:5],
    )


def test_reference_market_layout():
    market = reference_market()
    assert len(market) == 40
    assert market.spot == 1.0
    assert market.rate == 0.02
    assert market.strikes[0] == 0.9371
    assert market.strikes[-1] == 1.5328
    assert market.expiries[8] == market.expiries[0]
    assert market.expiries[-1] == 1.42857142857143


def test_calibrate_at_optimum_stops_on_small_error(small_market):
    observed = heston_prices(TRUE, small_market)
    result = calibrate(TRUE, small_market, observed, 10)
    assert isinstance(result, CalibrationResult)
    assert result.stop_reason is StopReason.SMALL_ERROR
    assert result.stop_reason.solved
    assert result.iterations == 0
    assert result.parameters == TRUE
    assert result.final_error == 0.0


def test_zero_iterations_leaves_parameters(small_market):
    observed = heston_prices(TRUE, small_market)
    start = HestonParameters(3.1, 0.105, 0.26, -0.78, 0.082)
    result = calibrate(start, small_market, observed, 0)
    assert result.stop_reason is StopReason.ITERATION_LIMIT
    assert not result.stop_reason.solved
    assert result.parameters == start
    assert result.initial_error == result.final_error
    assert result.jacobian_evaluations == 0


def test_calibration_never_increases_error(small_market):
    observed = heston_prices(TRUE, small_market)
    start = HestonParameters(3.1, 0.105, 0.26, -0.78, 0.082)
    result = calibrate(start, small_market, observed, 5)
    assert result.initial_error > 0.0
    assert result.final_error <= result.initial_error
    assert result.iterations <= 5
    assert result.price_evaluations >= 1


def test_mismatched_observations_rejected(small_market):
    with pytest.raises(ValueError):
        calibrate(TRUE, small_market, [0.1, 0.2], 10)


def test_negative_iterations_rejected(small_market):
    observed = heston_prices(TRUE, small_market)
    with pytest.raises(ValueError):
        calibrate(TRUE, small_market, observed, -1)


def test_wrong_parameter_count_rejected(small_market):
    observed = heston_prices(TRUE, small_market)
    with pytest.raises(ValueError):
        calibrate((1.0, 2.0), small_market, observed, 10)


def test_main_reports_iteration_limit(capsys):
    assert main(["--max-iterations", "0"]) == 0
    output = capsys.readouterr().out
    assert "Heston Model Calibrator" in output
    assert "Unsolved: stopped by itmax" in output
    assert "Iterations: 0" in output
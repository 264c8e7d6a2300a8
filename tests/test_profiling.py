import pytest

from swiftpricing.profiling import (
    REFERENCE_PRICE,
    SPOT,
    BenchmarkResult,
    main,
    run_shannon_benchmark,
)


@pytest.fixture(scope="module")
def single_run():
    return run_shannon_benchmark(1)


def test_shannon_price_close_to_reference(single_run):
    assert abs(single_run.price - REFERENCE_PRICE) < 0.05


def test_shannon_price_within_call_bounds(single_run):
    assert 0.0 < single_run.price < SPOT


def test_result_fields(single_run):
    assert single_run.method == "Shannon"
    assert single_run.repetitions == 1
    assert single_run.reference == REFERENCE_PRICE
    assert single_run.elapsed >= 0.0


def test_error_is_absolute_difference(single_run):
    assert single_run.error == abs(single_run.price - REFERENCE_PRICE)


def test_repeated_runs_give_same_price(single_run):
    repeated = run_shannon_benchmark(2)
    assert repeated.repetitions == 2
    assert repeated.price == pytest.approx(single_run.price, rel=1e-12)


def test_mean_time_divides_elapsed():
    result = BenchmarkResult("x", 1.0, 2.0, 4, 2.0)
    assert result.mean_time == 0.5
    assert result.error == 1.0


@pytest.mark.parametrize("repetitions", [0, -3])
def test_non_positive_repetitions_rejected(repetitions):
    with pytest.raises(ValueError):
        run_shannon_benchmark(repetitions)


def test_main_prints_both_methods(capsys):
    assert main(["--repetitions", "1"]) == 0
    out = capsys.readouterr().out
    assert "Shannon" in out
    assert "Quadrature" in out
    assert out.count("call_shannon=") == 2
    assert out.count("Elapsed time:") == 2


def test_main_rejects_zero_repetitions():
    with pytest.raises(SystemExit) as info:
        main(["--repetitions", "0"])
    assert info.value.code == 2
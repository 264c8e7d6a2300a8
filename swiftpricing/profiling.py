"""Timing of the Shannon-wavelet Heston pricer against the quadrature pricer."""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass

from swiftpricing.heston_cui import HestonParameters, MarketData, heston_prices
from swiftpricing.shannon_heston import price_heston_call

SPOT = 100.0
STRIKE = 100.0
RATE = 0.0
EXPIRY = 45.0
SCALE = 5
TRUNCATION = 12.0
PARAMETERS = HestonParameters(
    kappa=1.5768, v_bar=0.0398, sigma=0.5751, rho=-0.5711, v0=0.0175
)
REFERENCE_PRICE = 4.691153171658516e01
DEFAULT_REPETITIONS = 100


@dataclass(frozen=True)
class BenchmarkResult:
    """Price from the last of ``repetitions`` runs and the total time they took."""

    method: str
    price: float
    reference: float
    repetitions: int
    elapsed: float

    @property
    def error(self) -> float:
        return abs(self.price - self.reference)

    @property
    def mean_time(self) -> float:
        return self.elapsed / self.repetitions


def _check_repetitions(repetitions: int) -> None:
    if repetitions < 1:
        raise ValueError("repetitions must be at least 1")


def run_shannon_benchmark(repetitions=DEFAULT_REPETITIONS) -> BenchmarkResult:
    """Price the benchmark call ``repetitions`` times with Shannon wavelets."""
    _check_repetitions(repetitions)
    price = 0.0
    start = time.perf_counter()
    for _ in range(repetitions):
        price = price_heston_call(
            SPOT, STRIKE, RATE, PARAMETERS, EXPIRY, scale=SCALE, truncation=TRUNCATION
        ).price
    elapsed = time.perf_counter() - start
    return BenchmarkResult("Shannon", price, REFERENCE_PRICE, repetitions, elapsed)


def _run_quadrature_benchmark(repetitions: int) -> BenchmarkResult:
    _check_repetitions(repetitions)
    market = MarketData(spot=SPOT, rate=RATE, expiries=(EXPIRY,), strikes=(STRIKE,))
    price = 0.0
    start = time.perf_counter()
    for _ in range(repetitions):
        price = heston_prices(PARAMETERS, market)[0]
    elapsed = time.perf_counter() - start
    return BenchmarkResult("Quadrature", price, REFERENCE_PRICE, repetitions, elapsed)


def _report(result: BenchmarkResult, out) -> None:
    print(result.method, file=out)
    print(f"call_shannon={result.price:.15f}\terror={result.error:.2e}", file=out)
    print(f"Elapsed time: {result.elapsed:.3f}", file=out)
    print(file=out)


def main(argv=None) -> int:
    """Run both pricers on the benchmark call and print price, error and time."""
    parser = argparse.ArgumentParser(description="Heston pricer benchmark")
    parser.add_argument("--repetitions", type=int, default=DEFAULT_REPETITIONS)
    args = parser.parse_args(argv)
    try:
        results = (
            run_shannon_benchmark(args.repetitions),
            _run_quadrature_benchmark(args.repetitions),
        )
    except ValueError as exc:
        parser.error(str(exc))
    for result in results:
        _report(result, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
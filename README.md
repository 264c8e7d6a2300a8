# swiftpricing

Pricing of European call options under the Heston stochastic-volatility
model and geometric Brownian motion, the analytic gradient of Heston prices,
and Levenberg-Marquardt calibration of the Heston model.

## Modules

- `swiftpricing.heston_cui` – Heston call prices from 64-node
  Gauss-Legendre quadrature of the Fourier integrand on [0, 200].
  `HestonParameters(kappa, v_bar, sigma, rho, v0)` holds the model,
  `MarketData(spot, rate, expiries, strikes)` the options (it checks that
  expiries and strikes have the same length and that spot and strikes are
  positive). `heston_prices(params, market)` returns one price per option;
  `heston_integrands(...)` exposes the four real integrands.
- `swiftpricing.heston_jacobian` – `heston_jacobian(params, market)` returns,
  for each option, the derivatives of its price with respect to kappa,
  v_bar, sigma, rho and v0; `heston_jacobian_integrands(...)` exposes the
  integrands.
- `swiftpricing.calibration` – `calibrate(initial, market, observed,
  max_iterations=100)` fits the five Heston parameters with
  Levenberg-Marquardt and the analytic Jacobian, returning a
  `CalibrationResult` (parameters, `StopReason`, iteration and evaluation
  counts, and squared residual norms). `reference_market()` gives the
  built-in market of forty options (unit spot, 2% rate, eight expiries with
  five strikes each).
- `swiftpricing.shannon_gbm` – `price_gbm_call(spot, strike, rate, sigma,
  expiry, scale=2, truncation=10.0)` prices a call under geometric Brownian
  motion with a Shannon-wavelet expansion of the density. It returns a
  `ShannonResult` carrying the price, the coefficient range and the
  coefficients; `density(x)` evaluates the approximated density and
  `density_area()` its trapezoidal area. Also provides `scaling_function`,
  `gbm_characteristic` and `payoff_coefficient`.
- `swiftpricing.shannon_heston` – `price_heston_call(spot, strike, rate,
  params, expiry, scale=1, truncation=12.0)` prices a Heston call with
  Shannon wavelets, computing density coefficients with an inverse FFT
  (`fft_density_coefficients`) and payoff coefficients with a DCT-II and a
  DST-II (`fft_payoff_coefficients`). The truncation interval comes from
  `heston_interval`; the characteristic function is `heston_characteristic`.
- `swiftpricing.density_coefficients` – calculators for the wavelet density
  coefficients over a `CoefficientGrid(scale, k1, k2, j_density)`:
  `ParsevalCalculator` (trapezoidal integral, 10000 buckets by default),
  `ExplicitVietaCalculator`, `FastVietaCalculator` (one inverse FFT) and
  `NewPaperExplicitCalculator`. Each has `coefficients(x)`; the explicit and
  fast Vieta calculators also have `gradient_coefficients(x)`.
- `swiftpricing.profiling` – `run_shannon_benchmark(repetitions=100)` times
  the Shannon-wavelet Heston pricer on a benchmark call (spot 100, strike
  100, zero rate, expiry 45, scale 5) and returns a `BenchmarkResult` with
  the price, its error against the reference price and the elapsed time.

## Installation

```
pip install .
```

Requires Python 3.10 or later, NumPy and SciPy.

## Usage

Price the reference market and recover the model parameters:

```python
from swiftpricing.heston_cui import HestonParameters, heston_prices
from swiftpricing.calibration import calibrate, reference_market

market = reference_market()
true_params = HestonParameters(3.0, 0.10, 0.25, -0.8, 0.08)
observed = heston_prices(true_params, market)

start = HestonParameters(1.2, 0.20, 0.30, -0.6, 0.20)
result = calibrate(start, market, observed, 100)
print(result.parameters, result.stop_reason)
```

Price a Black-Scholes call with a Shannon-wavelet expansion:

```python
from swiftpricing.shannon_gbm import price_gbm_call

result = price_gbm_call(100.0, 120.0, 0.1, 0.25, 1.0, scale=2, truncation=10.0)
print(result.price)
print(result.density_area())  # close to 1
```

Price a Heston call the same way:

```python
from swiftpricing.heston_cui import HestonParameters
from swiftpricing.shannon_heston import price_heston_call

params = HestonParameters(1.5768, 0.0398, 0.5751, -0.5711, 0.0175)
print(price_heston_call(100.0, 100.0, 0.0, params, 45.0, scale=5).price)
```

The density-coefficient calculators work with any object that has a
`number_of_parameters` attribute and `characteristic(u, x)` and
`characteristic_gradient(u, x)` methods:

```python
from swiftpricing.density_coefficients import CoefficientGrid, FastVietaCalculator
from swiftpricing.shannon_gbm import gbm_characteristic


class GBM:
    number_of_parameters = 1

    def __init__(self, sigma, expiry, rate=0.0):
        self.sigma, self.expiry, self.rate = sigma, expiry, rate

    def characteristic(self, u, x):
        return gbm_characteristic(u, self.rate, self.sigma, self.expiry, x)

    def characteristic_gradient(self, u, x):
        f = self.characteristic(u, x)
        return [f * (1j * u * self.sigma * self.expiry - self.sigma * u**2 * self.expiry)]


grid = CoefficientGrid(scale=3, k1=-16, k2=16, j_density=64)
calculator = FastVietaCalculator(GBM(0.25, 1.0), grid)
print(calculator.coefficients(0.0))
print(calculator.gradient_coefficients(0.0))
```

## Command line

Calibrate to prices generated from the reference parameters
(3.0, 0.10, 0.25, -0.8, 0.08) on the built-in market and print the result,
the stopping reason, evaluation counts and residuals:

```
swiftpricing-calibrate
swiftpricing-calibrate --max-iterations 50 --initial 1.2 0.2 0.3 -0.6 0.2
```

Time the Shannon-wavelet pricer and the quadrature pricer on the benchmark
call:

```
swiftpricing-profile
swiftpricing-profile --repetitions 10
```

## What it does not do

- Only European calls are priced; there are no puts or other contracts.
- `density_coefficients` ships no distribution model of its own: the caller
  supplies the characteristic function. `ParsevalCalculator` and
  `NewPaperExplicitCalculator` have no gradient.
- Calibration fits the Heston model only, and only to prices from the
  quadrature pricer; it does not read market data from files.
- Nothing is written to disk; densities are returned as values, not saved.

## Tests

```
pip install .[test]
pytest
```
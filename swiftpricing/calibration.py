"""Levenberg-Marquardt calibration of the Heston model to observed call prices."""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass
from enum import Enum

import numpy as np

from swiftpricing.heston_cui import HestonParameters, MarketData, heston_prices
from swiftpricing.heston_jacobian import heston_jacobian

INITIAL_MU = 1e-3
GRADIENT_TOLERANCE = 1e-10
STEP_TOLERANCE = 1e-10
ERROR_TOLERANCE = 1e-10
_NU_LIMIT = 2**31 - 1
_EPSILON = float(np.finfo(float).eps)

REFERENCE_PARAMETERS = HestonParameters(3.0, 0.10, 0.25, -0.8, 0.08)
DEFAULT_INITIAL = (1.2, 0.2, 0.3, -0.6, 0.2)

_STRIKES = (
    0.9371, 0.8603, 0.8112, 0.7760, 0.7470, 0.7216, 0.6699, 0.6137,
    0.9956, 0.9868, 0.9728, 0.9588, 0.9464, 0.9358, 0.9175, 0.9025,
    1.0427, 1.0463, 1.0499, 1.0530, 1.0562, 1.0593, 1.0663, 1.0766,
    1.2287, 1.2399, 1.2485, 1.2659, 1.2646, 1.2715, 1.2859, 1.3046,
    1.3939, 1.4102, 1.4291, 1.4456, 1.4603, 1.4736, 1.5005, 1.5328,
)
_EXPIRY_ROW = (
    0.119047619047619, 0.238095238095238, 0.357142857142857, 0.476190476190476,
    0.595238095238095, 0.714285714285714, 1.07142857142857, 1.42857142857143,
)


class StopReason(Enum):
    """Why the optimiser stopped."""

    SMALL_GRADIENT = 1
    SMALL_STEP = 2
    ITERATION_LIMIT = 3
    SINGULAR_MATRIX = 4
    NO_REDUCTION = 5
    SMALL_ERROR = 6
    INVALID_VALUES = 7

    @property
    def solved(self) -> bool:
        return self in (StopReason.SMALL_GRADIENT, StopReason.SMALL_STEP, StopReason.SMALL_ERROR)


@dataclass(frozen=True)
class CalibrationResult:
    """Outcome of a calibration run; errors are squared residual norms."""

    parameters: HestonParameters
    stop_reason: StopReason
    iterations: int
    initial_error: float
    final_error: float
    gradient_norm: float
    step_norm: float
    price_evaluations: int
    jacobian_evaluations: int
    linear_systems: int


def reference_market() -> MarketData:
    """The forty-option test market: unit spot, 2% rate, five strikes per expiry."""
    return MarketData(
        spot=1.0,
        rate=0.02,
        expiries=_EXPIRY_ROW * 5,
        strikes=_STRIKES,
    )


def calibrate(initial, market: MarketData, observed, max_iterations=100) -> CalibrationResult:
    """Fit Heston parameters to ``observed`` prices with an analytic Jacobian."""
    if max_iterations < 0:
        raise ValueError("max_iterations must not be negative")
    target = np.asarray(observed, dtype=float)
    if target.shape != (len(market),):
        raise ValueError(f"{target.size} observations do not match {len(market)} options")
    p = np.array(tuple(initial), dtype=float)
    if p.shape != (5,):
        raise ValueError("five Heston parameters are required")

    def residual(values: np.ndarray) -> np.ndarray:
        return target - np.asarray(heston_prices(HestonParameters(*values), market))

    e = residual(p)
    price_evaluations, jacobian_evaluations, linear_systems = 1, 0, 0
    error = float(e @ e)
    initial_error = error
    gradient_norm = step_norm = mu = 0.0
    nu = 2
    stop = None if np.isfinite(error) else StopReason.INVALID_VALUES

    k = 0
    while stop is None and k < max_iterations:
        if error <= ERROR_TOLERANCE:
            stop = StopReason.SMALL_ERROR
            break
        jac = np.asarray(heston_jacobian(HestonParameters(*p), market))
        jacobian_evaluations += 1
        jtj = jac.T @ jac
        jte = jac.T @ e
        gradient_norm = float(np.max(np.abs(jte)))
        p_sq = float(p @ p)
        if not gradient_norm > GRADIENT_TOLERANCE:
            stop = StopReason.SMALL_GRADIENT
            break
        if k == 0:
            mu = INITIAL_MU * float(np.max(np.diag(jtj)))

        while True:
            linear_systems += 1
            try:
                step = np.linalg.solve(jtj + mu * np.eye(len(p)), jte)
            except np.linalg.LinAlgError:
                step = None
            if step is not None and np.all(np.isfinite(step)):
                step_norm = float(step @ step)
                if step_norm <= STEP_TOLERANCE**2 * p_sq:
                    stop = StopReason.SMALL_STEP
                    break
                if step_norm >= (p_sq + STEP_TOLERANCE) / (_EPSILON * _EPSILON):
                    stop = StopReason.SINGULAR_MATRIX
                    break
                candidate = p + step
                e_new = residual(candidate)
                price_evaluations += 1
                new_error = float(e_new @ e_new)
                if not np.isfinite(new_error):
                    stop = StopReason.INVALID_VALUES
                    break
                predicted = float(step @ (mu * step + jte))
                actual = error - new_error
                if predicted > 0 and actual > 0:
                    ratio = 2.0 * actual / predicted - 1.0
                    mu *= max(1.0 / 3.0, 1.0 - ratio**3)
                    nu = 2
                    p, e, error = candidate, e_new, new_error
                    break
            mu *= nu
            doubled = 2 * nu
            if doubled > _NU_LIMIT:
                stop = StopReason.NO_REDUCTION
                break
            nu = doubled
        k += 1

    if k >= max_iterations:
        stop = StopReason.ITERATION_LIMIT
    return CalibrationResult(
        parameters=HestonParameters(*(float(v) for v in p)),
        stop_reason=stop,
        iterations=k,
        initial_error=initial_error,
        final_error=error,
        gradient_norm=gradient_norm,
        step_norm=step_norm,
        price_evaluations=price_evaluations,
        jacobian_evaluations=jacobian_evaluations,
        linear_systems=linear_systems,
    )


def _stop_message(result: CalibrationResult) -> str:
    reason = result.stop_reason
    if reason is StopReason.SMALL_ERROR:
        return f"Solved: stopped by small ||e||_2 = {result.final_error:.8e} < {ERROR_TOLERANCE:.8e}"
    if reason is StopReason.SMALL_GRADIENT:
        return f"Solved: stopped by small gradient J^T e = {result.gradient_norm:.8e} < {GRADIENT_TOLERANCE:.8e}"
    if reason is StopReason.SMALL_STEP:
        return f"Solved: stopped by small change Dp = {result.step_norm:.8e} < {STEP_TOLERANCE:.8e}"
    if reason is StopReason.ITERATION_LIMIT:
        return "Unsolved: stopped by itmax"
    if reason is StopReason.SINGULAR_MATRIX:
        return "Unsolved: singular matrix. Restart from current p with increased mu"
    if reason is StopReason.NO_REDUCTION:
        return "Unsolved: no further error reduction is possible. Restart with increased mu"
    return "Unsolved: stopped by invalid values, user error"


def _format(values) -> str:
    return "\t".join(f"{v:.8e}" for v in values)


def main(argv=None) -> int:
    """Calibrate to prices generated from the reference parameters and report."""
    parser = argparse.ArgumentParser(description="Heston model calibrator")
    parser.add_argument("--max-iterations", type=int, default=100)
    parser.add_argument(
        "--initial",
        type=float,
        nargs=5,
        default=list(DEFAULT_INITIAL),
        metavar=("KAPPA", "V_BAR", "SIGMA", "RHO", "V0"),
    )
    args = parser.parse_args(argv)

    market = reference_market()
    observed = heston_prices(REFERENCE_PARAMETERS, market)
    start = time.perf_counter()
    try:
        result = calibrate(args.initial, market, observed, args.max_iterations)
    except ValueError as exc:
        parser.error(str(exc))
    elapsed = time.perf_counter() - start

    out = sys.stdout
    print("-------- -------- -------- Heston Model Calibrator -------- -------- --------", file=out)
    print("Parameters:\t         kappa\t     vinf\t       vov\t      rho\t     v0", file=out)
    print(f" Initial point:\t{_format(args.initial)}", file=out)
    print(f"Optimum found:\t{_format(result.parameters)}", file=out)
    print(f"Real optimum:\t{_format(REFERENCE_PARAMETERS)}", file=out)
    print(f" {_stop_message(result)}", file=out)
    print("-------- -------- -------- Computational cost -------- -------- --------", file=out)
    print(f"          Time cost: {elapsed:.8e} seconds ", file=out)
    print(f"         Iterations: {result.iterations}", file=out)
    print(f"         pv  Evalue: {result.price_evaluations}", file=out)
    print(f"         Jac Evalue: {result.jacobian_evaluations}", file=out)
    print(f"# of lin sys solved: {result.linear_systems}", file=out)
    print("-------- -------- -------- Residuals -------- -------- --------", file=out)
    print(f"            ||e0||_2: {result.initial_error:.8e}", file=out)
    print(f"           ||e*||_2: {result.final_error:.8e}", file=out)
    print(f"          ||J'e||_inf: {result.gradient_norm:.8e}", file=out)
    print(f"           ||Dp||_2: {result.step_norm:.8e}", file=out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
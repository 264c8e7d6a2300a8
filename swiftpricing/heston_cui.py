"""Heston vanilla call pricer using Gauss-Legendre quadrature of the Fourier integrand."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, Sequence

import numpy as np

LOWER_BOUND = 0.0
UPPER_BOUND = 200.0
HALF_WIDTH = 0.5 * (UPPER_BOUND - LOWER_BOUND)
MID_POINT = 0.5 * (UPPER_BOUND + LOWER_BOUND)
QUADRATURE_NODES = 64


def _positive_gauss_legendre(order: int) -> tuple[np.ndarray, np.ndarray]:
    nodes, weights = np.polynomial.legendre.leggauss(order)
    half = (order + 1) // 2
    return nodes[-half:], weights[-half:]


_NODES, _WEIGHTS = _positive_gauss_legendre(QUADRATURE_NODES)


@dataclass(frozen=True)
class HestonParameters:
    """Heston model parameters."""

    kappa: float
    v_bar: float
    sigma: float
    rho: float
    v0: float

    def __iter__(self) -> Iterator[float]:
        return iter((self.kappa, self.v_bar, self.sigma, self.rho, self.v0))


@dataclass(frozen=True)
class MarketData:
    """Spot, rate and the (expiry, strike) pairs of the observed options."""

    spot: float
    rate: float
    expiries: tuple[float, ...] = field(default_factory=tuple)
    strikes: tuple[float, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        expiries = tuple(float(t) for t in self.expiries)
        strikes = tuple(float(k) for k in self.strikes)
        if len(expiries) != len(strikes):
            raise ValueError(
                f"{len(expiries)} expiries do not match {len(strikes)} strikes"
            )
        if self.spot <= 0:
            raise ValueError("spot must be positive")
        if any(k <= 0 for k in strikes):
            raise ValueError("strikes must be positive")
        object.__setattr__(self, "expiries", expiries)
        object.__setattr__(self, "strikes", strikes)

    def __len__(self) -> int:
        return len(self.strikes)


def _branch(pq, shifted, params, expiry, x0, d_for_denominator=None):
    """Characteristic-function value for one half of the integrand.

    Returns the value and the ``d`` term, which the unshifted M branch reuses.
    """
    a, b, c, rho, v0 = params
    ipq = 1j * pq
    tmp1 = -a * b * rho * expiry / c
    if shifted:
        z = 1j * (pq - 1j)
        m = ipq + 1.0 + (pq - 1j) ** 2
        g = np.exp(tmp1 * ipq) * math.exp(tmp1)
    else:
        z = ipq
        m = ipq + pq.astype(complex) ** 2
        g = np.exp(tmp1 * ipq)
    kes = a - c * rho * z
    d = np.sqrt(kes**2 + m * c * c)
    half_t = 0.5 * expiry
    alpha = d * half_t
    cosh_a = np.cosh(alpha)
    sinh_a = np.sinh(alpha)
    big_a = (m * sinh_a) / (d * cosh_a + kes * sinh_a)
    dd = d if d_for_denominator is None else d_for_denominator
    big_d = (
        np.log(d)
        + (a - d) * half_t
        - np.log((d + kes) * 0.5 + (dd - kes) * 0.5 * np.exp(-d * expiry))
    )
    y = np.exp(x0 * z - v0 * big_a + (2.0 * a * b / (c * c)) * big_d) * g
    return y, d


def heston_integrands(u, params, strike, expiry, spot, rate):
    """Real integrands (M1, N1, M2, N2) at Gauss-Legendre abscissa ``u`` in [0, 1].

    ``u`` may be a scalar or an array; scalars give floats.
    """
    scalar = np.ndim(u) == 0
    u_arr = np.atleast_1d(np.asarray(u, dtype=float))
    params = tuple(params)
    pq_m = MID_POINT + HALF_WIDTH * u_arr
    pq_n = MID_POINT - HALF_WIDTH * u_arr
    x0 = math.log(spot) + rate * expiry
    log_k = math.log(strike)

    h_m = np.exp(-1j * pq_m * log_k) / (1j * pq_m)
    h_n = np.exp(-1j * pq_n * log_k) / (1j * pq_n)

    y_m1, d_m1 = _branch(pq_m, True, params, expiry, x0)
    y_n1, _ = _branch(pq_n, True, params, expiry, x0)
    # The second M branch keeps the first branch's d in its log denominator.
    y_m2, _ = _branch(pq_m, False, params, expiry, x0, d_for_denominator=d_m1)
    y_n2, _ = _branch(pq_n, False, params, expiry, x0)

    values = tuple(
        np.real(h * y) for h, y in ((h_m, y_m1), (h_n, y_n1), (h_m, y_m2), (h_n, y_n2))
    )
    if scalar:
        return tuple(float(v[0]) for v in values)
    return values


def heston_prices(params, market: MarketData) -> list[float]:
    """Heston prices of the European calls described by ``market``."""
    prices = []
    for expiry, strike in zip(market.expiries, market.strikes):
        disc = math.exp(-market.rate * expiry)
        intrinsic_half = 0.5 * (market.spot - strike * disc)
        m1, n1, m2, n2 = heston_integrands(
            _NODES, params, strike, expiry, market.spot, market.rate
        )
        y1 = float(np.dot(_WEIGHTS, m1 + n1))
        y2 = float(np.dot(_WEIGHTS, m2 + n2))
        prices.append(
            intrinsic_half + disc / math.pi * (HALF_WIDTH * y1 - strike * HALF_WIDTH * y2)
        )
    return prices


def _as_sequence(values: Sequence[float]) -> tuple[float, ...]:
    return tuple(float(v) for v in values)
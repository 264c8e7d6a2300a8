"""Shannon-wavelet (SWIFT) pricing of a European call under geometric Brownian motion."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


def scaling_function(j, k, x):
    """Shannon scaling function 2^(j/2) sinc(2^j x - k); the removable singularity is filled."""
    scale = 2.0**j
    value = math.sqrt(scale) * np.sinc(scale * np.asarray(x, dtype=float) - k)
    return float(value) if np.ndim(value) == 0 else value


def gbm_characteristic(w, rate, sigma, expiry, x0):
    """Fourier transform of the log-moneyness density at time ``expiry``."""
    w = np.asarray(w, dtype=float)
    drift = np.exp(-1j * w * (rate - 0.5 * sigma**2) * expiry)
    diffusion = np.exp(-0.5 * sigma**2 * w**2 * expiry)
    value = np.exp(-1j * w * x0) * drift * diffusion
    return complex(value) if np.ndim(value) == 0 else value


def payoff_coefficient(k, scale, k2, payoff_levels):
    """Payoff coefficient of (e^y - 1)^+ on [0, k2/2^scale] against the k-th scaling function.

    The sinc is replaced by a Vieta cosine sum of ``payoff_levels`` terms.
    """
    if payoff_levels < 1:
        raise ValueError("payoff_levels must be at least 1")
    pw2n = 2.0**scale
    upper = k2 / pw2n
    j = np.arange(1, payoff_levels + 1)
    co = (2.0 * j - 1.0) / (2.0 * payoff_levels) * math.pi
    c = co * pw2n
    arg_upper = co * (pw2n * upper - k)
    arg_lower = co * (-float(k))
    e_upper = math.exp(upper)
    i1 = c / (1.0 + c**2) * (
        e_upper * np.sin(arg_upper)
        - np.sin(arg_lower)
        + (1.0 / c) * (e_upper * np.cos(arg_upper) - np.cos(arg_lower))
    )
    i2 = (1.0 / c) * (np.sin(arg_upper) - np.sin(arg_lower))
    return float(np.sum(i1 - i2)) / payoff_levels


@dataclass(frozen=True)
class ShannonResult:
    """Price together with the density expansion it was computed from."""

    price: float
    scale: int
    min_k: int
    max_k: int
    coefficients: tuple[float, ...]
    lower: float
    upper: float
    density_levels: int
    payoff_levels: int

    def density(self, x):
        """Wavelet approximation of the log-moneyness density at ``x``."""
        xs = np.asarray(x, dtype=float)
        ks = np.arange(self.min_k, self.max_k + 1)
        scale = 2.0**self.scale
        basis = math.sqrt(scale) * np.sinc(scale * xs[..., None] - ks)
        value = basis @ np.asarray(self.coefficients)
        return float(value) if np.ndim(value) == 0 else value

    def density_area(self) -> float:
        """Trapezoidal area under the approximated density; close to one."""
        c = self.coefficients
        interior = sum(c[1:-1]) if len(c) > 2 else 0.0
        area = 0.5 * (c[0] + c[-1]) + interior
        return area / math.sqrt(2.0**self.scale)


def _vieta_levels(span: float) -> int:
    if span <= 0:
        return 1
    exponent = math.ceil(math.log2(math.pi * span))
    return 2 ** max(exponent - 1, 0)


def price_gbm_call(spot, strike, rate, sigma, expiry, scale=2, truncation=10.0) -> ShannonResult:
    """Price a European call with Shannon wavelets at resolution 2^scale."""
    if spot <= 0 or strike <= 0:
        raise ValueError("spot and strike must be positive")
    if sigma <= 0 or expiry <= 0:
        raise ValueError("sigma and expiry must be positive")
    if truncation <= 0:
        raise ValueError("truncation must be positive")

    pw2n = 2.0**scale
    x0 = math.log(spot / strike)
    centre = x0 + (rate - 0.5 * sigma**2) * expiry
    width = truncation * math.sqrt(sigma**2 * expiry)
    lower, upper = centre - width, centre + width

    min_k = math.ceil(pw2n * lower)
    max_k = math.floor(pw2n * upper)
    reach = max(abs(lower), abs(upper))
    span = max(abs(pw2n * reach - min_k), abs(pw2n * reach + max_k))
    density_levels = _vieta_levels(span)

    nodes = (2.0 * np.arange(density_levels) + 1.0) * math.pi / (2.0 * density_levels)
    f_hat = gbm_characteristic(pw2n * nodes, rate, sigma, expiry, x0)
    ks = np.arange(min_k, max_k + 1)
    coefficients = (
        math.sqrt(pw2n)
        * np.real(np.exp(1j * np.outer(ks, nodes)) @ f_hat)
        / density_levels
    )

    payoff_levels = _vieta_levels(abs(max_k - min_k))
    payoffs = np.array(
        [payoff_coefficient(int(k), scale, max_k, payoff_levels) for k in ks]
    )
    price = float(coefficients @ payoffs) * strike * math.exp(-rate * expiry) * math.sqrt(pw2n)

    return ShannonResult(
        price=price,
        scale=scale,
        min_k=min_k,
        max_k=max_k,
        coefficients=tuple(float(c) for c in coefficients),
        lower=lower,
        upper=upper,
        density_levels=density_levels,
        payoff_levels=payoff_levels,
    )
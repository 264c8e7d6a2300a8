"""Shannon-wavelet (SWIFT) pricing of a European call under the Heston model, using FFTs."""

from __future__ import annotations

import math

import numpy as np
import scipy.fft

from swiftpricing.shannon_gbm import ShannonResult, _vieta_levels


def heston_characteristic(w, params, rate, expiry, x0):
    """Fourier transform of the Heston log-moneyness density at time ``expiry``.

    ``w`` may be a scalar (a complex comes back) or an array.
    """
    kappa, v_bar, sigma, rho, v0 = params
    if sigma <= 0:
        raise ValueError("sigma must be positive")
    w = np.asarray(w, dtype=float)
    beta = kappa + 1j * rho * sigma * w
    d = np.sqrt(beta**2 + (w**2 - 1j * w) * sigma**2)
    g = (beta - d) / (beta + d)
    decay = np.exp(-d * expiry)
    e1 = -1j * rate * w * expiry + (v0 / sigma**2) * ((1.0 - decay) / (1.0 - g * decay)) * (
        beta - d
    )
    e2 = (kappa * v_bar / sigma**2) * (
        expiry * (beta - d) - 2.0 * np.log((1.0 - g * decay) / (1.0 - g))
    )
    value = np.exp(-1j * w * x0) * np.exp(e1) * np.exp(e2)
    return complex(value) if np.ndim(value) == 0 else value


def heston_interval(params, rate, expiry, x0, truncation=12.0):
    """Truncation interval (lower, upper) from the first two Heston cumulants."""
    kappa, v_bar, sigma, rho, v0 = params
    if kappa <= 0:
        raise ValueError("kappa must be positive")
    if truncation <= 0:
        raise ValueError("truncation must be positive")
    t = expiry
    decay = math.exp(-kappa * t)
    c1 = rate * t + (1.0 - decay) * (v_bar - v0) / (2.0 * kappa) - 0.5 * v_bar * t
    p1 = sigma * t * kappa * decay * (v0 - v_bar) * (8.0 * kappa * rho - 4.0 * sigma)
    p2 = kappa * rho * sigma * (1.0 - decay) * (16.0 * v_bar - 8.0 * v0)
    p3 = 2.0 * v_bar * kappa * t * (-4.0 * kappa * rho * sigma + sigma**2 + 4.0 * kappa**2)
    p4 = sigma**2 * (
        (v_bar - 2.0 * v0) * math.exp(-2.0 * kappa * t)
        + v_bar * (6.0 * decay - 7.0)
        + 2.0 * v0
    )
    p5 = 8.0 * kappa**2 * (v0 - v_bar) * (1.0 - decay)
    c2 = (p1 + p2 + p3 + p4 + p5) / (8.0 * kappa**3)
    width = truncation * math.sqrt(abs(c2))
    centre = x0 + c1
    return centre - width, centre + width


def fft_density_coefficients(params, rate, expiry, x0, scale, min_k, max_k, j_density):
    """Density coefficients c_{m,k} for k = min_k..max_k from one inverse FFT.

    ``j_density`` is the number of Vieta points; the transform has twice as many.
    """
    if j_density < 1:
        raise ValueError("j_density must be at least 1")
    if min_k > max_k:
        raise ValueError(f"min_k = {min_k} is greater than max_k = {max_k}")
    pw2n = 2.0**scale
    n_points = 2 * j_density
    nodes = (2.0 * np.arange(j_density) + 1.0) * math.pi / n_points
    padded = np.zeros(n_points, dtype=complex)
    padded[:j_density] = heston_characteristic(pw2n * nodes, params, rate, expiry, x0)
    backward = n_points * np.fft.ifft(padded)
    ks = np.arange(min_k, max_k + 1)
    values = (
        np.real(np.exp(1j * math.pi * ks / n_points) * backward[np.mod(ks, n_points)])
        * math.sqrt(pw2n)
        / j_density
    )
    return [float(v) for v in values]


def fft_payoff_coefficients(min_k, max_k, scale):
    """Call payoff coefficients for k = min_k..max_k from a DCT-II and a DST-II.

    The payoff is integrated over [0, max_k / 2^scale], so the range must contain zero.
    """
    if not min_k <= 0 <= max_k:
        raise ValueError("the coefficient range must contain k = 0")
    if min_k == max_k:
        raise ValueError("the coefficient range must hold more than one k")
    pw2n = 2.0**scale
    levels = _vieta_levels(max_k - min_k)
    upper = max_k / pw2n

    j = np.arange(levels)
    co = (2.0 * j + 1.0) / (2.0 * levels) * math.pi
    c = co * pw2n
    b_factor = 1.0 / c
    a_factor = c / (1.0 + c**2)
    e_upper = math.exp(upper)
    sb, cb = np.sin(c * upper), np.cos(c * upper)
    # Lower limit is zero: sin = 0, cos = 1, exp = 1.
    i11 = e_upper * sb + b_factor * e_upper * cb - b_factor
    i12 = -e_upper * cb + 1.0 + b_factor * e_upper * sb
    i21 = sb
    i22 = 1.0 - cb
    cos_part = a_factor * i11 - b_factor * i21
    sin_part = a_factor * i12 - b_factor * i22

    cos_t = scipy.fft.dct(cos_part, type=2)
    sin_t = scipy.fft.dst(sin_part, type=2)

    ks = np.arange(min_k, max_k + 1)
    magnitude = np.abs(ks)
    sine = np.where(magnitude > 0, sin_t[np.maximum(magnitude - 1, 0)], 0.0)
    values = (cos_t[magnitude] + np.sign(ks) * sine) / (2.0 * levels)
    return [float(v) for v in values]


def price_heston_call(spot, strike, rate, params, expiry, scale=1, truncation=12.0) -> ShannonResult:
    """Price a European call under Heston with Shannon wavelets at resolution 2^scale."""
    if spot <= 0 or strike <= 0:
        raise ValueError("spot and strike must be positive")
    if expiry <= 0:
        raise ValueError("expiry must be positive")
    params = tuple(float(p) for p in params)
    if len(params) != 5:
        raise ValueError("five Heston parameters are required")

    pw2n = 2.0**scale
    x0 = math.log(spot / strike)
    lower, upper = heston_interval(params, rate, expiry, x0, truncation)
    min_k = math.ceil(pw2n * lower)
    max_k = math.floor(pw2n * upper)

    reach = max(abs(lower), abs(upper))
    span = max(abs(pw2n * reach - min_k), abs(pw2n * reach + max_k))
    density_levels = _vieta_levels(span)

    coefficients = fft_density_coefficients(
        params, rate, expiry, x0, scale, min_k, max_k, density_levels
    )
    payoffs = fft_payoff_coefficients(min_k, max_k, scale)
    price = (
        float(np.dot(coefficients, payoffs))
        * strike
        * math.exp(-rate * expiry)
        * math.sqrt(pw2n)
    )
    return ShannonResult(
        price=price,
        scale=scale,
        min_k=min_k,
        max_k=max_k,
        coefficients=tuple(coefficients),
        lower=lower,
        upper=upper,
        density_levels=density_levels,
        payoff_levels=_vieta_levels(max_k - min_k),
    )
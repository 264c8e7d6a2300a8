"""Analytic gradient of Heston call prices with respect to the model parameters."""

from __future__ import annotations

import math

import numpy as np

from swiftpricing.heston_cui import (
    HALF_WIDTH,
    MID_POINT,
    MarketData,
    _NODES,
    _WEIGHTS,
)

PARAMETER_NAMES = ("kappa", "v_bar", "sigma", "rho", "v0")


def _branch_gradient(pq, shifted, params, expiry, x0, d_for_denominator=None, extra_d_division=False):
    """Characteristic value and log-derivative factors for one half of the integrand.

    Returns ``(y, factors, d)`` where ``factors`` holds the multipliers of ``y``
    giving the derivative with respect to kappa, v_bar, sigma, rho and v0.
    """
    a, b, c, rho, v0 = params
    ipq = 1j * pq
    if shifted:
        z = 1j * (pq - 1j)
        sq = (pq - 1j) ** 2
        m = ipq + 1.0 + sq
    else:
        z = ipq
        sq = pq.astype(complex) ** 2
        m = ipq + sq

    csqr = c * c
    abrt = a * b * rho * expiry
    g_rate = -abrt / c
    half_t = 0.5 * expiry
    tmp3 = 2.0 * a * b / csqr
    exp_half = math.exp(a * half_t)

    kes = a - c * rho * z
    d = np.sqrt(kes**2 + m * csqr)
    g = np.exp(g_rate * z)
    alpha = d * half_t
    calp = np.cosh(alpha)
    salp = np.sinh(alpha)
    a2 = d * calp + kes * salp
    a1 = m * salp
    big_a = a1 / a2
    big_b = d * exp_half / a2
    dd = d if d_for_denominator is None else d_for_denominator
    log_b = (
        np.log(d)
        + (a - d) * half_t
        - np.log((d + kes) * 0.5 + (dd - kes) * 0.5 * np.exp(-d * expiry))
    )
    y = np.exp(x0 * z - v0 * big_a + tmp3 * log_b) * g
    h_term = kes * calp + d * salp

    # v_bar
    y_b = (tmp3 / b) * log_b + (g_rate / b) * z

    # rho
    rho_rate = -a * b * expiry / c
    ctmp = c * z / d
    pd_prho = -kes * ctmp
    pa1_prho = m * calp * half_t * pd_prho
    pa2_prho = -ctmp * h_term * (1.0 + kes * half_t)
    if extra_d_division:
        pa2_prho = pa2_prho / d
    pa_prho = (pa1_prho - big_a * pa2_prho) / a2
    ctmp = pd_prho - pa2_prho * d / a2
    pb_prho = exp_half / a2 * ctmp
    y_rho = -v0 * pa_prho + tmp3 * ctmp / d + rho_rate * z

    # kappa
    kappa_rate = b * rho * expiry / c
    kappa_scale = tmp3 / a
    ctmp = -1.0 / (c * z)
    pb_pa = ctmp * pb_prho + big_b * half_t
    y_kappa = (
        -v0 * pa_prho * ctmp
        + kappa_scale * log_b
        + a * kappa_scale * pb_pa / big_b
        - kappa_rate * z
    )

    # sigma
    ratio = rho / c
    sigma_scale = 4.0 * a * b / c**3
    sigma_rate = abrt / csqr
    pd_pc = (ratio - 1.0 / kes) * pd_prho + c * sq / d
    pa1_pc = m * calp * half_t * pd_pc
    pa2_pc = (
        ratio * pa2_prho
        - 1.0 / z * (2.0 / (expiry * kes) + 1.0) * pa1_prho
        + c * half_t * a1
    )
    pa_pc = pa1_pc / a2 - big_a / a2 * pa2_pc
    y_sigma = (
        -v0 * pa_pc
        - sigma_scale * log_b
        + tmp3 / d * (pd_pc - d / a2 * pa2_pc)
        + sigma_rate * z
    )

    # v0
    y_v0 = -big_a

    return y, (y_kappa, y_b, y_sigma, y_rho, y_v0), d


def heston_jacobian_integrands(u, params, strike, expiry, spot, rate):
    """Real Jacobian integrands at Gauss-Legendre abscissa ``u`` in [0, 1].

    Returns one ``(first, second)`` pair per parameter, in the order kappa,
    v_bar, sigma, rho, v0. ``u`` may be a scalar (floats come back) or an array.
    """
    scalar = np.ndim(u) == 0
    u_arr = np.atleast_1d(np.asarray(u, dtype=float))
    params = tuple(float(p) for p in params)
    pq_m = MID_POINT + HALF_WIDTH * u_arr
    pq_n = MID_POINT - HALF_WIDTH * u_arr
    x0 = math.log(spot) + rate * expiry
    log_k = math.log(strike)

    h_m = np.exp(-1j * pq_m * log_k) / (1j * pq_m)
    h_n = np.exp(-1j * pq_n * log_k) / (1j * pq_n)

    y_m1, f_m1, d_m1 = _branch_gradient(pq_m, True, params, expiry, x0)
    y_n1, f_n1, _ = _branch_gradient(pq_n, True, params, expiry, x0)
    y_m2, f_m2, _ = _branch_gradient(
        pq_m, False, params, expiry, x0, d_for_denominator=d_m1, extra_d_division=True
    )
    y_n2, f_n2, _ = _branch_gradient(pq_n, False, params, expiry, x0)

    hm1, hn1 = h_m * y_m1, h_n * y_n1
    hm2, hn2 = h_m * y_m2, h_n * y_n2

    pairs = tuple(
        (np.real(hm1 * fm1 + hn1 * fn1), np.real(hm2 * fm2 + hn2 * fn2))
        for fm1, fn1, fm2, fn2 in zip(f_m1, f_n1, f_m2, f_n2)
    )
    if scalar:
        return tuple((float(first[0]), float(second[0])) for first, second in pairs)
    return pairs


def heston_jacobian(params, market: MarketData) -> list[list[float]]:
    """Derivatives of each observed call price, one row of five per option.

    Columns follow the parameter order kappa, v_bar, sigma, rho, v0.
    """
    rows = []
    for expiry, strike in zip(market.expiries, market.strikes):
        disc_pi = math.exp(-market.rate * expiry) / math.pi
        pairs = heston_jacobian_integrands(
            _NODES, params, strike, expiry, market.spot, market.rate
        )
        row = []
        for first, second in pairs:
            q1 = HALF_WIDTH * float(np.dot(_WEIGHTS, first))
            q2 = HALF_WIDTH * float(np.dot(_WEIGHTS, second))
            row.append(disc_pi * (q1 - strike * q2))
        rows.append(row)
    return rows
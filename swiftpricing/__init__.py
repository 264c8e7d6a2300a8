"""Heston and Black-Scholes call pricing, Heston Jacobians, calibration and Shannon-wavelet methods."""

__version__ = "0.1.0"

__all__ = [
    "calibration",
    "density_coefficients",
    "heston_cui",
    "heston_jacobian",
    "profiling",
    "shannon_gbm",
    "shannon_heston",
]
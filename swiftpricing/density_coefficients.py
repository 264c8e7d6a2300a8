"""Density coefficients of a Shannon-wavelet expansion from a characteristic function."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np


class Distribution(Protocol):
    """What a calculator needs from a model of the log-price distribution."""

    number_of_parameters: int

    def characteristic(self, u: float, x: float) -> complex:
        """Characteristic function at frequency ``u`` for position ``x``."""

    def characteristic_gradient(self, u: float, x: float) -> Sequence[complex]:
        """Derivatives of the characteristic function with respect to each parameter."""


@dataclass(frozen=True)
class CoefficientGrid:
    """Wavelet scale, the range k1..k2 of coefficients and the Vieta point count."""

    scale: int
    k1: int
    k2: int
    j_density: int

    def __post_init__(self) -> None:
        if self.scale < 0:
            raise ValueError("scale must not be negative")
        if self.k1 > self.k2:
            raise ValueError(f"k1 = {self.k1} is greater than k2 = {self.k2}")
        if self.j_density < 1:
            raise ValueError("j_density must be at least 1")

    @property
    def n_density(self) -> int:
        return 2 * self.j_density

    @property
    def two_to_the_m(self) -> int:
        return 2**self.scale

    @property
    def sqrt_two_to_the_m(self) -> float:
        return math.sqrt(self.two_to_the_m)

    @property
    def ks(self) -> np.ndarray:
        return np.arange(self.k1, self.k2 + 1)

    @property
    def vieta_angles(self) -> np.ndarray:
        """Angles (2j - 1) pi / N for j = 1..J."""
        j = np.arange(1, self.j_density + 1)
        return (2.0 * j - 1.0) * math.pi / self.n_density


class CoefficientCalculator(ABC):
    """Computes the coefficients c_{m,k} for k in the grid's range."""

    def __init__(self, distribution: Distribution, grid: CoefficientGrid) -> None:
        self.distribution = distribution
        self.grid = grid

    @abstractmethod
    def coefficients(self, x: float) -> list[float]:
        """Coefficients c_{m,k1} .. c_{m,k2} of the density at position ``x``."""

    def _characteristics(self, frequencies: np.ndarray, x: float) -> np.ndarray:
        return np.array(
            [self.distribution.characteristic(float(u), x) for u in frequencies],
            dtype=complex,
        )

    def _gradients(self, frequencies: np.ndarray, x: float) -> np.ndarray:
        count = self.distribution.number_of_parameters
        rows = []
        for u in frequencies:
            row = list(self.distribution.characteristic_gradient(float(u), x))
            if len(row) != count:
                raise ValueError(
                    f"gradient has {len(row)} entries, expected {count} parameters"
                )
            rows.append(row)
        return np.array(rows, dtype=complex).reshape(len(frequencies), count)


def _explicit_vieta(grid: CoefficientGrid, values: np.ndarray) -> np.ndarray:
    """Sum Re(values_j e^{i k w_j}) over the Vieta points, scaled; works on 1-D or 2-D values."""
    phases = np.exp(1j * np.outer(grid.ks, grid.vieta_angles))
    return np.real(phases @ values) * grid.sqrt_two_to_the_m / grid.j_density


class ParsevalCalculator(CoefficientCalculator):
    """Coefficients from a trapezoidal integral of the Parseval identity."""

    def __init__(
        self, distribution: Distribution, grid: CoefficientGrid, integral_buckets: int = 10000
    ) -> None:
        if integral_buckets < 1:
            raise ValueError("integral_buckets must be at least 1")
        super().__init__(distribution, grid)
        self.integral_buckets = integral_buckets

    def coefficients(self, x: float) -> list[float]:
        t = np.linspace(-0.5, 0.5, self.integral_buckets + 1)
        step = 1.0 / self.integral_buckets
        f_hat = self._characteristics(2.0 ** (self.grid.scale + 1) * math.pi * t, x)
        factor = 2.0 ** (self.grid.scale / 2.0)
        result = []
        for k in self.grid.ks:
            integrand = np.real(f_hat * np.exp(1j * 2.0 * math.pi * float(k) * t))
            integral = step * (integrand.sum() - 0.5 * (integrand[0] + integrand[-1]))
            result.append(float(integral * factor))
        return result


class ExplicitVietaCalculator(CoefficientCalculator):
    """Coefficients from the Vieta cosine product, summed term by term."""

    def coefficients(self, x: float) -> list[float]:
        f_hat = self._characteristics(self.grid.vieta_angles * self.grid.two_to_the_m, x)
        return [float(c) for c in _explicit_vieta(self.grid, f_hat)]

    def gradient_coefficients(self, x: float) -> list[list[float]]:
        """Per k, the derivative of c_{m,k} with respect to each model parameter."""
        grads = self._gradients(self.grid.vieta_angles * self.grid.two_to_the_m, x)
        return [[float(v) for v in row] for row in _explicit_vieta(self.grid, grads)]


class FastVietaCalculator(CoefficientCalculator):
    """Coefficients from the Vieta sum evaluated with one inverse FFT."""

    def _frequencies(self) -> np.ndarray:
        j = np.arange(self.grid.j_density)
        return (2.0 * j + 1.0) * math.pi * self.grid.two_to_the_m / self.grid.n_density

    def _finish(self, padded: np.ndarray) -> np.ndarray:
        n = self.grid.n_density
        times = n * np.fft.ifft(padded, axis=0)
        ks = self.grid.ks
        shift = np.exp(1j * ks * math.pi / n)
        picked = times[np.mod(ks, n)]
        if picked.ndim == 2:
            shift = shift[:, None]
        return np.real(shift * picked) * self.grid.sqrt_two_to_the_m / self.grid.j_density

    def coefficients(self, x: float) -> list[float]:
        padded = np.zeros(self.grid.n_density, dtype=complex)
        padded[: self.grid.j_density] = self._characteristics(self._frequencies(), x)
        return [float(c) for c in self._finish(padded)]

    def gradient_coefficients(self, x: float) -> list[list[float]]:
        """Per k, the derivative of c_{m,k} with respect to each model parameter."""
        grads = self._gradients(self._frequencies(), x)
        padded = np.zeros((self.grid.n_density, grads.shape[1]), dtype=complex)
        padded[: self.grid.j_density] = grads
        return [[float(v) for v in row] for row in self._finish(padded)]


class NewPaperExplicitCalculator(CoefficientCalculator):
    """Explicit Vieta coefficients, without a gradient."""

    def coefficients(self, x: float) -> list[float]:
        f_hat = self._characteristics(self.grid.vieta_angles * self.grid.two_to_the_m, x)
        return [float(c) for c in _explicit_vieta(self.grid, f_hat)]
"""Radix-2 split-radix fast Fourier transforms.

Complex transforms take and return sequences of complex numbers. The forward
transform uses the kernel ``exp(-2j*pi*j*k/n)``; the backward transform is
normalised by ``1/n`` so that ``ifft(fft(x))`` gives back ``x``.

Real transforms use a packed layout of ``n`` floats for the spectrum::

    [X0, X(n/2), Re X1, Im X1, Re X2, Im X2, ..., Re X(n/2-1), Im X(n/2-1)]

``X0`` and ``X(n/2)`` are purely real for real input, so they share the
first pair of slots.
"""

from __future__ import annotations

import cmath
import enum
import math
from collections.abc import Sequence

_MIN_REAL_SIZE = 4


class FftType(enum.Enum):
    """Whether a plan transforms real samples or complex samples."""

    REAL = enum.auto()
    COMPLEX = enum.auto()


class FftDirection(enum.Enum):
    """Forward (time to frequency) or backward (frequency to time)."""

    FORWARD = enum.auto()
    BACKWARD = enum.auto()


def _check_size(size: int, minimum: int = 1) -> None:
    if size < minimum or size & (size - 1):
        raise ValueError(f"FFT size must be a power of two not below {minimum}, got {size}")


def twiddle_factors(size: int) -> list[complex]:
    """The ``size`` roots of unity ``exp(2j*pi*k/size)`` used by the transforms."""
    _check_size(size)
    return [cmath.exp(1j * math.tau * k / size) for k in range(size)]


def _transform(x: list[complex], tw: Sequence[complex], step: int) -> list[complex]:
    """Split-radix decimation-in-time FFT; ``tw[k*step]`` is the k-th root for len(x)."""
    n = len(x)
    if n == 1:
        return [x[0]]
    if n == 2:
        return [x[0] + x[1], x[0] - x[1]]

    u = _transform(x[0::2], tw, 2 * step)
    z1 = _transform(x[1::4], tw, 4 * step)
    z3 = _transform(x[3::4], tw, 4 * step)

    half, quarter = n // 2, n // 4
    out = [0j] * n
    for k, (u1, u2, a, b) in enumerate(zip(u[:quarter], u[quarter:], z1, z3)):
        a *= tw[k * step].conjugate()
        b *= tw[3 * k * step].conjugate()
        t = a + b
        d = 1j * (a - b)
        out[k] = u1 + t
        out[k + half] = u1 - t
        out[k + quarter] = u2 - d
        out[k + half + quarter] = u2 + d
    return out


def _inverse(x: list[complex], tw: Sequence[complex], step: int) -> list[complex]:
    y = _transform(x, tw, step)
    n = len(y)
    return [v / n for v in (y[0], *y[:0:-1])]


def _rfft(values: list[float], tw: Sequence[complex]) -> list[float]:
    n = len(values)
    half = n // 2
    packed = [complex(re, im) for re, im in zip(values[0::2], values[1::2])]
    y = [part for v in _transform(packed, tw, 2) for part in (v.real, v.imag)]

    t = y[0]
    y[0] = t + y[1]
    y[1] = t - y[1]
    y[half + 1] = -y[half + 1]

    for k in range(2, half, 2):
        w = tw[k // 2]
        c, s = w.real, w.imag
        xer = 0.5 * (y[k] + y[n - k])
        xei = 0.5 * (y[k + 1] - y[n - k + 1])
        xor_t = 0.5 * (y[k + 1] + y[n - k + 1])
        xoi = -0.5 * (y[k] - y[n - k])
        tr = c * xor_t + s * xoi
        ti = -s * xor_t + c * xoi
        y[k] = xer + tr
        y[k + 1] = xei + ti
        y[n - k] = xer - tr
        y[n - k + 1] = -(xei - ti)
    return y


def _irfft(values: list[float], tw: Sequence[complex]) -> list[float]:
    x = list(values)
    n = len(x)
    half = n // 2

    t = x[0]
    x[0] = 0.5 * (t + x[1])
    x[1] = 0.5 * (t - x[1])
    x[half + 1] = -x[half + 1]

    for k in range(2, half, 2):
        w = tw[k // 2]
        c, s = w.real, w.imag
        xer = 0.5 * (x[k] + x[n - k])
        tr = 0.5 * (x[k] - x[n - k])
        xei = 0.5 * (x[k + 1] - x[n - k + 1])
        ti = 0.5 * (x[k + 1] + x[n - k + 1])
        xor_t = c * tr - s * ti
        xoi = s * tr + c * ti
        x[k] = xer - xoi
        x[k + 1] = xor_t + xei
        x[n - k] = xer + xoi
        x[n - k + 1] = xor_t - xei

    packed = [complex(re, im) for re, im in zip(x[0::2], x[1::2])]
    return [part for v in _inverse(packed, tw, 2) for part in (v.real, v.imag)]


def fft(data: Sequence[complex]) -> list[complex]:
    """Forward complex FFT; the length must be a power of two."""
    values = [complex(v) for v in data]
    return _transform(values, twiddle_factors(len(values)), 1)


def ifft(data: Sequence[complex]) -> list[complex]:
    """Backward complex FFT, normalised by ``1/n``."""
    values = [complex(v) for v in data]
    return _inverse(values, twiddle_factors(len(values)), 1)


def rfft(data: Sequence[float]) -> list[float]:
    """Forward FFT of real samples, returning the packed spectrum."""
    values = [float(v) for v in data]
    _check_size(len(values), _MIN_REAL_SIZE)
    return _rfft(values, twiddle_factors(len(values)))


def irfft(data: Sequence[float]) -> list[float]:
    """Real samples from a packed spectrum; the inverse of :func:`rfft`."""
    values = [float(v) for v in data]
    _check_size(len(values), _MIN_REAL_SIZE)
    return _irfft(values, twiddle_factors(len(values)))


class FftPlan:
    """A transform of fixed size, type and direction with precomputed twiddles."""

    def __init__(
        self,
        size: int,
        fft_type: FftType = FftType.COMPLEX,
        direction: FftDirection = FftDirection.FORWARD,
    ) -> None:
        _check_size(size, _MIN_REAL_SIZE if fft_type is FftType.REAL else 1)
        self.size = size
        self.type = fft_type
        self.direction = direction
        self.twiddles = tuple(twiddle_factors(size))

    def __repr__(self) -> str:
        return f"FftPlan(size={self.size}, type={self.type.name}, direction={self.direction.name})"

    def execute(self, data: Sequence[complex] | Sequence[float]) -> list:
        """Run the planned transform on ``data`` of exactly ``size`` samples."""
        if len(data) != self.size:
            raise ValueError(f"expected {self.size} samples, got {len(data)}")
        if self.type is FftType.REAL:
            values = [float(v) for v in data]
            if self.direction is FftDirection.FORWARD:
                return _rfft(values, self.twiddles)
            return _irfft(values, self.twiddles)
        cvalues = [complex(v) for v in data]
        if self.direction is FftDirection.FORWARD:
            return _transform(cvalues, self.twiddles, 1)
        return _inverse(cvalues, self.twiddles, 1)
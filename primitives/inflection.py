"""Inflection points — where the signal's second derivative changes sign.

Derivatives are finite differences over a fixed stride instead of adjacent
samples, so a single noisy sample cannot flip the sign on its own:

    y'(n)  ~ (y[n + D] - y[n]) / D
    y''(n) ~ (y'(n) - y'(n - D)) / D

Inflections are the boundaries between curves.
"""

import numpy as np
from numba import njit

DERIVATIVE_STRIDE = 10  # D, in samples


def _check_margin(samples, pos, stride):
    if pos < 0 or pos + stride >= len(samples):
        raise IndexError(
            f"position {pos} needs {stride} samples of margin "
            f"(sequence has {len(samples)})")


def derivative(samples, pos: int, stride: int = DERIVATIVE_STRIDE) -> float:
    """Rate of change of the signal at `pos`, measured over `stride` samples."""
    _check_margin(samples, pos, stride)
    return (int(samples[pos + stride]) - int(samples[pos])) / stride


def second_derivative(samples, pos: int, stride: int = DERIVATIVE_STRIDE) -> float:
    """Rate of change of the derivative. Needs `stride` samples on both sides."""
    return (derivative(samples, pos, stride) - derivative(samples, pos - stride, stride)) / stride


def is_inflection(samples, pos: int, stride: int = DERIVATIVE_STRIDE) -> bool:
    """True if the second derivative changes sign between `pos` and `pos + 1`.

    Zero counts on the "from" side only: 0 -> positive and 0 -> negative are
    inflections, positive -> 0 and negative -> 0 are not.
    """
    sd0 = second_derivative(samples, pos, stride)
    sd1 = second_derivative(samples, pos + 1, stride)
    return (sd0 <= 0 and sd1 > 0) or (sd0 >= 0 and sd1 < 0)


def scan_range(n_samples: int, stride: int = DERIVATIVE_STRIDE) -> range:
    """Positions `is_inflection` can be evaluated at for a sequence of this length."""
    return range(stride, max(stride, n_samples - stride - 1))


@njit(cache=True)
def _scan(samples, stride):
    n = len(samples)
    out = np.empty(max(0, n - 2 * stride - 1), dtype=np.int64)
    count = 0
    # Same operation order as second_derivative() so the floats match exactly
    for pos in range(stride, n - stride - 1):
        d0 = float(samples[pos + stride] - samples[pos]) / stride
        d0_back = float(samples[pos] - samples[pos - stride]) / stride
        d1 = float(samples[pos + 1 + stride] - samples[pos + 1]) / stride
        d1_back = float(samples[pos + 1] - samples[pos + 1 - stride]) / stride
        sd0 = (d0 - d0_back) / stride
        sd1 = (d1 - d1_back) / stride
        if (sd0 <= 0.0 and sd1 > 0.0) or (sd0 >= 0.0 and sd1 < 0.0):
            out[count] = pos
            count += 1
    return out[:count]


def find_inflections(samples, stride: int = DERIVATIVE_STRIDE) -> np.ndarray:
    """Every inflection position in a whole buffer (same answer as `is_inflection`).

    Returns an int64 array of positions, ascending.
    """
    if stride < 1:
        raise ValueError(f"stride must be >= 1, got {stride}")
    data = np.ascontiguousarray(samples, dtype=np.int64)
    return _scan(data, stride)

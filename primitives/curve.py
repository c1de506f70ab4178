"""Curves — the segments of signal between two consecutive inflection points.

A curve keeps its own read-only copy of the samples, so it stays usable after
the source buffer is gone, and caches its energy (sum of squared samples).

Similarity is a Riemann sum of the squared difference between two curves,
normalised by the larger energy:

    error = sum((a[i] - b[i]) ** 2) / max(E_a, E_b)

The shorter curve is zero-padded to the length of the longer one.
"""

import math
from dataclasses import dataclass, field
from itertools import zip_longest

import numpy as np

CURVE_MAX_SAMPLES = 100
CURVE_ERROR_THRESHOLD = 0.01


def _no_samples():
    data = np.zeros(0, dtype=np.int64)
    data.flags.writeable = False
    return data


@dataclass(frozen=True, eq=False)
class Curve:
    """Immutable curve snapshot. `start` is where it was cut from the source.

    `data` is copied to a read-only int64 array and `energy` is derived from
    it, so the two can never disagree.
    """

    start: int = 0
    data: np.ndarray = field(default_factory=_no_samples)
    energy: int = field(init=False, default=0)

    def __post_init__(self):
        data = np.array(self.data, dtype=np.int64).reshape(-1)
        data.flags.writeable = False
        object.__setattr__(self, "data", data)
        # Python ints: exact for any 32-bit input, however long the curve
        object.__setattr__(self, "energy", sum(v * v for v in data.tolist()))

    @property
    def sample_count(self) -> int:
        return len(self.data)

    @property
    def end(self) -> int:
        return self.start + len(self.data)

    @property
    def valid(self) -> bool:
        return len(self.data) > 0

    def __repr__(self):
        state = "" if self.valid else ", invalid"
        return f"Curve(start={self.start}, samples={self.sample_count}, energy={self.energy}{state})"


def blank_curve() -> Curve:
    return Curve()


def make_curve(samples, start: int, length: int) -> Curve:
    """Cut `length` samples starting at `start` out of `samples`.

    A zero-length or empty view gives an invalid curve, not an error.
    Negative bounds, or a view running past the end, raise IndexError.
    """
    if start < 0 or length < 0:
        raise IndexError(f"negative curve bounds: start={start}, length={length}")
    if length == 0 or start >= len(samples):
        return Curve(start=start)
    if start + length > len(samples):
        raise IndexError(
            f"curve [{start}, {start + length}) runs past the end "
            f"of {len(samples)} samples")

    return Curve(start=start, data=samples[start:start + length])


def squared_difference(c1: Curve, c2: Curve):
    """Sum of squared sample differences, over the longer of the two curves.

    One invalid curve compares as all zeros (the valid curve's energy);
    two invalid curves are infinitely far apart.
    """
    if c1.valid and c2.valid:
        return sum((a - b) ** 2 for a, b in
                   zip_longest(c1.data.tolist(), c2.data.tolist(), fillvalue=0))
    if c1.valid:
        return c1.energy
    if c2.valid:
        return c2.energy
    return math.inf


def is_same_curve(c1: Curve, c2: Curve, threshold: float = CURVE_ERROR_THRESHOLD) -> bool:
    """True if the normalised error between the curves is below `threshold`.

    Curves without energy are never the same as anything, themselves included.
    """
    ref_energy = max(c1.energy, c2.energy)
    if ref_energy == 0:
        return False
    return squared_difference(c1, c2) / ref_energy < threshold

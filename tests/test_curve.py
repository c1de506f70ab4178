"""Test curve construction and curve similarity.

Run: uv run python tests/test_curve.py
"""

import math
import numpy as np
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from primitives.curve import (
    CURVE_ERROR_THRESHOLD, Curve, blank_curve, make_curve, squared_difference, is_same_curve,
)


def curve_of(values):
    """Curve spanning a whole list of sample values."""
    return make_curve(np.array(values, dtype=np.int32), 0, len(values))


# ---------------------------------------------------------------------------
# Test 1: Blank and degenerate curves
# ---------------------------------------------------------------------------
def test_blank_and_empty():
    print("Test 1: blank / zero-length curves are invalid, not errors")
    blank = blank_curve()
    assert not blank.valid
    assert blank.sample_count == 0
    assert blank.energy == 0

    samples = np.arange(20, dtype=np.int32)
    empty = make_curve(samples, 5, 0)
    assert not empty.valid and empty.energy == 0 and empty.start == 5
    past_end = make_curve(samples, 20, 4)
    assert not past_end.valid
    print("  OK")


def test_bad_bounds():
    print("Test 2: negative or overrunning views raise IndexError")
    samples = np.arange(20, dtype=np.int32)
    with pytest.raises(IndexError):
        make_curve(samples, -1, 5)
    with pytest.raises(IndexError):
        make_curve(samples, 0, -5)
    with pytest.raises(IndexError):
        make_curve(samples, 15, 10)
    print("  OK")


# ---------------------------------------------------------------------------
# Test 3: Energy
# ---------------------------------------------------------------------------
def test_energy():
    print("Test 3: energy is the exact sum of squares")
    c = curve_of([3, -4, 0, 12])
    assert c.valid and c.sample_count == 4
    assert c.energy == 9 + 16 + 144

    # Full-scale int32 over hundreds of samples would overflow 64 bits
    loud = np.full(300, np.iinfo(np.int32).min, dtype=np.int32)
    c = make_curve(loud, 0, 300)
    assert c.energy == 300 * (2 ** 31) ** 2
    print(f"  full-scale energy: {c.energy}")


def test_curve_owns_its_samples():
    print("Test 4: curves copy samples out of the source buffer")
    samples = np.arange(10, dtype=np.int32)
    c = make_curve(samples, 2, 4)
    samples[:] = 0
    assert c.data.tolist() == [2, 3, 4, 5]
    assert c.energy == 4 + 9 + 16 + 25
    assert c.start == 2 and c.end == 6
    with pytest.raises(ValueError):
        c.data[0] = 99
    print("  OK")


# ---------------------------------------------------------------------------
# Test 5: Squared difference
# ---------------------------------------------------------------------------
def test_squared_difference_pads_shorter_curve():
    print("Test 5: the longer curve sets the comparison length")
    long = curve_of([1, 2, 3])
    short = curve_of([1, 2])
    assert squared_difference(long, short) == 9
    # Bound must not come from the first argument
    assert squared_difference(short, long) == 9
    print("  OK")


def test_squared_difference_symmetry_and_identity():
    print("Test 6: symmetric, zero against itself")
    rng = np.random.default_rng(3)
    for _ in range(20):
        a = curve_of(rng.integers(-2**31, 2**31 - 1, 50))
        b = curve_of(rng.integers(-2**31, 2**31 - 1, 50))
        assert squared_difference(a, b) == squared_difference(b, a)
        assert squared_difference(a, a) == 0
    print("  OK")


def test_squared_difference_invalid():
    print("Test 7: invalid curves")
    c = curve_of([5, 5, 5])
    assert squared_difference(c, blank_curve()) == c.energy
    assert squared_difference(blank_curve(), c) == c.energy
    assert squared_difference(blank_curve(), blank_curve()) == math.inf
    print("  OK")


# ---------------------------------------------------------------------------
# Test 8: Curve equality
# ---------------------------------------------------------------------------
def test_is_same_curve():
    print("Test 8: is_same_curve")
    c = curve_of([100, 400, 900, 400, 100])
    assert is_same_curve(c, c)
    assert is_same_curve(c, curve_of([101, 399, 902, 400, 99]))
    assert not is_same_curve(c, curve_of([-100, -400, -900, -400, -100]))
    assert not is_same_curve(c, curve_of([100, 400, 900]))  # truncated
    print("  OK")


def test_is_same_curve_degenerate():
    print("Test 9: no false positives from empty or silent curves")
    assert not is_same_curve(blank_curve(), blank_curve())
    silent = curve_of([0, 0, 0, 0])
    assert silent.valid and silent.energy == 0
    assert not is_same_curve(silent, silent)
    assert not is_same_curve(silent, blank_curve())
    assert not is_same_curve(curve_of([10, 10]), blank_curve())
    print("  OK")


def test_threshold_is_strict():
    print("Test 10: error must be strictly below the threshold")
    # error = 1 / 100 == threshold -> different
    assert not is_same_curve(curve_of([10]), curve_of([9]))
    # error = 1 / 10000 -> same
    assert is_same_curve(curve_of([100]), curve_of([99]))
    # Looser threshold accepts the first pair
    assert is_same_curve(curve_of([10]), curve_of([9]), threshold=2 * CURVE_ERROR_THRESHOLD)
    print("  OK")


# ---------------------------------------------------------------------------
# Test 11: Direct construction
# ---------------------------------------------------------------------------
def test_constructor_derives_energy():
    print("Test 11: Curve(data=...) computes its own energy")
    source = np.array([3, -4, 12], dtype=np.int32)
    c = Curve(start=7, data=source)
    assert c.valid and c.energy == 9 + 16 + 144
    assert c.start == 7 and c.end == 10
    assert c.data.dtype == np.int64
    with pytest.raises(ValueError):
        c.data[0] = 0
    source[0] = 1000
    assert c.data[0] == 3 and c.energy == 169

    # Same energy as the equivalent cut
    assert Curve(data=[1, 2, 3]).energy == make_curve(np.array([1, 2, 3]), 0, 3).energy == 14
    assert Curve().energy == 0 and not Curve().valid
    with pytest.raises(TypeError):
        Curve(data=[1, 2], energy=0)
    print("  OK")


if __name__ == "__main__":
    test_blank_and_empty()
    test_bad_bounds()
    test_energy()
    test_curve_owns_its_samples()
    test_squared_difference_pads_shorter_curve()
    test_squared_difference_symmetry_and_identity()
    test_squared_difference_invalid()
    test_is_same_curve()
    test_is_same_curve_degenerate()
    test_threshold_is_strict()
    test_constructor_derives_energy()
    print("\nDone!")

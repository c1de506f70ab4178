"""Cycle search — the shortest block of curves that repeats the block before it.

Anchored at the newest curve i, try partner offsets d = 1, 2, 3, ... For the
first partner j = i - d whose curve matches curve i, walk both pointers back
in lock-step:

    i   vs j
    i-1 vs j-1
    ...
    j   vs j-d

If every pair matches, the last d curves repeat the d curves before them and
d is the period. The first d that verifies wins, so a period is never
reported when a shorter one exists. Reaching d == capacity (partner back at
the anchor) means there is no cycle in the history.
"""

from __future__ import annotations

from primitives.curve import CURVE_ERROR_THRESHOLD, is_same_curve
from primitives.curve_ring import CurveRing


def _block_repeats(ring: CurveRing, index: int, partner: int, threshold: float) -> bool:
    stop = ring.wrap(partner)
    m = ring.wrap(index)
    n = stop
    while m != stop:
        m = ring.wrap(m - 1)
        n = ring.wrap(n - 1)
        if not is_same_curve(ring[m], ring[n], threshold):
            return False
    return True


def find_cycle(ring: CurveRing, index: int,
               threshold: float = CURVE_ERROR_THRESHOLD) -> int | None:
    """Period (in curves) of the cycle ending at `index`, or None.

    Pure function of the ring contents: the same ring and anchor always give
    the same answer.
    """
    anchor = ring[index]
    if not anchor.valid:
        return None
    for period in range(1, ring.capacity):
        partner = index - period
        if not is_same_curve(anchor, ring[partner], threshold):
            continue
        if _block_repeats(ring, index, partner, threshold):
            return period
    return None

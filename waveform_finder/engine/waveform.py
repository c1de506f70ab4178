"""Waveform tracker — the periodic unit currently believed to be playing.

States:
    empty     no waveform yet, or the last search found nothing usable
    tracking  a waveform is held and a cursor walks through it as curves arrive

Driving protocol, once per newly closed curve at ring slot i:

    if not tracker.fits(curve):
        tracker.find_new(ring, i)          # full cycle search
    elif tracker.is_end_of_waveform():
        tracker.re_anchor(ring, i)         # follow slow drift, no search

Every outcome of find_new / re_anchor is reported as a WaveformEvent to the
optional `on_event` callback, and logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from primitives.curve import CURVE_ERROR_THRESHOLD, Curve, is_same_curve
from primitives.curve_ring import CurveRing
from waveform_finder.engine.cycle_search import find_cycle
from waveform_finder.engine.params import WAVEFORM_MAX_CURVES

log = logging.getLogger(__name__)


class EventKind(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    REJECTED = "rejected"
    RE_ANCHORED = "re_anchored"


@dataclass(frozen=True)
class WaveformEvent:
    kind: EventKind
    position: int         # sample where the triggering curve ended
    curve_index: int      # ring slot of the triggering curve
    curve_count: int = 0
    total_samples: int = 0


@dataclass
class Waveform:
    """An ordered run of curve snapshots plus a matching cursor.

    Curves are immutable, so holding them here is a value copy: the ring may
    overwrite its slots without touching the waveform.
    """

    curves: tuple = ()
    cursor: int = 0

    @property
    def curve_count(self) -> int:
        return len(self.curves)

    @property
    def total_samples(self) -> int:
        return sum(c.sample_count for c in self.curves)

    @property
    def valid(self) -> bool:
        return len(self.curves) > 0


class WaveformTracker:

    def __init__(self, max_curves: int = WAVEFORM_MAX_CURVES,
                 threshold: float = CURVE_ERROR_THRESHOLD,
                 on_event: Callable[[WaveformEvent], None] | None = None):
        self.max_curves = max_curves
        self.threshold = threshold
        self.on_event = on_event
        self.waveform = Waveform()

    @property
    def tracking(self) -> bool:
        return self.waveform.valid

    def fits(self, curve: Curve) -> bool:
        """Does `curve` match the curve expected next?

        Not a pure query: each call that gets as far as comparing moves the
        cursor on by one, match or not, so the caller can tell when the
        waveform has been walked to its end. Returns False without comparing
        (and without moving) when empty or already past the last curve.
        """
        wf = self.waveform
        if not wf.valid or wf.cursor >= wf.curve_count:
            return False
        expected = wf.curves[wf.cursor]
        wf.cursor += 1
        return is_same_curve(curve, expected, self.threshold)

    def is_end_of_waveform(self) -> bool:
        return self.waveform.valid and self.waveform.cursor == self.waveform.curve_count

    def find_new(self, ring: CurveRing, index: int) -> bool:
        """Search the history for a cycle ending at `index` and track it.

        Returns True if a waveform was found. A missing or over-long cycle
        leaves the tracker empty.
        """
        position = ring[index].end
        period = find_cycle(ring, index, self.threshold)

        if period is None:
            self.waveform = Waveform()
            log.debug("no waveform found for curve %d (sample %d)", ring.wrap(index), position)
            self._emit(EventKind.NOT_FOUND, ring, index, position)
            return False

        if period > self.max_curves:
            self.waveform = Waveform()
            log.info("waveform rejected: %d curves exceeds maximum of %d (sample %d)",
                     period, self.max_curves, position)
            self._emit(EventKind.REJECTED, ring, index, position, curve_count=period)
            return False

        self.waveform = Waveform(curves=ring.window(index, period))
        log.info("new waveform found: %d curves, %d samples (sample %d)",
                 self.waveform.curve_count, self.waveform.total_samples, position)
        self._emit(EventKind.FOUND, ring, index, position,
                   curve_count=self.waveform.curve_count,
                   total_samples=self.waveform.total_samples)
        return True

    def re_anchor(self, ring: CurveRing, index: int):
        """Replace the waveform with its latest occurrence, ending at `index`.

        Assumes the same-length cycle just repeated; no search is run.
        """
        if not self.waveform.valid:
            raise RuntimeError("re_anchor needs a tracked waveform")
        self.waveform = Waveform(curves=ring.window(index, self.waveform.curve_count))
        position = ring[index].end
        log.debug("waveform re-anchored at sample %d: %d samples",
                  position, self.waveform.total_samples)
        self._emit(EventKind.RE_ANCHORED, ring, index, position,
                   curve_count=self.waveform.curve_count,
                   total_samples=self.waveform.total_samples)

    def reset(self):
        self.waveform = Waveform()

    def _emit(self, kind, ring, index, position, curve_count=0, total_samples=0):
        if self.on_event is None:
            return
        self.on_event(WaveformEvent(kind, position, ring.wrap(index),
                                    curve_count, total_samples))

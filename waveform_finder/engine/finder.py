"""Waveform finder — the detection pass over one mono sample sequence.

Signal flow:
    samples -> [Inflection scan] -> curve boundaries
            -> [Close curve] -> CurveRing
            -> [Tracker] fits? / find_new / re_anchor -> WaveformEvents

Curves span [previous boundary, boundary). The first curve starts at sample
0. The open segment after the last boundary is never closed, since it is
not yet a complete curve.
"""

import logging
import time

import numpy as np

from primitives.curve import Curve, make_curve
from primitives.curve_ring import CurveRing
from primitives.inflection import find_inflections
from waveform_finder.engine.params import check_params
from waveform_finder.engine.waveform import WaveformTracker, EventKind

log = logging.getLogger(__name__)


class WaveformFinder:
    """One detection pass: owns its ring history and tracker.

    Usage:
        finder = WaveformFinder()
        events = finder.process(samples)
        finder.waveform       # what is being tracked at the end
    """

    def __init__(self, params: dict = None, on_event=None):
        self.params = check_params(params)
        self.on_event = on_event
        self.ring = CurveRing(self.params["ring_capacity"])
        self.tracker = WaveformTracker(
            max_curves=self.params["waveform_max_curves"],
            threshold=self.params["curve_error_threshold"],
            on_event=self._record,
        )
        self.events = []
        self.curves_seen = 0

    @property
    def waveform(self):
        return self.tracker.waveform

    def reset(self):
        self.ring.reset()
        self.tracker.reset()
        self.events = []
        self.curves_seen = 0

    def add_curve(self, curve: Curve):
        """Push a closed curve into the history and update the tracker."""
        index = self.ring.push(curve)
        self.curves_seen += 1
        if not self.tracker.fits(curve):
            self.tracker.find_new(self.ring, index)
        elif self.tracker.is_end_of_waveform():
            self.tracker.re_anchor(self.ring, index)

    def process(self, samples) -> list:
        """Run a full pass over `samples`, starting from a clean history.

        Returns the events raised during the pass.
        """
        self.reset()
        t0 = time.perf_counter()
        samples = np.asarray(samples)
        max_len = self.params["curve_max_samples"]

        start = 0
        for boundary in find_inflections(samples, self.params["derivative_stride"]):
            boundary = int(boundary)
            # Overlong segments are closed in max-length pieces
            while boundary - start > max_len:
                self.add_curve(make_curve(samples, start, max_len))
                start += max_len
            self.add_curve(make_curve(samples, start, boundary - start))
            start = boundary

        elapsed = time.perf_counter() - t0
        found = sum(1 for e in self.events if e.kind == EventKind.FOUND)
        log.info("scanned %d samples in %.3fs: %d curves, %d waveforms found",
                 len(samples), elapsed, self.curves_seen, found)
        return list(self.events)

    def _record(self, event):
        self.events.append(event)
        if self.on_event is not None:
            self.on_event(event)


def find_waveforms(samples, params: dict = None, on_event=None) -> list:
    """One-shot helper: run a fresh WaveformFinder over `samples`."""
    return WaveformFinder(params, on_event=on_event).process(samples)

"""Offline WAV analysis — load audio, find repeating waveforms, print them.

Usage:
    uv run python -m waveform_finder.main input.wav [--preset presets/piano.json]

Without --preset, uses default params.
"""

import argparse
import json
import os
import sys
import time

from shared.audio import load_samples
from shared.pitch import hz_to_note, period_to_freq, period_to_note
from waveform_finder.engine.finder import WaveformFinder
from waveform_finder.engine.params import (
    SCHEMA, PARAM_RANGES, PARAM_SECTIONS, check_params, default_params,
)
from waveform_finder.engine.waveform import EventKind


def load_preset(path):
    """Load a params dict from JSON."""
    with open(path) as f:
        return json.load(f)


def format_event(event, sr):
    """One line per event: time, kind and, for waveforms, period/pitch."""
    t = event.position / sr
    if event.kind in (EventKind.FOUND, EventKind.RE_ANCHORED):
        freq = period_to_freq(event.total_samples, sr)
        return (f"{t:8.3f}s  {event.kind.value:<12} {event.curve_count:3d} curves "
                f"{event.total_samples:6d} samples  {freq:8.2f} Hz  {hz_to_note(freq)}")
    if event.kind == EventKind.REJECTED:
        return f"{t:8.3f}s  {event.kind.value:<12} {event.curve_count:3d} curves (too long)"
    return f"{t:8.3f}s  {event.kind.value}"


def build_params(args):
    if args.preset:
        params = load_preset(args.preset)
        print(f"Loaded preset: {args.preset}")
    else:
        params = default_params()
        print("Using default params")

    if args.stride is not None:
        params["derivative_stride"] = args.stride
    if args.threshold is not None:
        params["curve_error_threshold"] = args.threshold
    if args.max_curves is not None:
        params["waveform_max_curves"] = args.max_curves
        params["ring_capacity"] = max(params.get("ring_capacity", 0), 2 * args.max_curves)
    return check_params(params)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Find repeating waveforms in a WAV file")
    parser.add_argument("input", nargs="?", help="Input WAV file")
    parser.add_argument("--preset", help="JSON preset file (default params if omitted)")
    parser.add_argument("--stride", type=int, help="Override derivative stride (samples)")
    parser.add_argument("--threshold", type=float, help="Override curve error threshold")
    parser.add_argument("--max-curves", type=int, help="Override max curves per waveform")
    parser.add_argument("--all", action="store_true",
                        help="Also print not_found and re_anchored events")
    parser.add_argument("--show-params", action="store_true",
                        help="Print the parameter set and exit")
    args = parser.parse_args(argv)

    params = build_params(args)
    if args.show_params:
        print(f"{len(SCHEMA)} params")
        for section, keys in PARAM_SECTIONS.items():
            print(f"[{section}]")
            for key in keys:
                lo, hi = PARAM_RANGES[key]
                print(f"  {key} = {params[key]:<10} {SCHEMA.get(key).label} [{lo} .. {hi}]")
        return 0

    if not args.input:
        parser.error("input WAV file is required")
    if not os.path.exists(args.input):
        print(f"No such file: {args.input}", file=sys.stderr)
        return 1

    print(f"Loading: {args.input}")
    samples, sr = load_samples(args.input)
    print(f"  {len(samples)} samples, {len(samples)/sr:.2f}s, {sr} Hz")

    print("Analysing...")
    t0 = time.time()
    finder = WaveformFinder(params)
    events = finder.process(samples)
    elapsed = time.time() - t0

    shown = (EventKind.FOUND, EventKind.REJECTED)
    for event in events:
        if args.all or event.kind in shown:
            print(format_event(event, sr))

    counts = {kind: 0 for kind in EventKind}
    for event in events:
        counts[event.kind] += 1
    print(f"  {finder.curves_seen} curves in {elapsed:.2f}s: "
          + ", ".join(f"{counts[k]} {k.value}" for k in EventKind))
    if finder.waveform.valid:
        freq = period_to_freq(finder.waveform.total_samples, sr)
        print(f"Tracking at end: {finder.waveform.total_samples} samples, "
              f"{freq:.2f} Hz ({period_to_note(finder.waveform.total_samples, sr)})")
    else:
        print("No waveform tracked at end")
    return 0

"""Parameter schema for the waveform finder.

One contract for presets, the command line and the engine. Every source
produces a dict in this format; check_params() is the last gate before a
WaveformFinder uses it.
"""

from __future__ import annotations

from shared.params import ParamType as T, ParamDef, ParamSchema
from primitives.curve import CURVE_ERROR_THRESHOLD, CURVE_MAX_SAMPLES
from primitives.inflection import DERIVATIVE_STRIDE

SR = 44100

WAVEFORM_MAX_CURVES = 15
# A full cycle plus its repetition must fit in the ring
RING_CAPACITY = 2 * WAVEFORM_MAX_CURVES

# ── Schema ────────────────────────────────────────────────────────────

_PARAMS = [
    # --- Segmentation ---
    ParamDef("derivative_stride", T.INT, section="segmentation",
             label="Derivative stride (samples)",
             default=DERIVATIVE_STRIDE, range=(0, 1000)),

    ParamDef("curve_max_samples", T.INT, section="segmentation",
             label="Max samples per curve",
             default=CURVE_MAX_SAMPLES, range=(1, 1 << 20)),

    # --- Matching ---
    ParamDef("curve_error_threshold", T.FLOAT, section="matching",
             label="Curve error threshold",
             default=CURVE_ERROR_THRESHOLD, range=(0.0, 1.0)),

    ParamDef("waveform_max_curves", T.INT, section="matching",
             label="Max curves per waveform",
             default=WAVEFORM_MAX_CURVES, range=(1, 1024)),

    ParamDef("ring_capacity", T.INT, section="matching",
             label="Curve history size",
             default=RING_CAPACITY, range=(2, 4096)),
]


def _stride_is_positive(params):
    if params["derivative_stride"] < 1:
        return f"derivative_stride must be >= 1, got {params['derivative_stride']}"
    return None


def _ring_holds_two_waveforms(params):
    if params["ring_capacity"] < 2 * params["waveform_max_curves"]:
        return (f"ring_capacity ({params['ring_capacity']}) must be at least twice "
                f"waveform_max_curves ({params['waveform_max_curves']})")
    return None


SCHEMA = ParamSchema(_PARAMS, rules=[_stride_is_positive, _ring_holds_two_waveforms])

default_params = SCHEMA.default_params
PARAM_RANGES = SCHEMA.param_ranges()
PARAM_SECTIONS = SCHEMA.param_sections()


def check_params(params: dict | None) -> dict:
    """Fill in defaults, clamp to range and enforce the cross-field limits.

    Raises ValueError for a stride below 1, or if the ring cannot hold two
    full waveforms.
    """
    return SCHEMA.resolve(params)

"""Test the parameter schema and preset validation.

Run: uv run python tests/test_params.py
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from shared.params import ParamDef, ParamSchema, ParamType
from waveform_finder.engine.params import (
    SCHEMA, PARAM_RANGES, PARAM_SECTIONS, default_params, check_params,
)


def test_defaults():
    print("Test 1: default parameter set")
    params = default_params()
    assert params == {
        "derivative_stride": 10,
        "curve_max_samples": 100,
        "curve_error_threshold": 0.01,
        "waveform_max_curves": 15,
        "ring_capacity": 30,
    }
    # Fresh dict each call
    params["derivative_stride"] = 3
    assert default_params()["derivative_stride"] == 10
    print(f"  {params}")


def test_sections_and_ranges():
    print("Test 2: sections and ranges derived from the schema")
    assert PARAM_SECTIONS == {
        "segmentation": ["derivative_stride", "curve_max_samples"],
        "matching": ["curve_error_threshold", "waveform_max_curves", "ring_capacity"],
    }
    assert set(PARAM_RANGES) == set(default_params())
    assert len(SCHEMA) == 5
    assert SCHEMA.get("ring_capacity").label == "Curve history size"
    assert SCHEMA.get("nope") is None
    print("  OK")


def test_validate_and_clamp():
    print("Test 3: presets are cast, clamped, and stripped of unknown keys")
    raw = {
        "derivative_stride": "12",
        "curve_error_threshold": 5,
        "waveform_max_curves": 7.6,
        "ring_capacity": -3,
        "curve_max_samples": "lots",
        "sample_rate": 48000,
    }
    clean = SCHEMA.validate_and_clamp(raw)
    assert clean == {
        "derivative_stride": 12,
        "curve_error_threshold": 1.0,
        "waveform_max_curves": 8,
        "ring_capacity": 2,
    }
    print(f"  {clean}")


def test_check_params():
    print("Test 4: check_params fills defaults and enforces ring size")
    assert check_params(None) == default_params()
    params = check_params({"waveform_max_curves": 5, "ring_capacity": 10})
    assert params["waveform_max_curves"] == 5 and params["ring_capacity"] == 10
    assert params["derivative_stride"] == 10
    with pytest.raises(ValueError):
        check_params({"waveform_max_curves": 16})
    # Stride is rejected, not clamped up to 1
    for stride in (0, -5, "0"):
        with pytest.raises(ValueError, match="derivative_stride"):
            check_params({"derivative_stride": stride})
    assert check_params({"derivative_stride": 1})["derivative_stride"] == 1
    print("  OK")


def test_schema_rules():
    print("Test 5: coerce and cross-field rules on a standalone schema")
    lo = ParamDef("lo", ParamType.INT, default=1, section="s", range=(0, 10))
    hi = ParamDef("hi", ParamType.FLOAT, default=5.0, section="s")
    assert lo.coerce("3.4") == 3
    assert lo.coerce(99) == 10
    assert hi.coerce(1e9) == 1e9
    with pytest.raises(ValueError):
        lo.coerce("x")

    schema = ParamSchema([lo, hi],
                         rules=[lambda p: None if p["lo"] < p["hi"] else "lo must be below hi"])
    assert schema.resolve({"lo": 4}) == {"lo": 4, "hi": 5.0}
    with pytest.raises(ValueError, match="lo must be below hi"):
        schema.resolve({"lo": 7})
    print("  OK")


if __name__ == "__main__":
    test_defaults()
    test_sections_and_ranges()
    test_validate_and_clamp()
    test_check_params()
    test_schema_rules()
    print("\nDone!")

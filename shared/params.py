"""Declarative parameter schema.

The detector's settings are a list of ParamDef objects. ParamSchema derives
the defaults, ranges and sections from that list, coerces raw values coming
from presets or the command line, and checks the rules that span more than
one key. Every consumer goes through resolve(), so they all see the same
parameter set.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


class ParamType(Enum):
    FLOAT = "float"
    INT = "int"


@dataclass
class ParamDef:
    key: str
    type: ParamType
    default: Any
    section: str
    label: str = ""
    range: tuple | None = None  # (min, max), inclusive

    def coerce(self, value):
        """Cast `value` to this param's type and clamp it to range.

        Raises TypeError / ValueError if the value cannot be cast.
        """
        if self.type == ParamType.INT:
            v = int(round(float(value)))
        else:
            v = float(value)
        if self.range is not None:
            lo, hi = self.range
            v = max(lo, min(hi, v))
        return v


# A rule over a whole params dict: returns an error message, or None if it holds
Rule = Callable[[dict], "str | None"]


class ParamSchema:

    def __init__(self, params: list[ParamDef], rules: list[Rule] | None = None):
        self._params = params
        self._by_key: dict[str, ParamDef] = {p.key: p for p in params}
        self._rules = list(rules or [])

    def default_params(self) -> dict:
        return {p.key: p.default for p in self._params}

    def param_ranges(self) -> dict[str, tuple]:
        return {p.key: p.range for p in self._params if p.range is not None}

    def param_sections(self) -> dict[str, list[str]]:
        """Section name -> param keys, in declaration order."""
        sections: dict[str, list[str]] = {}
        for p in self._params:
            sections.setdefault(p.section, []).append(p.key)
        return sections

    def validate_and_clamp(self, raw: dict) -> dict:
        """Coerce a raw params dict (e.g. a JSON preset) key by key.

        Unknown keys and values that cannot be cast are dropped.
        """
        result = {}
        for key, value in raw.items():
            p = self._by_key.get(key)
            if p is None:
                continue
            try:
                result[key] = p.coerce(value)
            except (TypeError, ValueError):
                continue
        return result

    def resolve(self, raw: dict | None) -> dict:
        """Defaults overlaid with the usable part of `raw`, rules checked.

        Raises ValueError naming the first rule that does not hold.
        """
        params = self.default_params()
        if raw:
            params.update(self.validate_and_clamp(raw))
        for rule in self._rules:
            error = rule(params)
            if error:
                raise ValueError(error)
        return params

    def get(self, key: str) -> ParamDef | None:
        return self._by_key.get(key)

    def __len__(self):
        return len(self._params)

"""Canonical text rendering for data-model values."""

from __future__ import annotations

from typing import Any
import json
import math


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def stringify(value: Any) -> str:
    """Render a data-model value as text.

    Booleans render as ``true``/``false``, integral floats drop the
    fractional part (``8080.0`` -> ``8080``), ``None`` renders empty and
    containers render as compact JSON.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)

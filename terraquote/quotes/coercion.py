"""Total coercion helpers for loosely-typed request payloads.

None of these functions raise: malformed input degrades to the fallback.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

# Plain ASCII decimal literal with optional sign, fraction and exponent
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def to_number(value: Any, fallback: float = 0) -> float:
    """Convert a payload value to a finite number.

    - Finite int/float values are returned unchanged.
    - Strings that strip to a plain decimal literal are parsed. Underscore
      digit groups and non-ASCII digits are not numbers here.
    - Anything else (None, bool, NaN, infinities, integers too large for a
      float, junk strings, containers) yields `fallback`.
    """
    if isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        try:
            return value if math.isfinite(value) else fallback
        except OverflowError:
            return fallback
    if isinstance(value, str):
        cleaned = value.strip()
        if not _NUMBER_RE.fullmatch(cleaned):
            return fallback
        parsed = float(cleaned)
        return parsed if math.isfinite(parsed) else fallback
    return fallback


def to_text(value: Any, default: str = "") -> str:
    """Convert a payload value to a string, defaulting when absent.

    Integral numbers render without a trailing ".0" so numeric ids sent as
    JSON numbers (e.g. `prospect_id: 0`) survive as "0".
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and math.isfinite(value):
        return str(int(value)) if value.is_integer() else str(value)
    return default


def get_path(raw: Any, *keys: str) -> Any:
    """Walk nested mappings; any missing segment yields None."""
    current = raw
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current

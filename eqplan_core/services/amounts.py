from __future__ import annotations

import math
import re
import sys
from typing import Any


_GROUPING_RE = re.compile(r"['\s]")
_DISALLOWED_RE = re.compile(r"[^\d,.\-]")
_LEADING_NUMBER_RE = re.compile(r"^-?(?:\d+(?:\.\d*)?|\.\d+)")

PLACEHOLDER = "–"


def parse_amount(raw: Any) -> float:
    """
    Parse a user-typed CHF amount into a non-negative float.
    Handles:
      - "1000", "1'000", "1’000.50", "1 000"
      - "1000,50", "1'000,50" (comma as decimal when there is no dot)
      - "1,000.50", "1.000,50" (the separator that comes last is the decimal)
    Anything unparseable or negative returns 0.0.
    """
    if raw is None:
        return 0.0
    s = str(raw).strip()
    if not s:
        return 0.0

    s = s.replace("’", "'")
    s = _GROUPING_RE.sub("", s)
    s = _DISALLOWED_RE.sub("", s)

    has_dot = "." in s
    has_comma = "," in s
    if has_dot and has_comma:
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    elif has_comma:
        s = s.replace(",", ".")

    m = _LEADING_NUMBER_RE.match(s)
    if not m:
        return 0.0
    value = float(m.group(0))
    if not math.isfinite(value):
        return 0.0
    return max(0.0, value)


def round_to_2(n: float) -> float:
    # half-up at two decimals, epsilon nudges values like 1.005 the right way
    if not math.isfinite(n):
        return n
    return math.floor((n + sys.float_info.epsilon) * 100 + 0.5) / 100


def format_chf(value: float, decimals: int = 2, currency: bool = True) -> str:
    """Swiss display format, e.g. ``CHF 1'000.50``. NaN renders as a placeholder."""
    if value is None or math.isnan(value):
        return PLACEHOLDER
    rounded = round_to_2(value)
    body = f"{abs(rounded):,.{decimals}f}".replace(",", "'")
    if rounded < 0:
        body = f"-{body}"
    return f"CHF {body}" if currency else body


def clamp01(n: float) -> float:
    if not math.isfinite(n):
        return 0.0
    return min(1.0, max(0.0, n))

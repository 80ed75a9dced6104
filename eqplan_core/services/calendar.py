from __future__ import annotations

import datetime as dt
from typing import List, Optional

import pandas as pd

from eqplan_core.domain.models import TargetMonth


def _month_start(date: dt.date) -> dt.date:
    return dt.date(date.year, date.month, 1)


def parse_target_month(target: Optional[str]) -> Optional[TargetMonth]:
    """
    Parse a "YYYY-MM" string. Returns None when it is absent, not numeric,
    or the month lies outside 1..12.
    """
    if not target:
        return None
    parts = str(target).split("-")
    if len(parts) < 2:
        return None
    try:
        year = int(parts[0])
        month = int(parts[1])
    except ValueError:
        return None
    if month < 1 or month > 12:
        return None
    return TargetMonth(year=year, month_index=month - 1)


def months_remaining(target: Optional[str], now: dt.date) -> int:
    """Whole calendar months from the current month of ``now`` to the target month, never negative."""
    parsed = parse_target_month(target)
    if parsed is None:
        return 0
    months = (parsed.year - now.year) * 12 + (parsed.month_index - (now.month - 1))
    return max(0, months)


def default_target_month(now: dt.date, months_ahead: int = 24) -> str:
    target = (pd.Period(_month_start(now), freq="M") + months_ahead).to_timestamp().date()
    return f"{target.year:04d}-{target.month:02d}"


def month_sequence(now: dt.date, months: int) -> List[dt.date]:
    """First-of-month dates from the current month up to and including ``months`` ahead."""
    if months < 0:
        return []
    start = pd.Period(_month_start(now), freq="M")
    return [(start + i).to_timestamp().date() for i in range(months + 1)]

from __future__ import annotations

import datetime as dt
from typing import Iterable, List

import numpy as np
import pandas as pd

from eqplan_core.domain.models import (
    AssetBucket,
    BucketName,
    BucketProjection,
    Hardness,
    TimelinePoint,
)
from eqplan_core.services.calendar import month_sequence


def project_balance(current: float, monthly_contribution: float, months: int) -> float:
    """Linear projection, no returns or compounding."""
    return current + monthly_contribution * max(0, months)


def project_bucket(bucket: AssetBucket, months: int) -> BucketProjection:
    months = max(0, int(months))
    return BucketProjection(
        name=bucket.name,
        hardness=bucket.hardness,
        current=bucket.balance,
        monthly_contribution=bucket.monthly_contribution,
        months=months,
        projected=project_balance(bucket.balance, bucket.monthly_contribution, months),
    )


def project_buckets(buckets: Iterable[AssetBucket], months: int) -> List[BucketProjection]:
    return [project_bucket(b, months) for b in buckets]


def hard_projected(projections: Iterable[BucketProjection]) -> float:
    return sum(p.projected for p in projections if p.hardness == Hardness.HARD)


def total_projected(projections: Iterable[BucketProjection]) -> float:
    return sum(p.projected for p in projections)


def growth_timeline(buckets: Iterable[AssetBucket], now: dt.date, months: int) -> List[TimelinePoint]:
    """
    Month-by-month balances from today to the target month:
    - liquid: cash plus other assets
    - pillar_3a and pension_fund as their own series
    Empty when no months remain.
    """
    if months <= 0:
        return []

    by_name = {b.name: b for b in buckets}
    steps = np.arange(months + 1, dtype=float)

    def series(*names: str) -> np.ndarray:
        current = sum(by_name[n].balance for n in names if n in by_name)
        monthly = sum(by_name[n].monthly_contribution for n in names if n in by_name)
        return current + monthly * steps

    liquid = series(BucketName.CASH, BucketName.OTHER)
    s3a = series(BucketName.PILLAR_3A)
    pk = series(BucketName.PENSION_FUND)

    return [
        TimelinePoint(month=month, liquid=float(liquid[i]), pillar_3a=float(s3a[i]), pension_fund=float(pk[i]))
        for i, month in enumerate(month_sequence(now, months))
    ]


def timeline_frame(points: Iterable[TimelinePoint]) -> pd.DataFrame:
    rows = [
        {
            "month": p.month.isoformat(),
            "liquid": p.liquid,
            "pillar_3a": p.pillar_3a,
            "pension_fund": p.pension_fund,
            "total": p.total,
        }
        for p in points
    ]
    return pd.DataFrame(rows, columns=["month", "liquid", "pillar_3a", "pension_fund", "total"])

import datetime as dt

import pytest

from eqplan_core.domain.models import AssetBucket, BucketName, Hardness, default_buckets
from eqplan_core.services.projector import (
    growth_timeline,
    hard_projected,
    project_balance,
    project_buckets,
    timeline_frame,
    total_projected,
)


def _buckets():
    return default_buckets(
        cash=40000,
        pillar_3a=30000,
        pension_fund=60000,
        other=10000,
        pillar_3a_monthly=500,
        pension_fund_monthly=0,
    )


def test_project_balance_is_linear():
    assert project_balance(30000, 500, 24) == 42000
    assert project_balance(30000, 500, 0) == 30000
    assert project_balance(30000, 500, -3) == 30000


def test_cash_and_other_take_no_contribution_by_default():
    buckets = {b.name: b for b in _buckets()}
    assert buckets[BucketName.CASH].monthly_contribution == 0
    assert buckets[BucketName.OTHER].monthly_contribution == 0
    assert buckets[BucketName.PENSION_FUND].hardness == Hardness.SOFT


def test_aggregates_exclude_pension_fund_from_hard():
    projections = project_buckets(_buckets(), 24)
    assert hard_projected(projections) == 92000
    assert total_projected(projections) == 152000


def test_explicit_cash_contribution_is_projected():
    projections = project_buckets([AssetBucket(BucketName.CASH, 1000, 250)], 4)
    assert projections[0].projected == 2000
    assert projections[0].months == 4


def test_growth_timeline_runs_through_target_month():
    points = growth_timeline(_buckets(), dt.date(2025, 1, 10), 24)
    assert len(points) == 25
    assert points[0].month == dt.date(2025, 1, 1)
    assert points[-1].month == dt.date(2027, 1, 1)
    assert points[0].liquid == 50000
    assert points[-1].pillar_3a == 42000
    assert points[-1].total == pytest.approx(152000)


def test_growth_timeline_empty_without_months():
    assert growth_timeline(_buckets(), dt.date(2025, 1, 1), 0) == []


def test_timeline_frame_columns():
    frame = timeline_frame(growth_timeline(_buckets(), dt.date(2025, 1, 1), 2))
    assert list(frame.columns) == ["month", "liquid", "pillar_3a", "pension_fund", "total"]
    assert frame["month"].tolist() == ["2025-01-01", "2025-02-01", "2025-03-01"]
    assert frame["total"].iloc[-1] == pytest.approx(141000)

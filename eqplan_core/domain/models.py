from __future__ import annotations

import dataclasses
import datetime as dt
from typing import List, Optional, Tuple


class Hardness:
    HARD = "hard"
    SOFT = "soft"


class BucketName:
    CASH = "cash"
    PILLAR_3A = "pillar_3a"
    PENSION_FUND = "pension_fund"
    OTHER = "other"

    ALL = (CASH, PILLAR_3A, PENSION_FUND, OTHER)


DEFAULT_HARDNESS = {
    BucketName.CASH: Hardness.HARD,
    BucketName.PILLAR_3A: Hardness.HARD,
    BucketName.PENSION_FUND: Hardness.SOFT,
    BucketName.OTHER: Hardness.HARD,
}


class Constraint:
    HARD = "hard"
    TOTAL = "total"
    NONE = "none"


@dataclasses.dataclass(frozen=True)
class TargetMonth:
    year: int
    month_index: int  # 0..11

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month_index + 1:02d}"


@dataclasses.dataclass(frozen=True)
class AssetBucket:
    name: str
    balance: float
    monthly_contribution: float = 0.0
    hardness: str = Hardness.HARD

    @property
    def is_hard(self) -> bool:
        return self.hardness == Hardness.HARD


def default_buckets(
    cash: float = 0.0,
    pillar_3a: float = 0.0,
    pension_fund: float = 0.0,
    other: float = 0.0,
    pillar_3a_monthly: float = 0.0,
    pension_fund_monthly: float = 0.0,
) -> List[AssetBucket]:
    """
    The four buckets of the planner. Only pillar 3a and the pension fund take
    a monthly contribution; cash and other assets stay at their current balance.
    """
    return [
        AssetBucket(BucketName.CASH, cash, 0.0, DEFAULT_HARDNESS[BucketName.CASH]),
        AssetBucket(BucketName.PILLAR_3A, pillar_3a, pillar_3a_monthly, DEFAULT_HARDNESS[BucketName.PILLAR_3A]),
        AssetBucket(
            BucketName.PENSION_FUND,
            pension_fund,
            pension_fund_monthly,
            DEFAULT_HARDNESS[BucketName.PENSION_FUND],
        ),
        AssetBucket(BucketName.OTHER, other, 0.0, DEFAULT_HARDNESS[BucketName.OTHER]),
    ]


@dataclasses.dataclass(frozen=True)
class EquityRules:
    total_ratio: float = 0.20
    hard_ratio: float = 0.10


@dataclasses.dataclass(frozen=True)
class BucketProjection:
    name: str
    hardness: str
    current: float
    monthly_contribution: float
    months: int
    projected: float


@dataclasses.dataclass(frozen=True)
class RequirementState:
    price: float
    price_valid: bool
    months: int
    total_required: float
    hard_required: float
    total_now: float
    hard_now: float
    total_projected: float
    hard_projected: float
    total_shortfall: float
    hard_shortfall: float
    savings_gap: float
    binding_constraint: str
    required_monthly_rate: float  # NaN when undefined
    hard_rule_met: bool
    total_rule_met: bool
    hard_equity_warning: bool
    invalid_time_window: bool
    total_progress: float
    hard_progress: float
    projections: Tuple[BucketProjection, ...] = ()


@dataclasses.dataclass(frozen=True)
class PlanInputs:
    """Raw field values as typed by the user."""

    price: str = "800'000"
    target_month: str = ""
    cash: str = "40'000"
    pillar_3a: str = "30'000"
    pension_fund: str = "60'000"
    other: str = "10'000"
    pillar_3a_monthly: str = "500"
    pension_fund_monthly: str = "0"


@dataclasses.dataclass(frozen=True)
class TimelinePoint:
    month: dt.date
    liquid: float
    pillar_3a: float
    pension_fund: float

    @property
    def total(self) -> float:
        return self.liquid + self.pillar_3a + self.pension_fund


@dataclasses.dataclass(frozen=True)
class EquityComposition:
    hard: float
    soft: float
    gap: float
    target: float


@dataclasses.dataclass
class PlanResult:
    inputs: PlanInputs
    target_month: Optional[str]
    state: RequirementState
    timeline: List[TimelinePoint]

from __future__ import annotations

import math
from typing import Iterable, Optional

from eqplan_core.domain.models import (
    AssetBucket,
    Constraint,
    EquityComposition,
    EquityRules,
    RequirementState,
)
from eqplan_core.services.amounts import clamp01
from eqplan_core.services.projector import hard_projected, project_buckets, total_projected


CONSTRAINT_LABELS = {
    Constraint.HARD: "Hard equity (10%)",
    Constraint.TOTAL: "Total equity (20%)",
    Constraint.NONE: "No bottleneck",
}


def _binding_constraint(hard_shortfall: float, total_shortfall: float) -> str:
    if hard_shortfall > total_shortfall:
        return Constraint.HARD
    if total_shortfall > hard_shortfall:
        return Constraint.TOTAL
    return Constraint.NONE


def _required_rate(price_valid: bool, savings_gap: float, months: int) -> float:
    if not price_valid:
        return math.nan
    if savings_gap <= 0:
        return 0.0
    if months <= 0:
        return math.nan
    return savings_gap / months


def _progress(projected: float, required: float) -> float:
    if required <= 0:
        return 0.0
    return clamp01(projected / required)


def evaluate(
    price: float,
    buckets: Iterable[AssetBucket],
    months: int,
    rules: EquityRules = EquityRules(),
) -> RequirementState:
    """
    Check projected equity against both down-payment rules:
    - total equity (all buckets) must reach ``rules.total_ratio`` of the price
    - hard equity (everything but the pension fund) must reach ``rules.hard_ratio``
    The additional monthly savings rate is sized to whichever shortfall is larger.
    Undefined rates (no price, or an unmet goal with no months left) are NaN.
    """
    buckets = list(buckets)
    months = max(0, int(months))

    total_required = price * rules.total_ratio
    hard_required = price * rules.hard_ratio
    price_valid = price > 0

    projections = project_buckets(buckets, months)
    hard_at_target = hard_projected(projections)
    total_at_target = total_projected(projections)

    total_shortfall = max(0.0, total_required - total_at_target)
    hard_shortfall = max(0.0, hard_required - hard_at_target)
    savings_gap = max(total_shortfall, hard_shortfall)

    hard_rule_met = hard_at_target >= hard_required
    total_rule_met = total_at_target >= total_required

    return RequirementState(
        price=price,
        price_valid=price_valid,
        months=months,
        total_required=total_required,
        hard_required=hard_required,
        total_now=sum(b.balance for b in buckets),
        hard_now=sum(b.balance for b in buckets if b.is_hard),
        total_projected=total_at_target,
        hard_projected=hard_at_target,
        total_shortfall=total_shortfall,
        hard_shortfall=hard_shortfall,
        savings_gap=savings_gap,
        binding_constraint=_binding_constraint(hard_shortfall, total_shortfall),
        required_monthly_rate=_required_rate(price_valid, savings_gap, months),
        hard_rule_met=hard_rule_met,
        total_rule_met=total_rule_met,
        hard_equity_warning=total_rule_met and not hard_rule_met,
        invalid_time_window=price_valid and savings_gap > 0 and months <= 0,
        total_progress=_progress(total_at_target, total_required),
        hard_progress=_progress(hard_at_target, hard_required),
        projections=tuple(projections),
    )


def binding_constraint_label(state: RequirementState) -> str:
    return CONSTRAINT_LABELS[state.binding_constraint]


def equity_composition(state: RequirementState) -> EquityComposition:
    """Split the total-equity target into covered hard, covered soft and the open gap."""
    target = state.total_required
    hard = min(state.hard_projected, target)
    soft_projected = state.total_projected - state.hard_projected
    soft = min(soft_projected, max(0.0, target - hard))
    gap = max(0.0, target - hard - soft)
    return EquityComposition(hard=hard, soft=soft, gap=gap, target=target)


def rate_or_none(rate: float) -> Optional[float]:
    return None if math.isnan(rate) else rate

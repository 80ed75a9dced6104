from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict

from eqplan_core.domain.models import EquityRules, PlanInputs, PlanResult, default_buckets
from eqplan_core.services import calendar, evaluator, projector
from eqplan_core.services.amounts import parse_amount

LOGGER = logging.getLogger(__name__)


def build_plan(
    inputs: PlanInputs,
    now: dt.date,
    rules: EquityRules = EquityRules(),
    with_timeline: bool = True,
    use_default_target: bool = False,
) -> PlanResult:
    target = inputs.target_month
    if not target and use_default_target:
        target = calendar.default_target_month(now)
        LOGGER.debug("No target month given, using default %s", target)

    price = parse_amount(inputs.price)
    months = calendar.months_remaining(target, now)
    buckets = default_buckets(
        cash=parse_amount(inputs.cash),
        pillar_3a=parse_amount(inputs.pillar_3a),
        pension_fund=parse_amount(inputs.pension_fund),
        other=parse_amount(inputs.other),
        pillar_3a_monthly=parse_amount(inputs.pillar_3a_monthly),
        pension_fund_monthly=parse_amount(inputs.pension_fund_monthly),
    )
    LOGGER.debug("Evaluating price=%.2f months=%d target=%s", price, months, target or "-")

    state = evaluator.evaluate(price, buckets, months, rules)
    timeline = projector.growth_timeline(buckets, now, months) if with_timeline else []

    if not state.price_valid:
        LOGGER.debug("Purchase price missing or zero; required rate undefined")
    elif state.invalid_time_window:
        LOGGER.debug("Savings gap %.2f with no months left; required rate undefined", state.savings_gap)

    return PlanResult(inputs=inputs, target_month=target or None, state=state, timeline=timeline)


def plan_to_dict(result: PlanResult) -> Dict[str, Any]:
    state = result.state
    return {
        "target_month": result.target_month,
        "price": state.price,
        "price_valid": state.price_valid,
        "months": state.months,
        "total_required": state.total_required,
        "hard_required": state.hard_required,
        "total_now": state.total_now,
        "hard_now": state.hard_now,
        "total_projected": state.total_projected,
        "hard_projected": state.hard_projected,
        "total_shortfall": state.total_shortfall,
        "hard_shortfall": state.hard_shortfall,
        "savings_gap": state.savings_gap,
        "binding_constraint": state.binding_constraint,
        "required_monthly_rate": evaluator.rate_or_none(state.required_monthly_rate),
        "hard_rule_met": state.hard_rule_met,
        "total_rule_met": state.total_rule_met,
        "hard_equity_warning": state.hard_equity_warning,
        "invalid_time_window": state.invalid_time_window,
        "total_progress": state.total_progress,
        "hard_progress": state.hard_progress,
        "buckets": [
            {
                "name": p.name,
                "hardness": p.hardness,
                "current": p.current,
                "monthly_contribution": p.monthly_contribution,
                "projected": p.projected,
            }
            for p in state.projections
        ],
        "timeline": [
            {
                "month": p.month.isoformat(),
                "liquid": p.liquid,
                "pillar_3a": p.pillar_3a,
                "pension_fund": p.pension_fund,
                "total": p.total,
            }
            for p in result.timeline
        ],
    }

import dataclasses
import math

import pytest

from eqplan_core.domain.models import AssetBucket, BucketName, Constraint, EquityRules, default_buckets
from eqplan_core.services.amounts import round_to_2
from eqplan_core.services.evaluator import (
    binding_constraint_label,
    equity_composition,
    evaluate,
    rate_or_none,
)


def _buckets(cash=40000, pillar_3a=30000, pension_fund=60000, other=10000, pillar_3a_monthly=500, pension_fund_monthly=0):
    return default_buckets(
        cash=cash,
        pillar_3a=pillar_3a,
        pension_fund=pension_fund,
        other=other,
        pillar_3a_monthly=pillar_3a_monthly,
        pension_fund_monthly=pension_fund_monthly,
    )


def test_total_equity_is_binding():
    state = evaluate(800000, _buckets(), 24)
    assert state.total_required == pytest.approx(160000)
    assert state.hard_required == pytest.approx(80000)
    assert state.hard_projected == pytest.approx(92000)
    assert state.total_projected == pytest.approx(152000)
    assert state.hard_shortfall == 0
    assert state.total_shortfall == pytest.approx(8000)
    assert state.savings_gap == pytest.approx(8000)
    assert state.binding_constraint == Constraint.TOTAL
    assert round_to_2(state.required_monthly_rate) == 333.33
    assert state.hard_rule_met
    assert not state.total_rule_met
    assert not state.hard_equity_warning


def test_without_pension_assets_both_shortfalls_grow():
    state = evaluate(800000, _buckets(cash=5000, pension_fund=0), 24)
    assert state.hard_projected == pytest.approx(57000)
    assert state.hard_shortfall == pytest.approx(23000)
    assert state.total_shortfall == pytest.approx(103000)
    assert state.binding_constraint == Constraint.TOTAL
    assert state.savings_gap == pytest.approx(103000)


def test_hard_equity_is_binding_when_pension_fund_dominates():
    state = evaluate(800000, _buckets(cash=5000, pension_fund=110000), 20)
    assert state.total_rule_met
    assert not state.hard_rule_met
    assert state.hard_shortfall == pytest.approx(25000)
    assert state.total_shortfall == 0
    assert state.binding_constraint == Constraint.HARD
    assert state.hard_equity_warning
    assert state.required_monthly_rate == pytest.approx(1250)
    assert binding_constraint_label(state) == "Hard equity (10%)"


def test_zero_price_has_undefined_rate():
    state = evaluate(0, _buckets(), 24)
    assert not state.price_valid
    assert math.isnan(state.required_monthly_rate)
    assert rate_or_none(state.required_monthly_rate) is None
    assert state.total_progress == 0
    assert not state.invalid_time_window


def test_goal_already_met():
    state = evaluate(800000, _buckets(cash=200000), 24)
    assert state.required_monthly_rate == 0
    assert state.savings_gap == 0
    assert state.binding_constraint == Constraint.NONE
    assert binding_constraint_label(state) == "No bottleneck"
    assert state.total_progress == 1.0
    assert state.hard_progress == 1.0


def test_goal_met_with_no_months_left_is_still_zero():
    state = evaluate(800000, _buckets(cash=200000), 0)
    assert state.required_monthly_rate == 0
    assert not state.invalid_time_window


def test_unmet_goal_without_time_window():
    state = evaluate(800000, _buckets(), 0)
    assert state.invalid_time_window
    assert math.isnan(state.required_monthly_rate)
    assert state.total_projected == pytest.approx(140000)


@pytest.mark.parametrize(
    "buckets, months",
    [
        (_buckets(), 16),
        (_buckets(cash=5000, pension_fund=110000), 20),
    ],
)
def test_saving_the_required_rate_meets_both_rules(buckets, months):
    state = evaluate(800000, buckets, months)
    assert state.savings_gap > 0
    boosted = [
        dataclasses.replace(b, monthly_contribution=state.required_monthly_rate) if b.name == BucketName.CASH else b
        for b in buckets
    ]
    after = evaluate(800000, boosted, months)
    assert after.hard_rule_met
    assert after.total_rule_met
    assert after.required_monthly_rate == 0


def test_progress_ratios():
    state = evaluate(800000, _buckets(), 24)
    assert state.total_progress == pytest.approx(152000 / 160000)
    assert state.hard_progress == 1.0


def test_current_equity_totals():
    state = evaluate(800000, _buckets(), 24)
    assert state.total_now == 140000
    assert state.hard_now == 80000


def test_custom_rules():
    state = evaluate(1000000, [AssetBucket(BucketName.CASH, 100000)], 10, EquityRules(total_ratio=0.25, hard_ratio=0.15))
    assert state.total_required == pytest.approx(250000)
    assert state.hard_required == pytest.approx(150000)
    assert state.hard_shortfall == pytest.approx(50000)
    assert state.total_shortfall == pytest.approx(150000)
    assert state.required_monthly_rate == pytest.approx(15000)


def test_equity_composition_caps_at_target():
    comp = equity_composition(evaluate(800000, _buckets(), 24))
    assert comp.target == pytest.approx(160000)
    assert comp.hard == pytest.approx(92000)
    assert comp.soft == pytest.approx(60000)
    assert comp.gap == pytest.approx(8000)

    comp = equity_composition(evaluate(800000, _buckets(cash=200000), 24))
    assert comp.hard == pytest.approx(160000)
    assert comp.soft == 0
    assert comp.gap == 0

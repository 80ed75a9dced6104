from eqplan_core.services.amounts import format_chf, parse_amount, round_to_2  # noqa: F401
from eqplan_core.services.calendar import months_remaining  # noqa: F401
from eqplan_core.services.evaluator import evaluate  # noqa: F401
from eqplan_core.services.pipeline import build_plan  # noqa: F401
from eqplan_core.services.projector import project_balance  # noqa: F401

__all__ = [
    "parse_amount",
    "round_to_2",
    "format_chf",
    "months_remaining",
    "project_balance",
    "evaluate",
    "build_plan",
]

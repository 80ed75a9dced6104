from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Dict

from eqplan_core.domain.models import EquityRules, PlanInputs

LOGGER = logging.getLogger(__name__)

INPUT_FIELDS = tuple(f.name for f in dataclasses.fields(PlanInputs))


def load_rules(path: str | Path) -> EquityRules:
    data = _read_json(path)
    defaults = EquityRules()
    rules = EquityRules(
        total_ratio=float(data.get("total_ratio", defaults.total_ratio)),
        hard_ratio=float(data.get("hard_ratio", defaults.hard_ratio)),
    )
    if rules.total_ratio <= 0 or rules.hard_ratio <= 0:
        raise ValueError("Equity ratios must be positive")
    if rules.hard_ratio > rules.total_ratio:
        raise ValueError("hard_ratio cannot exceed total_ratio")
    return rules


def load_plan_inputs(path: str | Path) -> PlanInputs:
    data = _read_json(path)
    return inputs_from_mapping(data)


def inputs_from_mapping(data: Dict[str, Any]) -> PlanInputs:
    values = {}
    for key, raw in data.items():
        if key not in INPUT_FIELDS:
            LOGGER.debug("Ignoring unknown input field %r", key)
            continue
        values[key] = "" if raw is None else str(raw)
    return PlanInputs(**values)


def inputs_to_mapping(inputs: PlanInputs) -> Dict[str, str]:
    return dataclasses.asdict(inputs)


def _read_json(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    with open(p, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {p}")
    return data

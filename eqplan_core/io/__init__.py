from eqplan_core.io.config import (  # noqa: F401
    load_plan_inputs,
    load_rules,
)
from eqplan_core.io.store import JsonFileStore, MemoryStore, load_inputs, save_inputs  # noqa: F401

__all__ = [
    "load_plan_inputs",
    "load_rules",
    "JsonFileStore",
    "MemoryStore",
    "load_inputs",
    "save_inputs",
]

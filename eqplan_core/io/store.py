from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from eqplan_core.domain.models import PlanInputs
from eqplan_core.io.config import inputs_from_mapping, inputs_to_mapping

LOGGER = logging.getLogger(__name__)

INPUTS_KEY = "inputs"


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


def default_state_path() -> Path:
    return Path.home() / ".eqplan_state.json"


class JsonFileStore:
    """
    Field values remembered between CLI sessions. A missing or unreadable
    file behaves like an empty store; failed writes are logged and dropped.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else default_state_path()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning("Ignoring unreadable state file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("Could not save state to %s: %s", self.path, exc)


def load_inputs(store: KeyValueStore) -> PlanInputs:
    stored = store.get(INPUTS_KEY)
    if not isinstance(stored, dict):
        return PlanInputs()
    return inputs_from_mapping(stored)


def save_inputs(store: KeyValueStore, inputs: PlanInputs) -> None:
    store.set(INPUTS_KEY, inputs_to_mapping(inputs))

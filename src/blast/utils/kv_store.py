"""Key/value persistence used for the high score."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get_int(self, key: str, default: int = 0) -> int: ...

    def set_int(self, key: str, value: int) -> None: ...

    def save(self) -> None: ...


class MemoryKeyValueStore:
    """In-process store; ``saves`` counts calls to :meth:`save`."""

    def __init__(self, initial: Dict[str, int] | None = None) -> None:
        self._values: Dict[str, int] = dict(initial or {})
        self.saves = 0

    def get_int(self, key: str, default: int = 0) -> int:
        return int(self._values.get(key, default))

    def set_int(self, key: str, value: int) -> None:
        self._values[key] = int(value)

    def save(self) -> None:
        self.saves += 1


class JsonKeyValueStore:
    """Integer values persisted as a flat JSON object on disk."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._values: Dict[str, int] = {}
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            self._values = {}
            return
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt store at %s", self._path)
            self._values = {}
            return
        if not isinstance(payload, dict):
            self._values = {}
            return
        values: Dict[str, int] = {}
        for key, value in payload.items():
            try:
                values[str(key)] = int(value)
            except (TypeError, ValueError):
                continue
        self._values = values

    def get_int(self, key: str, default: int = 0) -> int:
        return self._values.get(key, default)

    def set_int(self, key: str, value: int) -> None:
        self._values[key] = int(value)

    def save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as handle:
            json.dump(self._values, handle, indent=2, sort_keys=True)

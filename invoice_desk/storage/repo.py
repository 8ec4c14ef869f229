from __future__ import annotations
import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class PersistenceError(Exception):
    """Base class for storage failures."""


class PersistenceReadError(PersistenceError):
    """Persisted data exists but cannot be parsed back into a collection."""


class PersistenceWriteError(PersistenceError):
    """The collection could not be written."""


def dumps_records(records: List[Dict[str, Any]]) -> str:
    return json.dumps(list(records), ensure_ascii=False, indent=2)


def loads_records(raw: str) -> List[Dict[str, Any]]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PersistenceReadError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise PersistenceReadError(f"Expected a JSON list, got {type(data).__name__}")
    return data


class Repository(ABC):
    """Key-value style storage for a whole invoice collection."""

    @abstractmethod
    def load(self) -> Optional[List[Dict[str, Any]]]:
        """Return the last saved collection, or None when nothing was saved yet."""

    @abstractmethod
    def save(self, records: List[Dict[str, Any]]) -> None:
        """Overwrite the persisted collection."""


class InMemoryRepository(Repository):
    """Keeps the serialized collection as a string, the way browser storage does."""

    def __init__(self, raw: Optional[str] = None) -> None:
        self.raw = raw
        self.saves = 0

    def load(self) -> Optional[List[Dict[str, Any]]]:
        if self.raw is None:
            return None
        return loads_records(self.raw)

    def save(self, records: List[Dict[str, Any]]) -> None:
        self.raw = dumps_records(records)
        self.saves += 1

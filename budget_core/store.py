"""Persistence stores for budget records.

Stores keep records (see ``records.py``) verbatim. Writes are
last-write-wins: there is no version column, so two members saving the
same budget overwrite each other.
"""
import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from budget_core.config import BUDGETS_FILE, STORE_BACKEND
from budget_core.errors import BudgetNotFoundError, StoreError
from budget_core.records import Record

logger = logging.getLogger(__name__)


def _visible_to(record: Record, user_id: str, email: Optional[str]) -> bool:
    if record.get("user_id") == user_id:
        return True
    if email:
        return email.strip().lower() in (record.get("member_emails") or [])
    return False


def _newest_first(records: List[Record]) -> List[Record]:
    return sorted(records, key=lambda r: r.get("created_at") or "", reverse=True)


class BudgetStore(ABC):
    """Create, fetch, list, update and delete budget records."""

    @abstractmethod
    def create(self, user_id: str, record: Record) -> Record:
        ...

    @abstractmethod
    def get(self, budget_id: str) -> Optional[Record]:
        ...

    @abstractmethod
    def list_for_user(self, user_id: str, email: Optional[str] = None) -> List[Record]:
        """Budgets owned by ``user_id`` plus those shared with ``email``, newest first."""
        ...

    @abstractmethod
    def update(self, budget_id: str, updates: Record) -> Record:
        ...

    @abstractmethod
    def delete(self, budget_id: str) -> None:
        ...


class InMemoryBudgetStore(BudgetStore):
    """Process-local store; contents are lost when the process exits."""

    def __init__(self) -> None:
        self._records: dict[str, Record] = {}

    def create(self, user_id: str, record: Record) -> Record:
        stored = {**copy.deepcopy(record), "user_id": user_id}
        self._records[stored["id"]] = stored
        return copy.deepcopy(stored)

    def get(self, budget_id: str) -> Optional[Record]:
        record = self._records.get(budget_id)
        return copy.deepcopy(record) if record is not None else None

    def list_for_user(self, user_id: str, email: Optional[str] = None) -> List[Record]:
        visible = [copy.deepcopy(r) for r in self._records.values() if _visible_to(r, user_id, email)]
        return _newest_first(visible)

    def update(self, budget_id: str, updates: Record) -> Record:
        if budget_id not in self._records:
            raise BudgetNotFoundError(budget_id)
        merged = {**self._records[budget_id], **copy.deepcopy(updates), "id": budget_id}
        self._records[budget_id] = merged
        return copy.deepcopy(merged)

    def delete(self, budget_id: str) -> None:
        if self._records.pop(budget_id, None) is None:
            raise BudgetNotFoundError(budget_id)


class JsonFileBudgetStore(BudgetStore):
    """All records in one JSON list on disk, rewritten on every change."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> List[Record]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StoreError(f"Cannot read budgets from {self.path}: {e}") from e
        if not isinstance(data, list):
            raise StoreError(f"Unexpected content in {self.path}: expected a list of budgets")
        return data

    def _save(self, records: List[Record]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise StoreError(f"Cannot write budgets to {self.path}: {e}") from e

    def create(self, user_id: str, record: Record) -> Record:
        records = [r for r in self._load() if r.get("id") != record["id"]]
        stored = {**record, "user_id": user_id}
        records.append(stored)
        self._save(records)
        logger.debug("Stored budget %s in %s", stored["id"], self.path)
        return stored

    def get(self, budget_id: str) -> Optional[Record]:
        return next((r for r in self._load() if r.get("id") == budget_id), None)

    def list_for_user(self, user_id: str, email: Optional[str] = None) -> List[Record]:
        return _newest_first([r for r in self._load() if _visible_to(r, user_id, email)])

    def update(self, budget_id: str, updates: Record) -> Record:
        records = self._load()
        for idx, record in enumerate(records):
            if record.get("id") == budget_id:
                records[idx] = {**record, **updates, "id": budget_id}
                self._save(records)
                return records[idx]
        raise BudgetNotFoundError(budget_id)

    def delete(self, budget_id: str) -> None:
        records = self._load()
        remaining = [r for r in records if r.get("id") != budget_id]
        if len(remaining) == len(records):
            raise BudgetNotFoundError(budget_id)
        self._save(remaining)


def open_store(backend: str = STORE_BACKEND, path: Path = BUDGETS_FILE) -> BudgetStore:
    if backend == "memory":
        return InMemoryBudgetStore()
    if backend == "json":
        return JsonFileBudgetStore(path)
    raise StoreError(f"Unknown store backend '{backend}'")

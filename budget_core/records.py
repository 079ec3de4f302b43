"""Conversion between Budget values and persisted records.

A record is a plain JSON-compatible dict. Money maps hold two-decimal
numbers and nested commitments keep the camelCase keys of the stored
layout (``paidStatus``, ``isExpanded``).
"""
import json
from typing import Any, Dict, List, Optional, Tuple

from budget_core.domain import Budget, CommitmentGroup, CommitmentItem
from budget_core.money import from_cents, to_cents, to_signed_cents
from budget_core.validation import is_valid_email

Record = Dict[str, Any]


def _money_map_out(mapping: dict) -> dict:
    return {k: from_cents(v) for k, v in mapping.items()}


def _money_map_in(mapping: Optional[dict]) -> dict:
    return {k: to_cents(v) for k, v in (mapping or {}).items()}


def member_emails(members: Tuple[str, ...]) -> List[str]:
    return [m.strip().lower() for m in members if is_valid_email(m)]


def item_to_dict(item: CommitmentItem) -> Record:
    return {
        "id": item.id,
        "name": item.name,
        "remark": item.remark,
        "amounts": _money_map_out(item.amounts),
        "paidStatus": dict(item.paid_status),
    }


def group_to_dict(group: CommitmentGroup) -> Record:
    return {
        "id": group.id,
        "name": group.name,
        "items": [item_to_dict(i) for i in group.items],
        "isExpanded": group.is_expanded,
    }


def budget_to_record(budget: Budget, user_id: str) -> Record:
    """Serialize a budget as-is; derived totals are stored verbatim."""
    return {
        "id": budget.id,
        "user_id": user_id,
        "name": budget.name,
        "month": budget.month,
        "year": budget.year,
        "members": list(budget.members),
        "member_emails": member_emails(budget.members),
        "commitments": [group_to_dict(g) for g in budget.commitments],
        "salaries": _money_map_out(budget.salaries),
        "total_commitments": _money_map_out(budget.total_commitments),
        "balance": _money_map_out(budget.balance),
        "created_at": budget.created_at,
    }


def item_from_dict(data: Record) -> CommitmentItem:
    return CommitmentItem(
        id=str(data["id"]),
        name=data.get("name") or "",
        remark=data.get("remark") or "",
        amounts=_money_map_in(data.get("amounts")),
        paid_status={k: bool(v) for k, v in (data.get("paidStatus") or {}).items()},
    )


def group_from_dict(data: Record) -> CommitmentGroup:
    return CommitmentGroup(
        id=str(data["id"]),
        name=data.get("name") or "",
        items=tuple(item_from_dict(i) for i in data.get("items") or []),
        is_expanded=bool(data.get("isExpanded", True)),
    )


def budget_from_record(record: Record) -> Budget:
    """Rebuild a Budget from a record without recomputing its totals."""
    return Budget(
        id=str(record["id"]),
        name=record.get("name") or "",
        month=record.get("month") or "",
        year=int(record.get("year") or 0),
        members=tuple(record.get("members") or ()),
        commitments=tuple(group_from_dict(g) for g in record.get("commitments") or []),
        salaries=_money_map_in(record.get("salaries")),
        total_commitments=_money_map_in(record.get("total_commitments")),
        balance={k: to_signed_cents(v) for k, v in (record.get("balance") or {}).items()},
        created_at=record.get("created_at") or "",
    )


def load_budgets(path: str) -> Tuple[Budget, ...]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return tuple(budget_from_record(r) for r in data)

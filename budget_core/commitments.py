"""Localized edits of the commitment tree.

Each function takes a Budget and returns a new one with derived totals
refreshed. Unknown group or item ids leave the budget unchanged.
"""
import logging
from dataclasses import replace
from typing import Callable, Iterable, Optional
from uuid import uuid4

from budget_core.domain import Budget, CommitmentGroup, CommitmentItem
from budget_core.functional import Maybe, Nothing, Some
from budget_core.totals import with_totals

logger = logging.getLogger(__name__)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex}"


def find_group(budget: Budget, group_id: str) -> Maybe[CommitmentGroup]:
    for group in budget.commitments:
        if group.id == group_id:
            return Some(group)
    return Nothing()


def find_item(budget: Budget, group_id: str, item_id: str) -> Maybe[CommitmentItem]:
    def _in_group(group: CommitmentGroup) -> Maybe[CommitmentItem]:
        for item in group.items:
            if item.id == item_id:
                return Some(item)
        return Nothing()

    return find_group(budget, group_id).bind(_in_group)


def ensure_paid_status(item: CommitmentItem, members: Iterable[str]) -> dict:
    status = dict(item.paid_status)
    for m in members:
        status.setdefault(m, False)
    return status


def _update_group(budget: Budget, group_id: str, f: Callable[[CommitmentGroup], CommitmentGroup]) -> Budget:
    if find_group(budget, group_id).is_none():
        logger.warning("Unknown commitment group %s", group_id)
        return budget
    groups = tuple(f(g) if g.id == group_id else g for g in budget.commitments)
    return with_totals(replace(budget, commitments=groups))


def _update_item(
    budget: Budget, group_id: str, item_id: str, f: Callable[[CommitmentItem], CommitmentItem]
) -> Budget:
    if find_item(budget, group_id, item_id).is_none():
        logger.warning("Unknown commitment item %s in group %s", item_id, group_id)
        return budget
    return _update_group(
        budget,
        group_id,
        lambda g: replace(g, items=tuple(f(i) if i.id == item_id else i for i in g.items)),
    )


# --- groups

def add_group(budget: Budget, name: str = "", group_id: Optional[str] = None) -> Budget:
    group = CommitmentGroup(id=group_id or new_id("group"), name=name, items=(), is_expanded=True)
    return with_totals(replace(budget, commitments=budget.commitments + (group,)))


def rename_group(budget: Budget, group_id: str, name: str) -> Budget:
    return _update_group(budget, group_id, lambda g: replace(g, name=name))


def toggle_group(budget: Budget, group_id: str) -> Budget:
    return _update_group(budget, group_id, lambda g: replace(g, is_expanded=not g.is_expanded))


def remove_group(budget: Budget, group_id: str) -> Budget:
    groups = tuple(g for g in budget.commitments if g.id != group_id)
    return with_totals(replace(budget, commitments=groups))


# --- items

def add_item(budget: Budget, group_id: str, name: str = "", item_id: Optional[str] = None) -> Budget:
    item = CommitmentItem(
        id=item_id or new_id("item"),
        name=name,
        amounts={},
        paid_status={m: False for m in budget.members},
    )
    return _update_group(budget, group_id, lambda g: replace(g, items=g.items + (item,)))


def update_item(
    budget: Budget, group_id: str, item_id: str, name: str, remark: Optional[str] = None
) -> Budget:
    return _update_item(budget, group_id, item_id, lambda i: replace(i, name=name, remark=remark or ""))


def remove_item(budget: Budget, group_id: str, item_id: str) -> Budget:
    return _update_group(
        budget, group_id, lambda g: replace(g, items=tuple(i for i in g.items if i.id != item_id))
    )


def set_amount(budget: Budget, group_id: str, item_id: str, member: str, cents: int) -> Budget:
    def _set(item: CommitmentItem) -> CommitmentItem:
        return replace(
            item,
            amounts={**item.amounts, member: cents},
            paid_status={**item.paid_status, member: item.paid_status.get(member, False)},
        )

    return _update_item(budget, group_id, item_id, _set)


def set_paid_status(budget: Budget, group_id: str, item_id: str, member: str, is_paid: bool) -> Budget:
    return _update_item(
        budget, group_id, item_id, lambda i: replace(i, paid_status={**i.paid_status, member: is_paid})
    )


def set_salary(budget: Budget, member: str, cents: int) -> Budget:
    return with_totals(replace(budget, salaries={**budget.salaries, member: cents}))

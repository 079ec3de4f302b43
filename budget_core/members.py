import logging
from dataclasses import replace

from budget_core.config import MAX_MEMBERS
from budget_core.domain import Budget, CommitmentItem
from budget_core.totals import with_totals

logger = logging.getLogger(__name__)


def map_items(budget: Budget, f) -> tuple:
    return tuple(
        replace(group, items=tuple(f(item) for item in group.items))
        for group in budget.commitments
    )


def _move_key(mapping: dict, old: str, new: str) -> dict:
    if old not in mapping:
        return dict(mapping)
    moved = {k: v for k, v in mapping.items() if k != old}
    moved[new] = mapping[old]
    return moved


def add_member(budget: Budget, max_members: int = MAX_MEMBERS) -> Budget:
    """Append an empty-named member and mark it unpaid on every item.

    Amounts are left alone; a missing amount already reads as zero.
    """
    if len(budget.members) >= max_members:
        logger.warning("add_member ignored: budget %s already has %d members", budget.id, len(budget.members))
        return budget

    new_name = ""
    if new_name in budget.members:
        logger.warning("add_member ignored: budget %s already has an unnamed member", budget.id)
        return budget

    def _init(item: CommitmentItem) -> CommitmentItem:
        return replace(item, paid_status={**item.paid_status, new_name: False})

    return with_totals(replace(
        budget,
        members=budget.members + (new_name,),
        commitments=map_items(budget, _init),
    ))


def remove_member(budget: Budget, index: int) -> Budget:
    if len(budget.members) <= 1:
        logger.warning("remove_member ignored: budget %s needs at least one member", budget.id)
        return budget
    if not 0 <= index < len(budget.members):
        logger.warning("remove_member ignored: index %d out of range", index)
        return budget

    removed = budget.members[index]
    remaining = budget.members[:index] + budget.members[index + 1:]
    if removed in remaining:
        # the surviving entry still owns these keys
        return with_totals(replace(budget, members=remaining))

    def _purge(item: CommitmentItem) -> CommitmentItem:
        return replace(
            item,
            amounts={k: v for k, v in item.amounts.items() if k != removed},
            paid_status={k: v for k, v in item.paid_status.items() if k != removed},
        )

    return with_totals(replace(
        budget,
        members=remaining,
        commitments=map_items(budget, _purge),
    ))


def rename_member(budget: Budget, index: int, new_name: str) -> Budget:
    """Rename members[index] and migrate its keys through the whole budget.

    Nothing is migrated when the old name is empty. An existing key with
    the new name is overwritten.
    """
    if not 0 <= index < len(budget.members):
        logger.warning("rename_member ignored: index %d out of range", index)
        return budget

    old_name = budget.members[index]
    members = budget.members[:index] + (new_name,) + budget.members[index + 1:]

    if not old_name or old_name == new_name:
        return with_totals(replace(budget, members=members))

    def _migrate(item: CommitmentItem) -> CommitmentItem:
        return replace(
            item,
            amounts=_move_key(item.amounts, old_name, new_name),
            paid_status=_move_key(item.paid_status, old_name, new_name),
        )

    return with_totals(replace(
        budget,
        members=members,
        commitments=map_items(budget, _migrate),
        salaries=_move_key(budget.salaries, old_name, new_name),
    ))

from typing import Iterable, Mapping, Sequence

from budget_core.domain import Budget, CommitmentGroup, Totals


def compute_totals(
    members: Sequence[str],
    commitments: Iterable[CommitmentGroup],
    salaries: Mapping[str, int],
) -> Totals:
    """Fold the commitment tree into per-member aggregates.

    Every output map is keyed by every name in ``members``. A missing
    amount counts as 0 and a missing paid flag counts as unpaid. Items are
    only read, never filled in. A name listed twice is counted once.
    """
    members = list(dict.fromkeys(members))
    total = {m: 0 for m in members}
    paid = {m: 0 for m in members}

    for group in commitments:
        for item in group.items:
            for m in members:
                amount = item.amounts.get(m, 0)
                total[m] += amount
                if item.paid_status.get(m, False):
                    paid[m] += amount

    unpaid = {m: total[m] - paid[m] for m in members}
    balance = {m: salaries.get(m, 0) - total[m] for m in members}
    return Totals(total_commitments=total, paid_amounts=paid, unpaid_amounts=unpaid, balance=balance)


def budget_totals(budget: Budget) -> Totals:
    return compute_totals(budget.members, budget.commitments, budget.salaries)


def with_totals(budget: Budget) -> Budget:
    totals = budget_totals(budget)
    return Budget(
        id=budget.id,
        name=budget.name,
        month=budget.month,
        year=budget.year,
        members=budget.members,
        commitments=budget.commitments,
        salaries=budget.salaries,
        total_commitments=totals.total_commitments,
        balance=totals.balance,
        created_at=budget.created_at,
    )

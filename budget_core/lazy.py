from typing import Callable, Iterable, Iterator, Tuple

from budget_core.domain import Budget, CommitmentGroup, CommitmentItem


def iter_items(
    commitments: Iterable[CommitmentGroup], pred: Callable[[CommitmentItem], bool]
) -> Iterator[Tuple[CommitmentGroup, CommitmentItem]]:
    for group in commitments:
        for item in group.items:
            if pred(item):
                yield group, item


def unpaid_items(budget: Budget, member: str) -> Iterator[Tuple[CommitmentGroup, CommitmentItem]]:
    """Items where ``member`` owes a non-zero amount and has not paid."""
    return iter_items(
        budget.commitments,
        lambda i: i.amounts.get(member, 0) > 0 and not i.paid_status.get(member, False),
    )


def top_commitments(budget: Budget, k: int) -> Iterator[tuple[str, int]]:
    # item name -> combined amount of the current members
    ordered = sorted(
        (
            (item.name, sum(item.amounts.get(m, 0) for m in budget.members))
            for _, item in iter_items(budget.commitments, lambda i: True)
        ),
        key=lambda pair: pair[1],
        reverse=True,
    )

    for name, total in ordered[: max(0, k)]:
        if total > 0:
            yield name, total

from itertools import islice

from budget_core.domain import Budget, CommitmentGroup, CommitmentItem
from budget_core.lazy import iter_items, top_commitments, unpaid_items


def make_budget():
    housing = CommitmentGroup("g1", "Housing", (
        CommitmentItem("i1", "Rent", amounts={"A": 80000, "B": 40000}, paid_status={"A": True}),
        CommitmentItem("i2", "Internet", amounts={"A": 15000}),
    ))
    other = CommitmentGroup("g2", "Other", (
        CommitmentItem("i3", "Gym", amounts={"B": 9900}, paid_status={"B": True}),
        CommitmentItem("i4", "Placeholder"),
    ))
    return Budget(id="b1", name="Home", month="May", year=2026, members=("A", "B"), commitments=(housing, other))


def test_iter_items_yields_group_and_item():
    pairs = list(iter_items(make_budget().commitments, lambda i: True))
    assert [(g.id, i.id) for g, i in pairs] == [("g1", "i1"), ("g1", "i2"), ("g2", "i3"), ("g2", "i4")]


def test_iter_items_is_lazy():
    calls = {"n": 0}

    def pred(item):
        calls["n"] += 1
        return True

    first = list(islice(iter_items(make_budget().commitments, pred), 1))
    assert len(first) == 1
    assert calls["n"] == 1


def test_unpaid_items():
    budget = make_budget()
    assert [i.name for _, i in unpaid_items(budget, "A")] == ["Internet"]
    assert [i.name for _, i in unpaid_items(budget, "B")] == ["Rent"]


def test_top_commitments_orders_and_skips_zero():
    budget = make_budget()
    assert list(top_commitments(budget, 10)) == [("Rent", 120000), ("Internet", 15000), ("Gym", 9900)]
    assert list(top_commitments(budget, 1)) == [("Rent", 120000)]
    assert list(top_commitments(budget, 0)) == []

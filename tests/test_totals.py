from budget_core.domain import Budget, CommitmentGroup, CommitmentItem
from budget_core.totals import compute_totals, with_totals


def make_item(id, amounts, paid=None, name="Item"):
    return CommitmentItem(id=id, name=name, amounts=amounts, paid_status=paid or {})


def make_group(id, *items, name="Group"):
    return CommitmentGroup(id=id, name=name, items=tuple(items))


def test_empty_budget():
    totals = compute_totals([], [], {})
    assert totals.total_commitments == {}
    assert totals.paid_amounts == {}
    assert totals.unpaid_amounts == {}
    assert totals.balance == {}


def test_single_item_single_member():
    groups = (make_group("g1", make_item("i1", {"Alice": 10000}, {"Alice": True})),)
    totals = compute_totals(["Alice"], groups, {"Alice": 100000})

    assert totals.total_commitments == {"Alice": 10000}
    assert totals.paid_amounts == {"Alice": 10000}
    assert totals.unpaid_amounts == {"Alice": 0}
    assert totals.balance == {"Alice": 90000}


def test_two_members_mixed_paid_status():
    groups = (make_group("g1", make_item("i1", {"A": 5000, "B": 3000}, {"A": True, "B": False})),)
    totals = compute_totals(["A", "B"], groups, {})

    assert totals.paid_amounts == {"A": 5000, "B": 0}
    assert totals.unpaid_amounts == {"A": 0, "B": 3000}
    assert totals.total_commitments == {"A": 5000, "B": 3000}


def test_missing_entries_count_as_zero_and_unpaid():
    groups = (make_group("g1", make_item("i1", {}), make_item("i2", {"A": 700})),)
    totals = compute_totals(["A"], groups, {})

    assert totals.total_commitments == {"A": 700}
    assert totals.paid_amounts == {"A": 0}
    assert totals.unpaid_amounts == {"A": 700}


def test_balance_without_salary_is_negative_total():
    groups = (make_group("g1", make_item("i1", {"A": 1234})),)
    totals = compute_totals(["A"], groups, {})
    assert totals.balance == {"A": -1234}


def test_conservation_across_groups():
    groups = (
        make_group("g1", make_item("i1", {"A": 1999, "B": 1}, {"A": True}), make_item("i2", {"A": 1})),
        make_group("g2", make_item("i3", {"A": 333, "B": 667}, {"B": True})),
    )
    totals = compute_totals(["A", "B"], groups, {"A": 500})

    for m in ("A", "B"):
        assert totals.paid_amounts[m] + totals.unpaid_amounts[m] == totals.total_commitments[m]
    assert totals.total_commitments == {"A": 2333, "B": 668}
    assert totals.balance["A"] == 500 - 2333


def test_keys_outside_members_are_ignored():
    groups = (make_group("g1", make_item("i1", {"A": 100, "Ghost": 999}, {"Ghost": True})),)
    totals = compute_totals(["A"], groups, {"Ghost": 5})
    assert set(totals.total_commitments) == {"A"}
    assert totals.total_commitments["A"] == 100


def test_compute_totals_is_pure():
    item = make_item("i1", {"A": 100})
    groups = (make_group("g1", item),)

    first = compute_totals(["A", "B"], groups, {"A": 1000})
    second = compute_totals(["A", "B"], groups, {"A": 1000})

    assert first == second
    assert item.paid_status == {}


def test_with_totals_refreshes_derived_fields():
    budget = Budget(
        id="b1", name="May", month="May", year=2026,
        members=("A",),
        commitments=(make_group("g1", make_item("i1", {"A": 2500})),),
        salaries={"A": 10000},
        total_commitments={"A": 1}, balance={"A": 1},
    )
    refreshed = with_totals(budget)

    assert refreshed.total_commitments == {"A": 2500}
    assert refreshed.balance == {"A": 7500}
    assert budget.total_commitments == {"A": 1}


def test_repeated_member_counted_once():
    groups = (make_group("g1", make_item("i1", {"Alice": 30000}, {"Alice": True})),)
    totals = compute_totals(["Alice", "Alice"], groups, {"Alice": 100000})

    assert totals.total_commitments == {"Alice": 30000}
    assert totals.paid_amounts == {"Alice": 30000}
    assert totals.balance == {"Alice": 70000}

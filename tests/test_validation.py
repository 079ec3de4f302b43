from datetime import date

from budget_core.domain import Budget, CommitmentGroup, CommitmentItem
from budget_core.validation import (
    ValidationErrorKind,
    is_valid_amount,
    is_valid_budget_name,
    is_valid_commitment_name,
    is_valid_email,
    is_valid_member_name,
    is_valid_month,
    is_valid_year,
    prepare_for_save,
    sanitize_string,
    validate_budget,
)


def make_budget(name="Family", members=("Alice",), groups=()):
    return Budget(id="b1", name=name, month="July", year=2026, members=members, commitments=groups)


def test_valid_budget_is_right():
    group = CommitmentGroup("g1", "Rent", (CommitmentItem("i1", "Flat"),))
    budget = make_budget(groups=(group,))
    result = validate_budget(budget)
    assert result.is_right()
    assert result.get_or_else(None) is budget


def test_blank_budget_name():
    result = validate_budget(make_budget(name="   "))
    assert result.is_left()
    kinds = [e.kind for e in result.get_error()]
    assert kinds == [ValidationErrorKind.MISSING_BUDGET_NAME]


def test_collects_every_violation():
    groups = (
        CommitmentGroup("g1", "", (CommitmentItem("i1", ""), CommitmentItem("i2", "ok"))),
        CommitmentGroup("g2", "Loans", (CommitmentItem("i3", " "),)),
    )
    result = validate_budget(make_budget(name="", members=("Alice", ""), groups=groups))

    errors = result.get_error()
    kinds = [e.kind for e in errors]
    assert kinds == [
        ValidationErrorKind.MISSING_BUDGET_NAME,
        ValidationErrorKind.MISSING_MEMBER_NAME,
        ValidationErrorKind.MISSING_GROUP_NAME,
        ValidationErrorKind.MISSING_ITEM_NAME,
        ValidationErrorKind.MISSING_ITEM_NAME,
    ]
    assert errors[1].ref == "1"
    assert errors[2].ref == "g1"
    assert errors[4].ref == "g2/i3"
    assert "Loans" in errors[4].message


def test_prepare_for_save_trims_names():
    item = CommitmentItem("i1", " Flat ", remark=" due 1st ", amounts={"Alice": 90000})
    groups = (CommitmentGroup("g1", "  Rent", (item,)),)
    budget = make_budget(name="  Family  ", members=("Alice ",), groups=groups)

    prepared = prepare_for_save(budget)

    assert prepared.name == "Family"
    assert prepared.members == ("Alice ",)
    group = prepared.commitments[0]
    assert group.name == "Rent"
    assert (group.items[0].name, group.items[0].remark) == ("Flat", "due 1st")
    assert group.items[0].amounts == {"Alice": 90000}
    assert prepared.total_commitments == {"Alice ": 0}


def test_sanitize_string():
    assert sanitize_string("  <b>Rent</b> ") == "bRent/b"
    assert sanitize_string("javascript:alert(1)") == "alert(1)"
    assert sanitize_string('x onclick=y') == "x y"
    assert len(sanitize_string("a" * 2000)) == 1000
    assert sanitize_string(None) == ""


def test_email_and_name_validators():
    assert is_valid_email("Alice@Example.com")
    assert not is_valid_email("alice@example")
    assert not is_valid_email("")
    assert is_valid_member_name("Alice")
    assert is_valid_member_name("a" * 60 + "@example.com")
    assert not is_valid_member_name("a" * 51)
    assert is_valid_budget_name("Home")
    assert not is_valid_budget_name("   ")
    assert is_valid_commitment_name("x" * 100)
    assert not is_valid_commitment_name("x" * 101)


def test_amount_validator():
    assert is_valid_amount(0)
    assert is_valid_amount("12.50")
    assert is_valid_amount(999999999.99)
    assert not is_valid_amount(-1)
    assert not is_valid_amount(1_000_000_000)
    assert not is_valid_amount("abc")
    assert not is_valid_amount(float("nan"))


def test_month_and_year_validators():
    today = date(2026, 10, 17)
    assert is_valid_month("October")
    assert not is_valid_month("october")
    assert is_valid_year(2026, today)
    assert is_valid_year(2036, today)
    assert not is_valid_year(2037, today)
    assert not is_valid_year(2025, today)
    assert not is_valid_year(True, today)

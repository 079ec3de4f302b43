import math
import re
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Optional, Union

from budget_core.domain import MONTHS, Budget
from budget_core.functional import Either, Left, Right
from budget_core.money import MAX_CENTS
from budget_core.totals import with_totals

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ValidationErrorKind(str, Enum):
    MISSING_BUDGET_NAME = "missing_budget_name"
    MISSING_MEMBER_NAME = "missing_member_name"
    MISSING_GROUP_NAME = "missing_group_name"
    MISSING_ITEM_NAME = "missing_item_name"


@dataclass(frozen=True)
class ValidationError:
    kind: ValidationErrorKind
    message: str
    ref: Optional[str] = None  # member index, group id or "group_id/item_id"


def validate_budget(budget: Budget) -> Either[tuple[ValidationError, ...], Budget]:
    """Blank-name gate run before a budget is handed to a store.

    Collects every violation instead of stopping at the first one.
    """
    errors: list[ValidationError] = []

    if not budget.name.strip():
        errors.append(ValidationError(
            ValidationErrorKind.MISSING_BUDGET_NAME, "Please enter a budget name."
        ))

    for idx, member in enumerate(budget.members):
        if not member.strip():
            errors.append(ValidationError(
                ValidationErrorKind.MISSING_MEMBER_NAME,
                f"Member #{idx + 1} has no name.",
                str(idx),
            ))

    for group in budget.commitments:
        if not group.name.strip():
            errors.append(ValidationError(
                ValidationErrorKind.MISSING_GROUP_NAME,
                "A commitment group has no name.",
                group.id,
            ))
        for item in group.items:
            if not item.name.strip():
                label = group.name.strip() or "an unnamed group"
                errors.append(ValidationError(
                    ValidationErrorKind.MISSING_ITEM_NAME,
                    f"An item in {label} has no name.",
                    f"{group.id}/{item.id}",
                ))

    if errors:
        return Left(tuple(errors))
    return Right(budget)


def prepare_for_save(budget: Budget) -> Budget:
    """Trim budget, group and item names and refresh totals.

    Member names are keys into every item map and are left untouched.
    """
    commitments = tuple(
        replace(
            group,
            name=group.name.strip(),
            items=tuple(replace(item, name=item.name.strip(), remark=item.remark.strip()) for item in group.items),
        )
        for group in budget.commitments
    )
    return with_totals(replace(budget, name=budget.name.strip(), commitments=commitments))


# --- field validators

def sanitize_string(value: str) -> str:
    if not isinstance(value, str):
        return ""
    cleaned = value.strip()
    cleaned = re.sub(r"[<>]", "", cleaned)
    cleaned = re.sub(r"javascript:", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"on\w+=", "", cleaned, flags=re.IGNORECASE)
    return cleaned[:1000]


def is_valid_email(email: str) -> bool:
    if not email or not isinstance(email, str):
        return False
    return bool(EMAIL_RE.match(email.strip().lower()))


def _length_between(value: str, low: int, high: int) -> bool:
    if not value or not isinstance(value, str):
        return False
    return low <= len(value.strip()) <= high


def is_valid_budget_name(name: str) -> bool:
    return _length_between(name, 1, 100)


def is_valid_member_name(name: str) -> bool:
    return is_valid_email(name) or _length_between(name, 1, 50)


def is_valid_commitment_name(name: str) -> bool:
    return _length_between(name, 1, 100)


def is_valid_amount(amount: Union[int, float, str]) -> bool:
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return False
    if not math.isfinite(value):
        return False
    return 0 <= value <= MAX_CENTS / 100


def is_valid_month(month: str) -> bool:
    return month in MONTHS


def is_valid_year(year: int, today: Optional[date] = None) -> bool:
    if isinstance(year, bool) or not isinstance(year, int):
        return False
    current = (today or date.today()).year
    return current <= year <= current + 10

"""Fixed-point money helpers.

Amounts live in the domain as integer cents. Conversion to and from
two-decimal numbers only happens at the edges: user input, stored records
and presentation.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from budget_core.config import CURRENCY

MAX_CENTS = 99_999_999_999  # 999,999,999.99

Number = Union[int, float, str, Decimal]


def to_cents(value: Number) -> int:
    """Parse a user or record amount into cents.

    Invalid input becomes 0, the value is rounded half-up to two decimals
    and clamped to [0, 999,999,999.99].
    """
    if isinstance(value, bool) or value is None:
        return 0
    try:
        dec = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return 0
    if not dec.is_finite():
        return 0
    cents = int((dec * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(0, min(MAX_CENTS, cents))


def cents_to_decimal(cents: int) -> Decimal:
    return Decimal(int(cents)).scaleb(-2)


def from_cents(cents: int) -> float:
    return float(cents_to_decimal(cents))


def format_money(cents: int, currency: str = CURRENCY) -> str:
    return f"{currency} {cents_to_decimal(cents):.2f}"


def to_signed_cents(value: Number) -> int:
    """Like to_cents but keeps the sign, for balances read back from records."""
    text = str(value).strip() if value is not None else ""
    if text.startswith("-"):
        return -to_cents(text[1:])
    return to_cents(text)

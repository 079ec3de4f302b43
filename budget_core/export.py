"""Tabular ledger export.

The ledger consumes already computed totals and never aggregates on its
own. ``summary_kind`` picks the footer rows:

- ``"balance"``: Salary, Total Commitments, Balance
- ``"payments"``: Paid, Unpaid
- ``"full"``: all of the above
"""
import re

import pandas as pd

from budget_core.config import CURRENCY
from budget_core.domain import Budget, Totals
from budget_core.money import format_money

SUMMARY_KINDS = ("balance", "payments", "full")
PAID_MARK = " ✅"
LABEL_COLUMN = "Commitments"


def _item_cell(amount: int, paid: bool, currency: str) -> str:
    if amount <= 0:
        return ""
    return format_money(amount, currency) + (PAID_MARK if paid else "")


def ledger_rows(budget: Budget, totals: Totals, summary_kind: str = "balance", currency: str = CURRENCY) -> list:
    """Rows as lists in column order: the label first, then one cell per member.

    Rows are positional so a member whose name matches ``LABEL_COLUMN``
    cannot overwrite the label cell.
    """
    if summary_kind not in SUMMARY_KINDS:
        raise ValueError(f"Unknown summary kind '{summary_kind}', expected one of {SUMMARY_KINDS}")

    members = ledger_members(budget)
    rows = []
    for group in budget.commitments:
        rows.append([group.name, *("" for _ in members)])
        for item in group.items:
            rows.append([
                item.name,
                *(_item_cell(item.amounts.get(m, 0), item.paid_status.get(m, False), currency) for m in members),
            ])

    def summary_row(label: str, values: dict) -> list:
        return [label, *(format_money(values.get(m, 0), currency) for m in members)]

    if summary_kind in ("balance", "full"):
        rows.append(summary_row("Salary", budget.salaries))
        rows.append(summary_row("Total Commitments", totals.total_commitments))
        rows.append(summary_row("Balance", totals.balance))
    if summary_kind in ("payments", "full"):
        rows.append(summary_row("Paid", totals.paid_amounts))
        rows.append(summary_row("Unpaid", totals.unpaid_amounts))
    return rows


def ledger_members(budget: Budget) -> list:
    return list(dict.fromkeys(budget.members))


def ledger_frame(budget: Budget, totals: Totals, summary_kind: str = "balance", currency: str = CURRENCY) -> pd.DataFrame:
    rows = ledger_rows(budget, totals, summary_kind, currency)
    return pd.DataFrame(rows, columns=[LABEL_COLUMN, *ledger_members(budget)])


def ledger_csv(budget: Budget, totals: Totals, summary_kind: str = "balance", currency: str = CURRENCY) -> str:
    return ledger_frame(budget, totals, summary_kind, currency).to_csv(index=False)


def export_filename(budget: Budget, ext: str = "csv") -> str:
    title = re.sub(r"\s+", "_", budget.name) if budget.name else "budget"
    return f"{title}_ledger_{budget.month}_{budget.year}.{ext}"

"""Monthly aggregation over the ledger.

The month's rows feed the presentational breakdown (per category, per sign
and, when tracked, per payment method). The balances attached to a report
come from the policy and always cover the whole ledger, so the two figures
answer different questions and are never derived from each other.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from .balance import BalancePolicy
from .models import ZERO, LedgerEntry, MonthlyReport, PaymentMethod
from .persistence import LedgerStore


def sum_by_category(entries: Iterable[LedgerEntry]) -> dict[str, Decimal]:
    """Signed sum per category, in first-appearance order."""

    totals: dict[str, Decimal] = {}
    for entry in entries:
        totals[entry.category] = totals.get(entry.category, ZERO) + entry.amount
    return totals


def split_by_sign(totals: dict[str, Decimal]) -> tuple[dict[str, Decimal], dict[str, Decimal]]:
    """Split signed category totals into ``(income, expenses)``.

    Expenses are returned as magnitudes. A category netting to exactly zero
    lands in neither map.
    """

    income: dict[str, Decimal] = {}
    expenses: dict[str, Decimal] = {}
    for category, total in totals.items():
        if total > 0:
            income[category] = total
        elif total < 0:
            expenses[category] = -total
    return income, expenses


def expenses_by_payment_method(
    entries: Iterable[LedgerEntry],
) -> dict[PaymentMethod, dict[str, Decimal]]:
    """Expense magnitudes grouped by payment method, then category."""

    grouped: dict[PaymentMethod, dict[str, Decimal]] = {}
    for entry in entries:
        if entry.amount >= 0:
            continue
        per_category = grouped.setdefault(entry.payment_method, {})
        per_category[entry.category] = per_category.get(entry.category, ZERO) - entry.amount
    return grouped


class BalanceAggregator:
    def __init__(self, store: LedgerStore, policy: BalancePolicy) -> None:
        self._store = store
        self._policy = policy

    def monthly_report(self, month: int, year: int) -> MonthlyReport | None:
        """Aggregate one calendar month; ``None`` when it has no transactions."""

        entries = self._store.query_by_month(month, year)
        if not entries:
            return None

        income, expenses = split_by_sign(sum_by_category(entries))
        by_method = (
            expenses_by_payment_method(entries) if self._policy.tracks_payment_method else {}
        )
        return MonthlyReport(
            month=month,
            year=year,
            income_by_category=income,
            expense_by_category=expenses,
            expenses_by_method=by_method,
            balances=self._policy.balances(self._store),
            transaction_count=len(entries),
        )


__all__ = [
    "BalanceAggregator",
    "expenses_by_payment_method",
    "split_by_sign",
    "sum_by_category",
]

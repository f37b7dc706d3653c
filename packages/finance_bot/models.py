"""Data models for ``finance_bot``.

Everything here is a plain value object. Amounts are always ``Decimal`` at
currency scale (two places); nothing in the package accumulates money in
binary floats.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


class TransactionKind(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def for_amount(cls, amount: Decimal) -> TransactionKind:
        return cls.INCOME if amount > 0 else cls.EXPENSE


class PaymentMethod(StrEnum):
    DEBIT = "debit"
    CREDIT = "credit"


# ---------------------------------------------------------------------------
# Parser output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransactionIntent:
    """A chat message that parsed as a transaction, before classification.

    ``amount`` is signed and never zero. ``payment_method`` is always
    ``DEBIT`` for messages without a payment token and for the legacy
    dialect.
    """

    amount: Decimal
    description: str
    payment_method: PaymentMethod = PaymentMethod.DEBIT

    @property
    def kind(self) -> TransactionKind:
        return TransactionKind.for_amount(self.amount)

    @property
    def is_income(self) -> bool:
        return self.kind is TransactionKind.INCOME


# ---------------------------------------------------------------------------
# Ledger rows
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """A persisted transaction as read back from the ledger store."""

    id: int
    occurred_at: datetime
    description: str
    category: str
    amount: Decimal
    kind: TransactionKind
    payment_method: PaymentMethod

    @property
    def is_income(self) -> bool:
        return self.kind is TransactionKind.INCOME


@dataclass(frozen=True, slots=True)
class Balances:
    """Whole-ledger running balances.

    ``credit_bill`` is ``None`` under the simple policy, which does not track
    card spending separately; otherwise it is the card total as a positive
    magnitude.
    """

    account: Decimal
    credit_bill: Decimal | None = None


# ---------------------------------------------------------------------------
# Replies
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Confirmation:
    """Everything the transport needs to acknowledge a recorded transaction."""

    user_display_name: str
    entry: LedgerEntry
    icon: str
    balances: Balances
    daily_allowance: Decimal
    # Only set for expenses when the active policy tracks payment methods.
    payment_method: PaymentMethod | None = None

    @property
    def kind(self) -> TransactionKind:
        return self.entry.kind

    @property
    def amount(self) -> Decimal:
        return abs(self.entry.amount)

    @property
    def category(self) -> str:
        return self.entry.category

    @property
    def description(self) -> str:
        return self.entry.description

    @property
    def occurred_at(self) -> datetime:
        return self.entry.occurred_at


@dataclass(frozen=True, slots=True)
class DeletedConfirmation:
    entry: LedgerEntry
    balances: Balances


@dataclass(frozen=True, slots=True)
class MonthlyReport:
    """Grouped sums for one calendar month plus whole-ledger balances.

    Category maps keep first-appearance order from a most-recent-first scan.
    Expense figures are magnitudes (positive). ``expenses_by_method`` is empty
    when the active policy does not track payment methods.
    """

    month: int
    year: int
    income_by_category: dict[str, Decimal]
    expense_by_category: dict[str, Decimal]
    balances: Balances
    expenses_by_method: dict[PaymentMethod, dict[str, Decimal]] = field(default_factory=dict)
    transaction_count: int = 0

    @property
    def tracks_payment_method(self) -> bool:
        return self.balances.credit_bill is not None

    def chart_series(self) -> list[tuple[str, Decimal]]:
        """Return ``(category, magnitude)`` pairs for the expense pie chart."""

        return list(self.expense_by_category.items())


__all__ = [
    "CENT",
    "ZERO",
    "Balances",
    "Confirmation",
    "DeletedConfirmation",
    "LedgerEntry",
    "MonthlyReport",
    "PaymentMethod",
    "TransactionIntent",
    "TransactionKind",
]

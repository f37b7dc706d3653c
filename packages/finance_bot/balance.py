"""Running-balance policies and the daily allowance.

Two policies exist and are selected by configuration:

- ``simple``: one balance, the sum of every transaction in the ledger.
- ``payment_method``: the account balance counts income and debit spending
  only; credit-card spending accumulates into a separate bill.

Both always sum the whole ledger. Nothing is cached: every call re-reads the
store, so a reply reflects the ledger as of that reply.
"""

from __future__ import annotations

import calendar
from abc import ABC, abstractmethod
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, ClassVar

from .models import CENT, ZERO, Balances
from .persistence import BalanceFilter

if TYPE_CHECKING:
    from .persistence import LedgerStore


class BalancePolicy(ABC):
    name: ClassVar[str]
    # Whether messages may carry a payment-method suffix and reports split
    # spending by method.
    tracks_payment_method: ClassVar[bool]

    @abstractmethod
    def balances(self, store: LedgerStore) -> Balances:
        raise NotImplementedError


class SimpleBalancePolicy(BalancePolicy):
    name = "simple"
    tracks_payment_method = False

    def balances(self, store: LedgerStore) -> Balances:
        return Balances(account=store.sum(BalanceFilter.ALL))


class PaymentMethodBalancePolicy(BalancePolicy):
    name = "payment_method"
    tracks_payment_method = True

    def balances(self, store: LedgerStore) -> Balances:
        account = store.sum(BalanceFilter.DEBIT_OR_INCOME)
        credit = store.sum(BalanceFilter.CREDIT)
        return Balances(account=account, credit_bill=abs(credit))


POLICIES: dict[str, type[BalancePolicy]] = {
    SimpleBalancePolicy.name: SimpleBalancePolicy,
    PaymentMethodBalancePolicy.name: PaymentMethodBalancePolicy,
}


def policy_from_name(name: str) -> BalancePolicy:
    try:
        return POLICIES[name.strip().lower()]()
    except KeyError:
        raise ValueError(
            f"unknown balance policy {name!r}; expected one of {sorted(POLICIES)}"
        ) from None


def days_remaining_in_month(today: date) -> int:
    """Days left in ``today``'s month, counting today."""

    last_day = calendar.monthrange(today.year, today.month)[1]
    return last_day - today.day + 1


def daily_allowance(balance: Decimal, today: date) -> Decimal:
    """Spread ``balance`` evenly over the rest of the month."""

    days = days_remaining_in_month(today)
    if days <= 0:
        return ZERO
    return (balance / days).quantize(CENT, rounding=ROUND_HALF_UP)


__all__ = [
    "BalancePolicy",
    "POLICIES",
    "PaymentMethodBalancePolicy",
    "SimpleBalancePolicy",
    "daily_allowance",
    "days_remaining_in_month",
    "policy_from_name",
]

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from finance_bot.balance import (
    PaymentMethodBalancePolicy,
    SimpleBalancePolicy,
    daily_allowance,
    days_remaining_in_month,
    policy_from_name,
)
from finance_bot.models import Balances, PaymentMethod
from tests.helpers.db import open_store, seed


@pytest.fixture
def store(tmp_path):
    s = open_store(tmp_path / "ledger.sqlite")
    seed(
        s,
        [
            ("2026-09-01T09:00:00", "2000", "salary", "Salário"),
            ("2026-10-01T09:00:00", "1000", "salary", "Salário"),
            ("2026-10-02T09:00:00", "-300", "rent share", "Contas"),
            ("2026-10-03T09:00:00", "-250.50", "dinner", "Alimentação", PaymentMethod.CREDIT),
        ],
    )
    yield s
    s.close()


def test_simple_policy_sums_whole_ledger(store):
    assert SimpleBalancePolicy().balances(store) == Balances(account=Decimal("2449.50"))


def test_payment_method_policy_separates_card_spending(store):
    balances = PaymentMethodBalancePolicy().balances(store)
    assert balances.account == Decimal("2700.00")
    assert balances.credit_bill == Decimal("250.50")


def test_policies_agree_on_the_total(store):
    simple = SimpleBalancePolicy().balances(store)
    split = PaymentMethodBalancePolicy().balances(store)
    assert simple.account == split.account - split.credit_bill


@pytest.mark.parametrize(
    ("name", "cls"),
    [("simple", SimpleBalancePolicy), (" Payment_Method ", PaymentMethodBalancePolicy)],
)
def test_policy_from_name(name, cls):
    assert isinstance(policy_from_name(name), cls)


def test_policy_from_name_rejects_unknown():
    with pytest.raises(ValueError, match="unknown balance policy"):
        policy_from_name("envelope")


@pytest.mark.parametrize(
    ("today", "days"),
    [
        (date(2026, 10, 19), 13),
        (date(2026, 10, 31), 1),
        (date(2026, 10, 1), 31),
        (date(2024, 2, 1), 29),
        (date(2026, 2, 28), 1),
    ],
)
def test_days_remaining_counts_today(today, days):
    assert days_remaining_in_month(today) == days


def test_daily_allowance_spreads_balance_over_remaining_days():
    assert daily_allowance(Decimal("1300.00"), date(2026, 10, 19)) == Decimal("100.00")
    assert daily_allowance(Decimal("100.00"), date(2026, 10, 29)) == Decimal("33.33")
    assert daily_allowance(Decimal("-62.00"), date(2026, 10, 1)) == Decimal("-2.00")
    assert daily_allowance(Decimal("0.00"), date(2026, 10, 31)) == Decimal("0.00")

from __future__ import annotations

from decimal import Decimal

import pytest

from finance_bot.aggregate import BalanceAggregator, split_by_sign, sum_by_category
from finance_bot.balance import PaymentMethodBalancePolicy, SimpleBalancePolicy
from finance_bot.models import PaymentMethod
from tests.helpers.db import open_store, seed

D = Decimal
CREDIT = PaymentMethod.CREDIT


@pytest.fixture
def store(tmp_path):
    s = open_store(tmp_path / "ledger.sqlite")
    seed(
        s,
        [
            ("2026-09-28T10:00:00", "-999", "old", "Lazer"),
            ("2026-10-01T09:00:00", "3000", "salary", "Salário"),
            ("2026-10-02T12:00:00", "-40", "pizza", "Alimentação"),
            ("2026-10-05T12:00:00", "-60", "restaurante", "Alimentação", CREDIT),
            ("2026-10-07T08:00:00", "-25.50", "uber", "Transporte"),
            ("2026-10-09T21:00:00", "-39.90", "netflix", "Lazer", CREDIT),
        ],
    )
    yield s
    s.close()


def test_empty_month_has_no_report(store):
    aggregator = BalanceAggregator(store, PaymentMethodBalancePolicy())
    assert aggregator.monthly_report(2, 1900) is None


def test_monthly_report_groups_by_sign_and_category(store):
    report = BalanceAggregator(store, SimpleBalancePolicy()).monthly_report(10, 2026)

    assert report.transaction_count == 5
    assert report.income_by_category == {"Salário": D("3000.00")}
    assert report.expense_by_category == {
        "Lazer": D("39.90"),
        "Transporte": D("25.50"),
        "Alimentação": D("100.00"),
    }
    assert report.expenses_by_method == {}
    assert not report.tracks_payment_method


def test_category_order_follows_most_recent_first(store):
    report = BalanceAggregator(store, SimpleBalancePolicy()).monthly_report(10, 2026)
    assert list(report.expense_by_category) == ["Lazer", "Transporte", "Alimentação"]


def test_balances_cover_the_whole_ledger_not_the_month(store):
    simple = BalanceAggregator(store, SimpleBalancePolicy()).monthly_report(10, 2026)
    assert simple.balances.account == D("1835.60")

    split = BalanceAggregator(store, PaymentMethodBalancePolicy()).monthly_report(10, 2026)
    assert split.balances.account == D("1935.50")
    assert split.balances.credit_bill == D("99.90")


def test_expenses_split_by_payment_method(store):
    report = BalanceAggregator(store, PaymentMethodBalancePolicy()).monthly_report(10, 2026)

    assert report.tracks_payment_method
    assert report.expenses_by_method == {
        PaymentMethod.CREDIT: {"Lazer": D("39.90"), "Alimentação": D("60.00")},
        PaymentMethod.DEBIT: {"Transporte": D("25.50"), "Alimentação": D("40.00")},
    }


def test_report_is_idempotent(store):
    aggregator = BalanceAggregator(store, PaymentMethodBalancePolicy())
    assert aggregator.monthly_report(10, 2026) == aggregator.monthly_report(10, 2026)


def test_chart_series_is_expense_magnitudes(store):
    report = BalanceAggregator(store, SimpleBalancePolicy()).monthly_report(10, 2026)
    assert report.chart_series() == [
        ("Lazer", D("39.90")),
        ("Transporte", D("25.50")),
        ("Alimentação", D("100.00")),
    ]


def test_split_by_sign_drops_categories_netting_to_zero():
    income, expenses = split_by_sign({"Outros": D("0.00"), "Lazer": D("-5"), "Salário": D("5")})
    assert income == {"Salário": D("5")}
    assert expenses == {"Lazer": D("5")}


def test_sum_by_category_on_no_entries():
    assert sum_by_category([]) == {}

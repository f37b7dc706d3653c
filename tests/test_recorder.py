from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from finance_bot.balance import PaymentMethodBalancePolicy, SimpleBalancePolicy
from finance_bot.categories import FALLBACK_CATEGORY, SALARY_CATEGORY
from finance_bot.categorize import KeywordCategorizer
from finance_bot.models import PaymentMethod, TransactionKind
from finance_bot.persistence import StorageError
from finance_bot.recorder import TransactionRecorder
from tests.helpers.db import open_store

NOW = datetime(2026, 10, 19, 20, 15)


class _CountingCategorizer:
    def __init__(self, answer: str | BaseException) -> None:
        self.answer = answer
        self.seen: list[str] = []

    def classify(self, text, taxonomy):
        self.seen.append(text)
        if isinstance(self.answer, BaseException):
            raise self.answer
        return self.answer


@pytest.fixture
def store(tmp_path):
    s = open_store(tmp_path / "ledger.sqlite")
    yield s
    s.close()


def _recorder(store, categorizer=None, policy=None):
    return TransactionRecorder(
        store,
        categorizer or KeywordCategorizer(),
        policy or PaymentMethodBalancePolicy(),
        clock=lambda: NOW,
    )


def test_record_expense(store):
    confirmation = _recorder(store).record("-50 Pizza d", "Ana")

    assert confirmation is not None
    assert confirmation.user_display_name == "Ana"
    assert confirmation.kind is TransactionKind.EXPENSE
    assert confirmation.amount == Decimal("50.00")
    assert confirmation.category == "Alimentação"
    assert confirmation.icon == "🍔"
    assert confirmation.description == "Pizza"
    assert confirmation.occurred_at == NOW
    assert confirmation.payment_method is PaymentMethod.DEBIT
    assert confirmation.balances.account == Decimal("-50.00")
    assert confirmation.balances.credit_bill == Decimal("0.00")
    # 13 days left in October counting the 19th.
    assert confirmation.daily_allowance == Decimal("-3.85")

    (row,) = store.query_by_month(10, 2026)
    assert row == confirmation.entry


def test_record_income_skips_categorizer(store):
    categorizer = _CountingCategorizer("Lazer")
    confirmation = _recorder(store, categorizer).record("+1300 Freela", "Ana")

    assert categorizer.seen == []
    assert confirmation.category == SALARY_CATEGORY
    assert confirmation.kind is TransactionKind.INCOME
    assert confirmation.payment_method is None
    assert confirmation.daily_allowance == Decimal("100.00")


def test_credit_spending_goes_to_the_card_bill(store):
    recorder = _recorder(store)
    recorder.record("+1000 Salário", "Ana")
    confirmation = recorder.record("-89,90 Netflix c", "Ana")

    assert confirmation.payment_method is PaymentMethod.CREDIT
    assert confirmation.balances.account == Decimal("1000.00")
    assert confirmation.balances.credit_bill == Decimal("89.90")


def test_classification_failure_still_persists(store):
    categorizer = _CountingCategorizer(TimeoutError("llm timed out"))
    confirmation = _recorder(store, categorizer).record("-12 Coisa estranha", "Ana")

    assert confirmation is not None
    assert confirmation.category == FALLBACK_CATEGORY
    assert store.query_latest().category == FALLBACK_CATEGORY


def test_non_transaction_text_touches_nothing(store):
    categorizer = _CountingCategorizer("Lazer")
    recorder = _recorder(store, categorizer)

    assert recorder.record("bom dia!", "Ana") is None
    assert recorder.record("0 Nada", "Ana") is None
    assert categorizer.seen == []
    assert store.query_latest() is None


def test_simple_policy_uses_legacy_dialect(store):
    recorder = _recorder(store, policy=SimpleBalancePolicy())
    confirmation = recorder.record("-10 Uber c", "Ana")

    assert confirmation.description == "Uber c"
    assert confirmation.payment_method is None
    assert confirmation.entry.payment_method is PaymentMethod.DEBIT
    assert confirmation.balances.credit_bill is None
    assert confirmation.balances.account == Decimal("-10.00")


def test_failed_insert_produces_no_confirmation(store):
    recorder = _recorder(store)
    store.close()
    with pytest.raises(StorageError):
        recorder.record("-50 Pizza", "Ana")


def test_delete_last(store):
    recorder = _recorder(store)
    assert recorder.delete_last() is None

    recorder.record("+100 Salário", "Ana")
    recorder.record("-30 Uber c", "Ana")

    deleted = recorder.delete_last()
    assert deleted.entry.description == "Uber"
    assert deleted.balances.account == Decimal("100.00")
    assert deleted.balances.credit_bill == Decimal("0.00")

    deleted = recorder.delete_last()
    assert deleted.entry.category == SALARY_CATEGORY
    assert recorder.delete_last() is None

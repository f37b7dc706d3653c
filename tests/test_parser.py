from __future__ import annotations

from decimal import Decimal

import pytest

from finance_bot.models import PaymentMethod, TransactionKind
from finance_bot.parser import parse_message, scan_amount, split_payment_suffix


@pytest.mark.parametrize(
    ("text", "amount", "description", "method"),
    [
        ("+123.45 Bonus", "123.45", "Bonus", PaymentMethod.DEBIT),
        ("50 Lunch d", "-50.00", "Lunch", PaymentMethod.DEBIT),
        ("-89,90 Netflix c", "-89.90", "Netflix", PaymentMethod.CREDIT),
        ("-200 Restaurante credito", "-200.00", "Restaurante", PaymentMethod.CREDIT),
        ("-50 Pizza debito", "-50.00", "Pizza", PaymentMethod.DEBIT),
        ("-120.50 Gasolina posto centro", "-120.50", "Gasolina posto centro", PaymentMethod.DEBIT),
        ("  -10 Uber  ", "-10.00", "Uber", PaymentMethod.DEBIT),
        ("35 Cinema C", "-35.00", "Cinema", PaymentMethod.CREDIT),
    ],
)
def test_parse_message_grammar(text, amount, description, method):
    intent = parse_message(text)
    assert intent is not None
    assert intent.amount == Decimal(amount)
    assert intent.description == description
    assert intent.payment_method is method


def test_only_explicit_plus_is_income():
    assert parse_message("+3000 Salário").kind is TransactionKind.INCOME
    assert parse_message("3000 Salário").kind is TransactionKind.EXPENSE
    assert parse_message("-3000 Salário").kind is TransactionKind.EXPENSE


@pytest.mark.parametrize(
    "text",
    [
        "50",
        "120,50",
        "hello there",
        "Pizza 50",
        "",
        "   ",
        "+ 50 Pizza",
        "50. Pizza",
        "1.2.3 Pizza",
        "50abc Pizza",
        "--50 Pizza",
        ",50 Pizza",
    ],
)
def test_text_outside_grammar_is_ignored(text):
    assert parse_message(text) is None


def test_zero_amount_is_rejected():
    assert parse_message("0 Pizza") is None
    assert parse_message("+0,00 Nada") is None
    assert parse_message("0.004 Rounding") is None


def test_amount_beyond_ledger_precision_is_rejected():
    assert parse_message("99999999999 Yacht") is None
    assert parse_message("9999999999.99 Yacht").amount == Decimal("-9999999999.99")


def test_description_must_stay_on_one_line():
    assert parse_message("-50 Pizza\nfoo bar") is None
    assert parse_message("-50 Pizza d\r\nvaleu") is None
    assert parse_message("-50 Pizza\nfoo bar", payment_suffix=False) is None
    intent = parse_message("-50\nPizza d")
    assert intent is not None
    assert (intent.description, intent.payment_method) == ("Pizza", PaymentMethod.DEBIT)
    assert parse_message("-50 Pizza d\n").description == "Pizza"


def test_amount_is_rounded_to_cents():
    assert parse_message("12,345 Pão").amount == Decimal("-12.35")
    assert parse_message("+7.1 Troco").amount == Decimal("7.10")


def test_lone_payment_token_is_both_token_and_description():
    intent = parse_message("50 c")
    assert intent is not None
    assert intent.payment_method is PaymentMethod.CREDIT
    assert intent.description == "c"


def test_legacy_dialect_keeps_trailing_word_in_description():
    intent = parse_message("-89,90 Netflix c", payment_suffix=False)
    assert intent is not None
    assert intent.description == "Netflix c"
    assert intent.payment_method is PaymentMethod.DEBIT


def test_scan_amount_requires_trailing_whitespace():
    assert scan_amount("50") is None
    token = scan_amount("-89,90 Netflix")
    assert token is not None
    assert (token.sign, token.literal, token.end) == ("-", "89.90", 6)


def test_split_payment_suffix_only_strips_whole_words():
    assert split_payment_suffix(" Cafe ") == ("Cafe", None)
    assert split_payment_suffix("Disco") == ("Disco", None)
    assert split_payment_suffix("Feira livre d") == ("Feira livre", PaymentMethod.DEBIT)
    assert split_payment_suffix("Feira CREDITO") == ("Feira", PaymentMethod.CREDIT)

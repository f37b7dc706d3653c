"""Reply text for confirmations, monthly reports and delete-last.

Confirmations are plain text. Reports, delete notices and the help text use
Telegram's legacy Markdown, so any user-supplied text placed in them goes
through ``escape_markdown`` first.
"""

from __future__ import annotations

import calendar
from datetime import datetime
from decimal import Decimal

from telegram.helpers import escape_markdown

from .categories import icon_for
from .models import Balances, Confirmation, DeletedConfirmation, MonthlyReport, PaymentMethod

NOTHING_TO_DELETE_TEXT = "❌ There are no transactions to delete."
GENERIC_FAILURE_TEXT = "⚠️ Something went wrong while updating your ledger. Please try again."
CHART_CAPTION = "📊 Spending distribution"

_METHOD_LABELS: dict[PaymentMethod, tuple[str, str]] = {
    PaymentMethod.DEBIT: ("💸", "Debit"),
    PaymentMethod.CREDIT: ("💳", "Credit Card"),
}


def _money(value: Decimal, currency: str) -> str:
    return f"{value:.2f} {currency}"


def _md(text: str) -> str:
    return escape_markdown(text, version=1)


def month_title(month: int, year: int) -> str:
    return f"{calendar.month_name[month]} {year}"


def format_date(moment: datetime) -> str:
    """``19 October 2026, Monday``."""

    weekday = calendar.day_name[moment.weekday()]
    return f"{moment.day} {calendar.month_name[moment.month]} {moment.year}, {weekday}"


def chart_title(month: int, year: int) -> str:
    return f"Spending distribution - {month_title(month, year)}"


def format_empty_month(month: int, year: int) -> str:
    return f"📭 No transactions recorded in {month_title(month, year)}."


def _balance_lines(balances: Balances, currency: str, *, bold: bool) -> list[str]:
    wrap = (lambda s: f"*{s}*") if bold else (lambda s: s)
    if balances.credit_bill is None:
        return [wrap(f"💰 Balance: {_money(balances.account, currency)}")]
    return [
        wrap(f"💰 Account balance (debit): {_money(balances.account, currency)}"),
        wrap(f"💳 Credit card bill: {_money(balances.credit_bill, currency)}"),
    ]


def format_confirmation(confirmation: Confirmation, currency: str) -> str:
    """Plain-text acknowledgement for a freshly recorded transaction."""

    c = confirmation
    amount = _money(c.amount, currency)
    if c.entry.is_income:
        lines = [f"{c.user_display_name} received {amount} in {c.icon} {c.category}"]
    else:
        lines = [f"{c.user_display_name} spent {amount} on {c.icon} {c.category}"]
        if c.payment_method is not None:
            emoji, label = _METHOD_LABELS[c.payment_method]
            lines.append(f"{emoji} Payment: {label}")

    lines.append(format_date(c.occurred_at))
    lines.append("")
    lines.append(c.description)
    lines.append("")
    per_day = _money(c.daily_allowance, currency)
    if c.balances.credit_bill is None:
        lines.append(f"💰 Balance: {_money(c.balances.account, currency)} (~{per_day} per day)")
    else:
        lines.append(
            f"💰 Account balance: {_money(c.balances.account, currency)} (~{per_day} per day)"
        )
        lines.append(f"💳 Credit card bill: {_money(c.balances.credit_bill, currency)}")
    lines.append("Send /balanco to see detailed balance.")
    return "\n".join(lines)


def _category_section(title: str, totals: dict[str, Decimal], currency: str, sign: str) -> list[str]:
    lines = [title]
    for category, value in totals.items():
        lines.append(f"{icon_for(category)} *{_md(category)}:* {sign}{_money(value, currency)}")
    lines.append("")
    return lines


def format_monthly_report(report: MonthlyReport, currency: str) -> str:
    """Markdown monthly summary: income, spending and whole-ledger balances."""

    lines = [f"📊 *Balance for {month_title(report.month, report.year)}*", ""]

    if report.income_by_category:
        lines += _category_section("💚 *INCOME:*", report.income_by_category, currency, "")

    if report.tracks_payment_method:
        debit = report.expenses_by_method.get(PaymentMethod.DEBIT)
        credit = report.expenses_by_method.get(PaymentMethod.CREDIT)
        if debit:
            lines += _category_section("💸 *DEBIT SPENDING:*", debit, currency, "-")
        if credit:
            lines += _category_section("💳 *CREDIT SPENDING:*", credit, currency, "-")
    elif report.expense_by_category:
        lines += _category_section("💸 *EXPENSES:*", report.expense_by_category, currency, "-")

    lines += _balance_lines(report.balances, currency, bold=True)
    return "\n".join(lines)


def format_deleted(deleted: DeletedConfirmation, currency: str) -> str:
    entry = deleted.entry
    sign = "+" if entry.is_income else "-"
    lines = [
        "🗑️ *Transaction deleted!*",
        "",
        f"{icon_for(entry.category)} {_md(entry.category)}: {sign}{_money(abs(entry.amount), currency)}",
        f"📝 {_md(entry.description)}",
    ]
    if not entry.is_income and deleted.balances.credit_bill is not None:
        emoji, label = _METHOD_LABELS[entry.payment_method]
        lines.append(f"{emoji} {label}")
    lines.append("")
    lines += _balance_lines(deleted.balances, currency, bold=False)
    return "\n".join(lines)


def format_help(user_display_name: str | None, *, tracks_payment_method: bool = True) -> str:
    """Usage text for /start and /help."""

    greeting = f"Hi, {_md(user_display_name)}! 👋" if user_display_name else "Hi! 👋"
    lines = [
        greeting,
        "",
        "🤖 *I'm your personal finance assistant!*",
        "",
        "📝 *How to use:*",
        "",
    ]
    if tracks_payment_method:
        lines += [
            "💸 *Debit spending:*",
            "   • Send: `-50 Pizza d` or `-50 Pizza debito`",
            "   • Send: `-120.50 Gasolina d`",
            "",
            "💳 *Credit card spending:*",
            "   • Send: `-200 Restaurante c` or `-200 Restaurante credito`",
            "   • Send: `-89,90 Netflix c`",
            "",
        ]
    else:
        lines += [
            "💸 *Spending:*",
            "   • Send: `-50 Pizza` or just `50 Pizza`",
            "   • Send: `-120,50 Gasolina`",
            "",
        ]
    lines += [
        "💰 *Income:*",
        "   • Send: `+3000 Salário`",
        "   • Send: `+500 Freelance`",
        "",
        "ℹ️ *How it works:*",
        "   • Amounts without a sign are spending",
    ]
    if tracks_payment_method:
        lines += [
            "   • Debit spending comes out of your balance",
            "   • Credit spending shows in the report and the card bill, not in your balance",
            "   • Debit is the default when no method is given",
        ]
    lines += [
        "",
        "🔍 *Commands:*",
        "/balanco - monthly report with chart",
        "/delete - delete the last recorded transaction",
        "",
        "✨ Spending is categorized automatically!",
    ]
    return "\n".join(lines)


__all__ = [
    "CHART_CAPTION",
    "GENERIC_FAILURE_TEXT",
    "NOTHING_TO_DELETE_TEXT",
    "chart_title",
    "format_confirmation",
    "format_date",
    "format_deleted",
    "format_empty_month",
    "format_help",
    "format_monthly_report",
    "month_title",
]

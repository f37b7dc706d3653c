"""Chat message grammar for transaction entries.

A transaction message looks like::

    [+|-]<digits>[(.|,)<digits>] <description> [d|debito|c|credito]

The grammar is implemented as two small, separately testable steps instead of
one regular expression:

- :func:`scan_amount` walks the leading amount with a finite-state scanner and
  stops at the first whitespace after it.
- :func:`split_payment_suffix` peels an optional payment-method word off the
  end of the remaining text.

:func:`parse_message` combines both and applies the sign policy: only an
explicit ``+`` makes an amount income; no sign (or ``-``) means an expense.
A transaction is a single line, so a description that continues onto another
line is not one. Text that does not fit the grammar yields ``None``; chats
carry plenty of unrelated conversation, so that is never an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum, auto

from .models import CENT, PaymentMethod, TransactionIntent

PAYMENT_TOKENS: dict[str, PaymentMethod] = {
    "d": PaymentMethod.DEBIT,
    "debito": PaymentMethod.DEBIT,
    "c": PaymentMethod.CREDIT,
    "credito": PaymentMethod.CREDIT,
}

# Largest magnitude that fits the ledger's NUMERIC(12, 2) column.
MAX_AMOUNT = Decimal("9999999999.99")


class _State(Enum):
    START = auto()
    SIGN = auto()
    INTEGER = auto()
    SEPARATOR = auto()
    FRACTION = auto()


@dataclass(frozen=True, slots=True)
class AmountToken:
    """The leading amount of a message.

    ``literal`` uses ``.`` as the decimal separator regardless of the input;
    ``end`` is the index of the whitespace character that terminated it.
    """

    sign: str | None
    literal: str
    end: int


def _is_digit(ch: str) -> bool:
    # ASCII only; str.isdigit() would also accept superscripts and other scripts.
    return "0" <= ch <= "9"


def scan_amount(text: str) -> AmountToken | None:
    """Scan the amount at the start of ``text``.

    Returns ``None`` unless the amount is well formed and followed by at
    least one whitespace character.
    """

    state = _State.START
    sign: str | None = None
    chars: list[str] = []

    for i, ch in enumerate(text):
        if state is _State.START:
            if ch in "+-":
                sign = ch
                state = _State.SIGN
            elif _is_digit(ch):
                chars.append(ch)
                state = _State.INTEGER
            else:
                return None
        elif state is _State.SIGN:
            if not _is_digit(ch):
                return None
            chars.append(ch)
            state = _State.INTEGER
        elif state is _State.INTEGER:
            if _is_digit(ch):
                chars.append(ch)
            elif ch in ".,":
                chars.append(".")
                state = _State.SEPARATOR
            elif ch.isspace():
                return AmountToken(sign=sign, literal="".join(chars), end=i)
            else:
                return None
        elif state is _State.SEPARATOR:
            if not _is_digit(ch):
                return None
            chars.append(ch)
            state = _State.FRACTION
        elif state is _State.FRACTION:
            if _is_digit(ch):
                chars.append(ch)
            elif ch.isspace():
                return AmountToken(sign=sign, literal="".join(chars), end=i)
            else:
                return None

    # Ran out of input: an amount with no description is not a transaction.
    return None


def split_payment_suffix(region: str) -> tuple[str, PaymentMethod | None]:
    """Split ``region`` into ``(description, payment_method)``.

    A final standalone ``d``/``debito``/``c``/``credito`` word (any case) is
    always read as the payment-method token. When that word is the only one,
    the token still wins and its text doubles as the description, so
    ``"c"`` becomes ``("c", CREDIT)`` rather than an empty description.
    """

    region = region.strip()
    words = region.split()
    if not words:
        return "", None
    last = words[-1]
    method = PAYMENT_TOKENS.get(last.casefold())
    if method is None:
        return region, None
    head = region[: len(region) - len(last)].strip()
    return (head or last), method


def _to_amount(token: AmountToken) -> Decimal:
    magnitude = Decimal(token.literal).quantize(CENT, rounding=ROUND_HALF_UP)
    return magnitude if token.sign == "+" else -magnitude


def parse_message(text: str, *, payment_suffix: bool = True) -> TransactionIntent | None:
    """Parse a chat message into a :class:`TransactionIntent`.

    Parameters
    ----------
    text:
        Raw message text. Surrounding whitespace is ignored.
    payment_suffix:
        When ``False`` (legacy dialect) the whole remainder is the description
        and the payment method is always debit.

    Returns ``None`` for text outside the grammar, for a description that runs
    over more than one line, for zero amounts and for amounts too large for
    the ledger.
    """

    stripped = text.strip()
    token = scan_amount(stripped)
    if token is None:
        return None

    amount = _to_amount(token)
    if amount == 0 or abs(amount) > MAX_AMOUNT:
        return None

    region = stripped[token.end :]
    if len(region.strip().splitlines()) > 1:
        return None
    if payment_suffix:
        description, method = split_payment_suffix(region)
    else:
        description, method = region.strip(), None
    if not description:
        return None

    return TransactionIntent(
        amount=amount,
        description=description,
        payment_method=method or PaymentMethod.DEBIT,
    )


__all__ = [
    "AmountToken",
    "MAX_AMOUNT",
    "PAYMENT_TOKENS",
    "parse_message",
    "scan_amount",
    "split_payment_suffix",
]

"""Transaction recording and delete-last.

:class:`TransactionRecorder` turns one chat message into at most one ledger
row: parse, pick a category, insert, then re-read the balances from the
ledger so the reply reflects durable state.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from .balance import BalancePolicy, daily_allowance
from .categories import icon_for
from .categorize import Categorizer, categorize_intent
from .logging_setup import get_logger
from .models import Confirmation, DeletedConfirmation
from .parser import parse_message
from .persistence import LedgerStore

_logger = get_logger("finance_bot.recorder")


class TransactionRecorder:
    """Record chat messages into the ledger.

    Parameters
    ----------
    store:
        Ledger store; the only place state is kept.
    categorizer:
        Expense categorizer. Its failures never reach the caller.
    policy:
        Balance policy. Also selects the message dialect: the payment-method
        suffix is only recognized when the policy tracks payment methods.
    clock:
        Source of the server timestamp for new rows and of "today" for the
        daily allowance.
    """

    def __init__(
        self,
        store: LedgerStore,
        categorizer: Categorizer,
        policy: BalancePolicy,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._categorizer = categorizer
        self._policy = policy
        self._clock = clock

    @property
    def policy(self) -> BalancePolicy:
        return self._policy

    def record(self, raw_text: str, user_display_name: str) -> Confirmation | None:
        """Record ``raw_text`` if it is a transaction message.

        Returns ``None`` (and touches nothing) when the text is not a
        transaction. Storage failures propagate as
        :class:`~finance_bot.persistence.StorageError`.
        """

        intent = parse_message(raw_text, payment_suffix=self._policy.tracks_payment_method)
        if intent is None:
            return None

        category = categorize_intent(intent, self._categorizer)
        now = self._clock()
        entry = self._store.insert(
            description=intent.description,
            category=category,
            amount=intent.amount,
            payment_method=intent.payment_method,
            occurred_at=now,
        )
        _logger.info(
            "recorded transaction id=%s kind=%s category=%s method=%s",
            entry.id,
            entry.kind,
            entry.category,
            entry.payment_method,
        )

        balances = self._policy.balances(self._store)
        show_method = self._policy.tracks_payment_method and not entry.is_income
        return Confirmation(
            user_display_name=user_display_name,
            entry=entry,
            icon=icon_for(entry.category),
            balances=balances,
            daily_allowance=daily_allowance(balances.account, now.date()),
            payment_method=entry.payment_method if show_method else None,
        )

    def delete_last(self) -> DeletedConfirmation | None:
        """Delete the most recent transaction; ``None`` when the ledger is empty."""

        latest = self._store.query_latest()
        if latest is None:
            return None
        self._store.delete_by_id(latest.id)
        _logger.info("deleted transaction id=%s", latest.id)
        return DeletedConfirmation(entry=latest, balances=self._policy.balances(self._store))


__all__ = ["TransactionRecorder"]

# ruff: noqa: I001
"""Ledger store over the shared ``transactions`` table.

:class:`LedgerStore` is the only code that talks to the database. It receives
the process-scoped SQLAlchemy engine at construction, opens one short
transactional session per operation and exposes the fixed query contract the
rest of the package relies on:

- ``insert`` one transaction (id and timestamp are assigned here)
- ``query_by_month`` / ``query_latest`` for reads
- ``delete_by_id`` for delete-last
- ``sum`` over the whole ledger with one of the :class:`BalanceFilter` filters
- ``close`` to drain the pool on shutdown

Database failures surface as :class:`StorageError`; nothing here retries or
swallows them.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import StrEnum
from typing import Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_db.client import make_session_factory, session_scope
from ledger_db.models.ledger import LedgerTransaction
from .models import CENT, ZERO, LedgerEntry, PaymentMethod, TransactionKind


class StorageError(RuntimeError):
    """A ledger read or write failed."""


class BalanceFilter(StrEnum):
    ALL = "all"
    # Spendable balance: debit spending plus all income.
    DEBIT_OR_INCOME = "debit_or_income"
    CREDIT = "credit"


def _to_decimal_2(raw: Any) -> Decimal:
    if raw is None:
        return ZERO
    try:
        d = Decimal(str(raw))
    except (InvalidOperation, ValueError) as e:
        raise StorageError(f"ledger returned a non-numeric amount: {raw!r}") from e
    return d.quantize(CENT, rounding=ROUND_HALF_UP)


def month_window(month: int, year: int) -> tuple[datetime, datetime]:
    """Return the half-open ``[start, end)`` datetime range of a calendar month."""

    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


def _to_entry(row: LedgerTransaction) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,
        occurred_at=row.occurred_at,
        description=row.description,
        category=row.category,
        amount=_to_decimal_2(row.amount),
        kind=TransactionKind(row.kind),
        payment_method=PaymentMethod(row.payment_method),
    )


class LedgerStore:
    """SQLAlchemy-backed ledger store bound to one engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._sessions = make_session_factory(engine)
        self._closed = False

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        if self._closed:
            raise StorageError(f"ledger {operation} failed: store is closed")
        try:
            with session_scope(self._sessions) as session:
                yield session
        except SQLAlchemyError as e:
            raise StorageError(f"ledger {operation} failed: {e}") from e

    def insert(
        self,
        *,
        description: str,
        category: str,
        amount: Decimal,
        payment_method: PaymentMethod = PaymentMethod.DEBIT,
        occurred_at: datetime | None = None,
    ) -> LedgerEntry:
        """Insert one transaction and return it with its assigned id.

        Income is always stored as debit; card income is not a thing in this
        ledger and tagging it credit would count it in both balance filters.
        """

        amount = _to_decimal_2(amount)
        if amount == 0:
            raise ValueError("transaction amount must be non-zero")
        description = description.strip()
        if not description:
            raise ValueError("transaction description must be non-empty")
        if not category:
            raise ValueError("transaction category must be non-empty")

        kind = TransactionKind.for_amount(amount)
        if kind is TransactionKind.INCOME:
            payment_method = PaymentMethod.DEBIT

        row = LedgerTransaction(
            occurred_at=occurred_at or datetime.now(),
            description=description,
            category=category,
            amount=amount,
            kind=kind.value,
            payment_method=PaymentMethod(payment_method).value,
        )
        with self._session("insert") as session:
            session.add(row)
            session.flush()
            entry = _to_entry(row)
        return entry

    def query_by_month(self, month: int, year: int) -> list[LedgerEntry]:
        """Return the month's transactions, most recent first."""

        start, end = month_window(month, year)
        stmt = (
            select(LedgerTransaction)
            .where(LedgerTransaction.occurred_at >= start, LedgerTransaction.occurred_at < end)
            .order_by(LedgerTransaction.occurred_at.desc(), LedgerTransaction.id.desc())
        )
        with self._session("query_by_month") as session:
            rows = session.scalars(stmt).all()
            return [_to_entry(r) for r in rows]

    def query_latest(self) -> LedgerEntry | None:
        """Return the most recently inserted transaction (highest id), if any."""

        stmt = select(LedgerTransaction).order_by(LedgerTransaction.id.desc()).limit(1)
        with self._session("query_latest") as session:
            row = session.scalars(stmt).first()
            return _to_entry(row) if row is not None else None

    def delete_by_id(self, entry_id: int) -> bool:
        """Hard-delete one transaction. Returns whether a row was removed."""

        stmt = delete(LedgerTransaction).where(LedgerTransaction.id == entry_id)
        with self._session("delete") as session:
            result = session.execute(stmt)
            return bool(result.rowcount)

    def sum(self, balance_filter: BalanceFilter = BalanceFilter.ALL) -> Decimal:
        """Sum signed amounts over the entire ledger under ``balance_filter``."""

        balance_filter = BalanceFilter(balance_filter)
        stmt = select(func.coalesce(func.sum(LedgerTransaction.amount), 0))
        if balance_filter is BalanceFilter.DEBIT_OR_INCOME:
            stmt = stmt.where(
                or_(
                    LedgerTransaction.payment_method == PaymentMethod.DEBIT.value,
                    LedgerTransaction.kind == TransactionKind.INCOME.value,
                )
            )
        elif balance_filter is BalanceFilter.CREDIT:
            stmt = stmt.where(LedgerTransaction.payment_method == PaymentMethod.CREDIT.value)
        with self._session("sum") as session:
            return _to_decimal_2(session.execute(stmt).scalar_one())

    def close(self) -> None:
        """Dispose of the engine's connection pool. Safe to call repeatedly."""

        if self._closed:
            return
        self._closed = True
        self._engine.dispose()


__all__ = [
    "BalanceFilter",
    "LedgerStore",
    "StorageError",
    "month_window",
]

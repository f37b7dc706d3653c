from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Core: transactions
# ---------------------------


class LedgerTransaction(Base):
    __tablename__ = "transactions"

    # SQLite needs a plain INTEGER primary key for rowid aliasing; together with
    # sqlite_autoincrement below this keeps ids from being reused after deletes.
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    # Server-local wall clock at insert time. Month windows are computed on
    # this value, so it is stored naive.
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # Redundant with the sign of ``amount``; kept for query convenience and
    # guarded by ck_transactions_kind_sign.
    kind: Mapped[str] = mapped_column(String, nullable=False)
    payment_method: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'debit'")
    )

    __table_args__ = (
        CheckConstraint("amount <> 0", name="ck_transactions_amount_nonzero"),
        CheckConstraint("kind in ('income','expense')", name="ck_transactions_kind"),
        CheckConstraint(
            "(kind = 'income' AND amount > 0) OR (kind = 'expense' AND amount < 0)",
            name="ck_transactions_kind_sign",
        ),
        CheckConstraint(
            "payment_method in ('debit','credit')", name="ck_transactions_payment_method"
        ),
        CheckConstraint("length(description) > 0", name="ck_transactions_description"),
        CheckConstraint("length(category) > 0", name="ck_transactions_category"),
        Index("ix_transactions_occurred_at", "occurred_at"),
        {"sqlite_autoincrement": True},
    )


__all__ = [
    "Base",
    "LedgerTransaction",
]

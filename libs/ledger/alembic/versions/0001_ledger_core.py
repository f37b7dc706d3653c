# ruff: noqa: I001
"""Ledger core table.

Revision ID: 0001_ledger_core
Revises: None
Create Date: 2025-10-02
"""

from __future__ import annotations  # ruff: noqa: I001

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_ledger_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "transactions",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        sa.Column("occurred_at", sa.DateTime(timezone=False), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("kind", sa.String(), nullable=False),
        sa.CheckConstraint("amount <> 0", name="ck_transactions_amount_nonzero"),
        sa.CheckConstraint("kind in ('income','expense')", name="ck_transactions_kind"),
        sa.CheckConstraint(
            "(kind = 'income' AND amount > 0) OR (kind = 'expense' AND amount < 0)",
            name="ck_transactions_kind_sign",
        ),
        sa.CheckConstraint("length(description) > 0", name="ck_transactions_description"),
        sa.CheckConstraint("length(category) > 0", name="ck_transactions_category"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_transactions_occurred_at", "transactions", ["occurred_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_transactions_occurred_at", table_name="transactions")
    op.drop_table("transactions")

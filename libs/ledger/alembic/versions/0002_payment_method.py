# ruff: noqa: I001
"""Add payment_method to transactions (debit/credit split).

Existing rows predate card tracking and are backfilled as ``debit`` through
the server default.

Revision ID: 0002_payment_method
Revises: 0001_ledger_core
Create Date: 2025-10-20
"""

from __future__ import annotations  # ruff: noqa: I001

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0002_payment_method"
down_revision: str | None = "0001_ledger_core"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # batch mode lets SQLite rebuild the table to attach the CHECK constraint;
    # the rebuilt table must keep AUTOINCREMENT so ids stay unique over time
    with op.batch_alter_table(
        "transactions", table_kwargs={"sqlite_autoincrement": True}
    ) as batch:
        batch.add_column(
            sa.Column(
                "payment_method",
                sa.String(),
                nullable=False,
                server_default=sa.text("'debit'"),
            )
        )
        batch.create_check_constraint(
            "ck_transactions_payment_method",
            sa.text("payment_method in ('debit','credit')"),
        )


def downgrade() -> None:
    with op.batch_alter_table(
        "transactions", table_kwargs={"sqlite_autoincrement": True}
    ) as batch:
        batch.drop_constraint("ck_transactions_payment_method", type_="check")
        batch.drop_column("payment_method")

"""DB helpers for tests: bootstrap a temporary SQLite ledger."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from ledger_db.client import create_ledger_engine, create_schema
from ledger_db.models.ledger import LedgerTransaction
from sqlalchemy import text as sql_text

from finance_bot.models import PaymentMethod
from finance_bot.persistence import LedgerStore


def bootstrap_sqlite_db(db_file: Path) -> str:
    """Create a SQLite database file, initialize the schema, and return the URL.

    Using a file-backed SQLite DB ensures multiple SQLAlchemy connections share
    the same state (in-memory DBs are per-connection by default).
    """

    url = f"sqlite+pysqlite:///{db_file}"
    db_file.parent.mkdir(parents=True, exist_ok=True)
    engine = create_ledger_engine(database_url=url)
    try:
        create_schema(engine)
        _assert_transactions_schema_in_sync(engine)
    finally:
        engine.dispose()
    return url


def open_store(db_file: Path) -> LedgerStore:
    url = bootstrap_sqlite_db(db_file)
    return LedgerStore(create_ledger_engine(database_url=url))


def seed(
    store: LedgerStore,
    rows: list[tuple[str, str, str, str] | tuple[str, str, str, str, PaymentMethod]],
) -> None:
    """Insert ``(iso_timestamp, amount, description, category[, method])`` rows."""

    for row in rows:
        when, amount, description, category, *rest = row
        store.insert(
            description=description,
            category=category,
            amount=Decimal(amount),
            payment_method=rest[0] if rest else PaymentMethod.DEBIT,
            occurred_at=datetime.fromisoformat(when),
        )


def _assert_transactions_schema_in_sync(engine) -> None:
    """Quick sanity check: ORM column set matches the SQLite table column set."""

    expected = {c.name for c in LedgerTransaction.__table__.columns}
    with engine.connect() as conn:
        rows = conn.execute(sql_text("PRAGMA table_info('transactions')")).fetchall()
    got = {row[1] for row in rows}  # (cid, name, type, notnull, dflt_value, pk)
    missing = expected - got
    extra = got - expected
    assert not missing and not extra, (
        f"transactions schema drift: missing={missing or '∅'}, extra={extra or '∅'}"
    )

"""Shared SQLAlchemy models registry for the ledger database.

Currently holds the single ``transactions`` table used by ``finance_bot``.
"""

from .ledger import Base, LedgerTransaction

__all__ = [
    "Base",
    "LedgerTransaction",
]

"""Public interface for the ``finance_bot`` package.

Symbol re-exports only. The chat transport (``finance_bot.bot``) and the CLI
(``finance_bot.cli``) are imported from their own modules.
"""

from .aggregate import BalanceAggregator
from .balance import (
    BalancePolicy,
    PaymentMethodBalancePolicy,
    SimpleBalancePolicy,
    daily_allowance,
    policy_from_name,
)
from .categorize import Categorizer, KeywordCategorizer, OpenAICategorizer
from .models import (
    Balances,
    Confirmation,
    DeletedConfirmation,
    LedgerEntry,
    MonthlyReport,
    PaymentMethod,
    TransactionIntent,
    TransactionKind,
)
from .parser import parse_message
from .persistence import BalanceFilter, LedgerStore, StorageError
from .recorder import TransactionRecorder

__all__ = [
    # Core
    "parse_message",
    "TransactionRecorder",
    "BalanceAggregator",
    "LedgerStore",
    "BalanceFilter",
    "StorageError",
    # Policies
    "BalancePolicy",
    "SimpleBalancePolicy",
    "PaymentMethodBalancePolicy",
    "policy_from_name",
    "daily_allowance",
    # Categorization
    "Categorizer",
    "OpenAICategorizer",
    "KeywordCategorizer",
    # Models / types
    "Balances",
    "Confirmation",
    "DeletedConfirmation",
    "LedgerEntry",
    "MonthlyReport",
    "PaymentMethod",
    "TransactionIntent",
    "TransactionKind",
]

"""Process wiring: build the engine, store and services from :class:`Settings`.

Both entry points (the chat bot and the CLI) go through :func:`build_services`
so they share one construction path and one shutdown path.
"""

from __future__ import annotations

from dataclasses import dataclass

from ledger_db.client import create_ledger_engine

from .aggregate import BalanceAggregator
from .balance import policy_from_name
from .categorize import Categorizer, KeywordCategorizer, OpenAICategorizer
from .charts import ChartRenderer, MatplotlibChartRenderer
from .config import Settings
from .logging_setup import get_logger
from .persistence import LedgerStore
from .recorder import TransactionRecorder

_logger = get_logger("finance_bot.runtime")


@dataclass(slots=True)
class Services:
    settings: Settings
    store: LedgerStore
    recorder: TransactionRecorder
    aggregator: BalanceAggregator
    renderer: ChartRenderer

    def close(self) -> None:
        self.store.close()


def build_categorizer(settings: Settings) -> Categorizer:
    """LLM categorizer when credentials are configured, keyword matcher otherwise."""

    if not settings.llm_enabled:
        _logger.warning("no LLM API key configured; using keyword categorization")
        return KeywordCategorizer()
    return OpenAICategorizer(
        model=settings.llm_model,
        structured_output=settings.llm_structured_output,
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        timeout=settings.llm_timeout_secs,
        max_retries=settings.llm_max_retries,
    )


def build_services(
    settings: Settings,
    *,
    store: LedgerStore | None = None,
    categorizer: Categorizer | None = None,
    renderer: ChartRenderer | None = None,
) -> Services:
    if store is None:
        engine = create_ledger_engine(database_url=settings.require_database_url())
        store = LedgerStore(engine)
    policy = policy_from_name(settings.balance_policy)
    recorder = TransactionRecorder(store, categorizer or build_categorizer(settings), policy)
    return Services(
        settings=settings,
        store=store,
        recorder=recorder,
        aggregator=BalanceAggregator(store, policy),
        renderer=renderer or MatplotlibChartRenderer(),
    )


__all__ = ["Services", "build_categorizer", "build_services"]

from __future__ import annotations

from finance_bot.balance import PaymentMethodBalancePolicy, SimpleBalancePolicy
from finance_bot.categorize import KeywordCategorizer, OpenAICategorizer
from finance_bot.charts import MatplotlibChartRenderer
from finance_bot.config import Settings
from finance_bot.runtime import build_categorizer, build_services
from tests.helpers.db import bootstrap_sqlite_db


def test_keyword_categorizer_without_credentials():
    assert isinstance(build_categorizer(Settings()), KeywordCategorizer)


def test_llm_categorizer_with_credentials():
    categorizer = build_categorizer(Settings(llm_api_key="gsk-test", llm_model="llama"))
    assert isinstance(categorizer, OpenAICategorizer)


def test_build_services_wires_policy_and_store(tmp_path):
    url = bootstrap_sqlite_db(tmp_path / "ledger.sqlite")
    services = build_services(Settings(database_url=url, balance_policy="simple"))
    try:
        assert isinstance(services.recorder.policy, SimpleBalancePolicy)
        assert isinstance(services.renderer, MatplotlibChartRenderer)
        assert services.store.query_latest() is None
    finally:
        services.close()

    services = build_services(Settings(database_url=url))
    try:
        assert isinstance(services.recorder.policy, PaymentMethodBalancePolicy)
    finally:
        services.close()

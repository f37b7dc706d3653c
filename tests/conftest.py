"""Pytest configuration for test isolation.

Settings are cached process-wide by ``finance_bot.config.get_settings`` and
read from the environment, and the CLI loads a ``.env`` from the working
directory. To keep tests hermetic, every test starts with the cache cleared,
the relevant variables removed and the working directory set to its own
temporary directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from finance_bot.config import get_settings

_ENV_VARS = (
    "DATABASE_URL",
    "BOT_TOKEN",
    "GROQ_API_KEY",
    "OPENAI_API_KEY",
    "FINANCE_BOT_LLM_BASE_URL",
    "FINANCE_BOT_LLM_MODEL",
    "FINANCE_BOT_LLM_TIMEOUT_SECS",
    "FINANCE_BOT_LLM_MAX_RETRIES",
    "FINANCE_BOT_LLM_STRUCTURED",
    "FINANCE_BOT_BALANCE_POLICY",
    "FINANCE_BOT_CURRENCY",
    "FINANCE_BOT_LOG_LEVEL",
    "WEBHOOK_URL",
    "PORT",
)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

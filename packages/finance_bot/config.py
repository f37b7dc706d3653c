"""Runtime configuration read from the environment.

Entry points load a local ``.env`` (python-dotenv, never overriding variables
that are already set) before the first :func:`get_settings` call; the result is
cached for the life of the process.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
GROQ_DEFAULT_MODEL = "llama-3.3-70b-versatile"
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    database_url: str | None = None
    bot_token: str | None = None

    llm_api_key: str | None = None
    llm_base_url: str | None = None
    llm_model: str = OPENAI_DEFAULT_MODEL
    llm_timeout_secs: float = 20.0
    llm_max_retries: int = 2
    llm_structured_output: bool = False

    balance_policy: Literal["simple", "payment_method"] = "payment_method"
    currency: str = "BRL"

    webhook_url: str | None = None
    port: int = 8080

    @field_validator("balance_policy", mode="before")
    @classmethod
    def _lower_policy(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("webhook_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str | None) -> str | None:
        return v.rstrip("/") if v else None

    @property
    def llm_enabled(self) -> bool:
        return bool(self.llm_api_key)

    def require_database_url(self) -> str:
        if not self.database_url:
            raise RuntimeError("DATABASE_URL is not set; cannot open the ledger")
        return self.database_url

    def require_bot_token(self) -> str:
        if not self.bot_token:
            raise RuntimeError("BOT_TOKEN is not set; cannot start the chat bot")
        return self.bot_token


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def settings_from_env() -> Settings:
    """Build :class:`Settings` from the current environment (uncached).

    Raises ``ValueError`` (pydantic ``ValidationError``) for malformed values
    such as an unknown balance policy or a non-numeric port.
    """

    groq_key = _env("GROQ_API_KEY")
    api_key = groq_key or _env("OPENAI_API_KEY")
    base_url = _env("FINANCE_BOT_LLM_BASE_URL") or (GROQ_BASE_URL if groq_key else None)
    default_model = GROQ_DEFAULT_MODEL if groq_key else OPENAI_DEFAULT_MODEL

    values: dict[str, object] = {
        "database_url": _env("DATABASE_URL"),
        "bot_token": _env("BOT_TOKEN"),
        "llm_api_key": api_key,
        "llm_base_url": base_url,
        "llm_model": _env("FINANCE_BOT_LLM_MODEL") or default_model,
        "llm_structured_output": (_env("FINANCE_BOT_LLM_STRUCTURED") or "0").lower() in _TRUTHY,
        "webhook_url": _env("WEBHOOK_URL"),
    }
    optional = {
        "llm_timeout_secs": "FINANCE_BOT_LLM_TIMEOUT_SECS",
        "llm_max_retries": "FINANCE_BOT_LLM_MAX_RETRIES",
        "balance_policy": "FINANCE_BOT_BALANCE_POLICY",
        "currency": "FINANCE_BOT_CURRENCY",
        "port": "PORT",
    }
    for field, env_name in optional.items():
        raw = _env(env_name)
        if raw is not None:
            values[field] = raw
    return Settings.model_validate(values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return settings_from_env()


__all__ = [
    "GROQ_BASE_URL",
    "Settings",
    "get_settings",
    "settings_from_env",
]

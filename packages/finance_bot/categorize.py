"""Expense categorization behind a narrow ``classify(text, taxonomy)`` interface.

Public API:
    - :class:`Categorizer` (protocol) with two implementations,
      :class:`OpenAICategorizer` and :class:`KeywordCategorizer`
    - :func:`classify_expense` / :func:`categorize_intent`, the failure-proof
      entry points used by the recorder

Categorizers may raise on any failure. The entry points never do: every
error, timeout or unrecognized label becomes ``FALLBACK_CATEGORY`` so that a
flaky model can never block persisting a transaction.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from openai import OpenAI

from . import prompting
from .categories import (
    FALLBACK_CATEGORY,
    SALARY_CATEGORY,
    TAXONOMY,
    match_category,
    normalize_label,
)
from .logging_setup import get_logger
from .models import TransactionIntent

_logger = get_logger("finance_bot.categorize")


class ClassificationError(ValueError):
    """The categorizer produced no usable taxonomy label."""


class Categorizer(Protocol):
    def classify(self, text: str, taxonomy: Sequence[str]) -> str:
        """Return exactly one member of ``taxonomy`` or raise."""
        ...


# ---- Response parsing ---------------------------------------------------------


def _extract_response_text(resp: Any) -> str:
    """Locate the text output on an OpenAI Responses SDK result.

    Prefer ``resp.output_text``; fall back to ``resp.output[0].content[0].text``
    (some SDK versions expose that as an object with a ``value`` string).
    """

    text: str | None = getattr(resp, "output_text", None)
    if not text:
        try:
            first = resp.output[0] if getattr(resp, "output", None) else None
            content = getattr(first, "content", None)
            if content and len(content) > 0:
                txt_obj = getattr(content[0], "text", None)
                if isinstance(txt_obj, str):
                    text = txt_obj
                else:
                    maybe_val = getattr(txt_obj, "value", None)
                    if isinstance(maybe_val, str):
                        text = maybe_val
        except (AttributeError, IndexError, TypeError):
            text = None
    if not text or not isinstance(text, str):
        raise ClassificationError("Unexpected Responses API shape; unable to locate text output")
    return text


def parse_category_output(text: str, taxonomy: Sequence[str]) -> str:
    """Map raw model output onto a taxonomy label.

    Accepts a bare label (``"Lazer"``, ``"lazer."``) or the structured-output
    JSON object ``{"category": "Lazer"}``. Raises :class:`ClassificationError`
    for empty or unrecognized output.
    """

    raw = text.strip()
    if raw.startswith("{"):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ClassificationError(f"Model output was not valid JSON: {raw!r}") from e
        if not isinstance(decoded, Mapping) or not isinstance(decoded.get("category"), str):
            raise ClassificationError(f"Model output is missing 'category': {raw!r}")
        raw = decoded["category"]

    label = match_category(raw, taxonomy)
    if label is None:
        raise ClassificationError(f"Model output is not a known category: {raw!r}")
    return label


# ---- Implementations ----------------------------------------------------------


class OpenAICategorizer:
    """Categorizer backed by an OpenAI-compatible Responses endpoint.

    Parameters
    ----------
    model:
        Model name understood by the endpoint.
    client:
        Preconfigured ``openai.OpenAI`` client. When omitted, one is created
        from ``client_options`` (``api_key``, ``base_url``, ``timeout``,
        ``max_retries``) on first use. Retries and timeouts are left to the SDK.
    structured_output:
        Request the strict JSON-schema output format. Only enable this for
        backends that support structured outputs.
    """

    def __init__(
        self,
        *,
        model: str,
        client: OpenAI | None = None,
        structured_output: bool = False,
        **client_options: Any,
    ) -> None:
        self._model = model
        self._client = client
        self._client_options = client_options
        self._structured_output = structured_output

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(**self._client_options)
        return self._client

    def classify(self, text: str, taxonomy: Sequence[str]) -> str:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "instructions": prompting.build_system_instructions(taxonomy),
            "input": text,
            "temperature": 0,
        }
        if self._structured_output:
            kwargs["text"] = {"format": prompting.build_response_format(taxonomy)}

        resp = self._get_client().responses.create(**kwargs)
        return parse_category_output(_extract_response_text(resp), taxonomy)


# Lower-case, accent-free stems; the first hit wins.
DEFAULT_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("mercado", "Supermercado"),
    ("feira", "Supermercado"),
    ("pizza", "Alimentação"),
    ("restaurante", "Alimentação"),
    ("lanche", "Alimentação"),
    ("ifood", "Alimentação"),
    ("almoco", "Alimentação"),
    ("jantar", "Alimentação"),
    ("cafe", "Alimentação"),
    ("uber", "Transporte"),
    ("gasolina", "Transporte"),
    ("onibus", "Transporte"),
    ("metro", "Transporte"),
    ("estacionamento", "Transporte"),
    ("netflix", "Lazer"),
    ("spotify", "Lazer"),
    ("cinema", "Lazer"),
    ("show", "Lazer"),
    ("farmacia", "Saúde"),
    ("remedio", "Saúde"),
    ("consulta", "Saúde"),
    ("academia", "Saúde"),
    ("curso", "Educação"),
    ("livro", "Educação"),
    ("faculdade", "Educação"),
    ("aluguel", "Contas"),
    ("internet", "Contas"),
    ("luz", "Contas"),
    ("agua", "Contas"),
    ("celular", "Contas"),
    ("roupa", "Roupas/Beleza"),
    ("cabelo", "Roupas/Beleza"),
    ("salao", "Roupas/Beleza"),
    ("tesouro", "Investimentos"),
    ("acoes", "Investimentos"),
    ("cdb", "Investimentos"),
)


class KeywordCategorizer:
    """Deterministic substring matcher; used offline and in tests."""

    def __init__(self, keywords: Sequence[tuple[str, str]] = DEFAULT_KEYWORDS) -> None:
        self._keywords = tuple(keywords)

    def classify(self, text: str, taxonomy: Sequence[str]) -> str:
        haystack = normalize_label(text)
        for stem, category in self._keywords:
            if stem in haystack and category in taxonomy:
                return category
        raise ClassificationError(f"No keyword matched {text!r}")


# ---- Failure-proof entry points ---------------------------------------------


def classify_expense(
    categorizer: Categorizer,
    description: str,
    taxonomy: Sequence[str] = TAXONOMY,
) -> str:
    """Classify an expense description, falling back to ``FALLBACK_CATEGORY``."""

    try:
        label = categorizer.classify(description, taxonomy)
    except Exception as e:  # noqa: BLE001 - any categorizer failure maps to the fallback
        _logger.warning(
            "classification failed for %r, using %s: %s", description, FALLBACK_CATEGORY, e
        )
        return FALLBACK_CATEGORY

    canonical = match_category(label, taxonomy) if isinstance(label, str) else None
    if canonical is None:
        _logger.warning(
            "categorizer returned %r outside the taxonomy, using %s", label, FALLBACK_CATEGORY
        )
        return FALLBACK_CATEGORY
    return canonical


def categorize_intent(intent: TransactionIntent, categorizer: Categorizer) -> str:
    """Return the category for a parsed message.

    Income is never sent to the categorizer; it is always ``SALARY_CATEGORY``.
    """

    if intent.is_income:
        return SALARY_CATEGORY
    return classify_expense(categorizer, intent.description)


__all__ = [
    "Categorizer",
    "ClassificationError",
    "DEFAULT_KEYWORDS",
    "KeywordCategorizer",
    "OpenAICategorizer",
    "categorize_intent",
    "classify_expense",
    "parse_category_output",
]

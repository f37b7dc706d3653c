"""Category taxonomy, icons and label matching.

The taxonomy is closed: every persisted transaction carries one of these
labels. Income never goes through classification and is always filed under
``SALARY_CATEGORY``; anything the classifier cannot place ends up in
``FALLBACK_CATEGORY``.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Sequence

SALARY_CATEGORY = "Salário"
FALLBACK_CATEGORY = "Outros"

TAXONOMY: tuple[str, ...] = (
    "Alimentação",
    "Supermercado",
    "Transporte",
    "Lazer",
    "Saúde",
    "Educação",
    "Contas",
    "Roupas/Beleza",
    SALARY_CATEGORY,
    "Investimentos",
    FALLBACK_CATEGORY,
)

CATEGORY_ICONS: dict[str, str] = {
    "Alimentação": "🍔",
    "Supermercado": "🛒",
    "Transporte": "🚗",
    "Lazer": "🎮",
    "Saúde": "💊",
    "Educação": "📚",
    "Contas": "📄",
    "Roupas/Beleza": "✂️",
    SALARY_CATEGORY: "💰",
    "Investimentos": "📈",
    FALLBACK_CATEGORY: "📦",
}

_DEFAULT_ICON = CATEGORY_ICONS[FALLBACK_CATEGORY]

# Characters models like to wrap a bare label in.
_STRIP_CHARS = " \t\r\n\"'`*.:;!"


def icon_for(category: str) -> str:
    """Return the emoji for ``category``; unknown labels get the fallback icon."""

    return CATEGORY_ICONS.get(category, _DEFAULT_ICON)


def normalize_label(label: str) -> str:
    """Return a comparison key: accents removed, case folded, spaces collapsed.

    ``"  saude. "`` and ``"Saúde"`` normalize to the same key.
    """

    s = label.strip(_STRIP_CHARS)
    decomposed = unicodedata.normalize("NFKD", s)
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(without_marks.casefold().split())


def match_category(label: str, taxonomy: Sequence[str] = TAXONOMY) -> str | None:
    """Map a free-form label onto the canonical taxonomy member, if any."""

    key = normalize_label(label)
    if not key:
        return None
    for candidate in taxonomy:
        if normalize_label(candidate) == key:
            return candidate
    return None


__all__ = [
    "CATEGORY_ICONS",
    "FALLBACK_CATEGORY",
    "SALARY_CATEGORY",
    "TAXONOMY",
    "icon_for",
    "match_category",
    "normalize_label",
]

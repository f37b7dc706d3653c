"""Prompt construction for single-expense categorization.

This module builds:
- The system instructions listing the closed taxonomy.
- The optional strict ``response_format`` (JSON Schema) object for the OpenAI
  Responses API, for backends that support structured outputs.
"""

from __future__ import annotations

from collections.abc import Sequence

from openai.types.responses.response_format_text_json_schema_config_param import (
    ResponseFormatTextJSONSchemaConfigParam,
)


def _labels(taxonomy: Sequence[str]) -> list[str]:
    labels = [c for c in dict.fromkeys(str(entry).strip() for entry in taxonomy) if c]
    if not labels:
        raise ValueError("taxonomy must contain at least one non-blank label")
    return labels


def build_system_instructions(taxonomy: Sequence[str]) -> str:
    """Return system instructions asking for exactly one taxonomy label.

    The transaction description is sent as the user input on its own, so the
    instructions carry the whole contract: the allowed labels and the
    one-label-only answer format.
    """

    labels = ", ".join(_labels(taxonomy))
    return (
        "You classify personal expenses described in a short chat message "
        "(usually Brazilian Portuguese). "
        f"Classify the expense into exactly one of: [{labels}]. "
        "Never invent categories. Answer with ONLY the category name."
    )


def build_response_format(taxonomy: Sequence[str]) -> ResponseFormatTextJSONSchemaConfigParam:
    """Return the strict JSON Schema response_format object for ``taxonomy``.

    Schema shape::

        {
          "type": "json_schema",
          "name": "expense_category",
          "schema": {
            "type": "object",
            "properties": {"category": {"type": "string", "enum": [...]}},
            "required": ["category"],
            "additionalProperties": false
          },
          "strict": true
        }
    """

    result: ResponseFormatTextJSONSchemaConfigParam = {
        "type": "json_schema",
        "name": "expense_category",
        "schema": {
            "type": "object",
            "properties": {
                "category": {"type": "string", "enum": _labels(taxonomy)},
            },
            "required": ["category"],
            "additionalProperties": False,
        },
        "strict": True,
    }
    return result

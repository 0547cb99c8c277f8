"""Shared helpers for request mapping."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from pydantic import BaseModel

from openwire.errors import InvalidDescriptorError


def to_strict_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Normalize a JSON schema for strict structured-output requirements.

    Ensures that for all 'object' types:
    1. additionalProperties is False
    2. All defined properties are listed in 'required'
    """
    normalized = deepcopy(schema)

    def walk(node: Any) -> Any:
        if isinstance(node, list):
            return [walk(item) for item in node]
        if not isinstance(node, dict):
            return node

        updated: dict[str, Any] = {}
        for key, value in node.items():
            updated[key] = walk(value)

        if updated.get("type") == "object" or "properties" in updated:
            properties = updated.get("properties", {})
            if isinstance(properties, dict):
                updated["additionalProperties"] = False
                if "required" not in updated:
                    updated["required"] = list(properties.keys())

        return updated

    result = walk(normalized)
    if not isinstance(result, dict):
        raise InvalidDescriptorError(
            "Invalid text schema: expected object schema", field="text"
        )
    return result


def text_format_for_model(model: type[BaseModel]) -> dict[str, Any]:
    """Build the Responses ``text`` config requesting output shaped like *model*."""
    return {
        "format": {
            "type": "json_schema",
            "name": model.__name__,
            "schema": to_strict_schema(model.model_json_schema()),
            "strict": True,
        }
    }

"""Validation of decoded JSON values against a schema definition."""

from __future__ import annotations

import json
from typing import Any

from gptapi.schema.definition import DataType, Definition


class SchemaValidationError(ValueError):
    """Raised when data does not match a schema."""


def _is_number(data: Any) -> bool:
    return isinstance(data, (int, float)) and not isinstance(data, bool)


def validate(schema: Definition, data: Any) -> bool:
    """Return whether ``data`` matches ``schema``."""
    kind = DataType(schema.type) if schema.type else None
    if kind is DataType.OBJECT:
        return _validate_object(schema, data)
    if kind is DataType.ARRAY:
        return _validate_array(schema, data)
    if kind is DataType.STRING:
        return isinstance(data, str)
    if kind is DataType.NUMBER:
        return _is_number(data)
    if kind is DataType.BOOLEAN:
        return isinstance(data, bool)
    if kind is DataType.INTEGER:
        if isinstance(data, float):
            return data.is_integer()
        return isinstance(data, int) and not isinstance(data, bool)
    if kind is DataType.NULL:
        return data is None
    return False


def _validate_object(schema: Definition, data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    required = schema.required or []
    if any(name not in data for name in required):
        return False
    return all(
        validate(sub, data[key])
        for key, sub in (schema.properties or {}).items()
        if key in data
    )


def _validate_array(schema: Definition, data: Any) -> bool:
    if not isinstance(data, list):
        return False
    if schema.items is None:
        return True
    return all(validate(schema.items, item) for item in data)


def verify_schema_and_unmarshal(schema: Definition, content: str | bytes) -> Any:
    """Decode JSON ``content``, check it against ``schema`` and return it."""
    data = json.loads(content)
    if not validate(schema, data):
        raise SchemaValidationError("data validation failed against the provided schema")
    return data
"""JSON schema definitions and schema generation from Python types."""

from __future__ import annotations

import dataclasses
import json
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any

_TRUE_WORDS = {"1", "t", "T", "TRUE", "true", "True"}
_OMITEMPTY = ",omitempty"
_NAMED_TYPES: dict[str, type] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
}


class DataType(str, Enum):
    """The JSON schema data types."""

    OBJECT = "object"
    NUMBER = "number"
    INTEGER = "integer"
    STRING = "string"
    ARRAY = "array"
    NULL = "null"
    BOOLEAN = "boolean"


@dataclass
class Definition:
    """A small description of a JSON schema."""

    type: DataType | None = None
    description: str = ""
    enum: list[str] | None = None
    properties: dict[str, Definition] | None = None
    required: list[str] | None = None
    items: Definition | None = None
    additional_properties: Any = None
    nullable: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the schema as a JSON-ready dictionary, omitting empty fields."""
        out: dict[str, Any] = {}
        if self.type:
            out["type"] = DataType(self.type).value
        if self.description:
            out["description"] = self.description
        if self.enum:
            out["enum"] = list(self.enum)
        if self.properties:
            out["properties"] = {k: v.to_dict() for k, v in self.properties.items()}
        if self.required:
            out["required"] = list(self.required)
        if self.items is not None:
            out["items"] = self.items.to_dict()
        if self.additional_properties is not None:
            extra = self.additional_properties
            out["additionalProperties"] = (
                extra.to_dict() if isinstance(extra, Definition) else extra
            )
        if self.nullable:
            out["nullable"] = True
        return out

    def to_json(self) -> str:
        """Return the schema serialised as JSON text."""
        return json.dumps(self.to_dict())

    def unmarshal(self, content: str | bytes) -> Any:
        """Decode ``content`` and check it against this schema."""
        from gptapi.schema.validate import verify_schema_and_unmarshal

        return verify_schema_and_unmarshal(self, content)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value) in _TRUE_WORDS


def _unwrap_optional(tp: Any) -> Any:
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1 and len(typing.get_args(tp)) == 2:
            return args[0]
        raise TypeError(f"unsupported type: {tp!r}")
    return tp


def _field_type(fld: dataclasses.Field) -> Any:
    tp = fld.type
    if isinstance(tp, str):
        try:
            return _NAMED_TYPES[tp]
        except KeyError:
            raise TypeError(f"unsupported type: {tp!r}") from None
    return tp


def _reflect(tp: Any) -> Definition:
    tp = _unwrap_optional(tp)
    origin = typing.get_origin(tp)
    if tp is str:
        return Definition(type=DataType.STRING)
    if tp is bool:
        return Definition(type=DataType.BOOLEAN)
    if tp is int:
        return Definition(type=DataType.INTEGER)
    if tp is float:
        return Definition(type=DataType.NUMBER)
    if origin in (list, tuple, set, frozenset) or tp in (list, tuple):
        args = typing.get_args(tp)
        if not args:
            raise TypeError(f"unsupported type: {tp!r}")
        return Definition(type=DataType.ARRAY, items=_reflect(args[0]))
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return _reflect_object(tp)
    raise TypeError(f"unsupported type: {tp!r}")


def _reflect_object(tp: type) -> Definition:
    properties: dict[str, Definition] = {}
    required: list[str] = []
    for fld in dataclasses.fields(tp):
        if fld.name.startswith("_"):
            continue
        meta = fld.metadata
        name = meta.get("json", "")
        is_required = True
        if not name:
            name = fld.name
        elif name.endswith(_OMITEMPTY):
            name = name[: -len(_OMITEMPTY)]
            is_required = False
        item = _reflect(_field_type(fld))
        if meta.get("description"):
            item.description = meta["description"]
        enum = meta.get("enum")
        if enum:
            item.enum = enum.split(",") if isinstance(enum, str) else list(enum)
        if meta.get("nullable", "") != "":
            item.nullable = _parse_bool(meta["nullable"])
        properties[name] = item
        if meta.get("required", "") != "":
            is_required = _parse_bool(meta["required"])
        if is_required:
            required.append(name)
    return Definition(
        type=DataType.OBJECT,
        additional_properties=False,
        properties=properties,
        required=required or None,
    )


def generate_schema_for_type(tp: Any) -> Definition:
    """Build a schema for a Python type or dataclass instance.

    Dataclass field metadata may carry ``json``, ``description``, ``enum``,
    ``nullable`` and ``required`` entries.
    """
    if dataclasses.is_dataclass(tp) and not isinstance(tp, type):
        tp = type(tp)
    return _reflect(tp)
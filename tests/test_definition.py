import json
from dataclasses import dataclass, field
from typing import Optional

import pytest

from gptapi.schema.definition import DataType, Definition, generate_schema_for_type
from gptapi.schema.validate import SchemaValidationError


def _roundtrip(defn):
    return json.loads(defn.to_json())


MARSHAL_CASES = [
    ({}, {}),
    (
        dict(
            type=DataType.STRING,
            description="A string type",
            properties={"name": Definition(type=DataType.STRING)},
        ),
        {"type": "string", "description": "A string type",
         "properties": {"name": {"type": "string"}}},
    ),
    (
        dict(
            type=DataType.OBJECT,
            properties={"user": Definition(
                type=DataType.OBJECT,
                properties={"name": Definition(type=DataType.STRING),
                            "age": Definition(type=DataType.INTEGER)},
            )},
        ),
        {"type": "object", "properties": {"user": {
            "type": "object",
            "properties": {"name": {"type": "string"}, "age": {"type": "integer"}}}}},
    ),
    (
        dict(
            type=DataType.OBJECT,
            properties={"user": Definition(
                type=DataType.OBJECT,
                properties={
                    "name": Definition(type=DataType.STRING),
                    "age": Definition(type=DataType.INTEGER),
                    "address": Definition(
                        type=DataType.OBJECT,
                        properties={"city": Definition(type=DataType.STRING),
                                    "country": Definition(type=DataType.STRING)},
                    ),
                },
            )},
        ),
        {"type": "object", "properties": {"user": {
            "type": "object", "properties": {
                "name": {"type": "string"}, "age": {"type": "integer"},
                "address": {"type": "object", "properties": {
                    "city": {"type": "string"}, "country": {"type": "string"}}}}}}},
    ),
    (
        dict(
            type=DataType.ARRAY,
            items=Definition(type=DataType.STRING),
            properties={"name": Definition(type=DataType.STRING)},
        ),
        {"type": "array", "items": {"type": "string"},
         "properties": {"name": {"type": "string"}}},
    ),
]


@pytest.mark.parametrize("kwargs,want", MARSHAL_CASES)
def test_marshal(kwargs, want):
    defn = Definition(**kwargs)
    assert json.loads(defn.to_json()) == want
    assert defn.to_dict() == want


@dataclass
class Empty:
    pass


@dataclass
class City:
    name: str = field(metadata={"json": "name"})
    state: str = field(metadata={"json": "state"})


@dataclass
class Many:
    name: str = field(metadata={"json": "name"})
    age: int = field(metadata={"json": "age"})
    active: bool = field(metadata={"json": "active"})
    height: float = field(metadata={"json": "height"})
    cities: list[City] = field(metadata={"json": "cities"})


@dataclass
class Described:
    name: str = field(metadata={"json": "name", "description": "The name of the person"})


@dataclass
class NotRequired:
    name: str = field(metadata={"json": "name", "required": "false"})


@dataclass
class WithEnum:
    color: str = field(metadata={"json": "color", "enum": "red,green,blue"})


@dataclass
class WithNullable:
    name: Optional[str] = field(metadata={"json": "name", "nullable": "true"})


SCHEMA_CASES = [
    (Empty, {"type": "object", "additionalProperties": False}),
    (Many, {
        "type": "object",
        "properties": {
            "name": {"type": "string"}, "age": {"type": "integer"},
            "active": {"type": "boolean"}, "height": {"type": "number"},
            "cities": {"type": "array", "items": {
                "additionalProperties": False, "type": "object",
                "properties": {"name": {"type": "string"}, "state": {"type": "string"}},
                "required": ["name", "state"]}},
        },
        "required": ["name", "age", "active", "height", "cities"],
        "additionalProperties": False,
    }),
    (Described, {"type": "object", "properties": {"name": {
        "type": "string", "description": "The name of the person"}},
        "required": ["name"], "additionalProperties": False}),
    (NotRequired, {"type": "object", "properties": {"name": {"type": "string"}},
                   "additionalProperties": False}),
    (WithEnum, {"type": "object", "properties": {"color": {
        "type": "string", "enum": ["red", "green", "blue"]}},
        "required": ["color"], "additionalProperties": False}),
    (WithNullable, {"type": "object", "properties": {"name": {
        "type": "string", "nullable": True}},
        "required": ["name"], "additionalProperties": False}),
]


@pytest.mark.parametrize("tp,want", SCHEMA_CASES)
def test_struct_to_schema(tp, want):
    assert _roundtrip(generate_schema_for_type(tp)) == want


def test_schema_from_instance():
    got = generate_schema_for_type(Described(name="John Doe"))
    assert got.to_dict()["required"] == ["name"]


def test_omitempty_tag_not_required():
    @dataclass
    class Opt:
        x: int = field(metadata={"json": "x,omitempty"})

    assert generate_schema_for_type(Opt).to_dict() == {
        "type": "object", "properties": {"x": {"type": "integer"}},
        "additionalProperties": False,
    }


@pytest.mark.parametrize("tp", [dict, complex, dict[str, int]])
def test_unsupported_type(tp):
    with pytest.raises(TypeError):
        generate_schema_for_type(tp)


def test_unmarshal_uses_schema():
    schema = generate_schema_for_type(Described)
    assert schema.unmarshal('{"name": "a"}') == {"name": "a"}
    with pytest.raises(SchemaValidationError):
        schema.unmarshal('{"name": 1}')
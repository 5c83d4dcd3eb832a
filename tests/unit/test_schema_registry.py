"""Tests for the Schema registry."""

from __future__ import annotations

import pytest

from unitkit.core.enums import JsonType
from unitkit.core.errors import UnitDefinitionError
from unitkit.core.models import ParameterShape, PropertySpec, SchemaDescriptor
from unitkit.core.schema import Schema


def _descriptor(name: str) -> dict:
    return {
        "name": name,
        "description": f"{name} things",
        "parameters": {
            "type": "object",
            "properties": {"path": {"type": "string", "description": "Path"}},
            "required": ["path"],
        },
    }


class TestSchemaRegistry:
    def test_dicts_are_parsed_into_descriptors(self):
        schema = Schema.create("u", {"get": _descriptor("get")})
        descriptor = schema.get("get")
        assert isinstance(descriptor, SchemaDescriptor)
        assert descriptor.parameters.properties["path"].type == JsonType.STRING
        assert descriptor.parameters.required == ["path"]

    def test_model_instances_kept_as_given(self):
        descriptor = SchemaDescriptor(name="peek", description="Current value")
        schema = Schema.create("u", {"peek": descriptor})
        assert schema.get("peek") is descriptor

    def test_get_missing_returns_none(self):
        schema = Schema.create("u", {})
        assert schema.get("anything") is None
        assert not schema.has("anything")

    def test_list_preserves_order(self):
        schema = Schema.create("u", {"post": _descriptor("post"), "get": _descriptor("get")})
        assert [d.name for d in schema.list()] == ["post", "get"]
        assert schema.names() == ["post", "get"]

    def test_unknown_json_type_rejected(self):
        bad = _descriptor("get")
        bad["parameters"]["properties"]["path"]["type"] = "datetime"
        with pytest.raises(UnitDefinitionError, match="Schema entry .get. of unit .u."):
            Schema.create("u", {"get": bad})

    def test_non_mapping_parameters_rejected(self):
        bad = _descriptor("get")
        bad["parameters"] = "path"
        with pytest.raises(UnitDefinitionError):
            Schema.create("u", {"get": bad})

    def test_union_type_accepted(self):
        nullable = _descriptor("get")
        nullable["parameters"]["properties"]["path"]["type"] = ["string", "null"]
        schema = Schema.create("u", {"get": nullable})
        spec = schema.get("get").parameters.properties["path"]
        assert spec.type == [JsonType.STRING, JsonType.NULL]
        assert schema.get("get").parameters.to_json_schema()["properties"]["path"] == {
            "type": ["string", "null"],
            "description": "Path",
        }


class TestParameterShape:
    def test_to_json_schema(self):
        shape = ParameterShape(
            properties={
                "path": PropertySpec(type=JsonType.STRING, description="Path"),
                "data": PropertySpec(),
            },
            required=["path"],
        )
        assert shape.to_json_schema() == {
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "Path"},
                "data": {},
            },
            "required": ["path"],
        }

    def test_union_with_any_is_unconstrained(self):
        assert PropertySpec(type=[JsonType.ANY, JsonType.STRING]).json_type() is None

    def test_property_order_is_declaration_order(self):
        shape = ParameterShape.model_validate(
            {"properties": {"z": {"type": "string"}, "a": {"type": "integer"}}}
        )
        assert list(shape.properties) == ["z", "a"]

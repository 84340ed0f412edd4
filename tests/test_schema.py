"""Unit tests for OpenAPI schema flattening."""

import pytest
from kubernetes.client import V1JSONSchemaProps

from tenant_mcp_tool.schema import SchemaNode, flatten, flatten_schema


class TestFlatten:

    @pytest.mark.unit
    def test_only_type(self):
        assert flatten(SchemaNode(type="string")) == {"type": "string"}

    @pytest.mark.unit
    def test_only_type_from_model(self):
        assert flatten_schema(V1JSONSchemaProps(type="string")) == {"type": "string"}

    @pytest.mark.unit
    def test_nested_array_from_model(self):
        schema = V1JSONSchemaProps(
            type="object",
            properties={
                "tags": V1JSONSchemaProps(type="array", items=V1JSONSchemaProps(type="string")),
            },
        )
        assert flatten_schema(schema) == {
            "type": "object",
            "properties": {"tags": {"type": "array", "items": {"type": "string"}}},
        }

    @pytest.mark.unit
    def test_nested_array_from_raw_items(self):
        # the client leaves items/additionalProperties as plain dicts
        schema = V1JSONSchemaProps(
            type="object",
            properties={
                "tags": V1JSONSchemaProps(type="array", items={"type": "string"}),
                "env": V1JSONSchemaProps(
                    type="object",
                    additional_properties={"type": "string", "maxLength": 63},
                ),
            },
        )
        assert flatten_schema(schema) == {
            "type": "object",
            "properties": {
                "tags": {"type": "array", "items": {"type": "string"}},
                "env": {
                    "type": "object",
                    "additionalProperties": {"type": "string", "maxLength": 63},
                },
            },
        }

    @pytest.mark.unit
    def test_raw_dict_recurses_into_properties(self):
        schema = {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name"],
                "properties": {"name": {"type": "string", "pattern": "^[a-z]+$"}},
            },
        }
        assert flatten_schema(schema) == schema

    @pytest.mark.unit
    def test_constraints(self):
        schema = V1JSONSchemaProps(
            type="integer",
            description="Replica count",
            minimum=0.0,
            maximum=10.0,
            default=1,
            enum=[1, 2, 3],
        )
        assert flatten_schema(schema) == {
            "type": "integer",
            "description": "Replica count",
            "minimum": 0.0,
            "maximum": 10.0,
            "default": 1,
            "enum": [1, 2, 3],
        }

    @pytest.mark.unit
    def test_zero_bounds_kept(self):
        assert flatten(SchemaNode(type="string", min_length=0)) == {"type": "string", "minLength": 0}

    @pytest.mark.unit
    def test_unique_items_only_when_true(self):
        assert "uniqueItems" not in flatten(SchemaNode(type="array", unique_items=False))
        assert flatten(SchemaNode(type="array", unique_items=True, min_items=1, max_items=5)) == {
            "type": "array",
            "uniqueItems": True,
            "minItems": 1,
            "maxItems": 5,
        }

    @pytest.mark.unit
    def test_empty_values_omitted(self):
        node = SchemaNode(type="object", description="", enum=[], required=[], properties={})
        assert flatten(node) == {"type": "object"}

    @pytest.mark.unit
    def test_non_schema_items_and_additional_properties_ignored(self):
        schema = {
            "type": "object",
            "additionalProperties": True,
            "properties": {"pair": {"type": "array", "items": [{"type": "string"}]}},
        }
        assert flatten_schema(schema) == {
            "type": "object",
            "properties": {"pair": {"type": "array"}},
        }

    @pytest.mark.unit
    def test_deep_nesting(self):
        schema = {"type": "string"}
        for _ in range(50):
            schema = {"type": "object", "properties": {"child": schema}}
        flattened = flatten_schema(schema)
        depth = 0
        while "properties" in flattened:
            flattened = flattened["properties"]["child"]
            depth += 1
        assert depth == 50
        assert flattened == {"type": "string"}

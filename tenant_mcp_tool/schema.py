"""OpenAPI v3 schema nodes and their flattening into plain dictionaries.

CRD schemas reach us in two shapes: typed ``V1JSONSchemaProps`` models, and
raw camelCase dictionaries wherever the client declares a field as an
untyped object (``items``, ``additionalProperties``). ``SchemaNode`` reads
either one into optional fields, so a field that was never specified stays
``None`` and is distinguishable from one set to a zero or empty value.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from kubernetes.client import V1JSONSchemaProps


# canonical key, V1JSONSchemaProps attribute
_SCALAR_FIELDS = (
    ("type", "type"),
    ("description", "description"),
    ("format", "format"),
    ("title", "title"),
    ("default", "default"),
    ("example", "example"),
    ("enum", "enum"),
    ("required", "required"),
    ("minLength", "min_length"),
    ("maxLength", "max_length"),
    ("pattern", "pattern"),
    ("minimum", "minimum"),
    ("maximum", "maximum"),
    ("minItems", "min_items"),
    ("maxItems", "max_items"),
    ("uniqueItems", "unique_items"),
)

_STRING_KEYS = ("type", "description", "format", "title", "pattern")
_LIST_KEYS = ("enum", "required")


def _read(source: Any, key: str, attr: str) -> Any:
    if isinstance(source, dict):
        return source.get(key)
    return getattr(source, attr, None)


def _is_schema(value: Any) -> bool:
    return isinstance(value, (dict, V1JSONSchemaProps))


@dataclass
class SchemaNode:
    type: Optional[str] = None
    description: Optional[str] = None
    format: Optional[str] = None
    title: Optional[str] = None
    default: Any = None
    example: Any = None
    enum: Optional[List[Any]] = None
    required: Optional[List[str]] = None
    properties: Optional[Dict[str, "SchemaNode"]] = None
    items: Optional["SchemaNode"] = None
    additional_properties: Optional["SchemaNode"] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    unique_items: Optional[bool] = None

    @classmethod
    def from_source(cls, source: Any) -> "SchemaNode":
        """Build a node from a V1JSONSchemaProps model or a raw schema dict."""
        values = {attr: _read(source, key, attr) for key, attr in _SCALAR_FIELDS}

        properties = _read(source, "properties", "properties")
        if properties:
            values["properties"] = {
                prop_name: cls.from_source(prop)
                for prop_name, prop in properties.items()
                if _is_schema(prop)
            }

        # items may also be a list of schemas and additionalProperties a
        # bool; neither describes a single element schema.
        items = _read(source, "items", "items")
        if _is_schema(items):
            values["items"] = cls.from_source(items)

        additional = _read(source, "additionalProperties", "additional_properties")
        if _is_schema(additional):
            values["additional_properties"] = cls.from_source(additional)

        return cls(**values)


def flatten(node: SchemaNode) -> Dict[str, Any]:
    """Convert a schema node into a nested dict holding only specified fields."""
    result: Dict[str, Any] = {}

    for key, attr in _SCALAR_FIELDS:
        value = getattr(node, attr)
        if value is None:
            continue
        if key in _STRING_KEYS or key in _LIST_KEYS:
            if not value:
                continue
        elif key == "uniqueItems":
            if value is not True:
                continue
        result[key] = value

    if node.properties:
        result["properties"] = {
            prop_name: flatten(prop) for prop_name, prop in node.properties.items()
        }
    if node.items is not None:
        result["items"] = flatten(node.items)
    if node.additional_properties is not None:
        result["additionalProperties"] = flatten(node.additional_properties)

    return result


def flatten_schema(source: Any) -> Dict[str, Any]:
    return flatten(SchemaNode.from_source(source))

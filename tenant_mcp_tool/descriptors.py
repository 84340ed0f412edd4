"""Type descriptors and the generic object document.

A TypeDescriptor is the (group, version, kind) triple that identifies a type
in the cluster. GenericObject wraps the raw JSON document of one instance and
exposes its well-known top-level fields through checked accessors.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from tenant_mcp_tool.errors import ForbiddenError, InvalidInputError


@dataclass(frozen=True)
class TypeDescriptor:
    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    def __str__(self) -> str:
        return f"{self.kind}.{self.api_version}"


def parse_api_version(api_version: str) -> Tuple[str, str]:
    """Split ``group/version`` into its parts.

    A bare version with no slash belongs to the core (empty) group.
    """
    if not api_version:
        raise InvalidInputError("missing or invalid 'apiVersion' field")
    parts = api_version.split("/")
    if len(parts) == 1:
        group, version = "", parts[0]
    elif len(parts) == 2:
        group, version = parts
    else:
        raise InvalidInputError(
            f"invalid apiVersion format '{api_version}': unexpected GroupVersion string"
        )
    if not version:
        raise InvalidInputError(f"invalid apiVersion format '{api_version}': empty version")
    return group, version


def resolve(api_version: str, kind: str, tenant_group: str) -> TypeDescriptor:
    """Resolve an apiVersion/kind pair into a descriptor inside the tenant group."""
    if not kind:
        raise InvalidInputError("missing or invalid 'kind' field")
    group, version = parse_api_version(api_version)
    if group != tenant_group:
        raise ForbiddenError(
            f"only resources in the '{tenant_group}' group are supported, got '{group}'",
            kind=kind,
            group=group,
        )
    return TypeDescriptor(group=group, version=version, kind=kind)


class GenericObject:
    """One instance document with checked access to its known fields.

    The document is owned by the caller for the duration of one operation.
    Scope handling mutates ``metadata.namespace`` in place.
    """

    def __init__(self, document: Dict[str, Any]):
        if not isinstance(document, dict):
            raise InvalidInputError("resource document must be a JSON object")
        self.document = document

    @classmethod
    def from_json(cls, content: str) -> "GenericObject":
        try:
            document = json.loads(content)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"failed to parse resource: {e}") from e
        return cls(document)

    def _string_field(self, container: Dict[str, Any], key: str) -> Optional[str]:
        value = container.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise InvalidInputError(f"field '{key}' must be a string")
        return value

    @property
    def api_version(self) -> str:
        value = self._string_field(self.document, "apiVersion")
        if not value:
            raise InvalidInputError("missing or invalid 'apiVersion' field")
        return value

    @property
    def kind(self) -> str:
        value = self._string_field(self.document, "kind")
        if not value:
            raise InvalidInputError("missing or invalid 'kind' field")
        return value

    @property
    def metadata(self) -> Dict[str, Any]:
        metadata = self.document.get("metadata")
        if not isinstance(metadata, dict):
            raise InvalidInputError("missing or invalid 'metadata' field")
        return metadata

    @property
    def name(self) -> str:
        return self._string_field(self.metadata, "name") or ""

    @property
    def namespace(self) -> str:
        return self._string_field(self.metadata, "namespace") or ""

    @namespace.setter
    def namespace(self, value: str) -> None:
        if value:
            self.metadata["namespace"] = value
        else:
            self.metadata.pop("namespace", None)

    def validate(self, tenant_group: str) -> TypeDescriptor:
        """Check the fields every apply needs and return the resolved descriptor."""
        kind = self.kind
        descriptor = resolve(self.api_version, kind, tenant_group)
        if not self.name:
            raise InvalidInputError("missing or invalid 'metadata.name' field", kind=kind)
        return descriptor

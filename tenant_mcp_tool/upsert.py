"""Create-or-patch of generic objects.

Create fails when the object exists and a patch fails when it does not, so
apply first looks the object up and then takes the matching branch. Two
concurrent applies to the same coordinates are not serialized here; the
forced server-side apply makes them converge at the API server.
"""

import logging
from dataclasses import dataclass

from tenant_mcp_tool.descriptors import GenericObject, TypeDescriptor
from tenant_mcp_tool.errors import NotFoundError

logger = logging.getLogger("mcp-server")

OPERATION_CREATED = "created"
OPERATION_UPDATED = "updated"


@dataclass(frozen=True)
class ApplyResult:
    api_version: str
    kind: str
    name: str
    namespace: str
    operation: str

    def to_dict(self):
        result = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "operation": self.operation,
        }
        if self.namespace:
            result["namespace"] = self.namespace
        return result


class UpsertEngine:
    def __init__(self, store, field_manager: str):
        self.store = store
        self.field_manager = field_manager

    def apply(self, obj: GenericObject, descriptor: TypeDescriptor) -> ApplyResult:
        name = obj.name
        namespace = obj.namespace

        try:
            self.store.get(descriptor, name, namespace)
        except NotFoundError:
            logger.debug(f"{descriptor.kind} '{name}' not found, creating it")
            self.store.create(descriptor, obj.document, namespace)
            operation = OPERATION_CREATED
        else:
            self.store.apply(descriptor, obj.document, name, namespace, self.field_manager)
            operation = OPERATION_UPDATED

        return ApplyResult(
            api_version=descriptor.api_version,
            kind=descriptor.kind,
            name=name,
            namespace=namespace,
            operation=operation,
        )

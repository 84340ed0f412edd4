"""Apply, get, delete and list tenant resources by kind.

ResourceService ties the descriptor resolver, scope policy, upsert engine and
projectors together over a cluster resource store. It keeps no state between
calls; every read goes to the cluster.
"""

import logging

from tenant_mcp_tool.descriptors import GenericObject, TypeDescriptor
from tenant_mcp_tool.errors import InvalidInputError, ResourceError
from tenant_mcp_tool.projectors import (
    DeleteResourceResult,
    GetResourceResult,
    ListResourcesResult,
    project_deletion,
    project_detail,
    project_list,
)
from tenant_mcp_tool.scope import ScopePolicy
from tenant_mcp_tool.upsert import ApplyResult, UpsertEngine

logger = logging.getLogger("mcp-server")


class ResourceService:
    def __init__(self, store, settings, scope_policy: ScopePolicy = None):
        self.store = store
        self.settings = settings
        self.scope = scope_policy or ScopePolicy.from_settings(settings)
        self.upsert = UpsertEngine(store, settings.field_manager)

    def _descriptor(self, kind: str) -> TypeDescriptor:
        return TypeDescriptor(
            group=self.settings.tenant_group,
            version=self.settings.default_version,
            kind=kind,
        )

    def apply_resource(self, json_content: str) -> ApplyResult:
        logger.debug("Applying resource from JSON")
        obj = GenericObject.from_json(json_content)
        descriptor = obj.validate(self.settings.tenant_group)
        self.scope.apply_scope(obj, descriptor)

        try:
            result = self.upsert.apply(obj, descriptor)
        except ResourceError as e:
            logger.error(
                f"Failed to apply {descriptor.kind} '{obj.name}' "
                f"in '{obj.namespace}': {e}"
            )
            raise

        logger.info(
            f"Resource applied successfully: {result.kind} '{result.name}' "
            f"namespace='{result.namespace}' operation={result.operation}"
        )
        return result

    def get_resource(self, kind: str, name: str, namespace: str = "") -> GetResourceResult:
        logger.debug(f"Getting resource {kind} '{name}' in '{namespace}'")
        if not kind:
            raise InvalidInputError("kind is required")
        if not name:
            raise InvalidInputError("name is required", kind=kind)

        namespace = self.scope.resolve_namespace(kind, namespace)
        try:
            obj = self.store.get(self._descriptor(kind), name, namespace)
        except ResourceError as e:
            logger.error(f"Failed to get {kind} '{name}' in '{namespace}': {e}")
            raise

        result = project_detail(obj)
        logger.info(f"Resource retrieved successfully: {kind} '{name}' in '{result.namespace}'")
        return result

    def delete_resource(self, kind: str, name: str, namespace: str = "") -> DeleteResourceResult:
        logger.debug(f"Deleting resource {kind} '{name}' in '{namespace}'")
        if not kind:
            raise InvalidInputError("kind is required")
        if not name:
            raise InvalidInputError("name is required", kind=kind)

        namespace = self.scope.resolve_namespace(kind, namespace)
        descriptor = self._descriptor(kind)
        try:
            self.store.delete(descriptor, name, namespace)
        except ResourceError as e:
            logger.error(f"Failed to delete {kind} '{name}' in '{namespace}': {e}")
            raise

        logger.info(f"Resource deleted successfully: {kind} '{name}' in '{namespace}'")
        return project_deletion(descriptor.api_version, kind, name, namespace)

    def list_resources(self, kind: str, namespace: str = "") -> ListResourcesResult:
        logger.debug(f"Listing resources {kind} in '{namespace or 'all'}'")
        if not kind:
            raise InvalidInputError("kind is required")

        if self.scope.is_cluster_scoped(kind):
            namespace = ""
        descriptor = self._descriptor(kind)
        try:
            items = self.store.list(descriptor, namespace)
        except ResourceError as e:
            logger.error(f"Failed to list {kind} in '{namespace or 'all'}': {e}")
            raise

        result = project_list(descriptor.api_version, kind, items)
        logger.info(f"Resources listed successfully: {kind} count={result.total_count}")
        return result

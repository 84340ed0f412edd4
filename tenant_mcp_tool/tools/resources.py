"""Generic tenant resource tools.

Thin handlers over ResourceService. They let an LLM manage any kind in the
tenant group without a dedicated tool per kind.

Tools:
    apply_resource   - Create or update a resource from its JSON document
    get_resource     - Get spec and status of one resource
    delete_resource  - Delete one resource
    list_resources   - List resources of a kind with a compact summary
"""

import logging
from typing import Any, Dict

from mcp.types import ToolAnnotations

from tenant_mcp_tool import config
from tenant_mcp_tool.errors import NotFoundError, ResourceError
from tenant_mcp_tool.k8s_config import get_dynamic_client
from tenant_mcp_tool.resources import ResourceService
from tenant_mcp_tool.store import ClusterResourceStore

logger = logging.getLogger("mcp-server")

NOT_FOUND_HINT = "Use list_resource_types to find the kinds available in the tenant group"


def _resource_service(context: str) -> ResourceService:
    store = ClusterResourceStore(lambda: get_dynamic_client(context))
    return ResourceService(store, config.settings)


def error_response(e: Exception, action: str) -> Dict[str, Any]:
    if isinstance(e, ResourceError):
        result: Dict[str, Any] = {"success": False}
        result.update(e.to_dict())
        if isinstance(e, NotFoundError):
            result["hint"] = NOT_FOUND_HINT
        return result
    logger.error(f"Error {action}: {e}")
    return {"success": False, "error": str(e), "reason": "InternalError"}


def register_resource_tools(server, non_destructive: bool):
    """Register generic resource tools; write tools are skipped when non_destructive."""

    if not non_destructive:
        @server.tool(
            annotations=ToolAnnotations(
                title="Apply Tenant Resource",
                destructiveHint=False,
                idempotentHint=True,
            ),
        )
        def apply_resource(
            resource_json: str,
            context: str = ""
        ) -> Dict[str, Any]:
            """Create or update a tenant resource from its JSON document.

            The document needs apiVersion (in the tenant group), kind and
            metadata.name. Cluster-scoped kinds have any namespace removed;
            namespaced kinds without a namespace go to the default namespace.
            An existing resource is updated with a server-side apply.

            Args:
                resource_json: Full resource document as a JSON string
                context: Kubernetes context (uses current if not specified)
            """
            try:
                result = _resource_service(context).apply_resource(resource_json)
                response: Dict[str, Any] = {"success": True}
                response.update(result.to_dict())
                return response
            except Exception as e:
                return error_response(e, "applying resource")

        @server.tool(
            annotations=ToolAnnotations(
                title="Delete Tenant Resource",
                destructiveHint=True,
            ),
        )
        def delete_resource(
            kind: str,
            name: str,
            namespace: str = "",
            context: str = ""
        ) -> Dict[str, Any]:
            """Delete a tenant resource by kind and name.

            Args:
                kind: Resource kind (e.g., "Project")
                name: Resource name
                namespace: Namespace (defaults for namespaced kinds, ignored for cluster-scoped)
                context: Kubernetes context (uses current if not specified)
            """
            try:
                result = _resource_service(context).delete_resource(kind, name, namespace)
                response: Dict[str, Any] = {"success": True}
                response.update(result.to_dict())
                return response
            except Exception as e:
                return error_response(e, "deleting resource")

    @server.tool(
        annotations=ToolAnnotations(
            title="Get Tenant Resource",
            readOnlyHint=True,
        ),
    )
    def get_resource(
        kind: str,
        name: str,
        namespace: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """Get the spec and status of a tenant resource.

        Args:
            kind: Resource kind (e.g., "Project")
            name: Resource name
            namespace: Namespace (defaults for namespaced kinds, ignored for cluster-scoped)
            context: Kubernetes context (uses current if not specified)
        """
        try:
            result = _resource_service(context).get_resource(kind, name, namespace)
            response: Dict[str, Any] = {"success": True}
            response.update(result.to_dict())
            return response
        except Exception as e:
            return error_response(e, "getting resource")

    @server.tool(
        annotations=ToolAnnotations(
            title="List Tenant Resources",
            readOnlyHint=True,
        ),
    )
    def list_resources(
        kind: str,
        namespace: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """List tenant resources of a kind.

        Each item carries name, namespace, labels, creation time and status.

        Args:
            kind: Resource kind (e.g., "Project")
            namespace: Namespace (empty = all namespaces)
            context: Kubernetes context (uses current if not specified)
        """
        try:
            result = _resource_service(context).list_resources(kind, namespace)
            response: Dict[str, Any] = {"success": True}
            response.update(result.to_dict())
            return response
        except Exception as e:
            return error_response(e, "listing resources")

"""Tenant type catalog tools.

Tools:
    list_resource_types    - List CRDs of the tenant group (storage version)
    get_resource_type      - Show one CRD with its flattened OpenAPI schema
    verify_resource_scopes - Compare the scope table with the CRDs' declared scope
"""

from typing import Any, Dict

from mcp.types import ToolAnnotations

from tenant_mcp_tool import config
from tenant_mcp_tool.catalog import CatalogReader
from tenant_mcp_tool.errors import StoreUnavailableError
from tenant_mcp_tool.k8s_config import get_apiextensions_client
from tenant_mcp_tool.scope import ScopePolicy, verify_scopes
from tenant_mcp_tool.tools.resources import error_response


def _catalog(context: str) -> CatalogReader:
    try:
        api = get_apiextensions_client(context)
    except Exception as e:
        raise StoreUnavailableError(f"failed to connect to the cluster: {e}") from e
    return CatalogReader(api, config.settings.tenant_group)


def register_schema_tools(server):
    """Register tenant type catalog tools."""

    @server.tool(
        annotations=ToolAnnotations(
            title="List Tenant Resource Types",
            readOnlyHint=True,
        ),
    )
    def list_resource_types(
        context: str = ""
    ) -> Dict[str, Any]:
        """List the resource types (CRDs) available in the tenant group.

        Use this first to learn which kinds exist and whether they are
        namespaced, then call list_resources or get_resource_type.

        Args:
            context: Kubernetes context (uses current if not specified)
        """
        try:
            types = _catalog(context).list_types()
            return {
                "success": True,
                "count": len(types),
                "crds": [t.to_dict() for t in types],
            }
        except Exception as e:
            return error_response(e, "listing resource types")

    @server.tool(
        annotations=ToolAnnotations(
            title="Get Tenant Resource Type",
            readOnlyHint=True,
        ),
    )
    def get_resource_type(
        crd_name: str,
        context: str = ""
    ) -> Dict[str, Any]:
        """Get a tenant CRD with the schema of its storage version.

        The OpenAPI schema is returned as a nested map of type, description,
        properties, items and validation constraints so the fields a resource
        accepts can be read before writing it with apply_resource.

        Args:
            crd_name: Full CRD name (e.g., "projects.tenant.dev")
            context: Kubernetes context (uses current if not specified)
        """
        try:
            detail = _catalog(context).get_type_detail(crd_name)
            response: Dict[str, Any] = {"success": True}
            response.update(detail.to_dict())
            return response
        except Exception as e:
            return error_response(e, "getting resource type")

    @server.tool(
        annotations=ToolAnnotations(
            title="Verify Resource Scope Table",
            readOnlyHint=True,
        ),
    )
    def verify_resource_scopes(
        context: str = ""
    ) -> Dict[str, Any]:
        """Check the cluster-scoped kind table against the installed CRDs.

        Reports every kind the table classifies differently from the scope its
        CRD declares.

        Args:
            context: Kubernetes context (uses current if not specified)
        """
        try:
            policy = ScopePolicy.from_settings(config.settings)
            drift = verify_scopes(policy, _catalog(context))
            return {
                "success": True,
                "scopeTableVersion": policy.table_version,
                "consistent": not drift,
                "drift": [entry.to_dict() for entry in drift],
            }
        except Exception as e:
            return error_response(e, "verifying resource scopes")

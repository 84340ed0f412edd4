from tenant_mcp_tool.tools.resources import register_resource_tools
from tenant_mcp_tool.tools.schema import register_schema_tools

__all__ = ["register_resource_tools", "register_schema_tools"]

"""MCP server for generic access to a tenant's custom resources."""

__version__ = "0.1.0"

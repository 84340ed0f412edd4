#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import signal
import sys
from importlib.metadata import PackageNotFoundError, version

from fastmcp import FastMCP

from tenant_mcp_tool import config
from tenant_mcp_tool.catalog import CatalogReader
from tenant_mcp_tool.k8s_config import get_apiextensions_client
from tenant_mcp_tool.scope import ScopePolicy, verify_scopes
from tenant_mcp_tool.tools import register_resource_tools, register_schema_tools

SERVER_NAME = "Tenant Resource MCP Server"
try:
    __version__ = version("tenant-resource-mcp")
except PackageNotFoundError:
    __version__ = "0.0.0-local"

logger = logging.getLogger("mcp-server")


def create_server(non_destructive: bool = False) -> FastMCP:
    server = FastMCP(
        name=SERVER_NAME,
        instructions=(
            "Generic access to the custom resources of a single tenant API group. "
            "Call list_resource_types to discover the kinds, get_resource_type to read "
            "a kind's schema, then list/get/apply/delete resources by kind and name. "
            "Resources outside the tenant group are rejected."
        ),
    )
    register_resource_tools(server, non_destructive)
    register_schema_tools(server)
    return server


def main() -> None:
    parser = argparse.ArgumentParser(description=SERVER_NAME)
    parser.add_argument("--transport", default="stdio",
                        choices=["stdio", "sse", "streamable-http"], help="MCP transport")
    parser.add_argument("--config", help="Path to a YAML/JSON config file")
    parser.add_argument("--non-destructive", action="store_true",
                        help="Do not register apply/delete tools")
    parser.add_argument("--verify-scopes", action="store_true",
                        help="Check the scope table against the cluster's CRDs at startup")
    args = parser.parse_args()

    overrides = {"non_destructive": True} if args.non_destructive else {}
    settings = config.refresh_settings(explicit_config_path=args.config, cli_overrides=overrides)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting %s v%s (group=%s)", SERVER_NAME, __version__, settings.tenant_group)

    def _graceful_exit(signum, frame):
        logger.info("Received signal %s, shutting down %s", signum, SERVER_NAME)
        sys.exit(0)

    signal.signal(signal.SIGINT, _graceful_exit)
    signal.signal(signal.SIGTERM, _graceful_exit)

    if args.verify_scopes:
        catalog = CatalogReader(get_apiextensions_client(), settings.tenant_group)
        verify_scopes(ScopePolicy.from_settings(settings), catalog, strict=settings.strict_scope)

    server = create_server(non_destructive=settings.non_destructive)
    server.run(transport=args.transport)


if __name__ == "__main__":
    main()

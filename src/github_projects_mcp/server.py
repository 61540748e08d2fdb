"""MCP server wiring for github-projects-mcp.

Tools map one-to-one onto the operation catalog; every call result is a single
TextContent block holding the JSON envelope produced by `dispatch_tool`.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from mcp.server import Server
from mcp.types import Resource, TextContent, Tool

from . import __version__
from .config import GITHUB_API_BASE_URL, is_token_configured
from .errors import SafeError, internal_error
from .tools import TOOL_METADATA, dispatch_tool, initialize_runtime_from_env

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

SERVER_NAME = "github-projects-mcp"
CAPABILITIES_URI = "github-projects-mcp://capabilities"
SERVER_STATUS_URI = "github-projects-mcp://server-status"

server = Server(SERVER_NAME)


def _build_tools() -> list[Tool]:
    return [
        Tool(name=name, description=meta["description"], inputSchema=meta["inputSchema"])
        for name, meta in TOOL_METADATA.items()
    ]


def _build_resources() -> list[Resource]:
    return [
        Resource(
            uri=SERVER_STATUS_URI,
            name="Server Status",
            description="Version, tool count and whether a GitHub token is configured",
        ),
        Resource(
            uri=CAPABILITIES_URI,
            name="Capabilities",
            description="Available GitHub project operations and the API endpoint they call",
        ),
    ]


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools."""
    tools = _build_tools()
    logger.info("Listed %s tools", len(tools))
    return tools


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Execute a tool and return MCP-compliant TextContent."""
    if not isinstance(arguments, dict):
        arguments = {}

    logger.info("Tool called: %s", name)

    try:
        raw_result = await dispatch_tool(name, arguments)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.error("Tool %s failed: %s", name, exc)
        raw_result = internal_error("Tool execution failed")
    return [TextContent(type="text", text=json.dumps(raw_result, default=str))]


@server.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return _build_resources()


@server.read_resource()
async def read_resource(uri: Any) -> str:
    """Read resource content."""
    uri_s = uri if isinstance(uri, str) else str(uri)

    if uri_s == CAPABILITIES_URI:
        caps = {
            "server": SERVER_NAME,
            "version": __version__,
            "operations": sorted(TOOL_METADATA.keys()),
            "graphql_endpoint": f"{GITHUB_API_BASE_URL}/graphql",
            "retries": False,
        }
        return json.dumps(caps, indent=2)

    if uri_s == SERVER_STATUS_URI:
        status: dict[str, Any] = {
            "server": SERVER_NAME,
            "version": __version__,
            "tools_available": len(TOOL_METADATA),
            "configured": False,
            "token_present": False,
        }
        try:
            runtime = initialize_runtime_from_env()
            status["configured"] = True
            status["token_env_var"] = runtime.config.token_env_var
            status["token_present"] = is_token_configured(runtime.config)
            status["audit"] = {"file_sink_enabled": runtime.config.audit_log_path is not None}
        except SafeError as exc:
            status["config_error"] = exc.message

        return json.dumps(status, indent=2)

    return json.dumps({"ok": False, "code": "NotFound", "message": "Unknown resource"}, indent=2)


async def run_server() -> None:
    """Run the server over stdio."""
    # Fail fast on invalid host configuration; a missing token is reported per call.
    try:
        runtime = initialize_runtime_from_env()
    except SafeError as exc:
        logger.error("Startup configuration error: %s", exc.message)
        raise

    logging.getLogger().setLevel(runtime.config.log_level)
    if not is_token_configured(runtime.config):
        logger.warning("%s is not set; tool calls will fail until it is provided", runtime.config.token_env_var)

    from mcp.server.stdio import stdio_server

    logger.info("GitHub Project Management MCP server %s starting", __version__)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


async def test_server() -> None:
    """Lightweight self-test to ensure tool/resource listing works."""
    tools = _build_tools()
    resources = _build_resources()
    print(f"{SERVER_NAME} {__version__}: {len(tools)} tools, {len(resources)} resources", file=sys.stderr)
    for tool in tools:
        print(f"  - {tool.name}", file=sys.stderr)

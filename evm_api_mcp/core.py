"""MCP server publishing the registered EVM API operations as tools."""

import json
import logging
import sys

from google.adk.tools.mcp_tool.conversion_utils import adk_to_mcp_tool_type
from mcp import types as mcp_types
from mcp.server.lowlevel import Server

from .manager import ResolverManager

logging.basicConfig(stream=sys.stderr, level=logging.INFO, format='[%(levelname)s] %(message)s')


def format_tool_result(name: str, result: dict) -> str:
    """Render a ResolverTool result as the text sent to the MCP client

    Success renders the JSON projection of the result. Failures render the
    error code or HTTP status of the failed call.
    """
    mode = result.get("mode")
    if result.get("success"):
        return f"{name} via {mode}:\n{json.dumps(result['data'], indent=2)}"
    if "code" in result:
        return f"{name} via {mode} failed: [{result['code']}] {result['message']}"
    if "status" in result:
        return f"{name} via {mode} failed with HTTP {result['status']}: {result['message']}"
    return result.get("message", f"{name} failed")


def build_mcp_server(manager: ResolverManager, server_name: str = "evm-api-mcp") -> Server:
    server = Server(server_name)

    @server.list_tools()
    async def list_tools():
        return [adk_to_mcp_tool_type(tool) for tool in manager.tools.values()]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict):
        logging.info(f"[EvmApiMCP] Tool call: {name} with args: {json.dumps(arguments)}")
        try:
            result = await manager.call(name, arguments or {})
        except Exception as e:
            logging.exception(f"[EvmApiMCP] Error executing tool '{name}': {e}")
            result = {"success": False, "message": f"Error executing tool: {e}"}
        return [mcp_types.TextContent(type="text", text=format_tool_result(name, result))]

    logging.info(f"[EvmApiMCP] Initialized MCP server '{server_name}' with {len(manager.tools)} tools")
    return server


__all__ = [
    "build_mcp_server",
    "format_tool_result",
]

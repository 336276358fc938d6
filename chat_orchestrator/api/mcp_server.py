"""
MCP server publishing the capability registry.

Each registered tool keeps its name, description and JSON schema. Calls run
through ``ToolDispatcher``, so a failing tool answers with a
``tool execution failed: ...`` text rather than an MCP error. The FastAPI
app mounts the streamable HTTP transport at ``/mcp`` and the SSE transport
at ``/sse``.
"""

import asyncio
import logging
from typing import Any

from fastmcp import FastMCP
from fastmcp.tools.tool import Tool, ToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr

from ..orchestration import ToolDispatcher
from ..tools import CapabilityDescriptor, CapabilityRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "chat-orchestrator"


class RegistryTool(Tool):
    """A registry capability exposed as an MCP tool."""

    _dispatcher: ToolDispatcher = PrivateAttr()

    @classmethod
    def from_descriptor(
        cls, descriptor: CapabilityDescriptor, dispatcher: ToolDispatcher
    ) -> "RegistryTool":
        tool = cls(
            name=descriptor.name,
            description=descriptor.description,
            parameters=descriptor.parameters,
        )
        tool._dispatcher = dispatcher
        return tool

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        # Executors are blocking (requests), keep them off the event loop
        text = await asyncio.to_thread(self._dispatcher.invoke, self.name, arguments or {})
        return ToolResult(content=[TextContent(type="text", text=text)])


def create_mcp_server(registry: CapabilityRegistry) -> FastMCP:
    mcp = FastMCP(SERVER_NAME)
    dispatcher = ToolDispatcher(registry)
    for descriptor in registry.describe_all():
        mcp.add_tool(RegistryTool.from_descriptor(descriptor, dispatcher))
    logger.info(f"MCP server exposes {len(registry)} tools: {', '.join(registry.names())}")
    return mcp

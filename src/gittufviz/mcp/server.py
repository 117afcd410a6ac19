"""MCP server implementation for gittufviz."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from ..config import VisualizerConfig
from ..service import PolicyService

logger = logging.getLogger(__name__)


class VisualizerServer:
    """MCP server exposing policy history and metadata tools."""

    def __init__(self, config: VisualizerConfig | None = None):
        self.config = config or VisualizerConfig()
        self.service = PolicyService(self.config)
        self.server = Server("gittufviz")
        self.tools: Dict[str, Callable] = {}
        self.tool_metadata: Dict[str, tuple[str, Dict]] = {}

        # Register handlers once at initialization
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Set up MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return [
                types.Tool(
                    name=tool_name,
                    description=desc,
                    inputSchema=schema,
                )
                for tool_name, (desc, schema) in self.tool_metadata.items()
            ]

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
            return [types.TextContent(type="text", text=await self.invoke(name, arguments))]

    async def invoke(self, name: str, arguments: Dict[str, Any] | None) -> str:
        """Run a registered tool off the event loop and return its JSON text."""
        if name not in self.tools:
            raise ValueError(f"Unknown tool: {name}")
        logger.info("Tool call %s", name)
        handler = self.tools[name]
        # Clones block on git, keep them off the event loop.
        return await asyncio.to_thread(handler, self.service, arguments or {})

    def register_tool(
        self,
        name: str,
        description: str,
        input_schema: Dict[str, Any],
        handler: Callable,
    ) -> None:
        """Register an MCP tool.

        Parameters
        ----------
        name:
            Tool name
        description:
            Tool description
        input_schema:
            JSON schema for tool inputs
        handler:
            Function called with ``(service, arguments)``
        """
        self.tools[name] = handler
        self.tool_metadata[name] = (description, input_schema)

    async def run(self) -> None:
        """Run the MCP server with stdio transport."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def create_server(config: VisualizerConfig | None = None) -> VisualizerServer:
    """Create and configure an MCP server instance.

    Parameters
    ----------
    config:
        Visualizer configuration

    Returns
    -------
    Configured VisualizerServer instance
    """
    server = VisualizerServer(config)

    from .tools import commits, metadata

    commits.register_tools(server)
    metadata.register_tools(server)

    return server

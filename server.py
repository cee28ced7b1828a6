"""MCP stdio server exposing the tool registry."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from config import ConfigManager
from errors import UnknownToolError, ValidationToolError
from run import build_default_registry
from tools.handler import ToolContext
from tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "termbridge"
SERVER_VERSION = "0.1.0"


class TerminalServer:
    """Binds a ``ToolRegistry`` to the MCP ``tools/list`` and ``tools/call`` requests.

    Handlers are installed directly on ``request_handlers`` so that
    ``McpError`` raised here reaches the caller as a JSON-RPC error instead
    of being folded into a tool result.
    """

    def __init__(
        self,
        registry: Optional[ToolRegistry] = None,
        config_manager: Optional[ConfigManager] = None,
    ) -> None:
        self.config_manager = config_manager or ConfigManager()
        self.registry = registry if registry is not None else build_default_registry()
        self.server: Server = Server(
            name=SERVER_NAME,
            version=SERVER_VERSION,
            instructions="Run commands and scripts, inspect processes and manage files on the local host.",
        )
        self.server.request_handlers[types.ListToolsRequest] = self._handle_list_tools
        self.server.request_handlers[types.CallToolRequest] = self._handle_call_tool

    def list_tools(self) -> List[types.Tool]:
        return [
            types.Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema)
            for spec in self.registry.list()
        ]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
        """Execute *name* and return its envelope as a single JSON text block."""
        context = ToolContext(config=self.config_manager.config)
        try:
            result = await self.registry.execute(name, arguments or {}, context)
        except ValidationToolError as exc:
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=exc.message)) from exc
        except UnknownToolError as exc:
            raise McpError(types.ErrorData(code=types.METHOD_NOT_FOUND, message=exc.message)) from exc
        except Exception as exc:
            logger.exception("Tool %s failed outside the dispatch wrapper", name)
            raise McpError(
                types.ErrorData(code=types.INTERNAL_ERROR, message=f"Tool execution failed: {exc}")
            ) from exc

        text = json.dumps(result.to_envelope(), indent=2, default=str)
        return [types.TextContent(type="text", text=text)]

    async def _handle_list_tools(self, request: types.ListToolsRequest) -> types.ServerResult:
        return types.ServerResult(types.ListToolsResult(tools=self.list_tools()))

    async def _handle_call_tool(self, request: types.CallToolRequest) -> types.ServerResult:
        content = await self.call_tool(request.params.name, request.params.arguments)
        return types.ServerResult(types.CallToolResult(content=content, isError=False))

    async def run(self) -> None:
        """Serve requests over stdio until the input stream closes."""
        logger.info("%s %s serving %d tools over stdio", SERVER_NAME, SERVER_VERSION, len(self.registry))
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


__all__ = ["SERVER_NAME", "SERVER_VERSION", "TerminalServer"]

"""Function-based tool handler wrapping plain operation functions."""
from __future__ import annotations

import asyncio
import functools
import inspect
from typing import Any, Dict

from ..handler import ToolHandler, ToolInvocation
from ..schemas import ToolSchema, parse_tool_input
from ..spec import Tool


class FunctionToolHandler(ToolHandler):
    """Adapter that lets a ``Tool`` function serve invocations.

    Arguments are validated against the tool's schema before the function
    runs. Coroutine functions are awaited; synchronous ones run in the
    loop's default executor so filesystem work does not block the loop.
    """

    def __init__(self, tool: Tool) -> None:
        self._tool = tool
        self._is_async = inspect.iscoroutinefunction(tool.fn)

    @property
    def tool(self) -> Tool:  # pragma: no cover - convenience for callers
        return self._tool

    async def handle(self, invocation: ToolInvocation) -> Dict[str, Any]:
        params = self.validate(invocation)
        return await self.invoke(params, invocation)

    def validate(self, invocation: ToolInvocation) -> ToolSchema | Dict[str, Any]:
        return parse_tool_input(self._tool.name, invocation.arguments)

    async def invoke(self, params: ToolSchema | Dict[str, Any], invocation: ToolInvocation) -> Dict[str, Any]:
        if self._is_async:
            return await self._tool.fn(params, invocation.context)

        loop = asyncio.get_running_loop()
        call = functools.partial(self._tool.fn, params, invocation.context)
        return await loop.run_in_executor(None, call)


__all__ = ["FunctionToolHandler"]

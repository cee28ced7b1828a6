"""Reusable harness for exercising tools through the dispatch wrapper in tests."""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional

from config import ServerConfig
from errors import ErrorKind
from tools.handler import ToolContext, ToolHandler, ToolInvocation, ToolOutput, execute_handler
from tools.handlers import FunctionToolHandler, ShellHandler
from tools.spec import Tool


def make_tool(
    tool_def: Callable[[], Dict[str, Any]],
    fn: Callable[..., Any],
    *,
    capabilities: Optional[Iterable[str]] = None,
) -> Tool:
    return Tool(**tool_def(), fn=fn, capabilities=capabilities)


class ToolTestHarness:
    """Helper for invoking a tool the way the registry would."""

    def __init__(self, tool: Tool, *, config: Optional[ServerConfig] = None):
        self.tool = tool
        self.context = ToolContext(config=config or ServerConfig())
        self.handler: ToolHandler
        if "exec_shell" in tool.capabilities:
            self.handler = ShellHandler(tool)
        else:
            self.handler = FunctionToolHandler(tool)

    async def invoke(self, arguments: Dict[str, Any]) -> ToolOutput:
        invocation = ToolInvocation(tool_name=self.tool.name, arguments=arguments, context=self.context)
        return await execute_handler(self.handler, invocation)

    async def envelope(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return (await self.invoke(arguments)).to_envelope()

    def assert_success(self, output: ToolOutput) -> None:
        assert output.success, f"Expected success but got failure: {output.error}"

    def assert_error(
        self,
        output: ToolOutput,
        kind: Optional[ErrorKind] = None,
        expected_msg: Optional[str] = None,
    ) -> None:
        assert not output.success, "Expected failure but tool succeeded"
        if kind is not None:
            assert output.error_kind is kind, f"Expected {kind} but got {output.error_kind}: {output.error}"
        if expected_msg:
            assert expected_msg in (output.error or ""), f"Missing expected message '{expected_msg}'"


__all__ = ["ToolTestHarness", "make_tool"]

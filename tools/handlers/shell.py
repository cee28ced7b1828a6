"""Shell handler enforcing the command policy before delegating to the tool."""
from __future__ import annotations

from typing import Any, Dict

from errors import ErrorKind, ToolError
from ..handler import ToolInvocation

from .function import FunctionToolHandler


class ShellHandler(FunctionToolHandler):
    """Adapter for process-spawning tools that honors the command policy.

    ``command`` arguments are matched against the whitelist/blacklist.
    Scripts additionally need their interpreter to be allowed, and the
    script text is matched the same way a command would be.
    """

    async def handle(self, invocation: ToolInvocation) -> Dict[str, Any]:
        params = self.validate(invocation)
        policy = invocation.context.config.command_policy

        interpreter = getattr(params, "interpreter", None)
        if interpreter is not None:
            allowed, reason = policy.can_use_interpreter(interpreter)
            if not allowed:
                raise ToolError(f"Command blocked by policy: {reason}", ErrorKind.PERMISSION_DENIED)

        text = getattr(params, "command", None) or getattr(params, "script_content", None)
        if text is not None:
            allowed, reason = policy.can_execute_command(text)
            if not allowed:
                raise ToolError(f"Command blocked by policy: {reason}", ErrorKind.PERMISSION_DENIED)

        return await self.invoke(params, invocation)


__all__ = ["ShellHandler"]

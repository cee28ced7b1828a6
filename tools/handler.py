"""Core tool handler protocol and supporting data structures."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol

from config import ServerConfig
from errors import ErrorKind, ProcessError, ToolError, ValidationToolError, classify_os_error
from .tool_summary import summarize_tool_call, truncate_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolContext:
    """Process-wide state handed to every handler."""

    config: ServerConfig = field(default_factory=ServerConfig)


@dataclass
class ToolInvocation:
    """Context for a single tool invocation."""

    tool_name: str
    arguments: Mapping[str, Any]
    context: ToolContext


@dataclass(frozen=True)
class ToolOutput:
    """Result of tool execution, tagged by ``success``."""

    success: bool
    execution_time_ms: int
    payload: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    exit_code: Optional[int] = None
    signal: Optional[str] = None
    timed_out: bool = False

    @classmethod
    def ok(cls, payload: Mapping[str, Any], execution_time_ms: int) -> "ToolOutput":
        return cls(success=True, execution_time_ms=execution_time_ms, payload=dict(payload))

    @classmethod
    def failure(cls, exc: ToolError, execution_time_ms: int) -> "ToolOutput":
        if isinstance(exc, ProcessError):
            return cls(
                success=False,
                execution_time_ms=execution_time_ms,
                error=exc.message,
                error_kind=exc.kind,
                stdout=exc.stdout,
                stderr=exc.stderr,
                exit_code=exc.exit_code,
                signal=exc.signal,
                timed_out=exc.timed_out,
            )
        return cls(
            success=False,
            execution_time_ms=execution_time_ms,
            error=exc.message,
            error_kind=exc.kind,
        )

    def to_envelope(self) -> Dict[str, Any]:
        """Return the JSON-ready mapping sent back to the caller."""
        if self.success:
            return {"success": True, "execution_time_ms": self.execution_time_ms, **self.payload}

        envelope: Dict[str, Any] = {
            "success": False,
            "execution_time_ms": self.execution_time_ms,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else ErrorKind.INTERNAL_ERROR.value,
        }
        if self.stdout is not None:
            envelope["stdout"] = self.stdout
        if self.stderr is not None:
            envelope["stderr"] = self.stderr
        if self.exit_code is not None:
            envelope["exit_code"] = self.exit_code
        if self.signal is not None:
            envelope["signal"] = self.signal
        if self.timed_out:
            envelope["timeout"] = True
        return envelope


class ToolHandler(Protocol):
    """Protocol describing tool handler implementations."""

    async def handle(self, invocation: ToolInvocation) -> Dict[str, Any]:
        ...


async def execute_handler(handler: ToolHandler, invocation: ToolInvocation) -> ToolOutput:
    """Run *handler*, time it and wrap the outcome in a ``ToolOutput``.

    ``ValidationToolError`` propagates unchanged so the transport can report
    it as a protocol error. Every other exception becomes a failure result.
    """
    start = time.monotonic()
    request_summary = summarize_tool_call(invocation.tool_name, invocation.arguments)

    def _elapsed_ms() -> int:
        return int((time.monotonic() - start) * 1000)

    try:
        payload = await handler.handle(invocation)
    except ValidationToolError:
        raise
    except ToolError as exc:
        result = ToolOutput.failure(exc, _elapsed_ms())
    except OSError as exc:
        result = ToolOutput.failure(classify_os_error(exc), _elapsed_ms())
    except Exception as exc:
        logger.exception("Unexpected error in %s", request_summary)
        result = ToolOutput.failure(ToolError(f"Tool execution failed: {exc}"), _elapsed_ms())
    else:
        result = ToolOutput.ok(payload or {}, _elapsed_ms())

    if result.success:
        logger.debug("%s -> ok [%dms]", request_summary, result.execution_time_ms)
    else:
        outcome = truncate_text((result.error or "error").split("\n", 1)[0], limit=160)
        logger.info(
            "%s -> %s: %s [%dms]",
            request_summary,
            result.error_kind.value if result.error_kind else "error",
            outcome,
            result.execution_time_ms,
        )
    return result


__all__ = [
    "ToolContext",
    "ToolHandler",
    "ToolInvocation",
    "ToolOutput",
    "execute_handler",
]

import asyncio
import errno

import pytest

from errors import ErrorKind, ProcessError, ToolError, ValidationToolError
from tools.handler import ToolContext, ToolInvocation, ToolOutput, execute_handler


class DummyHandler:
    async def handle(self, invocation):
        return {"value": invocation.arguments.get("value")}


class ErrorHandler:
    def __init__(self, exc: Exception) -> None:
        self._exc = exc

    async def handle(self, invocation):
        raise self._exc


def _invocation(arguments=None) -> ToolInvocation:
    return ToolInvocation(tool_name="echo", arguments=arguments or {}, context=ToolContext())


def test_execute_handler_wraps_payload():
    result = asyncio.run(execute_handler(DummyHandler(), _invocation({"value": 1})))

    assert result.success is True
    assert result.payload == {"value": 1}
    assert result.execution_time_ms >= 0

    envelope = result.to_envelope()
    assert envelope["success"] is True
    assert envelope["value"] == 1
    assert "execution_time_ms" in envelope


def test_execute_handler_reraises_validation_errors():
    with pytest.raises(ValidationToolError):
        asyncio.run(execute_handler(ErrorHandler(ValidationToolError("bad")), _invocation()))


def test_execute_handler_converts_tool_error():
    result = asyncio.run(execute_handler(ErrorHandler(ToolError("nope", ErrorKind.NOT_FOUND)), _invocation()))

    assert result.success is False
    envelope = result.to_envelope()
    assert envelope == {
        "success": False,
        "execution_time_ms": result.execution_time_ms,
        "error": "nope",
        "error_kind": "NotFound",
    }


def test_execute_handler_keeps_process_fields():
    exc = ProcessError(
        "timed out",
        ErrorKind.TIMEOUT,
        stdout="partial",
        stderr="",
        signal="SIGTERM",
        timed_out=True,
    )
    envelope = asyncio.run(execute_handler(ErrorHandler(exc), _invocation())).to_envelope()

    assert envelope["error_kind"] == "Timeout"
    assert envelope["stdout"] == "partial"
    assert envelope["stderr"] == ""
    assert envelope["signal"] == "SIGTERM"
    assert envelope["timeout"] is True
    assert "exit_code" not in envelope


def test_execute_handler_classifies_os_errors():
    exc = FileNotFoundError(errno.ENOENT, "No such file or directory", "/missing")
    result = asyncio.run(execute_handler(ErrorHandler(exc), _invocation()))

    assert result.error_kind is ErrorKind.NOT_FOUND
    assert "/missing" in result.error


def test_execute_handler_wraps_unexpected_errors():
    result = asyncio.run(execute_handler(ErrorHandler(RuntimeError("kaboom")), _invocation()))

    assert result.success is False
    assert result.error_kind is ErrorKind.INTERNAL_ERROR
    assert result.error == "Tool execution failed: kaboom"


def test_tool_output_is_frozen():
    output = ToolOutput.ok({"a": 1}, 5)
    with pytest.raises(Exception):
        output.success = False  # type: ignore[misc]

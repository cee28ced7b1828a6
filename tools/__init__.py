"""Tool system abstractions for the termbridge server."""

from .handler import ToolContext, ToolHandler, ToolInvocation, ToolOutput, execute_handler
from .handlers import FunctionToolHandler, ShellHandler
from .options import ExecutionOptions, build_execution_options
from .output import ExecOutput
from .registry import ToolRegistry, build_registry_from_tools, register_tools
from .schemas import (
    DirectoryOperationsInput,
    ExecuteCommandInput,
    ExecuteScriptInput,
    FileOperationsInput,
    FileReadInput,
    FileWriteInput,
    KillProcessInput,
    ListProcessesInput,
    SystemInfoInput,
    ToolSchema,
    parse_tool_input,
)
from .spec import Tool, ToolSpec
from errors import ErrorKind, ProcessError, ToolError, UnknownToolError, ValidationToolError

__all__ = [
    "DirectoryOperationsInput",
    "ErrorKind",
    "ExecOutput",
    "ExecuteCommandInput",
    "ExecuteScriptInput",
    "ExecutionOptions",
    "FileOperationsInput",
    "FileReadInput",
    "FileWriteInput",
    "FunctionToolHandler",
    "KillProcessInput",
    "ListProcessesInput",
    "ProcessError",
    "ShellHandler",
    "SystemInfoInput",
    "Tool",
    "ToolContext",
    "ToolError",
    "ToolHandler",
    "ToolInvocation",
    "ToolOutput",
    "ToolRegistry",
    "ToolSchema",
    "ToolSpec",
    "UnknownToolError",
    "ValidationToolError",
    "build_execution_options",
    "build_registry_from_tools",
    "execute_handler",
    "parse_tool_input",
    "register_tools",
]

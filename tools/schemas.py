"""Pydantic schemas for validated tool inputs."""
from __future__ import annotations

from typing import Any, Dict, Literal, Mapping, Optional, Type

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from errors import ValidationToolError

INTERPRETERS = ("bash", "sh", "powershell", "cmd", "python", "python3", "node", "perl", "ruby")
SIGNALS = ("SIGTERM", "SIGKILL", "SIGINT", "SIGHUP", "SIGQUIT")
FILE_OPERATIONS = ("copy", "move", "delete")
DIRECTORY_OPERATIONS = ("create", "list", "delete", "exists")

Interpreter = Literal["bash", "sh", "powershell", "cmd", "python", "python3", "node", "perl", "ruby"]
SignalName = Literal["SIGTERM", "SIGKILL", "SIGINT", "SIGHUP", "SIGQUIT"]
Encoding = Literal["utf8", "utf-8", "ascii", "latin1", "binary", "hex", "base64"]


class ToolSchema(BaseModel):
    """Base class for all tool schemas with strict validation."""

    model_config = {
        "extra": "forbid",
        "validate_assignment": True,
    }

    def dump(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ExecuteCommandInput(ToolSchema):
    command: str = Field(..., min_length=1, description="Shell command to execute")
    working_directory: Optional[str] = None
    timeout_ms: Optional[int] = Field(None, ge=1000, description="Timeout in milliseconds")
    environment: Optional[Dict[str, str]] = None

    @field_validator("command")
    @classmethod
    def validate_command(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Command must be a non-empty string")
        return value


class ExecuteScriptInput(ToolSchema):
    script_content: str = Field(..., min_length=1)
    interpreter: Interpreter
    working_directory: Optional[str] = None
    timeout_ms: Optional[int] = Field(None, ge=1000)

    @field_validator("script_content")
    @classmethod
    def validate_script(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Script content must be a non-empty string")
        return value


class SystemInfoInput(ToolSchema):
    pass


class ListProcessesInput(ToolSchema):
    filter: Optional[str] = None
    limit: Optional[int] = Field(None, ge=1)


class KillProcessInput(ToolSchema):
    pid: int = Field(..., ge=1)
    force: bool = False
    signal: SignalName = "SIGTERM"


class FileReadInput(ToolSchema):
    file_path: str = Field(..., min_length=1)
    encoding: Encoding = "utf8"


class FileWriteInput(ToolSchema):
    file_path: str = Field(..., min_length=1)
    content: str
    encoding: Encoding = "utf8"
    create_directories: bool = False
    backup: bool = False


class FileOperationsInput(ToolSchema):
    operation: Literal["copy", "move", "delete"]
    source: str = Field(..., min_length=1)
    destination: Optional[str] = None
    overwrite: bool = False
    force: bool = False

    @model_validator(mode="after")
    def validate_destination(self) -> "FileOperationsInput":
        if self.operation in {"copy", "move"} and not (self.destination or "").strip():
            raise ValueError(f"destination is required for {self.operation} operation")
        return self


class DirectoryOperationsInput(ToolSchema):
    operation: Literal["create", "list", "delete", "exists"]
    path: str = Field(..., min_length=1)
    recursive: Optional[bool] = None
    include_hidden: bool = False
    detailed: bool = True
    force: bool = False


_TOOL_SCHEMAS: Dict[str, Type[ToolSchema]] = {
    "execute_command": ExecuteCommandInput,
    "execute_script": ExecuteScriptInput,
    "get_system_info": SystemInfoInput,
    "list_processes": ListProcessesInput,
    "kill_process": KillProcessInput,
    "file_read": FileReadInput,
    "file_write": FileWriteInput,
    "file_operations": FileOperationsInput,
    "directory_operations": DirectoryOperationsInput,
}


def format_validation_error(exc: ValidationError) -> str:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "input"
        messages.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(messages)


def parse_tool_input(tool_name: str, raw_input: Optional[Mapping[str, Any]]) -> ToolSchema | Dict[str, Any]:
    """Parse and validate raw input into a Pydantic model instance.

    Tools without a registered schema receive the raw mapping unchanged.
    Invalid input raises ``ValidationToolError``.
    """
    if raw_input is None:
        raw_input = {}
    if not isinstance(raw_input, Mapping):
        raise ValidationToolError("arguments must be an object")
    schema = _TOOL_SCHEMAS.get(tool_name)
    if schema is None:
        return dict(raw_input)
    try:
        return schema(**raw_input)
    except ValidationError as exc:
        raise ValidationToolError(format_validation_error(exc)) from exc


__all__ = [
    "DIRECTORY_OPERATIONS",
    "DirectoryOperationsInput",
    "ExecuteCommandInput",
    "ExecuteScriptInput",
    "FILE_OPERATIONS",
    "FileOperationsInput",
    "FileReadInput",
    "FileWriteInput",
    "INTERPRETERS",
    "KillProcessInput",
    "ListProcessesInput",
    "SIGNALS",
    "SystemInfoInput",
    "ToolSchema",
    "format_validation_error",
    "parse_tool_input",
]

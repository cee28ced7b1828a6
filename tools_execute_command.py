from __future__ import annotations

import os
from typing import Any, Dict

from tools.handler import ToolContext
from tools.options import build_execution_options
from tools.output import raise_for_exec_output
from tools.process import run_shell
from tools.schemas import ExecuteCommandInput


def execute_command_tool_def() -> dict:
    return {
        "name": "execute_command",
        "description": (
            "Execute a shell command on the host and capture its output. Provide `command` as a full shell string; it runs through the platform shell "
            "(/bin/sh on POSIX, cmd.exe on Windows). Optional fields are `working_directory`, `timeout_ms` (default 30000, capped at the configured maximum) "
            "and `environment` (string overrides layered over the server environment). A zero exit returns stdout, stderr and exit_code. A non-zero exit, a "
            "signal or an expired deadline returns a failure that still carries whatever output was produced. Commands are checked against the configured "
            "whitelist/blacklist before they run."
        ),
        "input_schema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "command": {"type": "string", "description": "The shell command to execute."},
                "working_directory": {
                    "type": "string",
                    "description": "Working directory for the command (defaults to the server's current directory).",
                },
                "timeout_ms": {
                    "type": "integer",
                    "minimum": 1000,
                    "description": "Timeout in milliseconds (default 30000).",
                },
                "environment": {
                    "type": "object",
                    "description": "Additional environment variables.",
                    "additionalProperties": {"type": "string"},
                },
            },
            "required": ["command"],
        },
    }


async def execute_command_impl(params: ExecuteCommandInput, context: ToolContext) -> Dict[str, Any]:
    config = context.config
    options = build_execution_options(
        timeout_ms=params.timeout_ms,
        working_directory=params.working_directory,
        environment=params.environment,
        default_timeout_ms=config.default_timeout_ms,
        max_timeout_ms=config.max_timeout_ms,
        max_output_bytes=config.max_buffer_size,
    )

    output = await run_shell(params.command, options)
    raise_for_exec_output(output, params.command)

    return {
        "command": params.command,
        "working_directory": options.working_directory or os.getcwd(),
        "stdout": output.stdout,
        "stderr": output.stderr,
        "exit_code": output.exit_code,
    }

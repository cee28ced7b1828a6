from __future__ import annotations

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from errors import ValidationToolError
from tools.handler import ToolContext
from tools.options import build_execution_options
from tools.output import raise_for_exec_output
from tools.process import run_shell
from tools.schemas import INTERPRETERS, ExecuteScriptInput

logger = logging.getLogger(__name__)

_TEMP_PREFIX = "termbridge-"

SCRIPT_COMMANDS: Dict[str, str] = {
    "bash": 'bash "{path}"',
    "sh": 'sh "{path}"',
    "powershell": 'powershell -ExecutionPolicy Bypass -File "{path}"',
    "cmd": 'cmd /c "{path}"',
    "python": 'python "{path}"',
    "python3": 'python3 "{path}"',
    "node": 'node "{path}"',
    "perl": 'perl "{path}"',
    "ruby": 'ruby "{path}"',
}

SCRIPT_EXTENSIONS: Dict[str, str] = {
    "bash": ".sh",
    "sh": ".sh",
    "powershell": ".ps1",
    "cmd": ".bat",
    "python": ".py",
    "python3": ".py",
    "node": ".js",
    "perl": ".pl",
    "ruby": ".rb",
}


def execute_script_tool_def() -> dict:
    return {
        "name": "execute_script",
        "description": (
            "Run a script through one of the supported interpreters. The `script_content` is written to a file in a fresh temporary directory with the "
            "extension the interpreter expects, executed with the interpreter's standard invocation, and removed afterwards whatever the outcome. "
            "Optional `working_directory` sets where the script runs and `timeout_ms` bounds it (default 60000). Output and failure reporting match "
            "execute_command."
        ),
        "input_schema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "script_content": {"type": "string", "description": "The script source to execute."},
                "interpreter": {
                    "type": "string",
                    "enum": list(INTERPRETERS),
                    "description": "Interpreter used to run the script.",
                },
                "working_directory": {"type": "string", "description": "Working directory for the script."},
                "timeout_ms": {
                    "type": "integer",
                    "minimum": 1000,
                    "description": "Timeout in milliseconds (default 60000).",
                },
            },
            "required": ["script_content", "interpreter"],
        },
    }


@contextmanager
def temporary_script(content: str, extension: str) -> Iterator[str]:
    """Write *content* to ``script<extension>`` in a new temp directory.

    The file and its directory are removed on exit. Removal failures are
    logged and do not propagate.
    """
    directory = tempfile.mkdtemp(prefix=_TEMP_PREFIX)
    path = os.path.join(directory, f"script{extension}")
    try:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(content)
        yield path
    finally:
        try:
            if os.path.exists(path):
                os.unlink(path)
        except OSError as exc:
            logger.warning("Failed to remove script file %s: %s", path, exc)
        try:
            os.rmdir(directory)
        except OSError as exc:
            logger.warning("Failed to remove temp directory %s: %s", directory, exc)
            shutil.rmtree(directory, ignore_errors=True)


async def execute_script_impl(params: ExecuteScriptInput, context: ToolContext) -> Dict[str, Any]:
    template = SCRIPT_COMMANDS.get(params.interpreter)
    if template is None:
        raise ValidationToolError(f"Unsupported interpreter: {params.interpreter}")
    extension = SCRIPT_EXTENSIONS.get(params.interpreter, ".txt")

    config = context.config
    options = build_execution_options(
        timeout_ms=params.timeout_ms,
        working_directory=params.working_directory,
        default_timeout_ms=config.script_timeout_ms,
        max_timeout_ms=config.max_timeout_ms,
        max_output_bytes=config.max_buffer_size,
    )

    with temporary_script(params.script_content, extension) as script_path:
        command = template.format(path=script_path)
        output = await run_shell(command, options)

    raise_for_exec_output(output, f"{params.interpreter} script")

    return {
        "interpreter": params.interpreter,
        "working_directory": options.working_directory or os.getcwd(),
        "stdout": output.stdout,
        "stderr": output.stderr,
        "exit_code": output.exit_code,
    }

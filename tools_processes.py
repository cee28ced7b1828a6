from __future__ import annotations

import csv
import io
import re
from typing import Any, Dict, List, Optional

from errors import ValidationToolError
from tools.handler import ToolContext
from tools.options import KILL_TIMEOUT_MS, PROCESS_LIST_OUTPUT_BYTES, PROCESS_LIST_TIMEOUT_MS, build_execution_options
from tools.output import raise_for_exec_output
from tools.process import is_windows, run_shell
from tools.schemas import SIGNALS, KillProcessInput, ListProcessesInput


def list_processes_tool_def() -> dict:
    return {
        "name": "list_processes",
        "description": (
            "List running processes. On Windows the table comes from `tasklist` (name, pid, memory); elsewhere from `ps aux` (user, pid, cpu, "
            "memory, name). `filter` is a case-insensitive regular expression searched in the process name and `limit` caps the result "
            "(default 50, never more than 500)."
        ),
        "input_schema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "filter": {"type": "string", "description": "Regex filter applied to process names."},
                "limit": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 500,
                    "description": "Maximum number of processes to return (default 50).",
                },
            },
        },
    }


def kill_process_tool_def() -> dict:
    return {
        "name": "kill_process",
        "description": (
            "Send a termination signal to a process. `pid` is required; `signal` picks SIGTERM (default), SIGKILL, SIGINT, SIGHUP or SIGQUIT and "
            "`force` sends SIGKILL regardless. On Windows the process is ended with `taskkill` (`/F` when forced). Success means the signal was "
            "delivered, not that the process has exited."
        ),
        "input_schema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "pid": {"type": "integer", "minimum": 1, "description": "Process ID to terminate."},
                "force": {"type": "boolean", "description": "Force kill the process."},
                "signal": {
                    "type": "string",
                    "enum": list(SIGNALS),
                    "description": "Signal to send (default SIGTERM).",
                },
            },
            "required": ["pid"],
        },
    }


def _to_pid(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


def parse_ps_output(text: str) -> List[Dict[str, Any]]:
    """Parse ``ps aux`` output, skipping the header and short lines."""
    processes: List[Dict[str, Any]] = []
    for line in text.splitlines()[1:]:
        parts = line.split()
        if len(parts) < 11:
            continue
        processes.append(
            {
                "user": parts[0],
                "pid": _to_pid(parts[1]),
                "cpu": parts[2],
                "memory": parts[3],
                "name": " ".join(parts[10:]),
            }
        )
    return processes


def parse_tasklist_output(text: str) -> List[Dict[str, Any]]:
    """Parse ``tasklist /FO CSV`` output, skipping the header."""
    processes: List[Dict[str, Any]] = []
    rows = list(csv.reader(io.StringIO(text)))
    for row in rows[1:]:
        if len(row) < 2:
            continue
        processes.append(
            {
                "name": row[0],
                "pid": _to_pid(row[1]),
                "memory": row[4] if len(row) > 4 and row[4] else "N/A",
            }
        )
    return processes


def _compile_filter(pattern: Optional[str]) -> Optional[re.Pattern[str]]:
    if not pattern:
        return None
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        raise ValidationToolError(f"Invalid filter pattern '{pattern}': {exc}") from exc


async def list_processes_impl(params: ListProcessesInput, context: ToolContext) -> Dict[str, Any]:
    config = context.config
    matcher = _compile_filter(params.filter)
    limit = min(params.limit or config.process_list_limit, config.max_process_limit)

    command = "tasklist /FO CSV" if is_windows() else "ps aux"
    options = build_execution_options(
        default_timeout_ms=PROCESS_LIST_TIMEOUT_MS,
        max_timeout_ms=config.max_timeout_ms,
        max_output_bytes=PROCESS_LIST_OUTPUT_BYTES,
    )
    output = await run_shell(command, options)
    raise_for_exec_output(output, command)

    processes = parse_tasklist_output(output.stdout) if is_windows() else parse_ps_output(output.stdout)
    if matcher is not None:
        processes = [proc for proc in processes if matcher.search(proc["name"])]
    processes = processes[:limit]

    return {"process_count": len(processes), "processes": processes}


def kill_command(pid: int, signal_name: str, force: bool) -> tuple[str, str]:
    """Return the platform kill command and the signal actually sent."""
    if is_windows():
        flag = "/F " if force else ""
        return f"taskkill {flag}/PID {pid}", "SIGKILL" if force else signal_name
    sent = "SIGKILL" if force else signal_name
    return f"kill -s {sent[3:]} {pid}", sent


async def kill_process_impl(params: KillProcessInput, context: ToolContext) -> Dict[str, Any]:
    command, sent = kill_command(params.pid, params.signal, params.force)
    options = build_execution_options(
        default_timeout_ms=KILL_TIMEOUT_MS,
        max_timeout_ms=context.config.max_timeout_ms,
    )
    output = await run_shell(command, options)
    raise_for_exec_output(output, command)

    return {
        "pid": params.pid,
        "signal": sent,
        "stdout": output.stdout,
        "stderr": output.stderr,
    }

"""Structured results of process execution and their failure mapping."""
from __future__ import annotations

import signal as signal_module
from dataclasses import dataclass
from typing import Optional

from errors import ErrorKind, ProcessError


@dataclass
class ExecOutput:
    """Structured output from command execution."""

    stdout: str
    stderr: str
    exit_code: Optional[int]
    duration_seconds: float
    timed_out: bool = False
    signal: Optional[str] = None
    truncated: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out and not self.truncated


def signal_name(returncode: Optional[int]) -> Optional[str]:
    """Return the signal name for a negative asyncio return code."""

    if returncode is None or returncode >= 0:
        return None
    try:
        return signal_module.Signals(-returncode).name
    except ValueError:
        return f"SIG{-returncode}"


def raise_for_exec_output(output: ExecOutput, command: str) -> None:
    """Raise ``ProcessError`` unless *output* is a clean zero exit."""

    if output.ok:
        return

    if output.timed_out:
        kind = ErrorKind.TIMEOUT
        message = f"Command timed out after {output.duration_seconds:.1f}s: {command}"
    elif output.truncated:
        kind = ErrorKind.INTERNAL_ERROR
        message = f"Output exceeded the maximum buffer size: {command}"
    elif output.signal is not None:
        kind = ErrorKind.SIGNALED
        message = f"Command terminated by {output.signal}: {command}"
    else:
        kind = ErrorKind.NON_ZERO_EXIT
        message = f"Command failed with exit code {output.exit_code}: {command}"

    detail = output.stderr.strip()
    if detail:
        message = f"{message}\n{detail}"

    raise ProcessError(
        message,
        kind,
        stdout=output.stdout,
        stderr=output.stderr,
        exit_code=output.exit_code,
        signal=output.signal,
        timed_out=output.timed_out,
    )


__all__ = ["ExecOutput", "raise_for_exec_output", "signal_name"]

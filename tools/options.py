"""Resolution of per-invocation execution options."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Final, Mapping, Optional

MIN_TIMEOUT_MS: Final[int] = 1_000
MAX_TIMEOUT_MS: Final[int] = 300_000
COMMAND_TIMEOUT_MS: Final[int] = 30_000
SCRIPT_TIMEOUT_MS: Final[int] = 60_000
PROCESS_LIST_TIMEOUT_MS: Final[int] = 10_000
KILL_TIMEOUT_MS: Final[int] = 5_000

MAX_OUTPUT_BYTES: Final[int] = 10 * 1024 * 1024  # 10 MiB
PROCESS_LIST_OUTPUT_BYTES: Final[int] = 5 * 1024 * 1024
MAX_READ_BYTES: Final[int] = 50 * 1024 * 1024  # 50 MiB
MAX_WRITE_BYTES: Final[int] = 100 * 1024 * 1024  # 100 MiB


@dataclass(frozen=True)
class ExecutionOptions:
    """Clamped runtime parameters for one process spawn."""

    timeout_ms: int
    working_directory: Optional[str]
    env: Dict[str, str]
    max_output_bytes: int = MAX_OUTPUT_BYTES

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


def _merge_env(overrides: Optional[Mapping[str, str]]) -> Dict[str, str]:
    merged: Dict[str, str] = {**os.environ}
    if not overrides:
        return merged
    for key, value in overrides.items():
        merged[str(key)] = str(value)
    return merged


def build_execution_options(
    *,
    timeout_ms: Optional[int] = None,
    working_directory: Optional[str] = None,
    environment: Optional[Mapping[str, str]] = None,
    default_timeout_ms: int = COMMAND_TIMEOUT_MS,
    max_timeout_ms: int = MAX_TIMEOUT_MS,
    max_output_bytes: int = MAX_OUTPUT_BYTES,
) -> ExecutionOptions:
    """Build options from caller arguments and static defaults.

    The working directory is passed through unchecked; a missing directory
    is reported by the spawn itself.
    """

    requested = timeout_ms if timeout_ms else default_timeout_ms
    clamped = max(MIN_TIMEOUT_MS, min(int(requested), max_timeout_ms))
    cwd = (working_directory or "").strip() or None
    return ExecutionOptions(
        timeout_ms=clamped,
        working_directory=cwd,
        env=_merge_env(environment),
        max_output_bytes=max_output_bytes,
    )


__all__ = [
    "COMMAND_TIMEOUT_MS",
    "ExecutionOptions",
    "KILL_TIMEOUT_MS",
    "MAX_OUTPUT_BYTES",
    "MAX_READ_BYTES",
    "MAX_TIMEOUT_MS",
    "MAX_WRITE_BYTES",
    "MIN_TIMEOUT_MS",
    "PROCESS_LIST_OUTPUT_BYTES",
    "PROCESS_LIST_TIMEOUT_MS",
    "SCRIPT_TIMEOUT_MS",
    "build_execution_options",
]

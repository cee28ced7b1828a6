"""Asynchronous shell spawning with deadline and output-cap enforcement."""
from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
import time
from typing import Optional

from .options import ExecutionOptions
from .output import ExecOutput, signal_name

logger = logging.getLogger(__name__)

_READ_CHUNK = 64 * 1024
_KILL_GRACE_SECONDS = 2.0


def is_windows() -> bool:
    return sys.platform == "win32"


def _signal_group(proc: asyncio.subprocess.Process, *, force: bool = False) -> None:
    # The group outlives the shell while a background child holds the pipes,
    # so signal it even when the shell has already exited.
    try:
        if is_windows():
            proc.kill()
        else:
            os.killpg(proc.pid, signal.SIGKILL if force else signal.SIGTERM)
    except ProcessLookupError:
        pass


async def run_shell(command: str, options: ExecutionOptions) -> ExecOutput:
    """Run *command* through the platform shell and capture its output.

    Spawn failures (missing working directory, unusable shell) propagate as
    ``OSError``. Abnormal exits are reported in the returned ``ExecOutput``.
    """

    proc = await asyncio.create_subprocess_shell(
        command,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=options.working_directory,
        env=options.env,
        start_new_session=not is_windows(),
    )

    stdout = bytearray()
    stderr = bytearray()
    overflowed: list[str] = []

    async def _pump(stream: Optional[asyncio.StreamReader], sink: bytearray, name: str) -> None:
        if stream is None:
            return
        # Keep reading to EOF even past the cap so the pipe never stalls.
        while True:
            chunk = await stream.read(_READ_CHUNK)
            if not chunk:
                return
            if name in overflowed:
                continue
            room = options.max_output_bytes - len(sink)
            sink.extend(chunk[: max(room, 0)])
            if len(chunk) > room:
                overflowed.append(name)
                _signal_group(proc)

    start = time.monotonic()
    pumps = [
        asyncio.create_task(_pump(proc.stdout, stdout, "stdout")),
        asyncio.create_task(_pump(proc.stderr, stderr, "stderr")),
    ]
    waiter = asyncio.create_task(proc.wait())
    timed_out = False
    _, pending = await asyncio.wait([waiter, *pumps], timeout=options.timeout_seconds)
    if pending:
        timed_out = True
        logger.info("Command exceeded %dms deadline, terminating: %s", options.timeout_ms, command)
        _signal_group(proc)
        _, pending = await asyncio.wait(pending, timeout=_KILL_GRACE_SECONDS)
    if pending:
        logger.warning("Process group %d ignored SIGTERM, killing", proc.pid)
        _signal_group(proc, force=True)
        _, pending = await asyncio.wait(pending, timeout=_KILL_GRACE_SECONDS)
    if pending:
        logger.warning("Process group %d still holds its pipes, abandoning them", proc.pid)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    duration = time.monotonic() - start
    returncode = proc.returncode
    if overflowed:
        logger.warning("Command output exceeded %d bytes on %s", options.max_output_bytes, ", ".join(overflowed))

    return ExecOutput(
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
        exit_code=returncode if returncode is not None and returncode >= 0 else None,
        duration_seconds=duration,
        timed_out=timed_out,
        signal=signal_name(returncode),
        truncated=bool(overflowed),
    )


__all__ = ["is_windows", "run_shell"]

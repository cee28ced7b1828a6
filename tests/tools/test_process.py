import asyncio
import sys

import pytest

from tools.options import build_execution_options
from tools.process import run_shell

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell semantics")


def test_run_shell_captures_output():
    output = asyncio.run(run_shell("echo hello; echo oops 1>&2", build_execution_options()))

    assert output.ok
    assert output.exit_code == 0
    assert output.stdout == "hello\n"
    assert output.stderr == "oops\n"
    assert output.duration_seconds >= 0


def test_run_shell_reports_exit_code():
    output = asyncio.run(run_shell("echo partial; exit 7", build_execution_options()))

    assert not output.ok
    assert output.exit_code == 7
    assert output.stdout == "partial\n"
    assert output.signal is None


def test_run_shell_enforces_deadline():
    options = build_execution_options(timeout_ms=1000)
    output = asyncio.run(run_shell("echo started; sleep 5", options))

    assert output.timed_out is True
    assert output.exit_code is None
    assert output.signal == "SIGTERM"
    assert output.stdout == "started\n"
    assert output.duration_seconds < 4


def test_run_shell_uses_working_directory_and_env(tmp_path):
    options = build_execution_options(working_directory=str(tmp_path), environment={"GREETING": "hey"})
    output = asyncio.run(run_shell('pwd; echo "$GREETING"', options))

    lines = output.stdout.splitlines()
    assert lines[0] == str(tmp_path.resolve())
    assert lines[1] == "hey"


def test_run_shell_caps_output():
    options = build_execution_options(max_output_bytes=1024)
    output = asyncio.run(run_shell("yes", options))

    assert output.truncated is True
    assert len(output.stdout) == 1024
    assert not output.ok


def test_run_shell_missing_working_directory_raises(tmp_path):
    options = build_execution_options(working_directory=str(tmp_path / "nope"))
    with pytest.raises(FileNotFoundError):
        asyncio.run(run_shell("echo hi", options))


def test_run_shell_deadline_covers_background_children():
    options = build_execution_options(timeout_ms=1000)
    output = asyncio.run(run_shell("sleep 6 & echo hi", options))

    assert output.timed_out is True
    assert output.stdout == "hi\n"
    assert output.duration_seconds < 4


def test_run_shell_kills_group_that_ignores_sigterm():
    options = build_execution_options(timeout_ms=1000)
    output = asyncio.run(run_shell("trap '' TERM; echo armed; while true; do sleep 0.2; done", options))

    assert output.timed_out is True
    assert output.signal == "SIGKILL"
    assert output.stdout == "armed\n"
    assert output.duration_seconds < 6

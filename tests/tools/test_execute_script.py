import asyncio
import os
import shutil
import sys
import tempfile

import pytest

import tools_execute_script
from errors import ErrorKind, ValidationToolError
from tests.tool_harness import ToolTestHarness, make_tool
from tools_execute_script import (
    SCRIPT_COMMANDS,
    SCRIPT_EXTENSIONS,
    execute_script_impl,
    execute_script_tool_def,
    temporary_script,
)

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell semantics")


def _harness() -> ToolTestHarness:
    return ToolTestHarness(make_tool(execute_script_tool_def, execute_script_impl, capabilities={"exec_shell"}))


@pytest.fixture
def created_dirs(monkeypatch):
    """Record every temp directory handed out to scripts."""
    created = []
    real_mkdtemp = tempfile.mkdtemp

    def _mkdtemp(*args, **kwargs):
        path = real_mkdtemp(*args, **kwargs)
        created.append(path)
        return path

    monkeypatch.setattr(tools_execute_script.tempfile, "mkdtemp", _mkdtemp)
    return created


def test_tables_cover_every_interpreter():
    assert set(SCRIPT_COMMANDS) == set(SCRIPT_EXTENSIONS)
    assert SCRIPT_EXTENSIONS["powershell"] == ".ps1"
    assert SCRIPT_COMMANDS["cmd"].format(path="x.bat") == 'cmd /c "x.bat"'


def test_temporary_script_cleans_up_on_error():
    with pytest.raises(RuntimeError):
        with temporary_script("print(1)", ".py") as path:
            assert path.endswith("script.py")
            directory = os.path.dirname(path)
            raise RuntimeError("boom")
    assert not os.path.exists(directory)


@posix_only
def test_bash_script_runs_and_cleans_up(created_dirs):
    envelope = asyncio.run(_harness().envelope({"script_content": "echo from-script\n", "interpreter": "bash"}))

    assert envelope["success"] is True
    assert envelope["stdout"] == "from-script\n"
    assert envelope["interpreter"] == "bash"
    assert envelope["exit_code"] == 0
    assert created_dirs and all(not os.path.exists(path) for path in created_dirs)


@posix_only
def test_failing_script_reports_exit_and_cleans_up(created_dirs):
    harness = _harness()
    output = asyncio.run(harness.invoke({"script_content": "echo nope >&2\nexit 4\n", "interpreter": "sh"}))

    harness.assert_error(output, ErrorKind.NON_ZERO_EXIT)
    assert output.exit_code == 4
    assert output.stderr == "nope\n"
    assert all(not os.path.exists(path) for path in created_dirs)


@posix_only
@pytest.mark.skipif(shutil.which("python3") is None, reason="python3 not on PATH")
def test_python_script_uses_working_directory(tmp_path, created_dirs):
    envelope = asyncio.run(
        _harness().envelope(
            {
                "script_content": "import os\nprint(os.getcwd())\n",
                "interpreter": "python3",
                "working_directory": str(tmp_path),
            }
        )
    )

    assert envelope["success"] is True
    assert envelope["stdout"].strip() == str(tmp_path.resolve())
    assert all(not os.path.exists(path) for path in created_dirs)


@posix_only
def test_script_timeout_cleans_up(created_dirs):
    harness = _harness()
    output = asyncio.run(harness.invoke({"script_content": "sleep 5\n", "interpreter": "sh", "timeout_ms": 1000}))

    harness.assert_error(output, ErrorKind.TIMEOUT)
    assert output.timed_out is True
    assert all(not os.path.exists(path) for path in created_dirs)


@pytest.mark.parametrize("interpreter", sorted(SCRIPT_COMMANDS))
def test_every_interpreter_cleans_up_even_when_missing(interpreter, created_dirs):
    # Interpreters absent from the host fail to run; the temp directory still goes away.
    asyncio.run(_harness().invoke({"script_content": "exit 0", "interpreter": interpreter, "timeout_ms": 5000}))

    assert len(created_dirs) == 1
    assert not os.path.exists(created_dirs[0])


def test_unknown_interpreter_is_rejected_before_writing(created_dirs):
    with pytest.raises(ValidationToolError):
        asyncio.run(_harness().invoke({"script_content": "echo", "interpreter": "fortran"}))
    assert created_dirs == []

import pytest

from errors import ErrorKind, ProcessError
from tools.output import ExecOutput, raise_for_exec_output, signal_name


def test_signal_name_from_negative_returncode():
    assert signal_name(-15) == "SIGTERM"
    assert signal_name(-9) == "SIGKILL"
    assert signal_name(0) is None
    assert signal_name(None) is None


def test_clean_exit_does_not_raise():
    raise_for_exec_output(ExecOutput(stdout="hi\n", stderr="", exit_code=0, duration_seconds=0.1), "echo hi")


def test_non_zero_exit_raises_with_output():
    output = ExecOutput(stdout="partial", stderr="boom\n", exit_code=3, duration_seconds=0.1)
    with pytest.raises(ProcessError) as exc:
        raise_for_exec_output(output, "false")
    err = exc.value
    assert err.kind is ErrorKind.NON_ZERO_EXIT
    assert err.exit_code == 3
    assert err.stdout == "partial"
    assert err.message.startswith("Command failed with exit code 3: false")
    assert err.message.endswith("boom")


def test_timeout_takes_precedence_over_signal():
    output = ExecOutput(stdout="", stderr="", exit_code=None, duration_seconds=1.0, timed_out=True, signal="SIGTERM")
    with pytest.raises(ProcessError) as exc:
        raise_for_exec_output(output, "sleep 5")
    assert exc.value.kind is ErrorKind.TIMEOUT
    assert exc.value.timed_out is True
    assert exc.value.signal == "SIGTERM"


def test_signal_and_overflow_kinds():
    signaled = ExecOutput(stdout="", stderr="", exit_code=None, duration_seconds=0.1, signal="SIGKILL")
    with pytest.raises(ProcessError) as exc:
        raise_for_exec_output(signaled, "cmd")
    assert exc.value.kind is ErrorKind.SIGNALED

    overflow = ExecOutput(stdout="x" * 10, stderr="", exit_code=None, duration_seconds=0.1, truncated=True)
    with pytest.raises(ProcessError) as exc:
        raise_for_exec_output(overflow, "yes")
    assert exc.value.kind is ErrorKind.INTERNAL_ERROR
    assert "maximum buffer size" in exc.value.message

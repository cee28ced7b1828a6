import asyncio
import os
from pathlib import Path

import pytest

import tools_file_read
from errors import ErrorKind
from tests.tool_harness import ToolTestHarness, make_tool
from tools_file_read import detect_content_type, file_read_impl, file_read_tool_def


def _harness() -> ToolTestHarness:
    return ToolTestHarness(make_tool(file_read_tool_def, file_read_impl, capabilities={"read_fs"}))


def test_read_returns_content_and_metadata(tmp_path: Path):
    target = tmp_path / "notes.md"
    target.write_text("# Title\nbody\n", encoding="utf-8")

    envelope = asyncio.run(_harness().envelope({"file_path": str(target)}))

    assert envelope["success"] is True
    assert envelope["operation"] == "file_read"
    assert envelope["file_path"] == str(target)
    assert envelope["content"] == "# Title\nbody\n"
    assert envelope["encoding"] == "utf8"
    assert envelope["content_length"] == 13
    assert envelope["content_type"] == "markdown"
    assert envelope["stats"]["size"] == 13
    assert envelope["stats"]["is_file"] is True
    assert envelope["permissions"]["exists"] is True


def test_read_base64(tmp_path: Path):
    target = tmp_path / "blob.bin"
    target.write_bytes(b"\x00\x01\xff")

    envelope = asyncio.run(_harness().envelope({"file_path": str(target), "encoding": "base64"}))

    assert envelope["content"] == "AAH/"


def test_missing_file_is_not_found(tmp_path: Path):
    harness = _harness()
    output = asyncio.run(harness.invoke({"file_path": str(tmp_path / "missing.txt")}))

    harness.assert_error(output, ErrorKind.NOT_FOUND, "missing.txt")


def test_directory_is_rejected(tmp_path: Path):
    harness = _harness()
    output = asyncio.run(harness.invoke({"file_path": str(tmp_path)}))

    harness.assert_error(output, ErrorKind.IS_A_DIRECTORY)


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs named pipes")
def test_non_regular_file_is_rejected(tmp_path: Path):
    fifo = tmp_path / "pipe"
    os.mkfifo(fifo)

    harness = _harness()
    output = asyncio.run(harness.invoke({"file_path": str(fifo)}))

    harness.assert_error(output, ErrorKind.INTERNAL_ERROR, "Path is not a file")


def test_oversized_file_is_refused(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(tools_file_read, "MAX_READ_BYTES", 4)
    target = tmp_path / "big.txt"
    target.write_text("too big", encoding="utf-8")

    harness = _harness()
    output = asyncio.run(harness.invoke({"file_path": str(target)}))

    harness.assert_error(output, ErrorKind.INTERNAL_ERROR, "File too large")


def test_traversal_guard_runs_before_io(tmp_path: Path, fake_home: Path):
    harness = _harness()
    output = asyncio.run(harness.invoke({"file_path": str(tmp_path / "x..y")}))

    harness.assert_error(output, ErrorKind.PERMISSION_DENIED, "Path traversal detected")


@pytest.mark.parametrize(
    ("path", "content", "expected"),
    [
        ("main.py", "", "python"),
        ("lib.HPP", "", "cpp-header"),
        ("run", "#!/usr/bin/env python3\nprint(1)", "python"),
        ("run", "#!/usr/bin/env node\n", "javascript"),
        ("run", "#!/bin/bash\n", "bash"),
        ("run", "#!/bin/sh\n", "shell"),
        ("run", "#!/usr/bin/perl\n", "script"),
        ("data", ' {"a": 1} ', "json"),
        ("data", "{not json}", "text"),
        ("feed", '<?xml version="1.0"?><a/>', "xml"),
        ("page", "<!DOCTYPE html><html></html>", "html"),
        ("plain", "hello", "text"),
    ],
)
def test_detect_content_type(path, content, expected):
    assert detect_content_type(path, content) == expected

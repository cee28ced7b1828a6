import os
from pathlib import Path

import pytest

from errors import ErrorKind, ToolError, ValidationToolError
from tools.fs import decode_content, encode_content, file_metadata, file_permissions, normalize_path, validate_encoding


def test_normalize_path_expands_home(fake_home: Path):
    assert normalize_path("~/notes.txt") == str(fake_home / "notes.txt")


def test_normalize_path_collapses_relative_segments(tmp_path: Path):
    raw = str(tmp_path / "a" / ".." / "b.txt")
    assert normalize_path(raw) == str(tmp_path / "b.txt")


def test_normalize_path_makes_relative_paths_absolute(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    assert normalize_path("file.txt") == os.path.join(os.getcwd(), "file.txt")


def test_normalize_path_rejects_leftover_dotdot_outside_home(fake_home: Path, tmp_path: Path):
    # A name that merely contains ".." survives normalization and trips the guard.
    with pytest.raises(ToolError) as exc:
        normalize_path(str(tmp_path / "evil..name"))
    assert exc.value.kind is ErrorKind.PERMISSION_DENIED
    assert "Path traversal detected" in exc.value.message


def test_normalize_path_allows_dotdot_names_under_home(fake_home: Path):
    target = fake_home / "archive..old"
    assert normalize_path(str(target)) == str(target)


def test_normalize_path_rejects_empty():
    with pytest.raises(ValidationToolError):
        normalize_path("")


def test_validate_encoding():
    assert validate_encoding(None) == "utf8"
    assert validate_encoding("base64") == "base64"
    with pytest.raises(ValidationToolError):
        validate_encoding("utf-16")


def test_encode_and_decode_binary_encodings():
    assert encode_content("68690a", "hex") == b"hi\n"
    assert decode_content(b"hi\n", "hex") == "68690a"
    assert decode_content(b"\x00\xff", "base64") == "AP8="
    assert decode_content(b"caf\xe9", "latin1") == "café"
    with pytest.raises(ValidationToolError):
        encode_content("zz", "hex")
    with pytest.raises(ValidationToolError):
        encode_content("not base64!", "base64")
    with pytest.raises(ValidationToolError):
        encode_content("café", "ascii")


def test_file_metadata_reports_file(tmp_path: Path):
    target = tmp_path / "data.bin"
    target.write_bytes(b"12345")

    meta = file_metadata(str(target))

    assert meta["size"] == 5
    assert meta["is_file"] is True
    assert meta["is_directory"] is False
    assert meta["is_symbolic_link"] is False
    assert meta["modified"].endswith("Z")
    assert meta["permissions"]["readable"] is True


def test_file_metadata_flags_symlink(tmp_path: Path):
    target = tmp_path / "real.txt"
    target.write_text("x", encoding="utf-8")
    link = tmp_path / "link.txt"
    link.symlink_to(target)

    meta = file_metadata(str(link))

    assert meta["is_symbolic_link"] is True
    assert meta["is_file"] is True


def test_file_permissions_for_missing_path(tmp_path: Path):
    perms = file_permissions(str(tmp_path / "missing"))
    assert perms == {"exists": False, "readable": False, "writable": False, "executable": False}

"""Filesystem helpers shared by the file and directory tools."""
from __future__ import annotations

import base64
import os
import stat as stat_module
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Final, Optional

from errors import ErrorKind, ToolError, ValidationToolError

FILE_ENCODINGS: Final[tuple[str, ...]] = ("utf8", "utf-8", "ascii", "latin1", "binary", "hex", "base64")

_TEXT_CODECS: Final[Dict[str, str]] = {
    "utf8": "utf-8",
    "utf-8": "utf-8",
    "ascii": "ascii",
    "latin1": "latin-1",
    "binary": "latin-1",
}


def normalize_path(file_path: str) -> str:
    """Return an absolute, normalized form of *file_path* after the traversal guard.

    A normalized path that still contains ``..`` is rejected unless it lies
    under the home directory. This is a coarse check, not a sandbox.
    """

    if not file_path or not isinstance(file_path, str):
        raise ValidationToolError("Path must be a non-empty string")

    normalized = os.path.normpath(os.path.abspath(os.path.expanduser(file_path)))
    home = str(Path.home())
    if ".." in normalized and not normalized.startswith(home):
        raise ToolError(f"Path traversal detected - access denied: {file_path}", ErrorKind.PERMISSION_DENIED)
    return normalized


def validate_encoding(encoding: Optional[str]) -> str:
    if encoding and encoding not in FILE_ENCODINGS:
        raise ValidationToolError(
            f"Unsupported encoding: {encoding}. Supported: {', '.join(FILE_ENCODINGS)}"
        )
    return encoding or "utf8"


def decode_content(data: bytes, encoding: str) -> str:
    if encoding == "hex":
        return data.hex()
    if encoding == "base64":
        return base64.b64encode(data).decode("ascii")
    return data.decode(_TEXT_CODECS[encoding], errors="replace")


def encode_content(content: str, encoding: str) -> bytes:
    if encoding == "hex":
        try:
            return bytes.fromhex(content)
        except ValueError as exc:
            raise ValidationToolError(f"content is not valid hex: {exc}") from exc
    if encoding == "base64":
        try:
            return base64.b64decode(content, validate=True)
        except ValueError as exc:
            raise ValidationToolError(f"content is not valid base64: {exc}") from exc
    try:
        return content.encode(_TEXT_CODECS[encoding])
    except UnicodeEncodeError as exc:
        raise ValidationToolError(f"content cannot be encoded as {encoding}: {exc}") from exc


def _iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat().replace("+00:00", "Z")


def file_metadata(path: str) -> Dict[str, Any]:
    """Stat *path* (following links) and return a ``FileMetadata`` mapping."""

    info = os.stat(path)
    created = getattr(info, "st_birthtime", info.st_ctime)
    return {
        "size": info.st_size,
        "created": _iso(created),
        "modified": _iso(info.st_mtime),
        "accessed": _iso(info.st_atime),
        "is_file": stat_module.S_ISREG(info.st_mode),
        "is_directory": stat_module.S_ISDIR(info.st_mode),
        "is_symbolic_link": os.path.islink(path),
        "permissions": {
            "readable": os.access(path, os.R_OK),
            "writable": os.access(path, os.W_OK),
            "executable": bool(info.st_mode & 0o111),
        },
    }


def file_permissions(path: str) -> Dict[str, bool]:
    return {
        "exists": os.path.exists(path),
        "readable": os.access(path, os.R_OK),
        "writable": os.access(path, os.W_OK),
        "executable": os.access(path, os.X_OK),
    }


__all__ = [
    "FILE_ENCODINGS",
    "decode_content",
    "encode_content",
    "file_metadata",
    "file_permissions",
    "normalize_path",
    "validate_encoding",
]

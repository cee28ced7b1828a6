from __future__ import annotations

import json
import os
from typing import Any, Dict

from errors import ErrorKind, ToolError
from tools.fs import FILE_ENCODINGS, decode_content, file_metadata, file_permissions, normalize_path
from tools.handler import ToolContext
from tools.options import MAX_READ_BYTES
from tools.schemas import FileReadInput

_CONTENT_TYPES: Dict[str, str] = {
    "js": "javascript",
    "mjs": "javascript",
    "ts": "typescript",
    "py": "python",
    "rb": "ruby",
    "go": "go",
    "rs": "rust",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "h": "c-header",
    "hpp": "cpp-header",
    "css": "css",
    "html": "html",
    "htm": "html",
    "xml": "xml",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "toml": "toml",
    "ini": "ini",
    "cfg": "config",
    "conf": "config",
    "md": "markdown",
    "txt": "text",
    "log": "log",
    "sh": "shell",
    "bash": "bash",
    "zsh": "zsh",
    "fish": "fish",
    "ps1": "powershell",
    "bat": "batch",
    "cmd": "batch",
}


def file_read_tool_def() -> dict:
    return {
        "name": "file_read",
        "description": (
            "Read a file and return its content together with metadata (size, timestamps, type flags, permissions) and a detected content type. "
            "`encoding` selects how bytes are rendered: utf8 (default), utf-8, ascii, latin1, binary, or hex/base64 for binary-safe output. Paths "
            "may use `~`; files larger than 50 MiB are refused."
        ),
        "input_schema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "file_path": {"type": "string", "description": "Path to the file to read."},
                "encoding": {
                    "type": "string",
                    "enum": list(FILE_ENCODINGS),
                    "description": "File encoding (default utf8).",
                },
            },
            "required": ["file_path"],
        },
    }


def detect_content_type(file_path: str, content: str) -> str:
    """Guess a content type from the extension, a shebang line or the content itself."""
    extension = os.path.splitext(file_path)[1].lstrip(".").lower()
    if extension in _CONTENT_TYPES:
        return _CONTENT_TYPES[extension]

    first_line = content.split("\n", 1)[0]
    if first_line.startswith("#!"):
        if "python" in first_line:
            return "python"
        if "node" in first_line:
            return "javascript"
        if "bash" in first_line:
            return "bash"
        if "sh" in first_line:
            return "shell"
        return "script"

    stripped = content.strip()
    if stripped.startswith("{") and stripped.endswith("}"):
        try:
            json.loads(stripped)
            return "json"
        except ValueError:
            pass

    if "<?xml" in content:
        return "xml"
    if "<!DOCTYPE html" in content or "<html" in content:
        return "html"
    return "text"


def file_read_impl(params: FileReadInput, context: ToolContext) -> Dict[str, Any]:
    path = normalize_path(params.file_path)
    stats = file_metadata(path)
    if stats["is_directory"]:
        raise ToolError(f"Path is a directory: {path}", ErrorKind.IS_A_DIRECTORY)
    if not stats["is_file"]:
        raise ToolError(f"Path is not a file: {path}", ErrorKind.INTERNAL_ERROR)
    if stats["size"] > MAX_READ_BYTES:
        raise ToolError(
            f"File too large: {stats['size']} bytes exceeds limit of {MAX_READ_BYTES // (1024 * 1024)}MB",
            ErrorKind.INTERNAL_ERROR,
        )

    with open(path, "rb") as fh:
        data = fh.read()
    content = decode_content(data, params.encoding)

    return {
        "operation": "file_read",
        "file_path": path,
        "content": content,
        "encoding": params.encoding,
        "stats": stats,
        "permissions": file_permissions(path),
        "content_length": len(content),
        "content_type": detect_content_type(path, content),
    }

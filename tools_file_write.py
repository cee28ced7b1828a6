from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from errors import ErrorKind, ToolError
from tools.fs import FILE_ENCODINGS, encode_content, file_metadata, file_permissions, normalize_path
from tools.handler import ToolContext
from tools.options import MAX_WRITE_BYTES
from tools.schemas import FileWriteInput

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200


def file_write_tool_def() -> dict:
    return {
        "name": "file_write",
        "description": (
            "Write content to a file, creating it or replacing what is there, and report metadata about the result. `encoding` controls how "
            "`content` is turned into bytes (hex and base64 decode the content first). Set `create_directories` to create missing parent "
            "directories and `backup` to copy an existing file to `<path>.backup-<timestamp>` before it is replaced. The response includes a "
            "short preview of the written text. Content larger than 100 MiB is refused."
        ),
        "input_schema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "file_path": {"type": "string", "description": "Path to the file to write."},
                "content": {"type": "string", "description": "Content to write to the file."},
                "encoding": {
                    "type": "string",
                    "enum": list(FILE_ENCODINGS),
                    "description": "File encoding (default utf8).",
                },
                "create_directories": {
                    "type": "boolean",
                    "description": "Create parent directories if they don't exist.",
                },
                "backup": {
                    "type": "boolean",
                    "description": "Create a backup of an existing file before overwriting it.",
                },
            },
            "required": ["file_path", "content"],
        },
    }


def create_backup(path: str) -> Optional[Dict[str, Any]]:
    """Copy an existing file next to itself; ``None`` when there is nothing to back up."""
    if not os.path.exists(path):
        return None

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%f")[:-3] + "Z"
    backup_path = f"{path}.backup-{timestamp}"
    try:
        shutil.copy2(path, backup_path)
    except OSError as exc:
        logger.warning("Backup of %s failed: %s", path, exc)
        return {"backup_created": False, "error": str(exc)}
    return {"backup_created": True, "backup_path": backup_path, "timestamp": timestamp}


def content_preview(content: str, max_length: int = PREVIEW_LENGTH) -> Dict[str, Any]:
    """Summarize *content* in at most *max_length* characters, whole lines where possible."""
    lines = content.split("\n")
    total_lines = len(lines)

    if len(content) <= max_length:
        return {
            "preview": content,
            "truncated": False,
            "total_length": len(content),
            "total_lines": total_lines,
        }

    preview = ""
    line_count = 0
    for line in lines:
        if len(preview) + len(line) + 1 > max_length:
            break
        preview = f"{preview}\n{line}" if preview else line
        line_count += 1

    if not preview:
        preview = content[: max_length - 3] + "..."
    elif line_count < total_lines:
        preview += "\n..."

    return {
        "preview": preview,
        "truncated": True,
        "total_length": len(content),
        "total_lines": total_lines,
        "preview_lines": line_count,
    }


def file_write_impl(params: FileWriteInput, context: ToolContext) -> Dict[str, Any]:
    path = normalize_path(params.file_path)
    data = encode_content(params.content, params.encoding)
    if len(data) > MAX_WRITE_BYTES:
        raise ToolError(
            f"Content too large: {len(data)} bytes exceeds limit of {MAX_WRITE_BYTES // (1024 * 1024)}MB",
            ErrorKind.INTERNAL_ERROR,
        )

    parent = os.path.dirname(path)
    if params.create_directories:
        os.makedirs(parent, exist_ok=True)
    if not os.path.isdir(parent):
        raise ToolError(
            f"Parent directory does not exist: {parent}. Use create_directories: true to create it.",
            ErrorKind.NOT_FOUND,
        )
    if not os.access(parent, os.W_OK):
        raise ToolError(f"No write permission to directory: {parent}", ErrorKind.PERMISSION_DENIED)

    existed = os.path.exists(path)
    if existed and os.path.isdir(path):
        raise ToolError(f"Path is a directory: {path}", ErrorKind.IS_A_DIRECTORY)
    if existed and not os.access(path, os.W_OK):
        raise ToolError(f"No write permission to file: {path}", ErrorKind.PERMISSION_DENIED)

    backup_info = create_backup(path) if params.backup else None
    previous_size = os.path.getsize(path) if existed else 0

    with open(path, "wb") as fh:
        fh.write(data)

    return {
        "operation": "file_write",
        "file_path": path,
        "content_size": len(data),
        "encoding": params.encoding,
        "created": not existed,
        "previous_size": previous_size,
        "stats": file_metadata(path),
        "permissions": file_permissions(path),
        "backup_created": backup_info,
        "content_preview": content_preview(params.content),
    }

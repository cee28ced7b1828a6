from __future__ import annotations

import os
import shutil
from typing import Any, Callable, Dict

from errors import ErrorKind, ToolError, ValidationToolError
from tools.fs import file_metadata, normalize_path
from tools.handler import ToolContext
from tools.schemas import FILE_OPERATIONS, FileOperationsInput


def file_operations_tool_def() -> dict:
    return {
        "name": "file_operations",
        "description": (
            "Copy, move or delete a single file. copy and move need a `destination`; an existing destination is only replaced when `overwrite` "
            "is true, and missing destination directories are created. Moves across filesystems are refused. delete removes a regular file; "
            "with `force` a missing file is not an error. Results include metadata for the source and destination."
        ),
        "input_schema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "operation": {
                    "type": "string",
                    "enum": list(FILE_OPERATIONS),
                    "description": "Operation to perform.",
                },
                "source": {"type": "string", "description": "Source file path."},
                "destination": {"type": "string", "description": "Destination path (required for copy/move)."},
                "overwrite": {"type": "boolean", "description": "Overwrite the destination if it exists."},
                "force": {"type": "boolean", "description": "Do not fail when deleting a missing file."},
            },
            "required": ["operation", "source"],
        },
    }


def _prepare_destination(destination: str, overwrite: bool) -> None:
    if os.path.lexists(destination):
        if not overwrite:
            raise ToolError(
                f"Destination already exists: {destination}. Use overwrite: true to replace it.",
                ErrorKind.ALREADY_EXISTS,
            )
        if os.path.isdir(destination):
            raise ToolError(f"Destination is a directory: {destination}", ErrorKind.IS_A_DIRECTORY)
    os.makedirs(os.path.dirname(destination), exist_ok=True)


def copy_file(source: str, destination: str, overwrite: bool) -> Dict[str, Any]:
    if not os.path.exists(source):
        raise ToolError(f"Source file not found: {source}", ErrorKind.NOT_FOUND)
    if not os.path.isfile(source):
        raise ToolError(f"Source is not a file: {source}", ErrorKind.IS_A_DIRECTORY)
    _prepare_destination(destination, overwrite)

    source_stats = file_metadata(source)
    shutil.copy2(source, destination)
    return {
        "operation": "copy",
        "source": source,
        "destination": destination,
        "source_stats": source_stats,
        "destination_stats": file_metadata(destination),
    }


def move_file(source: str, destination: str, overwrite: bool) -> Dict[str, Any]:
    if not os.path.lexists(source):
        raise ToolError(f"Source file not found: {source}", ErrorKind.NOT_FOUND)
    _prepare_destination(destination, overwrite)

    source_stats = file_metadata(source)
    # os.replace raises EXDEV across filesystems; that surfaces as CrossDeviceMove.
    os.replace(source, destination)
    return {
        "operation": "move",
        "source": source,
        "destination": destination,
        "source_stats": source_stats,
        "destination_stats": file_metadata(destination),
    }


def delete_file(path: str, force: bool) -> Dict[str, Any]:
    if not os.path.lexists(path):
        if not force:
            raise ToolError(f"File not found: {path}", ErrorKind.NOT_FOUND)
        return {"operation": "delete", "file_path": path, "existed": False}

    if os.path.isdir(path) and not os.path.islink(path):
        raise ToolError(f"Path is a directory, not a file: {path}", ErrorKind.IS_A_DIRECTORY)

    stats = file_metadata(path) if os.path.exists(path) else None
    os.unlink(path)
    return {"operation": "delete", "file_path": path, "existed": True, "deleted_stats": stats}


def file_operations_impl(params: FileOperationsInput, context: ToolContext) -> Dict[str, Any]:
    source = normalize_path(params.source)

    if params.operation == "delete":
        result = delete_file(source, params.force)
    else:
        if not params.destination:
            raise ValidationToolError(f"destination is required for {params.operation} operation")
        destination = normalize_path(params.destination)
        operations: Dict[str, Callable[[str, str, bool], Dict[str, Any]]] = {
            "copy": copy_file,
            "move": move_file,
        }
        handler = operations.get(params.operation)
        if handler is None:
            raise ValidationToolError(f"Unsupported operation: {params.operation}")
        result = handler(source, destination, params.overwrite)

    return {
        **result,
        "requested_operation": params.operation,
        "overwrite_allowed": params.overwrite,
        "force_enabled": params.force,
    }

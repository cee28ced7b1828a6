from __future__ import annotations

import os
import shutil
from typing import Any, Dict, Iterable, List, Optional

from errors import ErrorKind, ToolError, ValidationToolError
from tools.fs import file_metadata, file_permissions, normalize_path
from tools.handler import ToolContext
from tools.schemas import DIRECTORY_OPERATIONS, DirectoryOperationsInput

_MB = 1024 * 1024
_GB = 1024 * _MB


def directory_operations_tool_def() -> dict:
    return {
        "name": "directory_operations",
        "description": (
            "Create, list, delete or check a directory. create makes missing parents by default and succeeds if the directory already exists. "
            "list returns one entry per child (hidden names only with `include_hidden`; metadata and permissions unless `detailed` is false) plus "
            "a summary of counts, total size, the largest file and the most recently modified entry. delete refuses non-empty directories unless "
            "`recursive` is true and tolerates a missing path with `force`. exists reports whether the path is a directory."
        ),
        "input_schema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "operation": {
                    "type": "string",
                    "enum": list(DIRECTORY_OPERATIONS),
                    "description": "Operation to perform.",
                },
                "path": {"type": "string", "description": "Directory path."},
                "recursive": {
                    "type": "boolean",
                    "description": "Create parents / delete contents (create defaults to true, delete to false).",
                },
                "include_hidden": {"type": "boolean", "description": "Include hidden entries when listing."},
                "detailed": {"type": "boolean", "description": "Include metadata for each entry (default true)."},
                "force": {"type": "boolean", "description": "Do not fail when deleting a missing directory."},
            },
            "required": ["operation", "path"],
        },
    }


def create_directory(path: str, recursive: bool) -> Dict[str, Any]:
    if os.path.exists(path):
        if not os.path.isdir(path):
            raise ToolError(f"Path exists but is not a directory: {path}", ErrorKind.ALREADY_EXISTS)
        return {"operation": "create", "directory_path": path, "created": False, "existed": True}

    if recursive:
        os.makedirs(path)
    else:
        os.mkdir(path)
    return {
        "operation": "create",
        "directory_path": path,
        "created": True,
        "existed": False,
        "stats": file_metadata(path),
    }


def list_directory(path: str, include_hidden: bool, detailed: bool) -> Dict[str, Any]:
    if not os.path.exists(path):
        raise ToolError(f"Directory not found: {path}", ErrorKind.NOT_FOUND)
    if not os.path.isdir(path):
        raise ToolError(f"Path is not a directory: {path}", ErrorKind.NOT_A_DIRECTORY)

    items: List[Dict[str, Any]] = []
    for name in sorted(os.listdir(path)):
        if not include_hidden and name.startswith("."):
            continue
        full_path = os.path.join(path, name)
        if not detailed:
            items.append({"name": name, "path": full_path})
            continue
        try:
            items.append(
                {
                    "name": name,
                    "path": full_path,
                    "stats": file_metadata(full_path),
                    "permissions": file_permissions(full_path),
                }
            )
        except OSError as exc:
            items.append({"name": name, "path": full_path, "error": exc.strerror or str(exc)})

    return {
        "operation": "list",
        "directory_path": path,
        "item_count": len(items),
        "items": items,
        "summary": listing_summary(items),
    }


def listing_summary(items: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Aggregate counts and sizes over listing entries.

    Entries without stats (errors, non-detailed listings) count as ``other``.
    Symbolic links are counted as links even though their stats follow the
    target.
    """
    entries = list(items)
    summary: Dict[str, Any] = {
        "total_items": len(entries),
        "files": 0,
        "directories": 0,
        "symbolic_links": 0,
        "other": 0,
        "total_size": 0,
        "largest_file": None,
        "most_recent": None,
    }
    largest = 0
    most_recent: Optional[str] = None

    for item in entries:
        stats = item.get("stats")
        if item.get("error") or not stats:
            summary["other"] += 1
            continue

        if stats["is_symbolic_link"]:
            summary["symbolic_links"] += 1
        elif stats["is_file"]:
            summary["files"] += 1
            summary["total_size"] += stats["size"]
            if stats["size"] > largest:
                largest = stats["size"]
                summary["largest_file"] = {
                    "name": item["name"],
                    "size": stats["size"],
                    "size_mb": round(stats["size"] / _MB, 2),
                }
        elif stats["is_directory"]:
            summary["directories"] += 1
        else:
            summary["other"] += 1

        # ISO-8601 UTC strings with a fixed format compare chronologically.
        if most_recent is None or stats["modified"] > most_recent:
            most_recent = stats["modified"]
            summary["most_recent"] = {
                "name": item["name"],
                "modified": stats["modified"],
                "is_file": stats["is_file"],
                "is_directory": stats["is_directory"],
            }

    summary["total_size_mb"] = round(summary["total_size"] / _MB, 2)
    summary["total_size_gb"] = round(summary["total_size"] / _GB, 2)
    return summary


def delete_directory(path: str, recursive: bool, force: bool) -> Dict[str, Any]:
    if not os.path.lexists(path):
        if not force:
            raise ToolError(f"Directory not found: {path}", ErrorKind.NOT_FOUND)
        return {"operation": "delete", "directory_path": path, "existed": False}

    if not os.path.isdir(path) or os.path.islink(path):
        raise ToolError(f"Path is not a directory: {path}", ErrorKind.NOT_A_DIRECTORY)

    stats = file_metadata(path)
    if recursive:
        shutil.rmtree(path)
    else:
        # ENOTEMPTY maps to NotEmpty with a hint to pass recursive.
        os.rmdir(path)
    return {
        "operation": "delete",
        "directory_path": path,
        "existed": True,
        "recursive": recursive,
        "deleted_stats": stats,
    }


def directory_exists(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        return {"operation": "exists", "directory_path": path, "exists": False}

    is_directory = os.path.isdir(path)
    return {
        "operation": "exists",
        "directory_path": path,
        "exists": is_directory,
        "is_directory": is_directory,
        "stats": file_metadata(path) if is_directory else None,
    }


def directory_operations_impl(params: DirectoryOperationsInput, context: ToolContext) -> Dict[str, Any]:
    path = normalize_path(params.path)
    operation = params.operation

    if operation == "create":
        result = create_directory(path, True if params.recursive is None else params.recursive)
    elif operation == "list":
        result = list_directory(path, params.include_hidden, params.detailed)
    elif operation == "delete":
        result = delete_directory(path, bool(params.recursive), params.force)
    elif operation == "exists":
        result = directory_exists(path)
    else:
        raise ValidationToolError(f"Unsupported operation: {operation}")

    return {
        **result,
        "requested_operation": operation,
        "options": {
            "recursive": params.recursive,
            "include_hidden": params.include_hidden,
            "detailed": params.detailed,
            "force": params.force,
        },
    }

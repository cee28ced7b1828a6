"""Helpers to summarize tool invocations for log lines."""
from __future__ import annotations

from typing import Any, List, Mapping

_SUMMARY_KEYS: tuple[str, ...] = (
    "command",
    "interpreter",
    "file_path",
    "source",
    "path",
    "pid",
    "filter",
)


def truncate_text(value: Any, *, limit: int = 60) -> str:
    text = str(value)
    if len(text) <= limit:
        return text
    if limit < 4:
        return text[:limit]
    return text[: limit - 3] + "..."


def summarize_tool_payload(payload: Any, *, limit: int = 60) -> str:
    if isinstance(payload, Mapping):
        operation = payload.get("operation")
        for key in _SUMMARY_KEYS:
            val = payload.get(key)
            if isinstance(val, (str, int, float)) and not isinstance(val, bool):
                text = truncate_text(val, limit=limit)
                return f"{operation} {text}" if isinstance(operation, str) else text
        return operation if isinstance(operation, str) else ""
    if isinstance(payload, list):
        simple: List[str] = []
        for item in payload:
            if isinstance(item, (str, int, float, bool)):
                simple.append(truncate_text(item, limit=limit))
            if len(simple) >= 2:
                break
        return ", ".join(simple)
    if isinstance(payload, (str, int, float, bool)):
        return truncate_text(payload, limit=limit)
    return ""


def summarize_tool_call(name: str, payload: Any, *, limit: int = 60) -> str:
    base = name or "tool"
    summary = summarize_tool_payload(payload, limit=limit)
    return f"{base}({summary})" if summary else base


__all__ = ["truncate_text", "summarize_tool_payload", "summarize_tool_call"]

"""Structured tool error types."""
from __future__ import annotations

import errno
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Classification of tool errors surfaced to callers."""

    INVALID_PARAMS = "InvalidParams"
    UNKNOWN_OPERATION = "UnknownOperation"
    NOT_FOUND = "NotFound"
    ALREADY_EXISTS = "AlreadyExists"
    NOT_A_DIRECTORY = "NotADirectory"
    IS_A_DIRECTORY = "IsADirectory"
    PERMISSION_DENIED = "PermissionDenied"
    NOT_EMPTY = "NotEmpty"
    NO_SPACE = "NoSpace"
    TOO_MANY_OPEN_FILES = "TooManyOpenFiles"
    CROSS_DEVICE_MOVE = "CrossDeviceMove"
    TIMEOUT = "Timeout"
    NON_ZERO_EXIT = "NonZeroExit"
    SIGNALED = "Signaled"
    INTERNAL_ERROR = "InternalError"


class ToolError(Exception):
    """Base class for tool execution errors."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.INTERNAL_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind

    def __str__(self) -> str:  # pragma: no cover - convenience
        return self.message


class ValidationToolError(ToolError):
    """Malformed or missing request arguments; rejected before any side effect."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorKind.INVALID_PARAMS)


class UnknownToolError(ToolError):
    """Raised when an operation name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}", ErrorKind.UNKNOWN_OPERATION)
        self.name = name


class ProcessError(ToolError):
    """A spawned process finished abnormally; carries whatever output it produced."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        *,
        stdout: str = "",
        stderr: str = "",
        exit_code: Optional[int] = None,
        signal: Optional[str] = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message, kind)
        self.stdout = stdout
        self.stderr = stderr
        self.exit_code = exit_code
        self.signal = signal
        self.timed_out = timed_out


_ERRNO_KINDS: dict[int, tuple[ErrorKind, str]] = {
    errno.ENOENT: (ErrorKind.NOT_FOUND, "No such file or directory"),
    errno.EEXIST: (ErrorKind.ALREADY_EXISTS, "Path already exists"),
    errno.ENOTDIR: (ErrorKind.NOT_A_DIRECTORY, "Path is not a directory"),
    errno.EISDIR: (ErrorKind.IS_A_DIRECTORY, "Path is a directory"),
    errno.EACCES: (ErrorKind.PERMISSION_DENIED, "Permission denied"),
    errno.EPERM: (ErrorKind.PERMISSION_DENIED, "Operation not permitted"),
    errno.ENOTEMPTY: (ErrorKind.NOT_EMPTY, "Directory not empty"),
    errno.ENOSPC: (ErrorKind.NO_SPACE, "No space left on device"),
    errno.EMFILE: (ErrorKind.TOO_MANY_OPEN_FILES, "Too many open files"),
    errno.ENFILE: (ErrorKind.TOO_MANY_OPEN_FILES, "Too many open files in system"),
    errno.EXDEV: (ErrorKind.CROSS_DEVICE_MOVE, "Cannot move across different filesystems"),
}

_KIND_HINTS: dict[ErrorKind, str] = {
    ErrorKind.ALREADY_EXISTS: "Use overwrite: true to replace it.",
    ErrorKind.NOT_EMPTY: "Use recursive: true to delete non-empty directories.",
}


def classify_os_error(exc: OSError, path: Optional[str] = None) -> ToolError:
    """Translate an ``OSError`` into a ``ToolError`` with a domain ``ErrorKind``."""

    subject = path or exc.filename
    entry = _ERRNO_KINDS.get(exc.errno) if exc.errno is not None else None
    if entry is None:
        detail = exc.strerror or str(exc)
        message = f"{detail}: {subject}" if subject else detail
        return ToolError(message, ErrorKind.INTERNAL_ERROR)

    kind, text = entry
    message = f"{text}: {subject}" if subject else text
    hint = _KIND_HINTS.get(kind)
    if hint:
        message = f"{message}. {hint}"
    return ToolError(message, kind)


__all__ = [
    "ErrorKind",
    "ProcessError",
    "ToolError",
    "UnknownToolError",
    "ValidationToolError",
    "classify_os_error",
]

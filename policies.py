"""Command permission policy for shell-backed tools.

The policy is a plain substring match. It is a configuration knob for
keeping obviously unwanted commands out, not an isolation boundary.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SecurityMode(Enum):
    """How command permission is decided."""

    STANDARD = "standard"
    STRICT = "strict"


@dataclass(frozen=True)
class CommandPolicy:
    """Whitelist/blacklist rules applied before a command or script runs."""

    security_mode: SecurityMode = SecurityMode.STANDARD
    command_whitelist: Tuple[str, ...] = ()
    command_blacklist: Tuple[str, ...] = ()
    allowed_interpreters: Optional[Tuple[str, ...]] = None

    def can_execute_command(self, command: str) -> tuple[bool, Optional[str]]:
        """Return whether *command* is permitted under the configured mode."""

        text = (command or "").strip()
        if not text:
            return False, "Command must not be empty"
        lowered = text.lower()

        if self.security_mode == SecurityMode.STRICT:
            if not self.command_whitelist:
                return False, "No commands are whitelisted in strict mode"
            for pattern in self.command_whitelist:
                if pattern and pattern.lower() in lowered:
                    return True, None
            return False, "Command does not match any whitelisted pattern"

        for pattern in self.command_blacklist:
            if pattern and pattern.lower() in lowered:
                return False, f"Command contains blocked pattern: {pattern}"
        return True, None

    def can_use_interpreter(self, interpreter: str) -> tuple[bool, Optional[str]]:
        """Return whether scripts may run through *interpreter*."""

        if self.allowed_interpreters is None:
            return True, None
        if interpreter in self.allowed_interpreters:
            return True, None
        return False, f"Interpreter '{interpreter}' is not allowed by configuration"


__all__ = ["CommandPolicy", "SecurityMode"]

"""Process-wide server configuration loaded from a per-user JSON file."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from policies import CommandPolicy, SecurityMode

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TERMBRIDGE_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".termbridge" / "config.json"

DEFAULT_INTERPRETERS: tuple[str, ...] = (
    "bash",
    "sh",
    "powershell",
    "cmd",
    "python",
    "python3",
    "node",
    "perl",
    "ruby",
)


@dataclass(frozen=True)
class ServerConfig:
    """Timeouts, buffer limits and command policy shared by every tool."""

    max_buffer_size: int = 10 * 1024 * 1024
    default_timeout_ms: int = 30_000
    max_timeout_ms: int = 300_000
    script_timeout_ms: int = 60_000
    process_list_limit: int = 50
    max_process_limit: int = 500
    allowed_interpreters: tuple[str, ...] = DEFAULT_INTERPRETERS
    enable_logging: bool = True
    log_level: str = "info"
    security_mode: SecurityMode = SecurityMode.STANDARD
    command_whitelist: tuple[str, ...] = field(default_factory=tuple)
    command_blacklist: tuple[str, ...] = field(default_factory=tuple)

    @property
    def command_policy(self) -> CommandPolicy:
        return CommandPolicy(
            security_mode=self.security_mode,
            command_whitelist=self.command_whitelist,
            command_blacklist=self.command_blacklist,
            allowed_interpreters=self.allowed_interpreters,
        )

    def update_with(self, **overrides: Any) -> "ServerConfig":
        """Return a copy with *overrides* cast to each field's type."""

        known = {f.name: getattr(self, f.name) for f in fields(self)}
        cast: Dict[str, Any] = {}
        for key, raw_value in overrides.items():
            if key not in known:
                raise KeyError(f"Unknown configuration field '{key}'")
            cast[key] = _cast_value(known[key], raw_value)
        return replace(self, **cast)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["security_mode"] = self.security_mode.value
        data["allowed_interpreters"] = list(self.allowed_interpreters)
        data["command_whitelist"] = list(self.command_whitelist)
        data["command_blacklist"] = list(self.command_blacklist)
        return data


def resolve_config_path(path: Optional[Path] = None) -> Path:
    """Return the explicit path, the ``TERMBRIDGE_CONFIG`` path, or the default."""

    if path is not None:
        return path.expanduser().resolve()
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser().resolve()
    return DEFAULT_CONFIG_PATH


def load_server_config(path: Optional[Path] = None) -> ServerConfig:
    """Load configuration from *path* merged over the built-in defaults.

    A missing file yields the defaults. An unreadable or malformed file is
    logged and also yields the defaults so the server can still start.
    """

    chosen = resolve_config_path(path)
    if not chosen.exists():
        return ServerConfig()
    try:
        with chosen.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to load config %s: %s", chosen, exc)
        return ServerConfig()
    if not isinstance(data, Mapping):
        logger.error("Config %s must contain a JSON object", chosen)
        return ServerConfig()
    return config_from_mapping(data)


def config_from_mapping(mapping: Mapping[str, Any]) -> ServerConfig:
    defaults = ServerConfig()
    known = {f.name for f in fields(defaults)}
    config = defaults
    for key, value in mapping.items():
        if key not in known:
            logger.warning("Ignoring unknown config key '%s'", key)
            continue
        try:
            config = config.update_with(**{key: value})
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring invalid value for config key '%s': %s", key, exc)
    return config


class ConfigManager:
    """Owns the live ``ServerConfig`` and persists every mutation to disk."""

    def __init__(self, path: Optional[Path] = None, *, config: Optional[ServerConfig] = None) -> None:
        self.path = resolve_config_path(path)
        self._config = config if config is not None else load_server_config(self.path)

    @property
    def config(self) -> ServerConfig:
        return self._config

    def get(self, key: str) -> Any:
        return getattr(self._config, key)

    def set(self, key: str, value: Any) -> ServerConfig:
        return self.update({key: value})

    def update(self, updates: Mapping[str, Any]) -> ServerConfig:
        self._config = self._config.update_with(**dict(updates))
        self.save()
        return self._config

    def reset(self) -> ServerConfig:
        self._config = ServerConfig()
        self.save()
        return self._config

    def save(self) -> None:
        """Write the current configuration; failures are logged, not raised."""

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._config.to_dict(), indent=2), encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to save config %s: %s", self.path, exc)
            return
        logger.info("Config saved to %s", self.path)


def _cast_value(example: Any, raw: Any) -> Any:
    if isinstance(example, Enum):
        if isinstance(raw, Enum):
            return raw
        if isinstance(raw, str):
            candidate = raw.strip()
            if not candidate:
                return example
            try:
                return type(example)(candidate.lower())
            except ValueError:
                try:
                    return type(example)[candidate.upper()]
                except KeyError as exc:
                    raise ValueError(f"invalid enum value {raw!r}") from exc
        raise ValueError(f"unsupported enum raw value {raw!r}")
    if isinstance(example, bool):
        if isinstance(raw, str):
            lowered = raw.strip().lower()
            if lowered in {"true", "1", "yes", "on"}:
                return True
            if lowered in {"false", "0", "no", "off"}:
                return False
        return bool(raw)
    if isinstance(example, int):
        return int(raw)
    if isinstance(example, tuple):
        if isinstance(raw, str):
            return tuple(part.strip() for part in raw.split(",") if part.strip())
        if isinstance(raw, Iterable):
            return tuple(str(item) for item in raw)
        return example
    return type(example)(raw) if type(example) is not type(raw) else raw


__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_INTERPRETERS",
    "ServerConfig",
    "config_from_mapping",
    "load_server_config",
    "resolve_config_path",
]

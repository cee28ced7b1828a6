"""Shared pytest fixtures for the termbridge test suite."""
from __future__ import annotations

from pathlib import Path

import pytest

from config import CONFIG_ENV_VAR, ServerConfig
from tools.handler import ToolContext


@pytest.fixture
def server_config() -> ServerConfig:
    return ServerConfig()


@pytest.fixture
def tool_context(server_config: ServerConfig) -> ToolContext:
    return ToolContext(config=server_config)


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``Path.home()`` at a scratch directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Route config loading through a file under ``tmp_path``."""
    path = tmp_path / "termbridge" / "config.json"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    return path

from __future__ import annotations

import os
import platform
import socket
import sys
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from tools.handler import ToolContext
from tools.schemas import SystemInfoInput

_STARTED_AT = time.monotonic()


def system_info_tool_def() -> dict:
    return {
        "name": "get_system_info",
        "description": (
            "Report information about the host and the server process: platform, architecture, OS release, Python version, hostname, pid, "
            "server uptime, process memory usage, CPU count, model and clock speed, load average where the platform provides one, home, temp "
            "and current directories, the number of environment variables and a timestamp. Takes no arguments."
        ),
        "input_schema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {},
        },
    }


def _cpu_speed() -> Optional[float]:
    """Current clock speed in MHz, or ``None`` where the platform does not expose it."""
    try:
        freq = psutil.cpu_freq()
    except (NotImplementedError, OSError):
        return None
    return round(freq.current, 2) if freq else None


def _process_memory() -> Dict[str, int]:
    info = psutil.Process().memory_info()
    memory = psutil.virtual_memory()
    return {
        "rss": info.rss,
        "vms": info.vms,
        "system_total": memory.total,
        "system_available": memory.available,
    }


def _load_average() -> Optional[List[float]]:
    if not hasattr(psutil, "getloadavg"):
        return None
    return [round(value, 2) for value in psutil.getloadavg()]


def system_info_impl(params: SystemInfoInput, context: ToolContext) -> Dict[str, Any]:
    cpu_count = psutil.cpu_count(logical=True) or 0
    return {
        "system_info": {
            "platform": sys.platform,
            "architecture": platform.machine(),
            "release": platform.release(),
            "type": platform.system(),
            "version": platform.version(),
            "python_version": platform.python_version(),
            "hostname": socket.gethostname(),
            "pid": os.getpid(),
            "uptime": round(time.monotonic() - _STARTED_AT, 3),
            "memory": _process_memory(),
            "cpu_count": cpu_count,
            "cpu_info": {
                "model": platform.processor() or platform.machine(),
                "speed": _cpu_speed(),
                "cores": cpu_count,
            },
            "load_average": _load_average(),
            "home_directory": str(Path.home()),
            "temp_directory": tempfile.gettempdir(),
            "current_working_directory": os.getcwd(),
            "environment_variables": len(os.environ),
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
    }

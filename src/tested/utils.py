from __future__ import annotations

import logging
import os as _os
from typing import Optional

LOG_LEVEL_ENV = "TESTED_LOG_LEVEL"
DEBUG_PY_TRACE_ENV = "TESTED_DEBUG_PY_TRACE"

_TRUTHY = ("1", "true", "yes", "on")

def debug_py_trace_enabled() -> bool:
    """Check whether Python tracebacks should accompany error reports."""
    raw = _os.environ.get(DEBUG_PY_TRACE_ENV)
    if raw is None:
        return False

    return raw.strip().lower() in _TRUTHY

def log_level_from_env(default: int = logging.WARNING) -> int:
    raw = _os.environ.get(LOG_LEVEL_ENV)
    if not raw:
        return default

    raw = raw.strip()
    if raw.isdigit():
        return int(raw)

    level = logging.getLevelName(raw.upper())
    if isinstance(level, int):
        return level

    return default

def configure_logging(level: Optional[int] = None) -> None:
    """Set up root logging for command-line use; the library never calls this."""
    if level is None:
        level = log_level_from_env()

    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        level=level,
    )

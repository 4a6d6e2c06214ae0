"""Helpers for constructing standard recording paths."""

import re
from datetime import datetime
from pathlib import Path

from ..config.app_config import AppPaths

DEFAULT_FILENAME = "data.csv"

# Allow only alphanumerics, underscore, dot, and dash.
_SESSION_NAME_RE = re.compile(r"[^A-Za-z0-9_.-]+")


def _sanitize_session_name(name: str) -> str:
    """
    Sanitize a session name for use in a file name.

    - Replace disallowed characters with '_'.
    - Strip leading/trailing underscores.
    - Fall back to 'session' if nothing remains.
    """
    cleaned = _SESSION_NAME_RE.sub("_", name).strip("_")
    return cleaned or "session"


def default_output_path(base: Path | None = None) -> Path:
    """Single rolling export file, overwritten by every session."""
    root = base or AppPaths().data_root
    return root / DEFAULT_FILENAME


def session_output_path(name: str, base: Path | None = None, *, now: datetime | None = None) -> Path:
    """
    Timestamped CSV path for a named session.

    Example: "forehand_20251204_153045.csv"
    """
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    root = base or AppPaths().recordings
    return root / f"{_sanitize_session_name(name)}_{timestamp}.csv"

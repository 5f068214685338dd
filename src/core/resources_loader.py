"""Locating bundled/user data files (domain lists).

This module lives in `core/` because:
- it centralizes *which* data files we need (domain lists) without coupling
  to the CLI
- it avoids duplicating path logic across adapters.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from core.config import get_user_config_dir


def _project_root() -> Path:
    # core/resources_loader.py -> core -> src -> <project_root>
    return Path(__file__).resolve().parents[2]


def _data_dir() -> Path:
    """Runtime data directory.

    Rules:
    - If DNSCHECK_DATA_DIR is set, it is used as is.
    - When frozen (PyInstaller), use a writable per-user path.
    - In development, use <project_root>/data.
    """

    override = (os.environ.get("DNSCHECK_DATA_DIR") or "").strip()
    if override:
        return Path(override)

    if getattr(sys, "frozen", False):
        return get_user_config_dir() / "data"

    return _project_root() / "data"


def get_default_list_path(filename: str) -> Path | None:
    """Look for a domain list in the usual places.

    Order:
    1) <data dir>/<filename>
    2) <user config dir>/data/<filename>
    3) ./<filename> (cwd)
    """

    candidates = [
        _data_dir() / filename,
        get_user_config_dir() / "data" / filename,
        Path.cwd() / filename,
    ]
    for p in candidates:
        if p.exists() and p.is_file():
            return p
    return None


def resolve_domains_file(path: Path) -> Path:
    """Return `path` if it exists, else a default location holding the same name."""

    if path.exists():
        return path
    return get_default_list_path(path.name) or path

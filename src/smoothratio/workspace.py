# src/smoothratio/workspace.py
"""
The user's workspace: editable profiles and saved reports.

    $SMOOTHRATIO_HOME            if set
    ~/Documents/SmoothRatio      otherwise

    profiles/   *.toml, seeded from the packaged profiles
    results/    default home for --output and --csv files
"""

from __future__ import annotations

import logging
import os
from importlib.resources import files as pkg_files
from pathlib import Path

logger = logging.getLogger(__name__)

SUBDIRS = ("profiles", "results")


def workspace_dir() -> Path:
    env = os.environ.get("SMOOTHRATIO_HOME")
    base = Path(env).expanduser() if env else Path.home() / "Documents" / "SmoothRatio"
    return base.resolve()


def _packaged_profiles():
    """Packaged *.toml profiles as importlib.resources traversables."""
    folder = pkg_files("smoothratio") / "profiles"
    return sorted(
        (res for res in folder.iterdir() if res.is_file() and res.name.endswith(".toml")),
        key=lambda res: res.name,
    )


def seed_workspace(*, overwrite: bool = False) -> tuple[Path, int]:
    """
    Create the workspace folders and copy the packaged profiles into it.
    Existing profiles are left alone unless overwrite=True.
    Returns (workspace_path, profiles_copied).
    """
    root = workspace_dir()
    for sub in SUBDIRS:
        (root / sub).mkdir(parents=True, exist_ok=True)

    copied = 0
    for res in _packaged_profiles():
        target = root / "profiles" / res.name
        if target.exists() and not overwrite:
            continue
        target.write_bytes(res.read_bytes())
        copied += 1
    if copied:
        logger.debug("seeded %d profile(s) into %s", copied, root / "profiles")
    return root, copied


def ensure_workspace_seeded() -> tuple[Path, bool]:
    root, copied = seed_workspace()
    return root, copied > 0

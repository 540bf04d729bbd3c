# src/smoothratio/output_manager.py
"""
Report output: screen, one file per run, or one file collecting every run.

Files never receive ANSI colour codes. Relative targets live in the workspace.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from smoothratio.fmt import strip_ansi
from smoothratio.workspace import workspace_dir

logger = logging.getLogger(__name__)

_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._=-]+")


def resolve_output_path(target: str, root: str | Path | None = None) -> Path:
    """'~' is expanded, absolute paths stay put, anything else goes under root (default: workspace)."""
    if not target:
        raise ValueError("Output path is empty")
    path = Path(target).expanduser()
    if not path.is_absolute():
        path = Path(root if root is not None else workspace_dir()) / path
    return Path(os.path.normpath(path))


def unused_path(path: Path) -> Path:
    """path itself, or path with _2, _3, ... before the suffix when it already exists."""
    candidate, i = path, 2
    while candidate.exists():
        candidate = path.with_name(f"{path.stem}_{i}{path.suffix}")
        i += 1
    return candidate


def run_filename(label: str, ext: str = ".txt") -> str:
    """Filesystem-safe name for one run, e.g. 'maxn=1000000_medium_spikes.txt'."""
    stem = _UNSAFE_RE.sub("_", label).strip("._-=") or "run"
    return stem + ext


def _is_directory_target(target: str) -> bool:
    return target in (".", "./") or target.endswith(("/", "\\"))


class OutputManager:
    """
    Tee report lines to the screen and, optionally, a file.

        with OutputManager("results/", label="maxn=1000000_medium_spikes") as om:
            om.write("...")      # per-run file, written on close, never overwritten

        with OutputManager("runs.txt") as om:
            om.write("...")      # appended line by line

    quiet=True silences the screen side only.
    """

    def __init__(self, output_file: str | None = None, quiet: bool = False, label: str | None = None):
        self.quiet = quiet
        self.label = label
        self._lines: list[str] = []
        self._path: Path | None = None
        self._append = False

        target = output_file or ""
        if not target:
            return
        if _is_directory_target(target):
            if not label:
                raise ValueError("A run label must be provided when outputting to a directory.")
            folder = resolve_output_path(target)
            folder.mkdir(parents=True, exist_ok=True)
            self._path = unused_path(folder / run_filename(label))
        else:
            self._path = resolve_output_path(target)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._append = True

    def __enter__(self) -> OutputManager:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @property
    def path(self) -> Path | None:
        return self._path

    def _save(self, text: str, mode: str) -> None:
        try:
            with self._path.open(mode, encoding="utf-8") as fh:
                fh.write(strip_ansi(text))
        except OSError as e:
            logger.warning("could not write report to %s: %s", self._path, e)

    def write(self, *args, sep: str = " ", end: str = "\n") -> None:
        text = sep.join(str(a) for a in args) + end
        self._lines.append(text)
        if not self.quiet:
            print(text, end="")
        if self._append:
            self._save(text, "a")

    def getvalue(self) -> str:
        """Everything written since the last close(), colour codes included."""
        return "".join(self._lines)

    def close(self) -> None:
        if self._path is None or not self._lines:
            return
        if self._append:
            self._save("\n", "a")           # blank line between runs
        else:
            self._save(self.getvalue(), "w")
        self._lines.clear()

# src/smoothratio/progress.py
from __future__ import annotations

import sys
import time

from smoothratio.search import ProgressEvent

_SPINNER = "|/-\\"
_BAR_WIDTH = 24
_REDRAW_EVERY = 0.05  # seconds


class Progress:
    """One-line live progress for a search, redrawn in place with '\\r'."""

    def __init__(self, *, enabled: bool = True, stream=None):
        self.enabled = enabled
        self.stream = stream or sys.stdout
        self.start = time.perf_counter()
        self._last_draw = 0.0
        self._ticks = 0
        self._width = 0

    def update(self, event: ProgressEvent, *, force: bool = False) -> None:
        if not self.enabled:
            return
        now = time.perf_counter()
        if not force and now - self._last_draw < _REDRAW_EVERY:
            return
        self._last_draw = now
        self._ticks += 1

        pct = min(max(event.percent, 0), 100)
        filled = pct * _BAR_WIDTH // 100
        rate = event.processed / max(now - self.start, 1e-9)
        at = f"n = {event.current_n:,}" if event.current_n is not None else ""
        line = (
            f"[{_SPINNER[self._ticks % len(_SPINNER)]}] [{'#' * filled}{'-' * (_BAR_WIDTH - filled)}] "
            f"{pct:3d}%  {event.processed:,}/{event.total_estimate:,}  {rate:,.0f}/s  {at}"
        )
        self._width = max(self._width, len(line))
        self.stream.write("\r" + line)
        self.stream.flush()

    def elapsed(self) -> float:
        return time.perf_counter() - self.start

    def done(self) -> None:
        """Erase the progress line."""
        if not self.enabled or not self._width:
            return
        self.stream.write("\r" + " " * self._width + "\r")
        self.stream.flush()

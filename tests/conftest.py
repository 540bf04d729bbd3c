# tests/conftest.py
from __future__ import annotations

import logging

import pytest

from smoothratio import runtime


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Every test gets its own SMOOTHRATIO_HOME and a clean runtime."""
    home = tmp_path / "workspace"
    monkeypatch.setenv("SMOOTHRATIO_HOME", str(home))
    runtime.reset()
    yield home
    runtime.reset()


@pytest.fixture
def check_record():
    """Exactness checks shared by every test that produces ResultRecords."""

    def _check(rec) -> None:
        assert 2**rec.pow2 * 3**rec.pow3 * rec.remainder == rec.n * (rec.n + 1)
        assert rec.remainder % 2 != 0
        assert rec.remainder % 3 != 0
        assert rec.pow2 >= 1
        assert rec.pow3 >= 0

    return _check


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """The CLI installs its own handler; undo that so caplog keeps working."""
    log = logging.getLogger("smoothratio")
    handlers, level, propagate = log.handlers[:], log.level, log.propagate
    yield
    log.handlers[:] = handlers
    log.setLevel(level)
    log.propagate = propagate

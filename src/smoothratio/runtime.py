# src/smoothratio/runtime.py
"""
Active profile for the current context.

The CLI loads one profile and applies it; library code reads its tunables
through CFG("SECTION.KEY", default) or CFG_INT and never opens TOML itself.
With no profile applied every lookup falls back to the caller's default.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from smoothratio.utility import UserInputError


@dataclass
class Runtime:
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=dict)
    debug: bool = False

    def apply(self, settings: Any) -> None:
        """Install a loaded profile (anything with as_dict()) or a plain mapping."""
        if isinstance(settings, Mapping):
            data, name = settings, "custom"
        elif callable(getattr(settings, "as_dict", None)):
            data, name = settings.as_dict(), getattr(settings, "name", None) or "default"
        else:
            raise TypeError(f"cannot apply settings of type {type(settings).__name__}")

        self.settings = dict(data)
        self.profile_name = name
        flag = self.lookup("BEHAVIOUR.DEBUG")
        if isinstance(flag, bool):
            self.debug = flag

    def lookup(self, key: str, default: Any = None) -> Any:
        if not key:
            return default
        node: Any = self.settings
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]
        return node

    def integer(self, key: str, default: int) -> int:
        value = self.lookup(key, default)
        if isinstance(value, bool) or not isinstance(value, int):
            raise UserInputError(
                f"profile '{self.profile_name}': {key} must be an integer, got {value!r}."
            )
        return value


_active: ContextVar[Runtime | None] = ContextVar("smoothratio_runtime", default=None)


def current() -> Runtime:
    rt = _active.get()
    if rt is None:
        rt = Runtime()
        _active.set(rt)
    return rt


def reset() -> None:
    """Forget the applied profile (tests start from a clean slate)."""
    _active.set(None)


def APPLY(settings: Any) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().lookup(key, default)


def CFG_INT(key: str, default: int) -> int:
    return current().integer(key, default)

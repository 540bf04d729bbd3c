# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import os

# Largest n the search accepts; n(n+1) then stays around 10**30.
MAX_SUPPORTED_N = 10**15


class UserInputError(Exception):
    pass


class InvalidSearchInput(UserInputError, ValueError):
    """Run-level configuration rejected before a search starts."""


class DegenerateCandidate(ValueError):
    """n too small for ln(ln(n)) to be finite and positive (n < 3)."""


class NonFiniteResult(ArithmeticError):
    """log R(n) evaluated to NaN or an infinity."""


def dec_digits(n: int) -> int:
    """Decimal digit count of |n| from its bit length, without str()."""
    n = abs(n)
    if n < 10:
        return 1
    est = int(n.bit_length() * 0.30102999566398120)   # d-1 or d
    return est + (n >= 10**est)


def validate_max_n(max_n: object) -> int:
    """Return max_n as int or raise InvalidSearchInput."""
    if max_n is None:
        raise InvalidSearchInput("maximum n is missing.")
    if isinstance(max_n, bool) or not isinstance(max_n, int):
        raise InvalidSearchInput(f"maximum n must be an integer, got {type(max_n).__name__}.")
    if max_n < 2:
        raise InvalidSearchInput(f"maximum n must be at least 2, got {max_n}.")
    if max_n > MAX_SUPPORTED_N:
        raise InvalidSearchInput(
            f"maximum n {max_n} exceeds the supported ceiling 10^15."
        )
    return max_n


_RESERVED_DEVICES = frozenset(
    {"con", "prn", "aux", "nul", *(f"com{i}" for i in range(1, 10)), *(f"lpt{i}" for i in range(1, 10))}
)
_PROTECTED_NAMES = frozenset({"pyproject.toml", "license"})
_PROTECTED_SUFFIXES = frozenset({".py", ".md", ".toml"})


def validate_output_setting(target: str | None) -> str | None:
    """
    Return a report/CSV target unchanged, or raise ValueError when it would
    clobber a source or project file or name a Windows device. Directory
    targets ('.', 'results/') are always accepted.
    """
    if not target or target in (".", "./") or target.endswith("/"):
        return target
    base = os.path.basename(target)
    stem, suffix = os.path.splitext(base.lower())
    if base.lower() in _PROTECTED_NAMES or stem in _RESERVED_DEVICES:
        raise ValueError(f"Forbidden output filename: {base}")
    if suffix in _PROTECTED_SUFFIXES:
        raise ValueError(f"Forbidden output file extension: {suffix}")
    return target


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    """{'A': {'B': 1}} -> {'A.B': 1}; used for the --debug settings dump."""
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out

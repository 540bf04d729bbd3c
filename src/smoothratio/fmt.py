# src/smoothratio/fmt.py
from __future__ import annotations

import math
import re

from colorama import Fore, Style

from smoothratio.factor import is_composite_base, remainder_factors
from smoothratio.runtime import CFG, CFG_INT
from smoothratio.utility import dec_digits

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

_SUPERSCRIPTS = str.maketrans("0123456789", "⁰¹²³⁴⁵⁶⁷⁸⁹")


def strip_ansi(s: str) -> str:
    return ANSI_RE.sub("", s)


def visible_len(s: str) -> int:
    return len(strip_ansi(s))


def pad(s: str, width: int, *, right: bool = False) -> str:
    """ljust/rjust that ignores colour codes."""
    fill = " " * max(0, width - visible_len(s))
    return fill + s if right else s + fill


def group_int(n: int) -> str:
    """1234567 -> '1,234,567'."""
    return f"{n:,}"


def format_log_ratio(x: float | None, digits: int = 4) -> str:
    if x is None:
        return "-"
    return f"{x:.{digits}f}"


def format_ratio(x: float | None, digits: int = 4) -> str:
    """Scientific notation; 0.0 and inf are legitimate values of exp(log R)."""
    if x is None:
        return "-"
    if math.isinf(x):
        return "∞"
    return f"{x:.{digits}e}"


def format_power(base: int, exp: int) -> str:
    if exp == 1:
        return str(base)
    return f"{base}{str(exp).translate(_SUPERSCRIPTS)}"


def format_factorization(fac: dict[int, int], *, mark_composite: bool = True) -> str:
    """{5: 2, 7: 1} -> '5²·7'; composite cofactors are shown dimmed with '?'."""
    parts = []
    for p in sorted(fac):
        tok = format_power(p, fac[p])
        if mark_composite and is_composite_base(p):
            tok = f"{Style.DIM}{tok}?{Style.RESET_ALL}"
        parts.append(tok)
    return "·".join(parts) or "1"


def format_remainder(m: int, *, factor: bool | None = None) -> str:
    """
    Render the 6-free remainder m. With DISPLAY.FACTOR_REMAINDER it is
    factorized (bounded by DISPLAY.REMAINDER_TRIAL_LIMIT), otherwise
    abbreviated when it gets long.
    """
    if factor is None:
        factor = bool(CFG("DISPLAY.FACTOR_REMAINDER", True))
    if m == 1:
        return "1"
    if factor:
        limit = CFG_INT("DISPLAY.REMAINDER_TRIAL_LIMIT", 1_000_000)
        return format_factorization(remainder_factors(m, limit=limit))
    if dec_digits(m) > 15:
        return f"{m:.2e}"
    return group_int(m)


def format_smooth_part(pow2: int, pow3: int) -> str:
    parts = [format_power(2, pow2)]
    if pow3:
        parts.append(format_power(3, pow3))
    return "·".join(parts)


def highlight(s: str, color: str = Fore.GREEN) -> str:
    return f"{color}{Style.BRIGHT}{s}{Style.RESET_ALL}"

# src/smoothratio/ratio.py
#
# log R(n) = pow2*ln2 + pow3*ln3 - ln(n) - ln(ln(n)), evaluated in log space so
# that neither 2**pow2 * 3**pow3 nor n*ln(n) is ever formed as a float.

from __future__ import annotations

import math

from smoothratio.factor import factorize23
from smoothratio.records import ResultRecord
from smoothratio.utility import DegenerateCandidate, NonFiniteResult

LOG2 = math.log(2)
LOG3 = math.log(3)


def evaluate(n: int, pow2: int, pow3: int) -> tuple[float, float]:
    """Return (log_ratio, ratio). ratio may be 0.0 (underflow) or inf (overflow)."""
    if n < 3:
        raise DegenerateCandidate(f"n={n}: ln(ln(n)) is not positive")
    log_n = math.log(n)
    log_ratio = pow2 * LOG2 + pow3 * LOG3 - log_n - math.log(log_n)
    if not math.isfinite(log_ratio):
        raise NonFiniteResult(f"n={n}: log ratio is {log_ratio}")
    try:
        ratio = math.exp(log_ratio)
    except OverflowError:
        ratio = math.inf
    return log_ratio, ratio


def compute_record(n: int) -> ResultRecord:
    """Factor n(n+1) exactly and evaluate it; one atomic unit of search work."""
    pow2, pow3, remainder = factorize23(n)
    log_ratio, ratio = evaluate(n, pow2, pow3)
    return ResultRecord(
        n=n,
        pow2=pow2,
        pow3=pow3,
        remainder=remainder,
        log_ratio=log_ratio,
        ratio=ratio,
    )

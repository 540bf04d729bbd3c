# src/smoothratio/factor.py
#
# Exact 2/3-part extraction for n(n+1).

from __future__ import annotations

from typing import NamedTuple

import gmpy2
from sympy import factorint, isprime


class Factorization(NamedTuple):
    pow2: int
    pow3: int
    remainder: int


def factorize23_value(value: int) -> Factorization:
    """Strip every factor 2, then every factor 3, from a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an integer, got {type(value).__name__}")
    if value < 1:
        raise ValueError(f"expected a positive integer, got {value}")
    rest, pow2 = gmpy2.remove(gmpy2.mpz(value), 2)
    rest, pow3 = gmpy2.remove(rest, 3)
    return Factorization(int(pow2), int(pow3), int(rest))


def factorize23(n: int) -> Factorization:
    """
    Return (pow2, pow3, remainder) with n*(n+1) == 2**pow2 * 3**pow3 * remainder
    and gcd(remainder, 6) == 1. Exact for any n >= 2.
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueError(f"n must be an integer, got {type(n).__name__}")
    if n < 2:
        raise ValueError(f"n must be >= 2, got {n}")
    return factorize23_value(n * (n + 1))


def remainder_factors(m: int, limit: int | None = 10**6) -> dict[int, int]:
    """
    Factor the 6-free remainder for display.

    With a trial limit, sympy may stop early and leave a composite cofactor
    as a key; callers flag those with is_composite_base().
    """
    if m <= 1:
        return {}
    return dict(factorint(m, limit=limit))


def is_composite_base(p: int) -> bool:
    return p > 1 and not isprime(p)

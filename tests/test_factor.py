# tests/test_factor.py
"""
Exact 2/3 extraction from n(n+1).

Run: pytest -v
"""

from __future__ import annotations

import pytest
from sympy import multiplicity

from smoothratio.factor import (
    factorize23,
    factorize23_value,
    is_composite_base,
    remainder_factors,
)


@pytest.mark.parametrize(
    ("n", "expected"),
    [
        (2, (1, 1, 1)),      # 6 = 2·3
        (3, (2, 1, 1)),      # 12 = 2²·3
        (7, (3, 0, 7)),      # 56 = 2³·7
        (8, (3, 2, 1)),      # 72 = 2³·3²
        (9, (1, 2, 5)),      # 90 = 2·3²·5
        (80, (4, 4, 5)),     # 6480 = 2⁴·3⁴·5
    ],
)
def test_known_values(n, expected):
    assert tuple(factorize23(n)) == expected


def test_named_fields():
    f = factorize23(8)
    assert (f.pow2, f.pow3, f.remainder) == (3, 2, 1)


def test_identity_small_range():
    for n in range(2, 5000):
        pow2, pow3, m = factorize23(n)
        assert 2**pow2 * 3**pow3 * m == n * (n + 1), n
        assert m % 2 != 0 and m % 3 != 0, n
        assert pow2 >= 1, n


@pytest.mark.parametrize(
    "n",
    [
        10**15,
        10**15 - 1,
        2**49 - 1,
        2**49,
        3**31 - 1,
        2**20 * 3**18 - 1,
        2**20 * 3**18 + 1,
        999_999_999_999_989,
    ],
)
def test_identity_large_n_matches_sympy(n):
    pow2, pow3, m = factorize23(n)
    p = n * (n + 1)
    assert 2**pow2 * 3**pow3 * m == p
    assert pow2 == multiplicity(2, p)
    assert pow3 == multiplicity(3, p)
    assert isinstance(m, int) and not isinstance(m, bool)


def test_results_are_plain_ints():
    f = factorize23(2**40 - 1)
    assert all(type(x) is int for x in f)


@pytest.mark.parametrize("bad", [1, 0, -5])
def test_rejects_n_below_two(bad):
    with pytest.raises(ValueError):
        factorize23(bad)


@pytest.mark.parametrize("bad", [2.5, "10", True, None])
def test_rejects_non_integers(bad):
    with pytest.raises(ValueError):
        factorize23(bad)


def test_value_form():
    assert tuple(factorize23_value(1)) == (0, 0, 1)
    assert tuple(factorize23_value(2**10 * 3**7 * 35)) == (10, 7, 35)
    with pytest.raises(ValueError):
        factorize23_value(0)


def test_remainder_factors():
    assert remainder_factors(1) == {}
    assert remainder_factors(5 * 5 * 7) == {5: 2, 7: 1}
    big = 1_000_003 * 1_000_033        # both prime, above the trial limit below
    fac = remainder_factors(big, limit=1000)
    prod = 1
    for p, e in fac.items():
        prod *= p**e
    assert prod == big


def test_is_composite_base():
    assert not is_composite_base(7)
    assert is_composite_base(35)

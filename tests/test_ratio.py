# tests/test_ratio.py
from __future__ import annotations

import math

import pytest

from smoothratio.ratio import LOG2, LOG3, compute_record, evaluate
from smoothratio.utility import DegenerateCandidate, NonFiniteResult


def test_evaluate_matches_closed_form():
    # n = 8: 72 = 2³·3², R(8) = 72 / (8·ln 8) = 9 / ln 8
    log_ratio, ratio = evaluate(8, 3, 2)
    assert log_ratio == pytest.approx(math.log(9) - math.log(math.log(8)))
    assert ratio == pytest.approx(9 / math.log(8))


def test_log_space_formula_terms():
    n, k, l = 10**15, 40, 20
    log_ratio, _ = evaluate(n, k, l)
    expected = k * LOG2 + l * LOG3 - math.log(n) - math.log(math.log(n))
    assert log_ratio == pytest.approx(expected)


@pytest.mark.parametrize("n", [0, 1, 2])
def test_degenerate_candidates(n):
    with pytest.raises(DegenerateCandidate):
        evaluate(n, 1, 1)


def test_ratio_overflow_is_infinite_not_error():
    log_ratio, ratio = evaluate(3, 5000, 0)
    assert math.isfinite(log_ratio)
    assert ratio == math.inf


def test_ratio_underflow_is_zero_not_error():
    log_ratio, ratio = evaluate(3, -2000, 0)
    assert math.isfinite(log_ratio)
    assert log_ratio < -745
    assert ratio == 0.0


def test_non_finite_log_ratio_rejected():
    with pytest.raises(NonFiniteResult):
        evaluate(10, float("nan"), 0)
    with pytest.raises(NonFiniteResult):
        evaluate(10, float("inf"), 0)


@pytest.mark.parametrize("n", [3, 7, 8, 9, 2**30 - 1, 10**15])
def test_compute_record(n, check_record):
    rec = compute_record(n)
    check_record(rec)
    assert rec.n == n
    assert rec.ratio == pytest.approx(math.exp(rec.log_ratio))
    assert rec.smooth_part * rec.remainder == n * (n + 1)


def test_compute_record_degenerate():
    with pytest.raises(DegenerateCandidate):
        compute_record(2)


def test_record_is_immutable():
    rec = compute_record(8)
    with pytest.raises(AttributeError):
        rec.n = 9

# src/smoothratio/expreval.py
"""
Integer inputs for the CLI: plain or grouped digits ("1,000,000", "1 000 000"),
scientific notation ("1e12", "5E9") and small arithmetic ("10^15", "2**40 - 1").

Nothing is passed to eval(). The text is parsed with ast and walked by a
whitelist evaluator, and powers are size-checked before they are computed.
"""

from __future__ import annotations

import ast
import math
import operator
import re

from smoothratio.utility import UserInputError, dec_digits

MAX_DIGITS = 64
MAX_NODES = 64

_SPACES = {"\u2009": " ", "\u202f": " ", "\u00a0": " "}   # thin, narrow no-break, no-break
_SEPARATORS = r"[ ,.'_]"
_PLAIN_RE = re.compile(r"[+-]?\d[\d_]*")
_RADIX_RE = re.compile(r"[+-]?0[xXbBoO][0-9a-fA-F_]+")
_GROUPED_RE = re.compile(rf"[+-]?\d{{1,3}}(?:{_SEPARATORS}\d{{3}})+")
_SCI_RE = re.compile(r"(?<![\w.])(\d+)[eE]([+-]?\d+)(?![\w.])")

_BINOPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
}
_UNARY = {ast.UAdd: operator.pos, ast.USub: operator.neg}


class _NotAnInteger(Exception):
    pass


def _literal(text: str) -> int | None:
    s = text.strip()
    for ch, repl in _SPACES.items():
        s = s.replace(ch, repl)
    if _PLAIN_RE.fullmatch(s):
        return int(s.replace("_", ""))
    if _RADIX_RE.fullmatch(s):
        try:
            return int(s, 0)
        except ValueError:
            return None
    if _GROUPED_RE.fullmatch(s):
        return int(re.sub(_SEPARATORS, "", s))
    return None


def _expand_scientific(text: str) -> str:
    """'1e12' -> '(1*10**12)'; a negative exponent is not an integer."""

    def repl(m: re.Match) -> str:
        mantissa, exp = int(m.group(1)), int(m.group(2))
        if exp < 0:
            raise _NotAnInteger
        return f"({mantissa}*10**{exp})"

    return _SCI_RE.sub(repl, text)


def _check_power(base: int, exp: int) -> None:
    if exp < 0:
        raise UserInputError("negative exponents are not allowed in integer expressions")
    if abs(base) > 1 and exp * math.log10(abs(base)) >= MAX_DIGITS:
        raise UserInputError(f"number has more than {MAX_DIGITS} decimal digits.")


class _Evaluator(ast.NodeVisitor):
    """Integer literals, parentheses, + - * // % ** and unary +/-; anything else is rejected."""

    def visit_Expression(self, node: ast.Expression) -> int:
        return self.visit(node.body)

    def visit_Constant(self, node: ast.Constant) -> int:
        if isinstance(node.value, bool) or not isinstance(node.value, int):
            raise _NotAnInteger
        return node.value

    def visit_UnaryOp(self, node: ast.UnaryOp) -> int:
        fn = _UNARY.get(type(node.op))
        if fn is None:
            raise _NotAnInteger
        return fn(self.visit(node.operand))

    def visit_BinOp(self, node: ast.BinOp) -> int:
        left, right = self.visit(node.left), self.visit(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
            return left**right
        fn = _BINOPS.get(type(node.op))
        if fn is None:
            raise _NotAnInteger
        if right == 0 and isinstance(node.op, (ast.FloorDiv, ast.Mod)):
            raise _NotAnInteger
        return fn(left, right)

    def generic_visit(self, node: ast.AST) -> int:
        raise _NotAnInteger


def parse_int_or_expr(text: str | None) -> int | None:
    """
    The integer denoted by text, or None when text is not an integer input.
    Raises UserInputError for inputs that are integers but absurdly large.
    """
    if text is None:
        return None
    value = _literal(text)
    if value is not None:
        return value

    try:
        source = _expand_scientific(text.replace("^", "**")).strip()
        tree = ast.parse(source, mode="eval")
        if sum(1 for _ in ast.walk(tree)) > MAX_NODES:
            return None
        value = _Evaluator().visit(tree)
    except (SyntaxError, ValueError, RecursionError, _NotAnInteger):
        return None

    if dec_digits(value) > MAX_DIGITS:
        raise UserInputError(f"number has more than {MAX_DIGITS} decimal digits.")
    return value

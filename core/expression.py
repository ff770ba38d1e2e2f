"""Safe evaluation of plain arithmetic expressions.

User text goes through three stages before a number comes out:

``clean_expression``
    drops filler phrases such as "what is" and every character that cannot be
    part of an arithmetic expression.
``validate_expression``
    rejects anything that still looks like an identifier, unbalanced
    parentheses and characters outside the arithmetic alphabet.
``evaluate_expression``
    tokenises the validated text and evaluates it with a small
    recursive-descent parser. Only numbers, ``+ - * / %`` and parentheses are
    understood; nothing is ever handed to ``eval``.

Division and modulo by zero follow IEEE-754 and produce infinities or NaN
instead of raising.
"""
from __future__ import annotations

import math
import re
from typing import List, NamedTuple, Tuple

_FILLER_PATTERN = re.compile(r"what\s+is|what's|calculate|compute|solve", re.IGNORECASE)
_NON_ARITHMETIC = re.compile(r"[^0-9+\-*/().%\s]")
_WHITESPACE_RUN = re.compile(r"\s+")
_IDENTIFIER_CHARS = re.compile(r"[a-zA-Z_$]")
_ARITHMETIC_ONLY = re.compile(r"[0-9\s+\-*/%().]+")
_NUMBER = re.compile(r"[0-9]+\.?[0-9]*|\.[0-9]+")

ADDITIVE_OPERATORS = frozenset("+-")
MULTIPLICATIVE_OPERATORS = frozenset("*/%")


class ExpressionError(ValueError):
    """Raised when an expression is rejected or cannot be parsed."""


class Token(NamedTuple):
    kind: str
    text: str


def clean_expression(raw: str) -> str:
    """Strip natural-language filler and non-arithmetic characters from ``raw``."""

    cleaned = _FILLER_PATTERN.sub("", raw)
    cleaned = _NON_ARITHMETIC.sub("", cleaned)
    cleaned = _WHITESPACE_RUN.sub(" ", cleaned)
    return cleaned.strip()


def validate_expression(expression: str) -> None:
    """Raise :class:`ExpressionError` unless ``expression`` is safe to evaluate."""

    if _IDENTIFIER_CHARS.search(expression):
        raise ExpressionError("Expression contains invalid characters")

    stack: List[str] = []
    for char in expression:
        if char == "(":
            stack.append(char)
        elif char == ")":
            if not stack:
                raise ExpressionError("Unbalanced parentheses")
            stack.pop()
    if stack:
        raise ExpressionError("Unbalanced parentheses")

    if not _ARITHMETIC_ONLY.fullmatch(expression):
        raise ExpressionError("Expression contains invalid characters")


def tokenize(expression: str) -> List[Token]:
    tokens: List[Token] = []
    position = 0
    while position < len(expression):
        char = expression[position]
        if char.isspace():
            position += 1
            continue
        match = _NUMBER.match(expression, position)
        if match:
            tokens.append(Token("number", match.group()))
            position = match.end()
            continue
        if char in ADDITIVE_OPERATORS or char in MULTIPLICATIVE_OPERATORS or char in "()":
            tokens.append(Token(char, char))
            position += 1
            continue
        raise ExpressionError(f"Unexpected character {char!r} at position {position}")
    return tokens


def _divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _remainder(left: float, right: float) -> float:
    # Truncated remainder: the result takes the sign of the dividend.
    if right == 0 or math.isinf(left) or math.isnan(left) or math.isnan(right):
        return math.nan
    return math.fmod(left, right)


def apply_operator(operator: str, left: float, right: float) -> float:
    if operator == "+":
        return left + right
    if operator == "-":
        return left - right
    if operator == "*":
        return left * right
    if operator == "/":
        return _divide(left, right)
    if operator == "%":
        return _remainder(left, right)
    raise ExpressionError(f"Unknown operator {operator!r}")


class _Parser:
    """Recursive-descent evaluator.

    Grammar::

        expression := term (("+" | "-") term)*
        term       := unary (("*" | "/" | "%") unary)*
        unary      := ("+" | "-") unary | primary
        primary    := NUMBER | "(" expression ")"
    """

    def __init__(self, tokens: List[Token]) -> None:
        self.tokens = tokens
        self.index = 0

    def parse(self) -> float:
        if not self.tokens:
            raise ExpressionError("Expression is empty")
        value = self._expression()
        if self.index != len(self.tokens):
            raise ExpressionError(f"Unexpected {self.tokens[self.index].text!r}")
        return value

    def _peek(self) -> str:
        if self.index < len(self.tokens):
            return self.tokens[self.index].kind
        return ""

    def _advance(self) -> Token:
        if self.index >= len(self.tokens):
            raise ExpressionError("Unexpected end of expression")
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _expression(self) -> float:
        value = self._term()
        while self._peek() in ADDITIVE_OPERATORS:
            operator = self._advance().kind
            value = apply_operator(operator, value, self._term())
        return value

    def _term(self) -> float:
        value = self._unary()
        while self._peek() in MULTIPLICATIVE_OPERATORS:
            operator = self._advance().kind
            value = apply_operator(operator, value, self._unary())
        return value

    def _unary(self) -> float:
        if self._peek() == "-":
            self._advance()
            return -self._unary()
        if self._peek() == "+":
            self._advance()
            return self._unary()
        return self._primary()

    def _primary(self) -> float:
        token = self._advance()
        if token.kind == "number":
            return float(token.text)
        if token.kind == "(":
            value = self._expression()
            if self._advance().kind != ")":
                raise ExpressionError("Expected ')'")
            return value
        raise ExpressionError(f"Unexpected {token.text!r}")


def evaluate_expression(expression: str) -> float:
    """Evaluate an already validated expression."""

    tokens = tokenize(expression)
    try:
        return _Parser(tokens).parse()
    except RecursionError as exc:
        raise ExpressionError("Expression is nested too deeply") from exc


def format_result(value: float) -> str:
    """Render ``value`` the way the calculator reports results."""

    if math.isnan(value):
        return "Not a number"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if abs(value) >= 1e21:
        return repr(float(value))
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.6f}".rstrip("0").rstrip(".")


def calculate(raw: str) -> Tuple[str, str]:
    """Clean, validate and evaluate ``raw``; return ``(expression, result)``."""

    expression = clean_expression(raw)
    validate_expression(expression)
    return expression, format_result(evaluate_expression(expression))


__all__ = [
    "ExpressionError",
    "Token",
    "apply_operator",
    "calculate",
    "clean_expression",
    "evaluate_expression",
    "format_result",
    "tokenize",
    "validate_expression",
]

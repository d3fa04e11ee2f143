"""
Expression Evaluator - Safe arithmetic evaluation for calculator results.

Supports +, -, *, /, parentheses, unary signs, and decimal numbers with
standard precedence. There are no names, functions, exponents, or
scientific notation, so arbitrary search text can never execute anything.

Grammar:
  expr   := term (('+' | '-') term)*
  term   := factor (('*' | '/') factor)*
  factor := number | '(' expr ')' | ('+' | '-') factor

Every failure (malformed number, unmatched parenthesis, trailing input,
division by zero) collapses to None at the evaluate() boundary.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext

from loguru import logger

# Unicode operator glyphs users type or paste
GLYPH_OPERATORS = {
    "×": "*",  # ×
    "÷": "/",  # ÷
    "·": "*",  # ·
}

_WHITESPACE = re.compile(r"\s+")

_CENTS = Decimal("0.01")


class ExpressionError(ValueError):
    """Raised by the parser when the expression cannot be evaluated."""


def normalize_expression(text: str) -> str:
    """Map operator glyphs to ASCII and strip all whitespace."""
    for glyph, op in GLYPH_OPERATORS.items():
        text = text.replace(glyph, op)
    return _WHITESPACE.sub("", text)


class _Parser:
    """Recursive-descent parser over a normalized expression string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def _peek(self) -> str | None:
        if self.pos < len(self.text):
            return self.text[self.pos]
        return None

    def parse(self) -> float:
        value = self._expr()
        if self.pos != len(self.text):
            raise ExpressionError(f"Unexpected character at position {self.pos}")
        return value

    def _expr(self) -> float:
        value = self._term()
        while (op := self._peek()) in ("+", "-"):
            self.pos += 1
            if op == "+":
                value += self._term()
            else:
                value -= self._term()
        return value

    def _term(self) -> float:
        value = self._factor()
        while (op := self._peek()) in ("*", "/"):
            self.pos += 1
            if op == "*":
                value *= self._factor()
            else:
                divisor = self._factor()
                if divisor == 0.0:
                    raise ExpressionError("Division by zero")
                value /= divisor
        return value

    def _factor(self) -> float:
        ch = self._peek()
        if ch is None:
            raise ExpressionError("Unexpected end of expression")

        if ch == "(":
            self.pos += 1
            value = self._expr()
            if self._peek() != ")":
                raise ExpressionError("Missing closing parenthesis")
            self.pos += 1
            return value
        if ch == "-":
            self.pos += 1
            return -self._factor()
        if ch == "+":
            self.pos += 1
            return self._factor()
        return self._number()

    def _number(self) -> float:
        start = self.pos
        while (ch := self._peek()) is not None and (ch.isdigit() or ch == "."):
            self.pos += 1

        literal = self.text[start:self.pos]
        # float() would also accept "inf", "1e5" and "1_0"; the scan above
        # only lets digits and dots through, so those never reach here.
        if not literal or not literal.isascii():
            raise ExpressionError(f"Invalid number at position {start}")
        try:
            return float(literal)
        except ValueError:
            raise ExpressionError(f"Invalid number: {literal!r}") from None


def format_result(value: float) -> str:
    """
    Round half up to 2 decimal places and strip trailing zeros.

    Rounding starts from the shortest repr of the float, so 2.675 (stored as
    2.67499...) still rounds to 2.68.

    Examples:
        4.0   -> "4"
        4.5   -> "4.5"
        1/3   -> "0.33"
        1/8   -> "0.13"
    """
    with localcontext() as ctx:
        # enough digits for any finite float
        ctx.prec = 400
        rounded = Decimal(repr(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    text = format(rounded, "f").rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text


def evaluate(text: str) -> str | None:
    """
    Evaluate an arithmetic expression.

    Args:
        text: Raw expression text, may contain spaces and × ÷ · glyphs

    Returns:
        Formatted result string, or None if the expression is invalid
    """
    expression = normalize_expression(text)
    if not expression:
        return None

    try:
        value = _Parser(expression).parse()
    except (ExpressionError, RecursionError) as e:
        logger.debug(f"Expression '{expression[:60]}' not evaluated: {e}")
        return None

    if not math.isfinite(value):
        return None
    return format_result(value)

"""
Calculator Handler - Inline math results for expression-like queries.

Classifies the query first: only text made of digits, operators,
parentheses, decimal points, spaces, and the × ÷ · glyphs, with at least one
operator or parenthesis, is handed to the expression evaluator. Anything
else (or anything that fails to evaluate) falls through to search.
"""

from dataclasses import dataclass

from loguru import logger

from quicksearch.models import CalculatorResult, ResultItem
from quicksearch.search.expression import GLYPH_OPERATORS, evaluate

OPERATOR_CHARS = frozenset("+-*/()")
EXPRESSION_CHARS = OPERATOR_CHARS | frozenset(". ") | frozenset(GLYPH_OPERATORS)


@dataclass(frozen=True)
class ExpressionResult:
    expression: str
    result: str | None = None


def is_math_expression(query: str) -> bool:
    """
    Cheap pre-filter that keeps ordinary search text away from the parser.

    Passing this check does not mean the text evaluates successfully.
    """
    trimmed = query.strip()
    if len(trimmed) < 2:
        return False
    if not any(ch in OPERATOR_CHARS for ch in trimmed):
        return False
    return all(ch.isdigit() or ch in EXPRESSION_CHARS for ch in trimmed)


class CalculatorHandler:
    """Evaluate arithmetic queries such as '2+2*2' or '(2 + 3) × 4'."""

    name = "calculator"
    priority = 100

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        logger.debug(f"Calculator {'enabled' if enabled else 'disabled'}")

    def classify(self, query: str) -> ExpressionResult | None:
        """
        Return an ExpressionResult if the query looks like arithmetic.

        The result field is None when the expression does not evaluate.
        """
        trimmed = query.strip()
        if not self.enabled or not is_math_expression(trimmed):
            return None
        return ExpressionResult(expression=trimmed, result=evaluate(trimmed))

    def matches(self, query: str) -> bool:
        classified = self.classify(query)
        return classified is not None and classified.result is not None

    def get_results(self, query: str) -> list[ResultItem]:
        classified = self.classify(query)
        if classified is None or classified.result is None:
            return []
        return [CalculatorResult(expression=classified.expression, result=classified.result)]

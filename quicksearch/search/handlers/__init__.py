"""
Search handlers - Pluggable query processors.

Each handler checks if it can handle a query and returns typed results.
"""

from .calculator import CalculatorHandler
from .sources import SourceSearch, UnifiedSearchHandler
from .web_search import WebSearchHandler

__all__ = [
    "CalculatorHandler",
    "WebSearchHandler",
    "SourceSearch",
    "UnifiedSearchHandler",
]

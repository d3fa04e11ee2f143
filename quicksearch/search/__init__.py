"""
Search package - Query routing, ranking, and shortcut detection.

Queries are dispatched to priority-ordered handlers (calculator, web
search shortcuts, per-source fuzzy search).
"""

from .router import QueryRouter, SearchHandler
from quicksearch.models import ResultItem

__all__ = ["QueryRouter", "SearchHandler", "ResultItem"]

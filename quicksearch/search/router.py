"""
Query Router - Dispatches search queries to priority-ordered handlers.

Each handler declares a priority (lower = higher priority) and a matches()
method. The router finds the first matching handler and returns its results.
Per-source search is the fallback (highest priority number), so a query only
reaches fuzzy ranking when neither the calculator nor a shortcut claims it.
"""

from abc import ABC, abstractmethod

from loguru import logger

from quicksearch.models import ResultItem


class SearchHandler(ABC):
    """Base class for all search handlers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Handler identifier."""
        ...

    @property
    @abstractmethod
    def priority(self) -> int:
        """Lower number = checked first. Source search should be ~1000."""
        ...

    @abstractmethod
    def matches(self, query: str) -> bool:
        """Return True if this handler should process the query."""
        ...

    @abstractmethod
    def get_results(self, query: str) -> list[ResultItem]:
        """Return results for the query."""
        ...


class QueryRouter:
    """Routes queries to the appropriate handler based on priority."""

    def __init__(self):
        self._handlers: list[SearchHandler] = []

    @property
    def handlers(self) -> list[SearchHandler]:
        return list(self._handlers)

    def register(self, handler: SearchHandler) -> None:
        """Register a handler and re-sort by priority."""
        self._handlers.append(handler)
        self._handlers.sort(key=lambda h: h.priority)

    def route(self, query: str) -> tuple[str, list[ResultItem]]:
        """
        Find the first matching handler and return its results.

        Args:
            query: The search query string

        Returns:
            Tuple of (handler_name, results_list).
            Returns ("none", []) for a blank query or if no handler matches.
        """
        if not query or not query.strip():
            return "none", []

        for handler in self._handlers:
            if handler.matches(query):
                logger.debug(f"Routing '{query}' to {handler.name}")
                return handler.name, handler.get_results(query)

        return "none", []

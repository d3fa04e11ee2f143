"""
Source Search Handlers - Rank apps, contacts, files, and device settings.

Each source pulls raw candidates from its provider, drops excluded items,
lists direct matches first (nickname, prefix, word-prefix, substring), then
appends fuzzy matches that were not already found directly.

UnifiedSearchHandler is the router's fallback and merges every source into
one section-ordered result list.
"""

from typing import Callable, Generic, Sequence, TypeVar

from loguru import logger

from quicksearch.models import ResultItem, result_section
from quicksearch.search.ranking import is_match, match_priority_with_nickname
from quicksearch.search.strategies import FuzzyConfigManager, FuzzySearchStrategy
from quicksearch.services.management import ItemStateManager

T = TypeVar("T")

# provider(query, limit) -> raw, unranked candidates
CandidateProvider = Callable[[str, int], Sequence[T]]

SECTION_ORDER = ("apps", "contacts", "files", "settings")


class SourceSearch(Generic[T]):
    """Ranking pipeline for one search source."""

    def __init__(
        self,
        source: str,
        provider: CandidateProvider,
        strategy_cls: type[FuzzySearchStrategy[T]],
        manager: ItemStateManager[T],
        configs: FuzzyConfigManager,
        to_result: Callable[[T, int, bool], ResultItem],
    ):
        self.source = source
        self.provider = provider
        self.strategy_cls = strategy_cls
        self.manager = manager
        self.configs = configs
        self.to_result = to_result

    def _candidates(self, query: str, limit: int) -> list[T]:
        try:
            return list(self.provider(query, limit))
        except Exception:
            logger.exception(f"Candidate provider for {self.source} failed")
            return []

    def search(self, query: str, limit: int = 30) -> list[ResultItem]:
        """
        Rank candidates for a query.

        Args:
            query: Search text (already stripped of any shortcut)
            limit: Maximum number of results

        Returns:
            Direct matches followed by fuzzy matches, at most `limit` items
        """
        if not query or not query.strip():
            return []

        excluded = self.manager.excluded_ids()
        nicknames = self.manager.nicknames()
        identity = self.manager.identity

        visible = [c for c in self._candidates(query, limit) if identity(c) not in excluded]

        def nickname_of(item: T) -> str | None:
            return nicknames.get(identity(item))

        strategy = self.strategy_cls(self.configs.get(self.source), nickname_of)

        direct = []
        for index, candidate in enumerate(visible):
            label = strategy.label(candidate)
            priority = match_priority_with_nickname(label, nickname_of(candidate), query)
            if is_match(priority):
                direct.append((priority, label.lower(), index))
        direct.sort()

        results = [self.to_result(visible[index], 100, False) for _, _, index in direct]
        found = {identity(visible[index]) for _, _, index in direct}

        remaining = [c for c in visible if identity(c) not in found]
        for match in strategy.find_matches(query, remaining):
            results.append(self.to_result(match.item, match.score, True))

        return results[:limit]


def merge_results(results: list[ResultItem]) -> list[ResultItem]:
    """Group results by section in SECTION_ORDER, keeping order within a section."""
    order = {section: i for i, section in enumerate(SECTION_ORDER)}
    return sorted(results, key=lambda r: order.get(result_section(r), len(order)))


class UnifiedSearchHandler:
    """Fallback handler: search every source and merge the results."""

    name = "search"
    priority = 1000

    def __init__(self, sources: list[SourceSearch], max_results: int = 30):
        self.sources = sources
        self.max_results = max_results

    def matches(self, query: str) -> bool:
        return True

    def get_results(self, query: str) -> list[ResultItem]:
        results: list[ResultItem] = []
        for source in self.sources:
            results.extend(source.search(query, self.max_results))
        return merge_results(results)

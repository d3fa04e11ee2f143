"""
Fuzzy search strategies - Per-source filtering and ordering of fuzzy matches.

Each search source (apps, contacts, files, settings) owns a FuzzyConfig and
a strategy that knows which label and alias to score. The shared
filter_by_fuzzy_search() applies the threshold cutoff and ordering the same
way for every source.
"""

from dataclasses import dataclass, replace
from typing import Callable, Generic, Iterable, TypeVar

from loguru import logger

from quicksearch.models import AppInfo, ContactInfo, DeviceFile, SettingShortcut
from quicksearch.search import fuzzy

T = TypeVar("T")

NicknameProvider = Callable[[T], str | None]


@dataclass(frozen=True)
class FuzzyConfig:
    """Fuzzy matching settings for one search source."""

    enabled: bool = False
    match_threshold: int = 70
    min_query_length: int = 3
    priority: int = 5

    def is_valid(self) -> bool:
        if not isinstance(self.enabled, bool):
            return False
        numbers = (self.match_threshold, self.min_query_length, self.priority)
        # bool is an int subclass; True is not a threshold
        if not all(isinstance(n, int) and not isinstance(n, bool) for n in numbers):
            return False
        return (
            0 <= self.match_threshold <= 100
            and self.min_query_length >= 1
            and self.priority >= 0
        )


DEFAULT_APP_CONFIG = FuzzyConfig(enabled=True)
DEFAULT_SOURCE_CONFIG = FuzzyConfig(enabled=False)

SOURCES = ("apps", "contacts", "files", "settings")


@dataclass(frozen=True)
class MatchResult(Generic[T]):
    item: T
    score: int
    priority: int
    is_fuzzy: bool = True


def sort_matches(matches: Iterable[MatchResult[T]]) -> list[MatchResult[T]]:
    """
    Order matches by score (descending), then priority (ascending).

    The sort is stable, so equal matches keep their candidate order.
    """
    return sorted(matches, key=lambda m: (-m.score, m.priority))


def filter_by_fuzzy_search(
    query: str,
    candidates: Iterable[T],
    score_fn: Callable[[T], int],
    config: FuzzyConfig,
) -> list[MatchResult[T]]:
    """
    Score candidates and keep those at or above the configured threshold.

    Args:
        query: The search query; blank queries never match anything
        candidates: Items to score, in their original order
        score_fn: Computes a 0-100 score for one candidate
        config: Supplies the threshold and the priority stamped on results

    Returns:
        Sorted list of MatchResult
    """
    if not query or not query.strip():
        return []

    matches = []
    for candidate in candidates:
        candidate_score = score_fn(candidate)
        if candidate_score >= config.match_threshold:
            matches.append(MatchResult(
                item=candidate,
                score=candidate_score,
                priority=config.priority,
            ))

    return sort_matches(matches)


class FuzzySearchStrategy(Generic[T]):
    """Base strategy: score label() and alias against the query."""

    def __init__(self, config: FuzzyConfig, nickname_provider: NicknameProvider | None = None):
        self.config = config
        self.nickname_provider = nickname_provider

    def label(self, item: T) -> str:
        raise NotImplementedError

    def alias(self, item: T) -> str | None:
        if self.nickname_provider is None:
            return None
        return self.nickname_provider(item)

    def score(self, query: str, item: T) -> int:
        return fuzzy.score(query, self.label(item), self.alias(item), self.config.min_query_length)

    def find_matches(self, query: str, candidates: Iterable[T]) -> list[MatchResult[T]]:
        if not self.config.enabled:
            return []
        return filter_by_fuzzy_search(
            query, candidates, lambda item: self.score(query, item), self.config
        )


class AppFuzzyStrategy(FuzzySearchStrategy[AppInfo]):
    def label(self, item: AppInfo) -> str:
        return item.name


class ContactFuzzyStrategy(FuzzySearchStrategy[ContactInfo]):
    def label(self, item: ContactInfo) -> str:
        return item.display_name


class FileFuzzyStrategy(FuzzySearchStrategy[DeviceFile]):
    def label(self, item: DeviceFile) -> str:
        return item.display_name


class SettingFuzzyStrategy(FuzzySearchStrategy[SettingShortcut]):
    """Settings score against their title and, failing that, their keywords."""

    def label(self, item: SettingShortcut) -> str:
        return item.title

    def score(self, query: str, item: SettingShortcut) -> int:
        best = super().score(query, item)
        if item.keywords:
            keywords = " ".join(item.keywords)
            best = max(best, fuzzy.score(query, keywords, None, self.config.min_query_length))
        return best


class FuzzyConfigManager:
    """
    Registry of per-source FuzzyConfig.

    Invalid configs are rejected and the previous config stays in effect.
    """

    def __init__(self, configs: dict[str, FuzzyConfig] | None = None):
        self._configs = {
            source: DEFAULT_APP_CONFIG if source == "apps" else DEFAULT_SOURCE_CONFIG
            for source in SOURCES
        }
        for source, config in (configs or {}).items():
            self.update(source, config)

    def get(self, source: str) -> FuzzyConfig:
        return self._configs[source]

    def update(self, source: str, config: FuzzyConfig) -> bool:
        if source not in self._configs:
            logger.warning(f"Ignoring fuzzy config for unknown source '{source}'")
            return False
        if not config.is_valid():
            logger.warning(f"Rejected invalid fuzzy config for '{source}': {config}")
            return False
        self._configs[source] = config
        return True

    def set_enabled(self, source: str, enabled: bool) -> bool:
        current = self.get(source)
        return self.update(source, replace(current, enabled=enabled))

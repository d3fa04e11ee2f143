"""
Tests for fuzzy search strategies, per-source configs, and match ordering.
"""

import pytest

from quicksearch.models import ContactInfo
from quicksearch.search.strategies import (
    AppFuzzyStrategy,
    ContactFuzzyStrategy,
    FuzzyConfig,
    FuzzyConfigManager,
    MatchResult,
    SettingFuzzyStrategy,
    filter_by_fuzzy_search,
    sort_matches,
)


class TestFilterByFuzzySearch:
    """Test threshold cutoff and ordering of fuzzy matches."""

    SCORES = {"a": 90, "b": 50, "c": 70, "d": 90}

    def _filter(self, query, threshold=70, priority=5):
        config = FuzzyConfig(enabled=True, match_threshold=threshold, priority=priority)
        return filter_by_fuzzy_search(query, list(self.SCORES), self.SCORES.get, config)

    def test_blank_query_returns_empty(self):
        assert self._filter("") == []
        assert self._filter("   ") == []

    def test_threshold_is_inclusive(self):
        items = [m.item for m in self._filter("q")]
        assert "c" in items
        assert "b" not in items

    def test_sorted_by_score_then_input_order(self):
        items = [m.item for m in self._filter("q")]
        assert items == ["a", "d", "c"]

    def test_priority_stamped_from_config(self):
        matches = self._filter("q", priority=2)
        assert all(m.priority == 2 and m.is_fuzzy for m in matches)

    def test_zero_threshold_keeps_everything(self):
        assert len(self._filter("q", threshold=0)) == 4


class TestSortMatches:

    def test_lower_priority_wins_ties(self):
        matches = [
            MatchResult("late", 80, 5),
            MatchResult("early", 80, 1),
            MatchResult("best", 95, 9),
        ]
        assert [m.item for m in sort_matches(matches)] == ["best", "early", "late"]


class TestFuzzyConfig:

    def test_defaults_are_valid(self):
        assert FuzzyConfig().is_valid() is True

    @pytest.mark.parametrize("kwargs", [
        {"match_threshold": 101},
        {"match_threshold": -1},
        {"min_query_length": 0},
        {"priority": -1},
    ])
    def test_invalid(self, kwargs):
        assert FuzzyConfig(**kwargs).is_valid() is False


class TestFuzzyConfigManager:
    """Test per-source config registry."""

    def test_apps_enabled_by_default(self):
        manager = FuzzyConfigManager()
        assert manager.get("apps").enabled is True
        assert manager.get("contacts").enabled is False

    def test_update_valid(self):
        manager = FuzzyConfigManager()
        config = FuzzyConfig(enabled=True, match_threshold=60)
        assert manager.update("contacts", config) is True
        assert manager.get("contacts") == config

    def test_invalid_update_keeps_previous(self):
        manager = FuzzyConfigManager()
        before = manager.get("apps")
        assert manager.update("apps", FuzzyConfig(match_threshold=200)) is False
        assert manager.get("apps") == before

    def test_unknown_source_rejected(self):
        manager = FuzzyConfigManager()
        assert manager.update("music", FuzzyConfig()) is False

    def test_initial_configs_applied(self):
        manager = FuzzyConfigManager({"files": FuzzyConfig(enabled=True, priority=1)})
        assert manager.get("files").enabled is True
        assert manager.get("files").priority == 1

    def test_set_enabled(self):
        manager = FuzzyConfigManager()
        assert manager.set_enabled("apps", False) is True
        assert manager.get("apps").enabled is False
        assert manager.get("apps").match_threshold == 70


class TestStrategies:
    """Test source-specific label and alias scoring."""

    def test_app_strategy_finds_acronym(self, sample_apps):
        strategy = AppFuzzyStrategy(FuzzyConfig(enabled=True))
        matches = strategy.find_matches("ytm", sample_apps)
        assert matches[0].item.name == "YouTube Music"
        assert matches[0].score == 100

    def test_disabled_strategy_returns_empty(self, sample_apps):
        strategy = AppFuzzyStrategy(FuzzyConfig(enabled=False))
        assert strategy.find_matches("ytm", sample_apps) == []

    def test_typo_match(self, sample_apps):
        strategy = AppFuzzyStrategy(FuzzyConfig(enabled=True))
        names = [m.item.name for m in strategy.find_matches("spotfy", sample_apps)]
        assert names[0] == "Spotify"

    def test_nickname_used_as_alias(self, sample_contacts):
        nicknames = {1: "Mommy"}
        strategy = ContactFuzzyStrategy(
            FuzzyConfig(enabled=True),
            lambda contact: nicknames.get(contact.contact_id),
        )
        matches = strategy.find_matches("mommy", sample_contacts)
        assert [m.item.contact_id for m in matches][0] == 1
        assert matches[0].score == 100

    def test_alias_is_none_without_provider(self):
        strategy = ContactFuzzyStrategy(FuzzyConfig(enabled=True))
        assert strategy.alias(ContactInfo(1, "Alice")) is None

    def test_setting_keywords(self, sample_settings):
        strategy = SettingFuzzyStrategy(FuzzyConfig(enabled=True))
        matches = strategy.find_matches("wireless", sample_settings)
        assert matches[0].item.id == "wifi"


class TestFuzzyConfigTypes:
    """Test that non-integer config fields are rejected, not raised on."""

    @pytest.mark.parametrize("kwargs", [
        {"match_threshold": None},
        {"match_threshold": "70"},
        {"min_query_length": 2.5},
        {"priority": True},
        {"enabled": "yes"},
    ])
    def test_wrong_types_invalid(self, kwargs):
        assert FuzzyConfig(**kwargs).is_valid() is False

    def test_manager_rejects_wrong_types(self):
        manager = FuzzyConfigManager()
        before = manager.get("apps")
        assert manager.update("apps", FuzzyConfig(enabled=True, match_threshold=None)) is False
        assert manager.get("apps") == before

"""
Tests for shortcut code validation, detection, and the shortcut registry.

Registry persistence uses a real SQLite database in tmp_path.
"""

import pytest

from quicksearch.search.handlers.web_search import DEFAULT_ENGINES, default_shortcuts
from quicksearch.search.shortcuts import (
    ShortcutEntry,
    ShortcutRegistry,
    ShortcutTable,
    detect,
    detect_at_start,
    is_valid_code,
    is_valid_code_for_display,
    is_valid_prefix,
    normalize_code,
)
from quicksearch.services.preferences import SqlitePreferenceStore


@pytest.fixture
def table():
    return ShortcutTable.from_mapping({
        "google": "ggl",
        "youtube_music": "ytm",
        "bing": ShortcutEntry("bng", enabled=False),
    })


class TestValidation:

    def test_normalize(self):
        assert normalize_code(" G G L ") == "ggl"
        assert normalize_code("Y-T.M") == "ytm"

    def test_strict_length(self):
        assert is_valid_code("a") is False
        assert is_valid_code("gg") is True
        assert is_valid_code("abcde") is True
        assert is_valid_code("abcdef") is False

    def test_display_length(self):
        assert is_valid_code_for_display("a") is True
        assert is_valid_code_for_display("") is False
        assert is_valid_code_for_display("abcdef") is False

    def test_validation_uses_normalized_code(self):
        assert is_valid_code(" G G ") is True
        assert is_valid_code("--") is False

    def test_prefix_conflict(self):
        assert is_valid_prefix("ggl", ["gg", "ytm"]) is False

    def test_same_code_is_not_a_conflict(self):
        assert is_valid_prefix("ggl", ["ggl"]) is True

    def test_shorter_code_is_allowed(self):
        assert is_valid_prefix("gg", ["ggl"]) is True

    def test_entry_normalizes_code(self):
        assert ShortcutEntry(" GGL ").code == "ggl"


class TestDetect:
    """Test trailing-word shortcut detection."""

    def test_detects_trailing_code(self, table):
        assert detect("weather news ggl", table) == ("weather news", "google")

    def test_case_insensitive(self, table):
        assert detect("lofi beats YTM", table) == ("lofi beats", "youtube_music")

    def test_single_word_never_matches(self, table):
        assert detect("ggl", table) is None

    def test_unknown_code(self, table):
        assert detect("news", table) is None
        assert detect("weather news xyz", table) is None

    def test_disabled_code_ignored(self, table):
        assert detect("weather bng", table) is None

    def test_extra_whitespace(self, table):
        assert detect("  weather   news   ggl  ", table) == ("weather   news", "google")

    def test_empty_table(self):
        assert detect("weather ggl", ShortcutTable()) is None

    def test_blank_query(self, table):
        assert detect("   ", table) is None

    def test_first_match_in_table_order_wins(self):
        table = ShortcutTable.from_mapping({"first": "abc", "second": "abc"})
        assert detect("query abc", table) == ("query", "first")


class TestDetectAtStart:

    def test_detects_leading_code(self, table):
        assert detect_at_start("ggl weather news", table) == ("weather news", "google")

    def test_single_word(self, table):
        assert detect_at_start("ggl", table) is None

    def test_disabled(self, table):
        assert detect_at_start("bng weather", table) is None


class TestShortcutTable:

    def test_with_entry_replaces_in_place(self, table):
        updated = table.with_entry("google", ShortcutEntry("gg"))
        assert list(updated.codes()) == ["google", "youtube_music", "bing"]
        assert updated.get("google").code == "gg"
        assert table.get("google").code == "ggl"

    def test_with_entry_appends_new(self, table):
        updated = table.with_entry("amazon", ShortcutEntry("amz"))
        assert len(updated) == 4


class TestShortcutRegistry:
    """Test layered configuration, validation, and persistence."""

    def test_defaults(self):
        registry = ShortcutRegistry(default_shortcuts(DEFAULT_ENGINES))
        assert registry.snapshot().get("google").code == "ggl"
        assert len(registry.snapshot()) == len(DEFAULT_ENGINES)

    def test_overrides_applied(self):
        registry = ShortcutRegistry(
            {"google": "ggl", "bing": "bng"},
            overrides={"google": {"code": "gg"}, "bing": {"enabled": False}},
        )
        assert registry.snapshot().get("google").code == "gg"
        assert registry.snapshot().get("bing").enabled is False

    def test_invalid_override_ignored(self):
        registry = ShortcutRegistry({"google": "ggl"}, overrides={"google": {"code": "g"}})
        assert registry.snapshot().get("google").code == "ggl"

    def test_string_enabled_flag_ignored(self):
        registry = ShortcutRegistry({"bing": "bng"}, overrides={"bing": {"enabled": "false"}})
        assert registry.snapshot().get("bing").enabled is True

    def test_unknown_destination_ignored(self):
        registry = ShortcutRegistry({"google": "ggl"}, overrides={"altavista": {"code": "alt"}})
        assert registry.snapshot().get("altavista") is None

    def test_set_code(self):
        registry = ShortcutRegistry({"google": "ggl"})
        assert registry.set_code("google", " G O O ") is True
        assert registry.snapshot().get("google").code == "goo"

    def test_set_code_enables(self):
        registry = ShortcutRegistry({"bing": "bng"}, overrides={"bing": {"enabled": False}})
        assert registry.set_code("bing", "bi") is True
        assert registry.snapshot().get("bing").enabled is True

    def test_set_code_rejects_invalid(self):
        registry = ShortcutRegistry({"google": "ggl"})
        assert registry.set_code("google", "g") is False
        assert registry.snapshot().get("google").code == "ggl"

    def test_set_code_rejects_prefix_conflict(self):
        registry = ShortcutRegistry({"google": "ggl", "gemini": "gm"})
        assert registry.set_code("google", "gmx") is False

    def test_set_code_unknown_destination(self):
        registry = ShortcutRegistry({"google": "ggl"})
        assert registry.set_code("altavista", "alt") is False

    def test_snapshot_is_immutable_view(self):
        registry = ShortcutRegistry({"google": "ggl"})
        before = registry.snapshot()
        registry.set_code("google", "goo")
        assert before.get("google").code == "ggl"

    def test_set_enabled(self):
        registry = ShortcutRegistry({"google": "ggl"})
        assert registry.set_enabled("google", False) is True
        assert detect("weather ggl", registry.snapshot()) is None

    def test_edits_persist_across_instances(self, tmp_db):
        store = SqlitePreferenceStore(tmp_db)
        ShortcutRegistry({"google": "ggl", "bing": "bng"}, store=store).set_code("google", "goo")
        ShortcutRegistry({"google": "ggl", "bing": "bng"}, store=store).set_enabled("bing", False)
        store.close()

        reopened = SqlitePreferenceStore(tmp_db)
        registry = ShortcutRegistry({"google": "ggl", "bing": "bng"}, store=reopened)
        assert registry.snapshot().get("google").code == "goo"
        assert registry.snapshot().get("bing").enabled is False
        reopened.close()

    def test_persisted_values_win_over_overrides(self, memory_store):
        memory_store.set_shortcut("google", "goo", True)
        registry = ShortcutRegistry(
            {"google": "ggl"}, store=memory_store, overrides={"google": {"code": "gg"}}
        )
        assert registry.snapshot().get("google").code == "goo"

    def test_persistence_failure_leaves_table_unchanged(self, tmp_db):
        store = SqlitePreferenceStore(tmp_db)
        registry = ShortcutRegistry({"google": "ggl"}, store=store)
        store.close()
        assert registry.set_code("google", "goo") is False
        assert registry.snapshot().get("google").code == "ggl"

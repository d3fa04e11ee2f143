"""
Quicksearch - Composition root.

Builds every component from settings and wires them together:

  query → SearchSession → QueryRouter
            ├─ CalculatorHandler   (priority 100)
            ├─ WebSearchHandler    (priority 200)
            └─ UnifiedSearchHandler (priority 1000, per-source ranking)

  pin / exclude / nickname → ItemStateManager (one per kind) → store → UI

Usage:
    app = QuickSearchApp(providers={"apps": my_app_provider})
    app.session.submit("ytm")
    app.apps.pin(app_info)
"""

from dataclasses import replace
from pathlib import Path
from typing import Any, Dict

from loguru import logger

from quicksearch.models import (
    AppResult,
    ContactResult,
    FileResult,
    SettingResult,
)
from quicksearch.search.handlers import CalculatorHandler, UnifiedSearchHandler, WebSearchHandler
from quicksearch.search.handlers.sources import CandidateProvider, SourceSearch
from quicksearch.search.handlers.web_search import DEFAULT_ENGINES, default_shortcuts
from quicksearch.search.router import QueryRouter
from quicksearch.search.session import SearchSession
from quicksearch.search.shortcuts import ShortcutRegistry
from quicksearch.search.strategies import (
    AppFuzzyStrategy,
    ContactFuzzyStrategy,
    FileFuzzyStrategy,
    FuzzyConfigManager,
    SettingFuzzyStrategy,
)
from quicksearch.services.management import (
    APP_MANAGEMENT,
    CONTACT_MANAGEMENT,
    FILE_MANAGEMENT,
    SETTING_MANAGEMENT,
    ItemStateManager,
)
from quicksearch.services.preferences import PreferenceStore, SqlitePreferenceStore
from quicksearch.services.state import SearchUiState, UiStateStore
from quicksearch.utils.helpers import (
    calculator_enabled_from_settings,
    data_dir,
    fuzzy_configs_from_settings,
    load_settings,
    max_results_from_settings,
    shortcut_overrides_from_settings,
)


def _no_candidates(query: str, limit: int) -> list:
    return []


class QuickSearchApp:
    """Owns the store, UI state, managers, handlers, and search session."""

    def __init__(
        self,
        providers: Dict[str, CandidateProvider] | None = None,
        settings: Dict[str, Any] | None = None,
        store: PreferenceStore | None = None,
    ):
        self.settings = settings if settings is not None else load_settings()
        self._owns_store = store is None
        self.store = store or SqlitePreferenceStore(self._db_path())
        calculator_enabled = calculator_enabled_from_settings(self.settings)
        self.ui_state = UiStateStore(SearchUiState(calculator_enabled=calculator_enabled))

        providers = providers or {}
        self.fuzzy_configs = FuzzyConfigManager(fuzzy_configs_from_settings(self.settings))
        self.shortcuts = ShortcutRegistry(
            default_shortcuts(DEFAULT_ENGINES),
            store=self.store,
            overrides=shortcut_overrides_from_settings(self.settings),
        )

        self.apps = ItemStateManager(APP_MANAGEMENT, self.store, self.ui_state, self._on_items_changed)
        self.contacts = ItemStateManager(CONTACT_MANAGEMENT, self.store, self.ui_state, self._on_items_changed)
        self.files = ItemStateManager(FILE_MANAGEMENT, self.store, self.ui_state, self._on_items_changed)
        self.device_settings = ItemStateManager(
            SETTING_MANAGEMENT, self.store, self.ui_state, self._on_items_changed
        )

        sources = [
            SourceSearch("apps", providers.get("apps", _no_candidates), AppFuzzyStrategy,
                         self.apps, self.fuzzy_configs, AppResult),
            SourceSearch("contacts", providers.get("contacts", _no_candidates), ContactFuzzyStrategy,
                         self.contacts, self.fuzzy_configs, ContactResult),
            SourceSearch("files", providers.get("files", _no_candidates), FileFuzzyStrategy,
                         self.files, self.fuzzy_configs, FileResult),
            SourceSearch("settings", providers.get("settings", _no_candidates), SettingFuzzyStrategy,
                         self.device_settings, self.fuzzy_configs, SettingResult),
        ]

        self.calculator = CalculatorHandler(enabled=calculator_enabled)
        self.router = QueryRouter()
        self.router.register(self.calculator)
        self.router.register(WebSearchHandler(self.shortcuts))
        self.router.register(UnifiedSearchHandler(sources, max_results=max_results_from_settings(self.settings)))

        self.session = SearchSession(self.router, self.ui_state)

        for manager in self.managers:
            manager.refresh()
        logger.debug("Quicksearch core initialized")

    @property
    def managers(self) -> list[ItemStateManager]:
        return [self.apps, self.contacts, self.files, self.device_settings]

    def _db_path(self) -> Path:
        storage = self.settings.get("storage", {})
        configured = storage.get("path") if isinstance(storage, dict) else None
        if isinstance(configured, str) and configured:
            return Path(configured).expanduser()
        if configured is not None:
            logger.warning(f"Ignoring invalid storage.path {configured!r}")
        return data_dir() / "preferences.db"

    def _on_items_changed(self) -> None:
        # Re-rank so un-excluded items and new nicknames show up
        if self.ui_state.state.query:
            self.session.resubmit()

    def set_calculator_enabled(self, enabled: bool) -> None:
        self.calculator.set_enabled(enabled)
        self.ui_state.update(lambda state: replace(state, calculator_enabled=enabled))

    def close(self) -> None:
        for manager in self.managers:
            manager.close()
        self.session.close()
        if self._owns_store:
            self.store.close()

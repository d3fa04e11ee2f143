# Quicksearch Services Package
"""
Backend services for the quicksearch core.

Services handle item state, data persistence, and the observable UI state.
"""

from .management import ItemStateManager
from .preferences import MemoryPreferenceStore, PersistenceError, PreferenceStore, SqlitePreferenceStore
from .state import SearchUiState, UiStateStore

__all__ = [
    "ItemStateManager",
    "MemoryPreferenceStore",
    "PersistenceError",
    "PreferenceStore",
    "SqlitePreferenceStore",
    "SearchUiState",
    "UiStateStore",
]

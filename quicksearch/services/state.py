"""
UI State - Observable snapshot the presentation layer renders from.

All publishers (item state manager, search session) go through
UiStateStore.update(), passing a function from the latest snapshot to the
next one. Listeners are notified after every update, like the "changed"
signal of a service. The core never reads this state back to decide its own
invariants; the preference store stays the source of truth.
"""

import threading
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Callable, Mapping

from loguru import logger

from quicksearch.models import ItemKind, ResultItem


@dataclass(frozen=True)
class ManagementSnapshot:
    """Pinned / excluded / nickname state of one item kind."""

    pinned: frozenset[str] = frozenset()
    excluded: frozenset[str] = frozenset()
    nicknames: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class SearchUiState:
    query: str = ""
    query_version: int = 0
    handler: str = "none"
    results: tuple[ResultItem, ...] = ()
    calculator_enabled: bool = True
    management: Mapping[ItemKind, ManagementSnapshot] = field(
        default_factory=lambda: MappingProxyType({kind: ManagementSnapshot() for kind in ItemKind})
    )

    def snapshot_for(self, kind: ItemKind) -> ManagementSnapshot:
        return self.management.get(kind, ManagementSnapshot())

    def with_snapshot(self, kind: ItemKind, snapshot: ManagementSnapshot) -> "SearchUiState":
        management = dict(self.management)
        management[kind] = snapshot
        return replace(self, management=MappingProxyType(management))


StateUpdater = Callable[[SearchUiState], SearchUiState]
StateListener = Callable[[SearchUiState], None]


class UiStateStore:
    """Holds the latest SearchUiState and applies updater functions to it."""

    def __init__(self, initial: SearchUiState | None = None):
        self._state = initial or SearchUiState()
        self._lock = threading.Lock()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SearchUiState:
        return self._state

    def connect(self, listener: StateListener) -> None:
        """Register a listener called with every new state."""
        self._listeners.append(listener)

    def update(self, updater: StateUpdater) -> SearchUiState:
        with self._lock:
            self._state = updater(self._state)
            new_state = self._state

        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.exception("UI state listener failed")
        return new_state

"""
Item State Manager - Pin, exclude, and nickname any managed item.

One generic ItemStateManager serves every item kind; a small
ManagementConfig per kind supplies the identity key. Mutations run on a
single worker thread per manager, so operations on one kind apply in the
order they were submitted. Each mutation writes to the preference store
first and only then publishes the new state to the UI.

Invariant: an excluded id is never pinned. Excluding unpins atomically, and
pinning an excluded id is refused.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Callable, Generic, TypeVar

from loguru import logger

from quicksearch.models import (
    AppInfo,
    ContactInfo,
    DeviceFile,
    ItemKind,
    SettingShortcut,
    result_identity,
)
from quicksearch.services.preferences import PersistenceError, PreferenceStore
from quicksearch.services.state import ManagementSnapshot, SearchUiState, UiStateStore

T = TypeVar("T")


@dataclass(frozen=True)
class ManagementConfig(Generic[T]):
    """Per-kind capabilities: which kind it is and how to identify an item."""

    kind: ItemKind
    identity: Callable[[T], str]


APP_MANAGEMENT: ManagementConfig[AppInfo] = ManagementConfig(ItemKind.APP, lambda app: app.package_name)
CONTACT_MANAGEMENT: ManagementConfig[ContactInfo] = ManagementConfig(
    ItemKind.CONTACT, lambda contact: str(contact.contact_id)
)
FILE_MANAGEMENT: ManagementConfig[DeviceFile] = ManagementConfig(ItemKind.FILE, lambda file: file.uri)
SETTING_MANAGEMENT: ManagementConfig[SettingShortcut] = ManagementConfig(
    ItemKind.SETTING, lambda setting: setting.id
)


class ItemStateManager(Generic[T]):
    """
    Applies management operations for one item kind.

    Mutating methods return a Future resolving to True when the operation was
    applied and persisted, False when it was refused or the store failed.
    A False result means the operation did not happen; retrying is safe
    because every operation is idempotent.

    Methods:
        pin(item), unpin(item): Toggle pinned state
        exclude(item): Hide item from results (also unpins)
        remove_exclusion(item): Show item again (pin state is not restored)
        set_nickname(item, nickname): Set or clear (None / blank) a nickname
        clear_all_excluded(): Empty the excluded set for this kind
    """

    def __init__(
        self,
        config: ManagementConfig[T],
        store: PreferenceStore,
        ui_state: UiStateStore | None = None,
        on_changed: Callable[[], None] | None = None,
    ):
        self.config = config
        self.store = store
        self.ui_state = ui_state
        self.on_changed = on_changed
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=f"quicksearch-{config.kind.value}",
        )

    @property
    def kind(self) -> ItemKind:
        return self.config.kind

    def identity(self, item: T) -> str:
        return self.config.identity(item)

    # Mutations ---------------------------------------------------------------

    def pin(self, item: T) -> Future:
        item_id = self.identity(item)
        return self._submit("pin", item_id, lambda: self._pin(item_id))

    def unpin(self, item: T) -> Future:
        item_id = self.identity(item)
        return self._submit("unpin", item_id, lambda: self.store.unpin(self.kind, item_id))

    def exclude(self, item: T) -> Future:
        item_id = self.identity(item)
        return self._submit("exclude", item_id, lambda: self.store.exclude(self.kind, item_id))

    def remove_exclusion(self, item: T) -> Future:
        item_id = self.identity(item)
        return self._submit(
            "remove_exclusion", item_id, lambda: self.store.remove_exclusion(self.kind, item_id)
        )

    def set_nickname(self, item: T, nickname: str | None) -> Future:
        item_id = self.identity(item)
        cleaned = nickname.strip() if nickname else None
        return self._submit(
            "set_nickname", item_id, lambda: self.store.set_nickname(self.kind, item_id, cleaned or None)
        )

    def clear_all_excluded(self) -> Future:
        return self._submit("clear_all_excluded", None, lambda: self.store.clear_excluded(self.kind))

    def refresh(self) -> Future:
        """Publish the persisted state of this kind to the UI."""
        return self._submit("refresh", None, lambda: None)

    def flush(self) -> None:
        """Block until every operation submitted so far has finished."""
        self._executor.submit(lambda: None).result()

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def _pin(self, item_id: str) -> bool:
        if item_id in self.store.get_excluded(self.kind):
            logger.debug(f"Refusing to pin excluded {self.kind.value} '{item_id}'")
            return False
        self.store.pin(self.kind, item_id)
        return True

    # Reads -------------------------------------------------------------------

    def is_pinned(self, item: T) -> bool:
        return self.identity(item) in self.pinned_ids()

    def is_excluded(self, item: T) -> bool:
        return self.identity(item) in self.excluded_ids()

    def get_nickname(self, item: T) -> str | None:
        try:
            return self.store.get_nickname(self.kind, self.identity(item))
        except PersistenceError:
            logger.exception(f"Failed to read nickname for {self.kind.value}")
            return None

    def pinned_ids(self) -> set[str]:
        try:
            return self.store.get_pinned(self.kind)
        except PersistenceError:
            logger.exception(f"Failed to read pinned {self.kind.value} ids")
            return set()

    def excluded_ids(self) -> set[str]:
        try:
            return self.store.get_excluded(self.kind)
        except PersistenceError:
            logger.exception(f"Failed to read excluded {self.kind.value} ids")
            return set()

    def nicknames(self) -> dict[str, str]:
        try:
            return self.store.get_nicknames(self.kind)
        except PersistenceError:
            logger.exception(f"Failed to read {self.kind.value} nicknames")
            return {}

    # Worker ------------------------------------------------------------------

    def _submit(self, operation: str, item_id: str | None, action: Callable[[], bool | None]) -> Future:
        return self._executor.submit(self._run, operation, item_id, action)

    def _run(self, operation: str, item_id: str | None, action: Callable[[], bool | None]) -> bool:
        try:
            applied = action()
        except PersistenceError:
            logger.exception(f"Failed to {operation} {self.kind.value} '{item_id}'")
            return False

        if applied is False:
            return False

        logger.debug(f"{operation} {self.kind.value} '{item_id}'")
        self._publish(operation, item_id)

        if self.on_changed is not None and operation != "refresh":
            self.on_changed()
        return True

    def _publish(self, operation: str, item_id: str | None) -> None:
        if self.ui_state is None:
            return

        try:
            snapshot = ManagementSnapshot(
                pinned=frozenset(self.store.get_pinned(self.kind)),
                excluded=frozenset(self.store.get_excluded(self.kind)),
                nicknames=MappingProxyType(self.store.get_nicknames(self.kind)),
            )
        except PersistenceError:
            # Persisted already; the UI catches up on the next refresh.
            logger.exception(f"Failed to read {self.kind.value} state after {operation}")
            return

        def project(state: SearchUiState) -> SearchUiState:
            state = state.with_snapshot(self.kind, snapshot)
            if operation == "exclude":
                results = tuple(
                    r for r in state.results if result_identity(r) != (self.kind, item_id)
                )
                state = replace(state, results=results)
            return state

        self.ui_state.update(project)

"""
Shortcut Resolver - Redirect a query to a search destination by its last word.

Typing "weather news ggl" sends "weather news" to the destination whose
shortcut code is "ggl". Codes are short alphanumeric tokens, stored
normalized (trimmed, lower-cased, non-alphanumerics stripped).

Detection works on an immutable ShortcutTable snapshot; ShortcutRegistry
owns the mutable configuration, validates edits, and persists them.
"""

import threading
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping

from loguru import logger

from quicksearch.services.preferences import PersistenceError, PreferenceStore

MIN_CODE_LENGTH = 2
MIN_DISPLAY_CODE_LENGTH = 1
MAX_CODE_LENGTH = 5


def normalize_code(code: str) -> str:
    """Trim, lower-case, and keep only letters and digits: " G G L " -> "ggl"."""
    return "".join(ch for ch in code.strip().lower() if ch.isalnum())


def _valid_length(code: str, min_length: int) -> bool:
    normalized = normalize_code(code)
    return min_length <= len(normalized) <= MAX_CODE_LENGTH


def is_valid_code(code: str) -> bool:
    """Strict validation used when saving a code: 2-5 characters."""
    return _valid_length(code, MIN_CODE_LENGTH)


def is_valid_code_for_display(code: str) -> bool:
    """Relaxed validation for live-typing feedback: 1-5 characters."""
    return _valid_length(code, MIN_DISPLAY_CODE_LENGTH)


def is_valid_prefix(code: str, existing_codes: Iterable[str]) -> bool:
    """
    Reject a code that starts with a different, already-used code.

    With "gg" in use, "ggl" would be shadowed while typing, so it is refused.
    """
    new = normalize_code(code)
    if not new:
        return True
    for existing in existing_codes:
        other = normalize_code(existing)
        if other and new != other and new.startswith(other):
            return False
    return True


@dataclass(frozen=True)
class ShortcutEntry:
    code: str
    enabled: bool = True

    def __post_init__(self):
        object.__setattr__(self, "code", normalize_code(self.code))


@dataclass(frozen=True)
class ShortcutTable:
    """
    Immutable destination -> ShortcutEntry mapping.

    Iteration order is the detection priority order.
    """

    entries: tuple[tuple[str, ShortcutEntry], ...] = ()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, ShortcutEntry | str]) -> "ShortcutTable":
        entries = []
        for destination, entry in mapping.items():
            if isinstance(entry, str):
                entry = ShortcutEntry(entry)
            entries.append((destination, entry))
        return cls(tuple(entries))

    def __iter__(self) -> Iterator[tuple[str, ShortcutEntry]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, destination: str) -> ShortcutEntry | None:
        for dest, entry in self.entries:
            if dest == destination:
                return entry
        return None

    def with_entry(self, destination: str, entry: ShortcutEntry) -> "ShortcutTable":
        """Return a copy with one destination replaced (or appended)."""
        entries = [(d, entry if d == destination else e) for d, e in self.entries]
        if self.get(destination) is None:
            entries.append((destination, entry))
        return ShortcutTable(tuple(entries))

    def codes(self) -> dict[str, str]:
        return {dest: entry.code for dest, entry in self.entries}


def _find_destination(word: str, table: ShortcutTable) -> str | None:
    word = word.lower()
    for destination, entry in table:
        if not entry.enabled or not entry.code:
            continue
        if entry.code == word:
            return destination
    return None


def detect(query: str, table: ShortcutTable) -> tuple[str, str] | None:
    """
    Detect a trailing shortcut code.

    Args:
        query: Raw query text
        table: Snapshot of the shortcut configuration

    Returns:
        (remaining_query, destination_id), or None if the last word is not
        an enabled shortcut or the query has fewer than two words
    """
    trimmed = query.strip()
    if not trimmed:
        return None

    parts = trimmed.rsplit(None, 1)
    if len(parts) < 2:
        return None

    remaining, last_word = parts
    destination = _find_destination(last_word, table)
    if destination is None:
        return None
    return remaining.rstrip(), destination


def detect_at_start(query: str, table: ShortcutTable) -> tuple[str, str] | None:
    """Detect a leading shortcut code ("ggl weather news")."""
    trimmed = query.strip()
    if not trimmed:
        return None

    parts = trimmed.split(None, 1)
    if len(parts) < 2:
        return None

    first_word, remaining = parts
    destination = _find_destination(first_word, table)
    if destination is None:
        return None
    return remaining.lstrip(), destination


class ShortcutRegistry:
    """
    Owns the shortcut configuration and hands out immutable snapshots.

    Codes come from the built-in defaults, then settings overrides, then
    values persisted by earlier edits. Invalid codes at any layer are
    ignored and the previous layer's code is kept.
    """

    def __init__(
        self,
        defaults: Mapping[str, str],
        store: PreferenceStore | None = None,
        overrides: Mapping[str, Mapping] | None = None,
    ):
        self.store = store
        self._lock = threading.Lock()

        table = ShortcutTable.from_mapping(dict(defaults))

        for destination, override in (overrides or {}).items():
            table = self._apply_loaded(table, destination, override.get("code"), override.get("enabled"))

        if store is not None:
            try:
                persisted = store.get_shortcuts()
            except PersistenceError:
                logger.exception("Failed to load persisted shortcuts, using defaults")
                persisted = {}
            for destination, (code, enabled) in persisted.items():
                table = self._apply_loaded(table, destination, code, enabled)

        self._table = table

    @staticmethod
    def _apply_loaded(table: ShortcutTable, destination: str, code, enabled) -> ShortcutTable:
        current = table.get(destination)
        if current is None:
            logger.warning(f"Ignoring shortcut for unknown destination '{destination}'")
            return table

        new_code = current.code
        if code is not None:
            if isinstance(code, str) and is_valid_code(code):
                new_code = normalize_code(code)
            else:
                logger.warning(f"Ignoring invalid shortcut code {code!r} for '{destination}'")

        new_enabled = current.enabled
        if enabled is not None:
            if isinstance(enabled, bool):
                new_enabled = enabled
            else:
                logger.warning(f"Ignoring invalid enabled flag {enabled!r} for '{destination}'")

        return table.with_entry(destination, ShortcutEntry(new_code, new_enabled))

    def snapshot(self) -> ShortcutTable:
        return self._table

    def set_code(self, destination: str, code: str) -> bool:
        """
        Change a destination's code. Saving a code also enables it.

        Returns:
            True if applied; False if the code was invalid, conflicts with
            another code, or could not be persisted
        """
        normalized = normalize_code(code)
        with self._lock:
            if self._table.get(destination) is None:
                logger.warning(f"Unknown shortcut destination '{destination}'")
                return False
            if not is_valid_code(normalized):
                logger.warning(f"Rejected shortcut code {code!r} for '{destination}'")
                return False

            others = [c for d, c in self._table.codes().items() if d != destination]
            if not is_valid_prefix(normalized, others):
                logger.warning(f"Shortcut code '{normalized}' conflicts with an existing code")
                return False

            if not self._persist(destination, normalized, True):
                return False
            self._table = self._table.with_entry(destination, ShortcutEntry(normalized, True))

        logger.debug(f"Shortcut for '{destination}' set to '{normalized}'")
        return True

    def set_enabled(self, destination: str, enabled: bool) -> bool:
        with self._lock:
            entry = self._table.get(destination)
            if entry is None:
                logger.warning(f"Unknown shortcut destination '{destination}'")
                return False
            if not self._persist(destination, entry.code, enabled):
                return False
            self._table = self._table.with_entry(destination, ShortcutEntry(entry.code, enabled))
        return True

    def _persist(self, destination: str, code: str, enabled: bool) -> bool:
        if self.store is None:
            return True
        try:
            self.store.set_shortcut(destination, code, enabled)
        except PersistenceError:
            logger.exception(f"Failed to save shortcut for '{destination}'")
            return False
        return True

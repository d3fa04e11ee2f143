"""
Preference Store - Persistent pinned / excluded / nickname state per item kind.

The item state manager only depends on the PreferenceStore contract. Two
implementations are provided:
  - SqlitePreferenceStore: WAL-mode SQLite database, one persistent
    connection, every mutation committed in its own transaction
  - MemoryPreferenceStore: process-local dictionaries (tests, ephemeral use)

Every storage failure surfaces as PersistenceError. Excluding an item also
unpins it inside the same transaction, so an id is never both pinned and
excluded on disk.
"""

import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger

from quicksearch.models import ItemKind


class PersistenceError(Exception):
    """Raised when the preference store cannot read or write."""


class PreferenceStore(ABC):
    """Narrow key-value contract used by the item state manager."""

    @abstractmethod
    def get_pinned(self, kind: ItemKind) -> set[str]:
        ...

    @abstractmethod
    def pin(self, kind: ItemKind, item_id: str) -> None:
        ...

    @abstractmethod
    def unpin(self, kind: ItemKind, item_id: str) -> None:
        ...

    @abstractmethod
    def get_excluded(self, kind: ItemKind) -> set[str]:
        ...

    @abstractmethod
    def exclude(self, kind: ItemKind, item_id: str) -> None:
        """Add to the excluded set and remove from the pinned set atomically."""
        ...

    @abstractmethod
    def remove_exclusion(self, kind: ItemKind, item_id: str) -> None:
        ...

    @abstractmethod
    def clear_excluded(self, kind: ItemKind) -> None:
        ...

    @abstractmethod
    def get_nicknames(self, kind: ItemKind) -> dict[str, str]:
        ...

    @abstractmethod
    def set_nickname(self, kind: ItemKind, item_id: str, nickname: str | None) -> None:
        """Store a nickname; None clears it."""
        ...

    def get_nickname(self, kind: ItemKind, item_id: str) -> str | None:
        return self.get_nicknames(kind).get(item_id)

    @abstractmethod
    def get_shortcuts(self) -> dict[str, tuple[str, bool]]:
        """Return persisted shortcut edits as destination -> (code, enabled)."""
        ...

    @abstractmethod
    def set_shortcut(self, destination: str, code: str, enabled: bool) -> None:
        ...


class SqlitePreferenceStore(PreferenceStore):
    """
    SQLite-backed preference store.

    One connection is shared across threads; a lock serializes access so
    per-kind writer threads can use the same store.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_database()
        logger.debug(f"SqlitePreferenceStore initialized with db at {self.db_path}")

    def _init_database(self):
        """Create database schema if it doesn't exist."""
        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS pinned (
                    kind TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    PRIMARY KEY (kind, item_id)
                )
            """)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS excluded (
                    kind TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    PRIMARY KEY (kind, item_id)
                )
            """)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS nicknames (
                    kind TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    nickname TEXT NOT NULL,
                    PRIMARY KEY (kind, item_id)
                )
            """)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS shortcuts (
                    destination TEXT PRIMARY KEY,
                    code TEXT NOT NULL,
                    enabled INTEGER NOT NULL DEFAULT 1
                )
            """)

    def _read(self, sql: str, params: tuple = ()) -> list[tuple]:
        with self._lock:
            try:
                return self._conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                raise PersistenceError(str(e)) from e

    def _write(self, *statements: tuple[str, tuple]) -> None:
        """Run statements in one transaction; roll back all of them on error."""
        with self._lock:
            try:
                with self._conn:
                    for sql, params in statements:
                        self._conn.execute(sql, params)
            except sqlite3.Error as e:
                raise PersistenceError(str(e)) from e

    def get_pinned(self, kind: ItemKind) -> set[str]:
        rows = self._read("SELECT item_id FROM pinned WHERE kind = ?", (kind.value,))
        return {row[0] for row in rows}

    def pin(self, kind: ItemKind, item_id: str) -> None:
        self._write((
            "INSERT OR IGNORE INTO pinned (kind, item_id) VALUES (?, ?)",
            (kind.value, item_id),
        ))

    def unpin(self, kind: ItemKind, item_id: str) -> None:
        self._write((
            "DELETE FROM pinned WHERE kind = ? AND item_id = ?",
            (kind.value, item_id),
        ))

    def get_excluded(self, kind: ItemKind) -> set[str]:
        rows = self._read("SELECT item_id FROM excluded WHERE kind = ?", (kind.value,))
        return {row[0] for row in rows}

    def exclude(self, kind: ItemKind, item_id: str) -> None:
        self._write(
            ("INSERT OR IGNORE INTO excluded (kind, item_id) VALUES (?, ?)", (kind.value, item_id)),
            ("DELETE FROM pinned WHERE kind = ? AND item_id = ?", (kind.value, item_id)),
        )

    def remove_exclusion(self, kind: ItemKind, item_id: str) -> None:
        self._write((
            "DELETE FROM excluded WHERE kind = ? AND item_id = ?",
            (kind.value, item_id),
        ))

    def clear_excluded(self, kind: ItemKind) -> None:
        self._write(("DELETE FROM excluded WHERE kind = ?", (kind.value,)))

    def get_nicknames(self, kind: ItemKind) -> dict[str, str]:
        rows = self._read("SELECT item_id, nickname FROM nicknames WHERE kind = ?", (kind.value,))
        return dict(rows)

    def get_nickname(self, kind: ItemKind, item_id: str) -> str | None:
        rows = self._read(
            "SELECT nickname FROM nicknames WHERE kind = ? AND item_id = ?",
            (kind.value, item_id),
        )
        return rows[0][0] if rows else None

    def set_nickname(self, kind: ItemKind, item_id: str, nickname: str | None) -> None:
        if nickname is None:
            self._write((
                "DELETE FROM nicknames WHERE kind = ? AND item_id = ?",
                (kind.value, item_id),
            ))
            return
        self._write((
            """
            INSERT INTO nicknames (kind, item_id, nickname) VALUES (?, ?, ?)
            ON CONFLICT(kind, item_id) DO UPDATE SET nickname = excluded.nickname
            """,
            (kind.value, item_id, nickname),
        ))

    def get_shortcuts(self) -> dict[str, tuple[str, bool]]:
        rows = self._read("SELECT destination, code, enabled FROM shortcuts")
        return {dest: (code, bool(enabled)) for dest, code, enabled in rows}

    def set_shortcut(self, destination: str, code: str, enabled: bool) -> None:
        self._write((
            """
            INSERT INTO shortcuts (destination, code, enabled) VALUES (?, ?, ?)
            ON CONFLICT(destination) DO UPDATE SET
                code = excluded.code,
                enabled = excluded.enabled
            """,
            (destination, code, int(enabled)),
        ))

    def close(self) -> None:
        with self._lock:
            self._conn.close()


class MemoryPreferenceStore(PreferenceStore):
    """In-process store with the same semantics as the SQLite store."""

    def __init__(self):
        self._lock = threading.Lock()
        self._pinned: dict[ItemKind, set[str]] = {}
        self._excluded: dict[ItemKind, set[str]] = {}
        self._nicknames: dict[ItemKind, dict[str, str]] = {}
        self._shortcuts: dict[str, tuple[str, bool]] = {}

    def get_pinned(self, kind: ItemKind) -> set[str]:
        with self._lock:
            return set(self._pinned.get(kind, ()))

    def pin(self, kind: ItemKind, item_id: str) -> None:
        with self._lock:
            self._pinned.setdefault(kind, set()).add(item_id)

    def unpin(self, kind: ItemKind, item_id: str) -> None:
        with self._lock:
            self._pinned.get(kind, set()).discard(item_id)

    def get_excluded(self, kind: ItemKind) -> set[str]:
        with self._lock:
            return set(self._excluded.get(kind, ()))

    def exclude(self, kind: ItemKind, item_id: str) -> None:
        with self._lock:
            self._excluded.setdefault(kind, set()).add(item_id)
            self._pinned.get(kind, set()).discard(item_id)

    def remove_exclusion(self, kind: ItemKind, item_id: str) -> None:
        with self._lock:
            self._excluded.get(kind, set()).discard(item_id)

    def clear_excluded(self, kind: ItemKind) -> None:
        with self._lock:
            self._excluded.pop(kind, None)

    def get_nicknames(self, kind: ItemKind) -> dict[str, str]:
        with self._lock:
            return dict(self._nicknames.get(kind, {}))

    def set_nickname(self, kind: ItemKind, item_id: str, nickname: str | None) -> None:
        with self._lock:
            nicknames = self._nicknames.setdefault(kind, {})
            if nickname is None:
                nicknames.pop(item_id, None)
            else:
                nicknames[item_id] = nickname

    def get_shortcuts(self) -> dict[str, tuple[str, bool]]:
        with self._lock:
            return dict(self._shortcuts)

    def set_shortcut(self, destination: str, code: str, enabled: bool) -> None:
        with self._lock:
            self._shortcuts[destination] = (code, enabled)

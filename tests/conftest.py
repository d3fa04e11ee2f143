"""
Shared test fixtures for the quicksearch test suite.

Provides temporary preference databases, settings files, and sample
candidates that use real file I/O (no mocking of the filesystem).
"""

import pytest
import toml

from quicksearch.models import AppInfo, ContactInfo, DeviceFile, SettingShortcut
from quicksearch.services.preferences import MemoryPreferenceStore, SqlitePreferenceStore
from quicksearch.services.state import UiStateStore


@pytest.fixture
def tmp_db(tmp_path):
    """Path for a real SQLite preference database."""
    return tmp_path / "preferences.db"


@pytest.fixture
def sqlite_store(tmp_db):
    """A SqlitePreferenceStore on a fresh database, closed after the test."""
    store = SqlitePreferenceStore(tmp_db)
    yield store
    store.close()


@pytest.fixture
def memory_store():
    return MemoryPreferenceStore()


@pytest.fixture
def ui_state():
    return UiStateStore()


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file with all sections."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "calculator": {"enabled": False},
        "search": {"max_results": 10},
        "fuzzy": {
            "contacts": {
                "enabled": True,
                "match_threshold": 60,
                "min_query_length": 2,
                "priority": 3,
            },
        },
        "shortcuts": {
            "google": {"code": "gg", "enabled": True},
            "bing": {"enabled": False},
        },
        "storage": {"path": str(tmp_path / "prefs.db")},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path


@pytest.fixture
def sample_apps():
    return [
        AppInfo("YouTube Music", "com.google.android.apps.youtube.music"),
        AppInfo("YouTube", "com.google.android.youtube"),
        AppInfo("Spotify", "com.spotify.music"),
        AppInfo("Google Maps", "com.google.android.apps.maps"),
        AppInfo("Calculator", "com.android.calculator2"),
        AppInfo("WhatsApp", "com.whatsapp"),
    ]


@pytest.fixture
def sample_contacts():
    return [
        ContactInfo(1, "Alice Johnson", ("+15550100",)),
        ContactInfo(2, "Bob Smith"),
        ContactInfo(3, "Mom"),
    ]


@pytest.fixture
def sample_files():
    return [
        DeviceFile("content://media/1", "holiday_photo.jpg", "image/jpeg"),
        DeviceFile("content://media/2", "tax return 2025.pdf", "application/pdf"),
        DeviceFile("content://media/3", "Downloads", is_directory=True),
    ]


@pytest.fixture
def sample_settings():
    return [
        SettingShortcut("wifi", "Wi-Fi", "Network settings", ("wireless", "internet")),
        SettingShortcut("bluetooth", "Bluetooth", "Pair devices", ("pairing",)),
        SettingShortcut("display", "Display", "Brightness and theme", ("brightness", "screen")),
    ]


@pytest.fixture
def make_provider():
    """Factory wrapping a list as a CandidateProvider that returns every item."""
    def factory(items):
        def provider(query, limit):
            return list(items)
        return provider
    return factory

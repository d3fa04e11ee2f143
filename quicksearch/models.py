"""
Domain models shared by the search handlers and the item state manager.

Managed items (apps, contacts, files, device settings) each expose a stable
identity key. Search results are a closed set of frozen dataclasses; code that
merges or projects results matches on them exhaustively, so adding a new
result kind fails loudly at every merge point until it is handled.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import assert_never


class ItemKind(str, Enum):
    """Kinds of items that can be pinned, excluded, or nicknamed."""

    APP = "app"
    CONTACT = "contact"
    FILE = "file"
    SETTING = "setting"


@dataclass(frozen=True)
class AppInfo:
    name: str
    package_name: str


@dataclass(frozen=True)
class ContactInfo:
    contact_id: int
    display_name: str
    phone_numbers: tuple[str, ...] = ()


@dataclass(frozen=True)
class DeviceFile:
    uri: str
    display_name: str
    mime_type: str | None = None
    is_directory: bool = False


@dataclass(frozen=True)
class SettingShortcut:
    id: str
    title: str
    description: str = ""
    keywords: tuple[str, ...] = ()


# Result variants --------------------------------------------------------------

@dataclass(frozen=True)
class AppResult:
    app: AppInfo
    score: int = 100
    is_fuzzy: bool = False

    @property
    def title(self) -> str:
        return self.app.name


@dataclass(frozen=True)
class ContactResult:
    contact: ContactInfo
    score: int = 100
    is_fuzzy: bool = False

    @property
    def title(self) -> str:
        return self.contact.display_name


@dataclass(frozen=True)
class FileResult:
    file: DeviceFile
    score: int = 100
    is_fuzzy: bool = False

    @property
    def title(self) -> str:
        return self.file.display_name


@dataclass(frozen=True)
class SettingResult:
    setting: SettingShortcut
    score: int = 100
    is_fuzzy: bool = False

    @property
    def title(self) -> str:
        return self.setting.title


@dataclass(frozen=True)
class CalculatorResult:
    expression: str
    result: str

    @property
    def title(self) -> str:
        return self.result


@dataclass(frozen=True)
class WebSearchResult:
    destination: str
    engine_name: str
    query: str
    url: str = field(default="", compare=False)

    @property
    def title(self) -> str:
        return f"Search {self.engine_name}: {self.query}"


ResultItem = (
    AppResult
    | ContactResult
    | FileResult
    | SettingResult
    | CalculatorResult
    | WebSearchResult
)


def result_identity(result: ResultItem) -> tuple[ItemKind, str] | None:
    """
    Return the (kind, id) of the managed item behind a result row.

    Calculator and web search rows are not managed and return None.
    """
    match result:
        case AppResult(app=app):
            return ItemKind.APP, app.package_name
        case ContactResult(contact=contact):
            return ItemKind.CONTACT, str(contact.contact_id)
        case FileResult(file=file):
            return ItemKind.FILE, file.uri
        case SettingResult(setting=setting):
            return ItemKind.SETTING, setting.id
        case CalculatorResult() | WebSearchResult():
            return None
        case _:
            assert_never(result)


def result_section(result: ResultItem) -> str:
    """Section name a result row is rendered under."""
    match result:
        case AppResult():
            return "apps"
        case ContactResult():
            return "contacts"
        case FileResult():
            return "files"
        case SettingResult():
            return "settings"
        case CalculatorResult():
            return "calculator"
        case WebSearchResult():
            return "web"
        case _:
            assert_never(result)

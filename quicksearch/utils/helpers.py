"""
Helper utilities for the quicksearch core.

Provides:
- Settings loading from TOML with defaults applied
- XDG config / data directory resolution
- Conversion of settings sections into typed configuration
"""

import os
from pathlib import Path
from typing import Any, Dict

import toml
from loguru import logger

from quicksearch.search.strategies import DEFAULT_APP_CONFIG, DEFAULT_SOURCE_CONFIG, SOURCES, FuzzyConfig

DEFAULT_CALCULATOR_ENABLED = True
DEFAULT_MAX_RESULTS = 30


def _default_settings() -> Dict[str, Any]:
    fuzzy = {}
    for source in SOURCES:
        config = DEFAULT_APP_CONFIG if source == "apps" else DEFAULT_SOURCE_CONFIG
        fuzzy[source] = {
            "enabled": config.enabled,
            "match_threshold": config.match_threshold,
            "min_query_length": config.min_query_length,
            "priority": config.priority,
        }

    return {
        "calculator": {
            "enabled": DEFAULT_CALCULATOR_ENABLED,
        },
        "search": {
            "max_results": DEFAULT_MAX_RESULTS,
        },
        "fuzzy": fuzzy,
        "shortcuts": {},
        "storage": {},
    }


def config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "quicksearch"


def data_dir() -> Path:
    base = os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share"
    return Path(base) / "quicksearch"


def settings_path() -> Path:
    return config_dir() / "settings.toml"


def load_settings(path: Path | None = None) -> Dict[str, Any]:
    """
    Load settings from a TOML file.

    Returns:
        Dictionary containing settings with defaults applied

    Example settings.toml:
        [calculator]
        enabled = true

        [fuzzy.apps]
        enabled = true
        match_threshold = 70
        min_query_length = 3
        priority = 5

        [shortcuts.google]
        code = "gg"
        enabled = true
    """
    defaults = _default_settings()
    path = Path(path) if path is not None else settings_path()

    if not path.exists():
        logger.info(f"Settings file not found at {path}, using defaults")
        return defaults

    try:
        loaded = toml.load(path)
    except (toml.TomlDecodeError, OSError):
        logger.exception(f"Could not load settings from {path}, using defaults")
        return defaults

    return _deep_merge(defaults, loaded)


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def fuzzy_configs_from_settings(settings: Dict[str, Any]) -> Dict[str, FuzzyConfig]:
    """
    Build a FuzzyConfig per source from the [fuzzy.*] sections.

    Sections with wrong types or out-of-range values are skipped with a
    warning; the source keeps its default config.
    """
    configs = {}
    fuzzy = settings.get("fuzzy", {})
    if not isinstance(fuzzy, dict):
        logger.warning("Ignoring malformed [fuzzy] settings")
        return {}
    for source, section in fuzzy.items():
        if not isinstance(section, dict):
            logger.warning(f"Skipping malformed fuzzy section '{source}'")
            continue
        try:
            config = FuzzyConfig(
                enabled=section["enabled"],
                match_threshold=section["match_threshold"],
                min_query_length=section["min_query_length"],
                priority=section["priority"],
            )
        except KeyError:
            logger.warning(f"Skipping malformed fuzzy section '{source}'")
            continue
        if not config.is_valid():
            logger.warning(f"Skipping invalid fuzzy config for '{source}': {config}")
            continue
        configs[source] = config
    return configs


def shortcut_overrides_from_settings(settings: Dict[str, Any]) -> Dict[str, Dict]:
    """Return the [shortcuts.*] sections that are tables."""
    overrides = {}
    shortcuts = settings.get("shortcuts", {})
    if not isinstance(shortcuts, dict):
        logger.warning("Ignoring malformed [shortcuts] settings")
        return {}
    for destination, section in shortcuts.items():
        if not isinstance(section, dict):
            logger.warning(f"Skipping malformed shortcut section '{destination}'")
            continue
        overrides[destination] = section
    return overrides


def calculator_enabled_from_settings(settings: Dict[str, Any]) -> bool:
    """Read [calculator] enabled; anything but a TOML boolean keeps the default."""
    section = settings.get("calculator", {})
    value = section.get("enabled", DEFAULT_CALCULATOR_ENABLED) if isinstance(section, dict) else None
    if not isinstance(value, bool):
        logger.warning(f"Ignoring invalid calculator.enabled {value!r}, using {DEFAULT_CALCULATOR_ENABLED}")
        return DEFAULT_CALCULATOR_ENABLED
    return value


def max_results_from_settings(settings: Dict[str, Any]) -> int:
    """Read [search] max_results; non-integers and values below 1 keep the default."""
    section = settings.get("search", {})
    value = section.get("max_results", DEFAULT_MAX_RESULTS) if isinstance(section, dict) else None
    # bool is an int subclass; "max_results = true" is not a count
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        logger.warning(f"Ignoring invalid search.max_results {value!r}, using {DEFAULT_MAX_RESULTS}")
        return DEFAULT_MAX_RESULTS
    return value

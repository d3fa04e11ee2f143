# Quicksearch Utilities Package
"""
Shared utility functions and helpers for the quicksearch core.
"""

from .helpers import config_dir, data_dir, load_settings

__all__ = ["config_dir", "data_dir", "load_settings"]

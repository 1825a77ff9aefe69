"""
Preferences Module
==================

User preferences for the blocker.

This package contains:
    - catalog: Static list of supported apps
    - store: JSON key-value preferences store
"""

from shorts_blocker.preferences.catalog import (
    AVAILABLE_PACKAGES,
    DEFAULT_ENABLED_PACKAGES,
    TrackedPackage,
    find_package,
)
from shorts_blocker.preferences.store import PreferencesStore, decode_packages, encode_packages

__all__ = [
    "AVAILABLE_PACKAGES",
    "DEFAULT_ENABLED_PACKAGES",
    "TrackedPackage",
    "find_package",
    "PreferencesStore",
    "decode_packages",
    "encode_packages",
]

"""
Preferences Store
=================

Small JSON key-value store holding the user's preferences:

- tracked packages, serialized as a comma-joined string
- onboarding-completed flag
- disclosure-accepted flag

Reads drop blank and duplicate package entries and fall back to the
default package set when the value is unset or empty.

Usage:
    store = PreferencesStore(Path("~/.shorts_blocker/preferences.json").expanduser())
    store.toggle_package("com.instagram.android", enabled=False)
    packages = store.get_tracked_packages()
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Iterable

from shorts_blocker.preferences.catalog import (
    AVAILABLE_PACKAGES,
    DEFAULT_ENABLED_PACKAGES,
    TrackedPackage,
)
from shorts_blocker.utils.logger import get_logger

logger = get_logger(__name__)

TRACKED_PACKAGES_KEY = "tracked_packages"
ONBOARDING_COMPLETED_KEY = "onboarding_completed"
DISCLOSURE_ACCEPTED_KEY = "disclosure_accepted"


def encode_packages(packages: Iterable[str]) -> str:
    """Join distinct, non-blank package names with commas."""
    return ",".join(_normalize(packages))


def decode_packages(value: Any) -> list[str]:
    """
    Split a comma-joined value into distinct, non-blank package names.

    Anything other than a string is a corrupt entry and decodes as empty.
    """
    if not value:
        return []
    if not isinstance(value, str):
        logger.error("Tracked packages value is not a string, using defaults", value=repr(value))
        return []
    return _normalize(value.split(","))


def _normalize(packages: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for pkg in packages:
        pkg = pkg.strip()
        if pkg and pkg not in seen:
            seen.add(pkg)
            result.append(pkg)
    return result


class PreferencesStore:
    """
    File-backed preferences.

    All access is serialized by a lock; writes replace the file
    atomically.
    """

    def __init__(self, path: Path) -> None:
        """
        Initialize the store.

        Args:
            path: JSON file location. Created on first write.
        """
        self.path = Path(path)
        self._lock = threading.RLock()
        self._version = 0

    # ------------------------------------------------------------------
    # Raw key-value access
    # ------------------------------------------------------------------

    def _read(self) -> dict[str, Any]:
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.error("Failed to read preferences", path=str(self.path), error=str(e))
            return {}

        try:
            data = json.loads(content) if content.strip() else {}
        except json.JSONDecodeError as e:
            logger.error("Preferences file is corrupt, using defaults", path=str(self.path), error=str(e))
            return {}

        if not isinstance(data, dict):
            logger.error("Preferences file is not an object, using defaults", path=str(self.path))
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".prefs-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        self._version += 1

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    @property
    def revision(self) -> tuple[int, int]:
        """Changes whenever the preferences are written, by this or another process."""
        with self._lock:
            try:
                mtime = self.path.stat().st_mtime_ns
            except FileNotFoundError:
                mtime = 0
            return self._version, mtime

    # ------------------------------------------------------------------
    # Tracked packages
    # ------------------------------------------------------------------

    def get_tracked_packages(self) -> list[str]:
        """Return tracked package names, or the defaults when unset or empty."""
        packages = decode_packages(self.get(TRACKED_PACKAGES_KEY))
        if not packages:
            packages = list(DEFAULT_ENABLED_PACKAGES)
        logger.debug("Getting tracked packages", packages=packages)
        return packages

    def set_tracked_packages(self, packages: Iterable[str]) -> None:
        value = encode_packages(packages)
        logger.debug("Setting tracked packages", packages=value)
        self.set(TRACKED_PACKAGES_KEY, value)

    def get_tracked_packages_with_status(self) -> list[TrackedPackage]:
        """Return the catalog with each entry's enabled flag filled in."""
        enabled = set(self.get_tracked_packages())
        return [pkg.with_enabled(pkg.package_name in enabled) for pkg in AVAILABLE_PACKAGES]

    def toggle_package(self, package_name: str, enabled: bool) -> list[str]:
        """
        Enable or disable tracking for one package.

        Returns:
            The tracked packages after the change.
        """
        logger.info("Toggling package", package=package_name, enabled=enabled)
        with self._lock:
            packages = self.get_tracked_packages()
            if enabled and package_name not in packages:
                packages.append(package_name)
            elif not enabled and package_name in packages:
                packages.remove(package_name)
            self.set_tracked_packages(packages)
            return packages

    def initialize_default_packages(self) -> None:
        """Persist the default package set when nothing is stored yet."""
        with self._lock:
            if not decode_packages(self.get(TRACKED_PACKAGES_KEY)):
                logger.info("Initializing default packages")
                self.set_tracked_packages(DEFAULT_ENABLED_PACKAGES)

    # ------------------------------------------------------------------
    # Onboarding flags
    # ------------------------------------------------------------------

    def _get_flag(self, key: str) -> bool:
        value = self.get(key, False)
        if not isinstance(value, bool):
            logger.error("Preference flag is not a boolean, using false", key=key, value=repr(value))
            return False
        return value

    @property
    def onboarding_completed(self) -> bool:
        return self._get_flag(ONBOARDING_COMPLETED_KEY)

    @onboarding_completed.setter
    def onboarding_completed(self, value: bool) -> None:
        self.set(ONBOARDING_COMPLETED_KEY, bool(value))

    @property
    def disclosure_accepted(self) -> bool:
        return self._get_flag(DISCLOSURE_ACCEPTED_KEY)

    @disclosure_accepted.setter
    def disclosure_accepted(self, value: bool) -> None:
        self.set(DISCLOSURE_ACCEPTED_KEY, bool(value))

"""
Tracked Package Catalog
=======================

Static list of applications the blocker knows how to monitor.
"""

from dataclasses import dataclass, replace
from typing import Optional

from shorts_blocker.detectors.instagram import INSTAGRAM_PACKAGE
from shorts_blocker.detectors.youtube import YOUTUBE_PACKAGE


@dataclass(frozen=True)
class TrackedPackage:
    """
    An application that can be monitored.

    Attributes:
        package_name: Android package name.
        display_name: Human readable app name.
        description: What gets blocked in this app.
        enabled: Whether the user enabled monitoring.
    """

    package_name: str
    display_name: str
    description: str
    enabled: bool = False

    def with_enabled(self, enabled: bool) -> "TrackedPackage":
        return replace(self, enabled=enabled)


AVAILABLE_PACKAGES: tuple[TrackedPackage, ...] = (
    TrackedPackage(
        package_name=YOUTUBE_PACKAGE,
        display_name="YouTube",
        description="Block YouTube Shorts",
    ),
    TrackedPackage(
        package_name=INSTAGRAM_PACKAGE,
        display_name="Instagram",
        description="Block Instagram Reels",
    ),
)

DEFAULT_ENABLED_PACKAGES: tuple[str, ...] = (YOUTUBE_PACKAGE, INSTAGRAM_PACKAGE)


def find_package(package_name: str) -> Optional[TrackedPackage]:
    """Look up a catalog entry by package name."""
    for pkg in AVAILABLE_PACKAGES:
        if pkg.package_name == package_name:
            return pkg
    return None

"""
Detector Registry
=================

Maps application package names to their content detector.

Usage:
    from shorts_blocker.detectors import build_default_registry

    registry = build_default_registry()
    detector = registry.get("com.google.android.youtube")
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from shorts_blocker.config import DetectionSettings
from shorts_blocker.detectors.base import ContentDetector
from shorts_blocker.detectors.instagram import InstagramReelsDetector, InstagramReelsTabDetector
from shorts_blocker.detectors.youtube import YouTubeShortsDetector, YouTubeShortsPlayerDetector
from shorts_blocker.utils.logger import get_logger

logger = get_logger(__name__)


YOUTUBE_HEURISTICS: Mapping[str, type[ContentDetector]] = MappingProxyType({
    "progress_bar": YouTubeShortsDetector,
    "vertical_player": YouTubeShortsPlayerDetector,
})

INSTAGRAM_HEURISTICS: Mapping[str, type[ContentDetector]] = MappingProxyType({
    "section_video": InstagramReelsDetector,
    "tab_fullscreen": InstagramReelsTabDetector,
})


class DetectorRegistry:
    """
    Immutable package-name to detector mapping.

    At most one detector is registered per package.
    """

    def __init__(self, detectors: Iterable[ContentDetector] = ()) -> None:
        """
        Build the registry.

        Args:
            detectors: Detectors to register.

        Raises:
            ValueError: If two detectors claim the same package or a
                detector has no package name.
        """
        table: dict[str, ContentDetector] = {}
        for detector in detectors:
            if not detector.package_name:
                raise ValueError(f"{detector!r} has no package name")
            if detector.package_name in table:
                raise ValueError(f"Duplicate detector for package '{detector.package_name}'")
            table[detector.package_name] = detector
        self._detectors: Mapping[str, ContentDetector] = MappingProxyType(table)

    def get(self, package_name: Optional[str]) -> Optional[ContentDetector]:
        """Return the detector for ``package_name`` or None."""
        if not package_name:
            return None
        return self._detectors.get(package_name)

    @property
    def packages(self) -> list[str]:
        return list(self._detectors)

    def __contains__(self, package_name: object) -> bool:
        return package_name in self._detectors

    def __len__(self) -> int:
        return len(self._detectors)

    def __repr__(self) -> str:
        return f"DetectorRegistry({dict(self._detectors)!r})"


def build_default_registry(settings: Optional[DetectionSettings] = None) -> DetectorRegistry:
    """
    Build the registry with one detector per supported app.

    Args:
        settings: Detection settings selecting the heuristic per app.
            Defaults to the canonical heuristics.

    Returns:
        Populated DetectorRegistry.
    """
    youtube_heuristic = settings.youtube_heuristic if settings else "progress_bar"
    instagram_heuristic = settings.instagram_heuristic if settings else "section_video"

    registry = DetectorRegistry([
        YOUTUBE_HEURISTICS[youtube_heuristic](),
        INSTAGRAM_HEURISTICS[instagram_heuristic](),
    ])

    logger.info(
        "Detector registry built",
        youtube=youtube_heuristic,
        instagram=instagram_heuristic,
    )
    return registry

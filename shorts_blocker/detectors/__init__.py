"""
Detectors Module
================

Per-app short-form content detectors.

This package contains:
    - base: ContentDetector contract and bounded traversal helpers
    - youtube: YouTube Shorts detectors
    - instagram: Instagram Reels detectors
    - registry: Package name to detector mapping
"""

from shorts_blocker.detectors.base import ContentDetector, DefaultResources, ResourceLookup, bfs
from shorts_blocker.detectors.instagram import (
    INSTAGRAM_PACKAGE,
    InstagramReelsDetector,
    InstagramReelsTabDetector,
)
from shorts_blocker.detectors.registry import DetectorRegistry, build_default_registry
from shorts_blocker.detectors.youtube import (
    YOUTUBE_PACKAGE,
    YouTubeShortsDetector,
    YouTubeShortsPlayerDetector,
)

__all__ = [
    "ContentDetector",
    "DefaultResources",
    "ResourceLookup",
    "bfs",
    "INSTAGRAM_PACKAGE",
    "InstagramReelsDetector",
    "InstagramReelsTabDetector",
    "YOUTUBE_PACKAGE",
    "YouTubeShortsDetector",
    "YouTubeShortsPlayerDetector",
    "DetectorRegistry",
    "build_default_registry",
]

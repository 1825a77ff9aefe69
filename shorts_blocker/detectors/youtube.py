"""
YouTube Shorts Detectors
========================

Two heuristics for the YouTube app:

- ``YouTubeShortsDetector``: single signal. The Shorts player renders a
  dedicated ``reel_progress_bar`` element that no other YouTube screen has.
- ``YouTubeShortsPlayerDetector``: dual signal. Requires a tall vertical
  container AND a Shorts player indicator, so navigation tabs that merely
  say "Shorts" do not trigger it.

Detection patterns follow YouTube app versions 18.x - 19.x and may need
updates after major redesigns. Shorts shelves in the home feed are
intentionally not detected.
"""

from shorts_blocker.accessibility.node import AccessibilityEvent, UINode
from shorts_blocker.detectors.base import ContentDetector, ResourceLookup, bfs, contains_any
from shorts_blocker.utils.logger import get_logger

logger = get_logger(__name__)

YOUTUBE_PACKAGE = "com.google.android.youtube"


class YouTubeShortsDetector(ContentDetector):
    """Detects the Shorts player through its progress bar."""

    package_name = YOUTUBE_PACKAGE
    max_nodes = 120

    PROGRESS_BAR_ID = "reel_progress_bar"

    def is_short_form_content(
        self,
        event: AccessibilityEvent,
        root: UINode,
        resources: ResourceLookup,
    ) -> bool:
        logger.debug("Inspecting YouTube window", class_name=event.class_name)

        for node in bfs(root, self.max_nodes):
            if contains_any(node.resource_id, (self.PROGRESS_BAR_ID,)):
                logger.debug("[YouTube] Shorts detected from id", resource_id=node.resource_id)
                return True

        return False


class YouTubeShortsPlayerDetector(ContentDetector):
    """
    Vertical-video plus player-indicator heuristic.

    The window root must be a vertical container (aspect ratio above
    ``MIN_ASPECT_RATIO`` and taller than ``MIN_HEIGHT``). On top of that one
    Shorts indicator is required: a Shorts-like id on the root itself, or a
    player component / player description found by a secondary scan of at
    most ``max_pattern_nodes`` nodes.
    """

    package_name = YOUTUBE_PACKAGE
    max_nodes = 100
    max_pattern_nodes = 100

    MIN_ASPECT_RATIO = 1.7
    MIN_HEIGHT = 800
    MIN_DESCRIPTION_LENGTH = 20

    CONTAINER_ID_PATTERNS = ("shorts", "reel", "short_player")

    PLAYER_ID_PATTERNS = (
        "shorts_player",
        "reel_player",
        "shorts_video",
        "reel_video_player",
        "reel_dyn_remix",
        "shorts_comment",
        "shorts_like_button",
        "reel_pivot_button",
    )

    PLAYBACK_WORDS = ("video", "playing", "paused")

    def is_short_form_content(
        self,
        event: AccessibilityEvent,
        root: UINode,
        resources: ResourceLookup,
    ) -> bool:
        has_short_indicator = contains_any(root.resource_id, self.CONTAINER_ID_PATTERNS)
        if has_short_indicator:
            logger.debug("Shorts indicator found in view id", resource_id=root.resource_id)

        aspect = root.bounds.aspect_ratio
        has_vertical_video = aspect > self.MIN_ASPECT_RATIO and root.bounds.height > self.MIN_HEIGHT

        if has_vertical_video:
            logger.debug(
                "Vertical container found",
                aspect_ratio=round(aspect, 2),
                height=root.bounds.height,
            )
            if not has_short_indicator and self._has_player_pattern(root):
                has_short_indicator = True

        is_shorts = has_vertical_video and has_short_indicator
        if is_shorts:
            logger.info("Shorts screen confirmed with both indicators")
        else:
            logger.debug(
                "Not Shorts",
                has_vertical_video=has_vertical_video,
                has_short_indicator=has_short_indicator,
            )
        return is_shorts

    def _has_player_pattern(self, root: UINode) -> bool:
        """Scan for Shorts player components, ignoring short tab labels."""
        found = 0
        scanned = 0

        for node in bfs(root, self.max_pattern_nodes):
            scanned += 1

            if contains_any(node.resource_id, self.PLAYER_ID_PATTERNS):
                logger.debug("Shorts player component found", resource_id=node.resource_id)
                found += 1

            desc = node.content_desc
            if (
                desc
                and len(desc.strip()) > self.MIN_DESCRIPTION_LENGTH
                and contains_any(desc, ("shorts",))
                and contains_any(desc, self.PLAYBACK_WORDS)
            ):
                logger.debug("Shorts video description found", content_desc=desc)
                found += 1

        logger.debug("Shorts pattern scan finished", scanned=scanned, indicators=found)
        return found > 0

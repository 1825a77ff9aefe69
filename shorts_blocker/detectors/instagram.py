"""
Instagram Reels Detectors
=========================

Two heuristics for the Instagram app. Instagram reuses its clips viewer
for every kind of video, so both have to work harder than the YouTube
detectors.

- ``InstagramReelsDetector``: first establishes that the user is in the
  Reels section (selected Reels tab, Reels fragment container, or a Clips
  activity), then requires at least two independent video-playback
  indicators.
- ``InstagramReelsTabDetector``: shallow 10-node scan. A selected
  ``clips_tab`` means Reels; a missing ``feed_tab`` bar is taken as
  fullscreen media viewing. Cheap, but it also fires on fullscreen regular
  posts.

Patterns follow Instagram app versions 300.x - 320.x.
"""

from typing import Optional

from shorts_blocker.accessibility.node import AccessibilityEvent, UINode
from shorts_blocker.detectors.base import ContentDetector, ResourceLookup, bfs, contains_any
from shorts_blocker.utils.logger import get_logger

logger = get_logger(__name__)

INSTAGRAM_PACKAGE = "com.instagram.android"


class InstagramReelsDetector(ContentDetector):
    """Reels section check followed by a video-signal score."""

    package_name = INSTAGRAM_PACKAGE
    max_nodes = 150
    max_video_nodes = 100

    REELS_LABEL = "reels"

    TAB_ID_PATTERNS = ("clips_tab", "reels_tab", "tab_button", "navigation_bar_item")

    CONTAINER_ID_PATTERNS = (
        "clips_fragment_container",
        "clips_tab_container",
        "clips_viewer_fragment_container",
    )

    ACTIVITY_PATTERNS = ("clips", "reel")

    VIDEO_ID_PATTERNS = (
        "clips_video_player",
        "clips_viewer_video",
        "video_player_container",
        "reel_video_player",
        "clips_media_view",
        "video_view",
        "texture_view",
        "surface_view",
    )

    VIDEO_CLASS_PATTERNS = ("VideoView", "TextureView", "SurfaceView")

    MIN_PAGER_HEIGHT = 800
    MIN_VIDEO_WIDTH = 300
    MIN_VIDEO_HEIGHT = 500
    REQUIRED_SCORE = 2

    def is_short_form_content(
        self,
        event: AccessibilityEvent,
        root: UINode,
        resources: ResourceLookup,
    ) -> bool:
        if not self._in_reels_section(event, root):
            logger.debug("[Instagram] Not in Reels section", class_name=event.class_name)
            return False

        score = self._video_score(root)
        is_reels = score >= self.REQUIRED_SCORE
        if is_reels:
            logger.info("[Instagram] User is actively watching Reels", score=score)
        else:
            logger.debug("[Instagram] Reels section without playing video", score=score)
        return is_reels

    def _in_reels_section(self, event: AccessibilityEvent, root: UINode) -> bool:
        if contains_any(event.class_name, self.ACTIVITY_PATTERNS):
            logger.debug("[Instagram] Reels activity", class_name=event.class_name)
            return True

        for node in bfs(root, self.max_nodes):
            if contains_any(node.resource_id, self.CONTAINER_ID_PATTERNS):
                logger.debug("[Instagram] Reels container found", resource_id=node.resource_id)
                return True

            if (
                node.selected
                and contains_any(node.resource_id, self.TAB_ID_PATTERNS)
                and self._is_reels_label(node)
            ):
                logger.debug("[Instagram] Reels tab selected", resource_id=node.resource_id)
                return True

        return False

    def _is_reels_label(self, node: UINode) -> bool:
        text: Optional[str] = node.text
        if text and text.strip().lower() == self.REELS_LABEL:
            return True
        return contains_any(node.content_desc, (self.REELS_LABEL,))

    def _video_score(self, root: UINode) -> int:
        """Count video-playback indicators within ``max_video_nodes`` nodes."""
        score = 0

        for node in bfs(root, self.max_video_nodes):
            resource_id = node.resource_id

            if contains_any(resource_id, self.VIDEO_ID_PATTERNS):
                score += 1

            if (
                resource_id
                and "clips" in resource_id.lower()
                and "pager" in resource_id.lower()
                and node.bounds.height > self.MIN_PAGER_HEIGHT
            ):
                # Full-height pager only exists in the Reels viewer
                score += 2

            if (
                contains_any(node.class_name, self.VIDEO_CLASS_PATTERNS)
                and node.bounds.width >= self.MIN_VIDEO_WIDTH
                and node.bounds.height >= self.MIN_VIDEO_HEIGHT
            ):
                score += 1

            if score >= self.REQUIRED_SCORE:
                break

        return score


class InstagramReelsTabDetector(ContentDetector):
    """Selected Reels tab or missing feed tab bar within the first nodes."""

    package_name = INSTAGRAM_PACKAGE
    max_nodes = 10

    def is_short_form_content(
        self,
        event: AccessibilityEvent,
        root: UINode,
        resources: ResourceLookup,
    ) -> bool:
        logger.debug("[Instagram] Event class name", class_name=event.class_name)

        feed_tab_count = 0
        for node in bfs(root, self.max_nodes):
            resource_id = node.resource_id or ""

            if "feed_tab" in resource_id:
                feed_tab_count += 1

            if "clips_tab" in resource_id and node.selected:
                logger.info("[Instagram] User is actively watching Reels in Reels tab")
                return True

        if feed_tab_count == 0:
            logger.info("[Instagram] User is actively watching media in fullscreen")
            return True
        return False

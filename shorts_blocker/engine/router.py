"""
Detection Engine
================

Routes accessibility events to the matching detector and dismisses
short-form content with a global back action.

Flow per event:
    1. Ignore events from packages that are not tracked and enabled.
    2. Look up the detector for the event's package.
    3. Scan windows in order, skipping windows without a root.
    4. On the first positive window, consult the rate limiter and, when
       ready, perform the back action. Later windows are not scanned.

Usage:
    engine = DetectionEngine(registry, host, tracked_packages=["com.google.android.youtube"])
    outcome = await engine.handle_event(event, windows)
"""

import threading
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Iterable, Optional

from structlog.contextvars import bound_contextvars

from shorts_blocker.accessibility.node import AccessibilityEvent, UIWindow
from shorts_blocker.detectors.base import DefaultResources, ResourceLookup
from shorts_blocker.detectors.registry import DetectorRegistry
from shorts_blocker.device.host import AccessibilityHost
from shorts_blocker.engine.rate_limiter import RateLimiter
from shorts_blocker.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ACTION_KEY = "content_detected"
LEGACY_ACTION_KEY = "shorts_detected"


class DetectionOutcome(Enum):
    """What the engine did with one event."""

    IGNORED = "ignored"
    NO_DETECTOR = "no_detector"
    NOT_DETECTED = "not_detected"
    COOLDOWN = "cooldown"
    DISMISSED = "dismissed"
    DISMISS_FAILED = "dismiss_failed"


@dataclass
class EngineStats:
    """Running counters for the engine."""

    events_seen: int = 0
    detections: int = 0
    dismissals: int = 0
    cooldown_skips: int = 0
    failures: int = 0


class DetectionEngine:
    """
    Event router for short-form content detection.

    The engine owns its rate limiter, so cooldown state lives exactly as
    long as the engine.
    """

    def __init__(
        self,
        registry: DetectorRegistry,
        host: AccessibilityHost,
        tracked_packages: Iterable[str] = (),
        rate_limiter: Optional[RateLimiter] = None,
        action_key: str = DEFAULT_ACTION_KEY,
        resources: Optional[ResourceLookup] = None,
        dry_run: bool = False,
    ) -> None:
        """
        Initialize the engine.

        Args:
            registry: Package to detector mapping.
            host: Platform host used for the back action.
            tracked_packages: Packages the user enabled.
            rate_limiter: Cooldown gate. Defaults to a 1500 ms limiter.
            action_key: Cooldown key for dismiss actions.
            resources: Localized string lookup passed to detectors.
            dry_run: Log dismiss actions instead of performing them.
        """
        self.registry = registry
        self.host = host
        self.rate_limiter = rate_limiter or RateLimiter()
        self.action_key = action_key
        self.resources = resources or DefaultResources()
        self.dry_run = dry_run
        self._tracked: frozenset[str] = frozenset(tracked_packages)
        self._stats = EngineStats()
        self._stats_lock = threading.Lock()

    @property
    def tracked_packages(self) -> frozenset[str]:
        return self._tracked

    def update_tracked_packages(self, packages: Iterable[str]) -> None:
        """Replace the set of tracked packages."""
        self._tracked = frozenset(p for p in packages if p and p.strip())
        logger.info("Tracked packages updated", packages=sorted(self._tracked))

    def is_tracked(self, package_name: Optional[str]) -> bool:
        return bool(package_name) and package_name in self._tracked

    def stats(self) -> dict[str, int]:
        """Return a copy of the engine counters."""
        with self._stats_lock:
            return asdict(self._stats)

    def _count(self, name: str) -> None:
        with self._stats_lock:
            setattr(self._stats, name, getattr(self._stats, name) + 1)

    def detect(self, event: AccessibilityEvent, windows: Iterable[UIWindow]) -> Optional[UIWindow]:
        """
        Find the first window showing short-form content.

        Pure apart from logging: no action is taken.

        Returns:
            The first positive window, or None.
        """
        detector = self.registry.get(event.package_name)
        if detector is None:
            return None

        for window in windows:
            root = window.root
            if root is None:
                continue
            try:
                positive = detector.is_short_form_content(event, root, self.resources)
            except Exception as e:
                logger.exception(
                    "Detector failed, treating window as negative",
                    detector=type(detector).__name__,
                    window_id=window.window_id,
                    error=str(e),
                )
                continue
            if positive:
                return window
        return None

    async def handle_event(
        self,
        event: Optional[AccessibilityEvent],
        windows: Iterable[UIWindow],
    ) -> DetectionOutcome:
        """
        Process one accessibility event.

        Args:
            event: The event, or None (ignored).
            windows: Currently open windows.

        Returns:
            DetectionOutcome describing what happened.
        """
        if event is None:
            return DetectionOutcome.IGNORED

        if not self.is_tracked(event.package_name):
            return DetectionOutcome.IGNORED

        self._count("events_seen")

        with bound_contextvars(package=event.package_name, event_type=event.event_type):
            if self.registry.get(event.package_name) is None:
                logger.debug("No detector for package")
                return DetectionOutcome.NO_DETECTOR

            window = self.detect(event, windows)
            if window is None:
                return DetectionOutcome.NOT_DETECTED

            logger.info("Short-form content detected", window_id=window.window_id)
            self._count("detections")

            if not self.rate_limiter.should_perform_action(self.action_key):
                logger.debug("Action skipped due to cooldown", key=self.action_key)
                self._count("cooldown_skips")
                return DetectionOutcome.COOLDOWN

            return await self._dismiss()

    async def _dismiss(self) -> DetectionOutcome:
        """Perform the back action once; failures are logged, never retried."""
        if self.dry_run:
            logger.info("Dry run: BACK action not performed")
            self._count("dismissals")
            return DetectionOutcome.DISMISSED

        logger.info("Performing BACK action")
        try:
            result = await self.host.perform_global_back()
        except Exception as e:
            logger.exception("BACK action raised", error=str(e))
            self._count("failures")
            return DetectionOutcome.DISMISS_FAILED

        if result.success:
            logger.debug("BACK action performed successfully", duration_ms=result.duration_ms)
            self._count("dismissals")
            return DetectionOutcome.DISMISSED

        logger.warning("BACK action failed", error=result.error)
        self._count("failures")
        return DetectionOutcome.DISMISS_FAILED

"""
Blocker Service
===============

Long-running service that watches the device and dismisses short-form
content.

ADB has no accessibility event stream, so the service polls: every
``poll_interval`` seconds it reads the foreground activity, turns it into
an ``AccessibilityEvent`` (window-state-changed when the activity changed,
content-changed otherwise), passes it through the event filter configured
at connect time, snapshots the windows and hands both to the
``DetectionEngine``.

Tracked packages are read once at connect and re-applied whenever the
preferences file changes while the service runs.

Usage:
    service = BlockerService.from_settings(host)
    await service.connect()
    await service.run()
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from structlog.contextvars import bound_contextvars

from shorts_blocker.accessibility.node import AccessibilityEvent, EventType
from shorts_blocker.config import Settings, get_settings
from shorts_blocker.detectors.registry import DetectorRegistry, build_default_registry
from shorts_blocker.device.host import AccessibilityHost
from shorts_blocker.engine.rate_limiter import RateLimiter
from shorts_blocker.engine.router import DetectionEngine, DetectionOutcome
from shorts_blocker.preferences.store import PreferencesStore
from shorts_blocker.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_EVENT_TYPES = frozenset({
    EventType.WINDOW_STATE_CHANGED,
    EventType.WINDOW_CONTENT_CHANGED,
    EventType.VIEW_SCROLLED,
})


@dataclass
class EventFilter:
    """
    Which events reach the engine.

    Attributes:
        event_types: Accepted event types.
        package_names: Accepted source packages.
        notification_timeout_ms: Minimum delay between two delivered
            events of the same package.
    """

    event_types: frozenset[EventType] = DEFAULT_EVENT_TYPES
    package_names: frozenset[str] = frozenset()
    notification_timeout_ms: int = 100
    _last_delivered: dict[str, float] = field(default_factory=dict, repr=False)

    def accepts(self, event: AccessibilityEvent) -> bool:
        if event.event_type not in self.event_types:
            return False
        if event.package_name not in self.package_names:
            return False

        last = self._last_delivered.get(event.package_name)
        if last is not None and (event.timestamp - last) * 1000 < self.notification_timeout_ms:
            return False

        self._last_delivered[event.package_name] = event.timestamp
        return True


class BlockerService:
    """Polling accessibility service driving the detection engine."""

    def __init__(
        self,
        host: AccessibilityHost,
        store: PreferencesStore,
        engine: DetectionEngine,
        poll_interval: float = 1.0,
        notification_timeout_ms: int = 100,
    ) -> None:
        """
        Initialize the service.

        Args:
            host: Device host providing windows and the back action.
            store: Preferences store holding tracked packages.
            engine: Detection engine.
            poll_interval: Seconds between two polls.
            notification_timeout_ms: Event filter notification timeout.
        """
        self.host = host
        self.store = store
        self.engine = engine
        self.poll_interval = poll_interval
        self.notification_timeout_ms = notification_timeout_ms

        self.event_filter: Optional[EventFilter] = None
        self.last_outcome: Optional[DetectionOutcome] = None
        self._last_foreground: Optional[tuple[str, Optional[str]]] = None
        self._prefs_revision: Optional[tuple[int, int]] = None
        self._stop = asyncio.Event()
        self._running = False

    @classmethod
    def from_settings(
        cls,
        host: AccessibilityHost,
        settings: Optional[Settings] = None,
        store: Optional[PreferencesStore] = None,
        registry: Optional[DetectorRegistry] = None,
        dry_run: bool = False,
    ) -> "BlockerService":
        """Build a service and its engine from application settings."""
        settings = settings or get_settings()
        engine = DetectionEngine(
            registry=registry or build_default_registry(settings.detection),
            host=host,
            rate_limiter=RateLimiter(cooldown_ms=settings.detection.cooldown_ms),
            action_key=settings.detection.action_key,
            dry_run=dry_run,
        )
        return cls(
            host=host,
            store=store or PreferencesStore(settings.service.preferences_path),
            engine=engine,
            poll_interval=settings.service.poll_interval,
            notification_timeout_ms=settings.service.notification_timeout_ms,
        )

    @property
    def is_running(self) -> bool:
        return self._running

    async def connect(self) -> bool:
        """
        Connect the host and configure the event filter.

        Returns:
            True if the host connected.
        """
        logger.info("Blocker service connecting")
        if not await self.host.connect():
            return False

        await self.reload_preferences()
        return True

    async def reload_preferences(self) -> None:
        """Read tracked packages and re-apply the event filter."""
        revision = await asyncio.to_thread(lambda: self.store.revision)
        packages = await asyncio.to_thread(self.store.get_tracked_packages)
        self._configure(packages)
        self._prefs_revision = revision

    def _configure(self, packages: Iterable[str]) -> None:
        packages = frozenset(packages)
        self.event_filter = EventFilter(
            package_names=packages,
            notification_timeout_ms=self.notification_timeout_ms,
        )
        self.engine.update_tracked_packages(packages)
        logger.info("Event filter configured for tracked packages", packages=sorted(packages))

    async def _preferences_changed(self) -> bool:
        revision = await asyncio.to_thread(lambda: self.store.revision)
        return revision != self._prefs_revision

    def _next_event(self, package: str, activity: Optional[str]) -> AccessibilityEvent:
        current = (package, activity)
        if current != self._last_foreground:
            event_type = EventType.WINDOW_STATE_CHANGED
        else:
            event_type = EventType.WINDOW_CONTENT_CHANGED
        self._last_foreground = current
        return AccessibilityEvent(
            event_type=event_type,
            package_name=package,
            class_name=activity,
            timestamp=time.monotonic(),
        )

    async def poll_once(self) -> Optional[DetectionOutcome]:
        """
        Run one poll cycle.

        Returns:
            The engine outcome, or None when no event was delivered.
        """
        if self.event_filter is None or await self._preferences_changed():
            await self.reload_preferences()

        foreground = await self.host.get_foreground()
        if not foreground.package:
            logger.debug("No foreground package")
            return None

        event = self._next_event(foreground.package, foreground.activity)
        logger.debug(
            "Accessibility event",
            type=event.event_type,
            package=event.package_name,
            class_name=event.class_name,
        )

        if not self.event_filter.accepts(event):
            return None

        windows = await self.host.get_windows()
        logger.debug("Inspecting windows", count=len(windows))

        outcome = await self.engine.handle_event(event, windows)
        self.last_outcome = outcome
        return outcome

    async def run(self, max_iterations: Optional[int] = None) -> None:
        """
        Poll until ``stop()`` is called.

        Args:
            max_iterations: Stop after this many polls (None = forever).
        """
        self._running = True
        self._stop.clear()

        # Every line logged during this session carries the device serial
        with bound_contextvars(device=self._device_serial()):
            logger.info("Blocker service started", poll_interval=self.poll_interval)
            iterations = 0
            try:
                while not self._stop.is_set():
                    if max_iterations is not None and iterations >= max_iterations:
                        break
                    iterations += 1

                    try:
                        await self.poll_once()
                    except Exception as e:
                        # Keep polling through transient device failures
                        logger.exception("Poll cycle failed", error=str(e))

                    try:
                        await asyncio.wait_for(self._stop.wait(), timeout=self.poll_interval)
                    except asyncio.TimeoutError:
                        pass
            finally:
                self._running = False
                logger.info("Blocker service stopped", iterations=iterations)

    def _device_serial(self) -> Optional[str]:
        if self.host.info is not None:
            return self.host.info.device_id
        return self.host.device_id

    def stop(self) -> None:
        """Ask the polling loop to exit."""
        logger.warning("Blocker service interrupted")
        self._stop.set()

    async def shutdown(self) -> None:
        """Stop polling and disconnect the host."""
        self.stop()
        await self.host.disconnect()

    def status(self) -> dict[str, Any]:
        """Service status for the status endpoint."""
        info = self.host.info
        device = None
        if info is not None:
            device = {
                "serial": info.device_id,
                "model": info.model,
                "android_version": info.os_version,
                "screen": f"{info.screen_width}x{info.screen_height}",
            }
        return {
            "running": self._running,
            "connected": self.host.is_connected,
            "device": device,
            "tracked_packages": sorted(self.engine.tracked_packages),
            "detectors": self.engine.registry.packages,
            "last_outcome": self.last_outcome.value if self.last_outcome else None,
            "stats": self.engine.stats(),
        }

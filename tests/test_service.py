"""
Tests for Blocker Service
=========================

Tests for:
- EventFilter
- Poll cycle: event synthesis, filtering, engine hand-off
- Preference reloads while running
- Run loop and status
"""

import time

import pytest

from shorts_blocker.accessibility.node import AccessibilityEvent, EventType
from shorts_blocker.config import Settings
from shorts_blocker.detectors import DetectorRegistry, YouTubeShortsDetector
from shorts_blocker.device.host import ForegroundInfo
from shorts_blocker.engine import DetectionEngine, DetectionOutcome, RateLimiter
from shorts_blocker.service import BlockerService, EventFilter
from tests.conftest import INSTAGRAM, YOUTUBE, window


# ===================================================================
# EventFilter
# ===================================================================


class TestEventFilter:
    def make_filter(self, timeout_ms=100):
        return EventFilter(package_names=frozenset({YOUTUBE}), notification_timeout_ms=timeout_ms)

    def event(self, package=YOUTUBE, timestamp=10.0, event_type=EventType.WINDOW_CONTENT_CHANGED):
        return AccessibilityEvent(event_type=event_type, package_name=package, timestamp=timestamp)

    def test_accepts_tracked_package(self):
        assert self.make_filter().accepts(self.event()) is True

    def test_rejects_other_package(self):
        assert self.make_filter().accepts(self.event(package=INSTAGRAM)) is False

    def test_rejects_unlisted_event_type(self):
        event_filter = EventFilter(
            event_types=frozenset({EventType.WINDOW_STATE_CHANGED}),
            package_names=frozenset({YOUTUBE}),
        )
        assert event_filter.accepts(self.event()) is False
        assert event_filter.accepts(self.event(event_type=EventType.WINDOW_STATE_CHANGED)) is True

    def test_notification_timeout(self):
        event_filter = self.make_filter(timeout_ms=100)

        assert event_filter.accepts(self.event(timestamp=10.0)) is True
        assert event_filter.accepts(self.event(timestamp=10.05)) is False
        assert event_filter.accepts(self.event(timestamp=10.2)) is True

    def test_zero_timeout_accepts_everything(self):
        event_filter = self.make_filter(timeout_ms=0)
        assert event_filter.accepts(self.event(timestamp=10.0)) is True
        assert event_filter.accepts(self.event(timestamp=10.0)) is True


# ===================================================================
# BlockerService
# ===================================================================


@pytest.fixture
def engine(mock_host, clock):
    return DetectionEngine(
        DetectorRegistry([YouTubeShortsDetector()]),
        mock_host,
        rate_limiter=RateLimiter(clock=clock),
    )


@pytest.fixture
def service(mock_host, store, engine):
    return BlockerService(mock_host, store, engine, poll_interval=0.01, notification_timeout_ms=0)


class TestConnect:
    @pytest.mark.asyncio
    async def test_connect_configures_filter(self, service, mock_host):
        assert await service.connect() is True

        mock_host.connect.assert_awaited_once()
        assert service.event_filter.package_names == frozenset({YOUTUBE, INSTAGRAM})
        assert service.engine.tracked_packages == frozenset({YOUTUBE, INSTAGRAM})

    @pytest.mark.asyncio
    async def test_connect_uses_stored_packages(self, service, store):
        store.set_tracked_packages([INSTAGRAM])
        await service.connect()
        assert service.event_filter.package_names == frozenset({INSTAGRAM})

    @pytest.mark.asyncio
    async def test_connect_failure(self, service, mock_host):
        mock_host.connect.return_value = False

        assert await service.connect() is False
        assert service.event_filter is None


class TestPollOnce:
    @pytest.mark.asyncio
    async def test_dismisses_shorts(self, service, mock_host, shorts_tree):
        mock_host.get_windows.return_value = [window(shorts_tree)]
        await service.connect()

        outcome = await service.poll_once()

        assert outcome is DetectionOutcome.DISMISSED
        assert service.last_outcome is DetectionOutcome.DISMISSED
        mock_host.perform_global_back.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_configures_lazily(self, service, mock_host):
        outcome = await service.poll_once()

        assert service.event_filter is not None
        assert outcome is DetectionOutcome.NOT_DETECTED

    @pytest.mark.asyncio
    async def test_no_foreground(self, service, mock_host):
        mock_host.get_foreground.return_value = ForegroundInfo()
        await service.connect()

        assert await service.poll_once() is None
        mock_host.get_windows.assert_not_called()

    @pytest.mark.asyncio
    async def test_untracked_foreground_is_filtered(self, service, mock_host):
        mock_host.get_foreground.return_value = ForegroundInfo(package="com.android.settings", activity=".Settings")
        await service.connect()

        assert await service.poll_once() is None
        mock_host.get_windows.assert_not_called()

    @pytest.mark.asyncio
    async def test_event_types_follow_foreground_changes(self, service, mock_host):
        seen = []

        async def capture(event, windows):
            seen.append(event.event_type)
            return DetectionOutcome.NOT_DETECTED

        service.engine.handle_event = capture
        await service.connect()

        mock_host.get_foreground.return_value = ForegroundInfo(package=YOUTUBE, activity="Home")
        await service.poll_once()
        await service.poll_once()
        mock_host.get_foreground.return_value = ForegroundInfo(package=YOUTUBE, activity="Shorts")
        await service.poll_once()

        assert seen == [
            EventType.WINDOW_STATE_CHANGED,
            EventType.WINDOW_CONTENT_CHANGED,
            EventType.WINDOW_STATE_CHANGED,
        ]

    @pytest.mark.asyncio
    async def test_notification_timeout_drops_rapid_polls(self, mock_host, store, engine):
        service = BlockerService(mock_host, store, engine, notification_timeout_ms=60_000)
        await service.connect()

        assert await service.poll_once() is DetectionOutcome.NOT_DETECTED
        assert await service.poll_once() is None

    @pytest.mark.asyncio
    async def test_preference_change_is_reapplied(self, service, mock_host, store, shorts_tree):
        mock_host.get_windows.return_value = [window(shorts_tree)]
        await service.connect()

        store.toggle_package(YOUTUBE, enabled=False)
        outcome = await service.poll_once()

        assert outcome is None
        assert service.engine.tracked_packages == frozenset({INSTAGRAM})
        mock_host.perform_global_back.assert_not_called()


class TestRunLoop:
    @pytest.mark.asyncio
    async def test_max_iterations(self, service, mock_host):
        await service.connect()
        await service.run(max_iterations=3)

        assert mock_host.get_foreground.await_count == 3
        assert service.is_running is False

    @pytest.mark.asyncio
    async def test_poll_failures_do_not_stop_loop(self, service, mock_host):
        mock_host.get_foreground.side_effect = RuntimeError("device gone")
        await service.connect()

        await service.run(max_iterations=2)

        assert mock_host.get_foreground.await_count == 2

    @pytest.mark.asyncio
    async def test_stop(self, service, mock_host):
        async def stop_on_poll():
            service.stop()
            return ForegroundInfo()

        mock_host.get_foreground.side_effect = stop_on_poll
        await service.connect()

        started = time.monotonic()
        await service.run()

        assert mock_host.get_foreground.await_count == 1
        assert time.monotonic() - started < 5

    @pytest.mark.asyncio
    async def test_shutdown_disconnects(self, service, mock_host):
        await service.shutdown()
        mock_host.disconnect.assert_awaited_once()


class TestStatus:
    @pytest.mark.asyncio
    async def test_status(self, service, mock_host, shorts_tree):
        mock_host.get_windows.return_value = [window(shorts_tree)]
        await service.connect()
        await service.poll_once()

        status = service.status()

        assert status["running"] is False
        assert status["connected"] is True
        assert status["device"] == {
            "serial": "emulator-5554",
            "model": "Pixel 8",
            "android_version": "14",
            "screen": "1080x2340",
        }
        assert status["tracked_packages"] == sorted([YOUTUBE, INSTAGRAM])
        assert status["detectors"] == [YOUTUBE]
        assert status["last_outcome"] == "dismissed"
        assert status["stats"]["dismissals"] == 1


class TestFromSettings:
    def test_builds_engine_from_settings(self, mock_host, store):
        settings = Settings()
        service = BlockerService.from_settings(mock_host, settings=settings, store=store, dry_run=True)

        assert service.store is store
        assert service.engine.dry_run is True
        assert service.engine.rate_limiter.cooldown_ms == settings.detection.cooldown_ms
        assert set(service.engine.registry.packages) == {YOUTUBE, INSTAGRAM}

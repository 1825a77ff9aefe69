"""
Tests for Logging
=================

Tests for:
- Enum rendering processor
- Context bound per event and per service session
"""

import pytest
import structlog

from shorts_blocker.accessibility.node import EventType
from shorts_blocker.detectors import DetectorRegistry, YouTubeShortsDetector
from shorts_blocker.engine import DetectionEngine, DetectionOutcome
from shorts_blocker.service import BlockerService
from shorts_blocker.utils import render_enums
from tests.conftest import YOUTUBE, make_event, make_node, window


class TestRenderEnums:
    def test_enum_fields_rendered_as_values(self):
        event_dict = {
            "event": "Accessibility event",
            "type": EventType.WINDOW_STATE_CHANGED,
            "outcome": DetectionOutcome.DISMISSED,
            "package": YOUTUBE,
        }

        result = render_enums(None, "info", event_dict)

        assert result == {
            "event": "Accessibility event",
            "type": "window_state_changed",
            "outcome": "dismissed",
            "package": YOUTUBE,
        }


class TestBoundContext:
    @pytest.mark.asyncio
    async def test_detector_sees_event_context(self, mock_host):
        seen = {}

        class RecordingDetector(YouTubeShortsDetector):
            def is_short_form_content(self, event, root, resources):
                seen.update(structlog.contextvars.get_contextvars())
                return False

        engine = DetectionEngine(DetectorRegistry([RecordingDetector()]), mock_host, tracked_packages=[YOUTUBE])
        await engine.handle_event(make_event(YOUTUBE), [window(make_node("com.google.android.youtube:id/results"))])

        assert seen["package"] == YOUTUBE
        assert seen["event_type"] is EventType.WINDOW_CONTENT_CHANGED
        assert "package" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_service_session_binds_device_serial(self, mock_host, store):
        engine = DetectionEngine(DetectorRegistry([YouTubeShortsDetector()]), mock_host)
        service = BlockerService(mock_host, store, engine, poll_interval=0.01, notification_timeout_ms=0)
        seen = []

        async def capture(event, windows):
            seen.append(structlog.contextvars.get_contextvars().get("device"))
            return DetectionOutcome.NOT_DETECTED

        engine.handle_event = capture
        await service.connect()
        await service.run(max_iterations=1)

        assert seen == ["emulator-5554"]
        assert "device" not in structlog.contextvars.get_contextvars()

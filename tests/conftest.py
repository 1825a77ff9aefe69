"""
Shared Test Fixtures
====================

Pytest fixtures used across all test modules, plus helpers for building
synthetic accessibility trees.
"""

from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from shorts_blocker.accessibility.node import (
    AccessibilityEvent,
    Bounds,
    EventType,
    UINode,
    UIWindow,
)
from shorts_blocker.device.host import AccessibilityHost, ActionResult, DeviceInfo, ForegroundInfo
from shorts_blocker.preferences.store import PreferencesStore

YOUTUBE = "com.google.android.youtube"
INSTAGRAM = "com.instagram.android"


def make_node(
    resource_id: Optional[str] = None,
    *,
    class_name: Optional[str] = "android.view.View",
    text: Optional[str] = None,
    content_desc: Optional[str] = None,
    bounds: tuple[int, int, int, int] = (0, 0, 100, 100),
    selected: bool = False,
    children: Optional[list[UINode]] = None,
) -> UINode:
    """Build a node; ``bounds`` is (left, top, right, bottom)."""
    return UINode(
        resource_id=resource_id,
        class_name=class_name,
        text=text,
        content_desc=content_desc,
        bounds=Bounds.from_corners(*bounds),
        selected=selected,
        children=children or [],
    )


def make_event(
    package: str = YOUTUBE,
    class_name: Optional[str] = None,
    event_type: EventType = EventType.WINDOW_CONTENT_CHANGED,
) -> AccessibilityEvent:
    return AccessibilityEvent(event_type=event_type, package_name=package, class_name=class_name)


def filler(count: int, prefix: str = "com.app:id/item") -> list[UINode]:
    """``count`` leaf nodes without any interesting signal."""
    return [make_node(f"{prefix}_{i}") for i in range(count)]


def window(root: Optional[UINode], window_id: int = 0, package: str = YOUTUBE) -> UIWindow:
    return UIWindow(window_id=window_id, package=package, root=root)


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: int = 100_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_host() -> MagicMock:
    """Create a mock AccessibilityHost with all abstract methods mocked."""
    host = MagicMock(spec=AccessibilityHost)
    host.device_id = "emulator-5554"
    host.info = DeviceInfo(device_id="emulator-5554", os_version="14", model="Pixel 8")
    host.is_connected = True

    host.connect = AsyncMock(return_value=True)
    host.disconnect = AsyncMock(return_value=None)
    host.get_windows = AsyncMock(return_value=[])
    host.get_foreground = AsyncMock(return_value=ForegroundInfo(package=YOUTUBE, activity=None))
    host.perform_global_back = AsyncMock(return_value=ActionResult(success=True))
    return host


@pytest.fixture
def store(tmp_path: Path) -> PreferencesStore:
    return PreferencesStore(tmp_path / "prefs" / "preferences.json")


@pytest.fixture
def shorts_tree() -> UINode:
    """YouTube Shorts player window."""
    return make_node(
        "com.google.android.youtube:id/watch_while_layout",
        bounds=(0, 0, 1080, 2340),
        children=[
            make_node("com.google.android.youtube:id/reel_recycler", bounds=(0, 0, 1080, 2200), children=[
                make_node("com.google.android.youtube:id/reel_player_page_container", bounds=(0, 0, 1080, 2200)),
                make_node("com.google.android.youtube:id/reel_progress_bar", bounds=(0, 2190, 1080, 2200)),
            ]),
            make_node("com.google.android.youtube:id/pivot_bar", bounds=(0, 2200, 1080, 2340)),
        ],
    )


@pytest.fixture
def sample_dump_xml() -> str:
    """uiautomator dump of the YouTube Shorts player."""
    return """<?xml version='1.0' encoding='UTF-8' standalone='yes' ?>
<hierarchy rotation="0">
  <node index="0" text="" resource-id="" class="android.widget.FrameLayout"
        package="com.google.android.youtube" content-desc="" selected="false"
        bounds="[0,0][1080,2340]">
    <node index="0" text="" resource-id="com.google.android.youtube:id/reel_recycler"
          class="androidx.recyclerview.widget.RecyclerView" package="com.google.android.youtube"
          content-desc="" selected="false" bounds="[0,0][1080,2200]">
      <node index="0" text="" resource-id="com.google.android.youtube:id/reel_progress_bar"
            class="android.widget.ProgressBar" package="com.google.android.youtube"
            content-desc="" selected="false" bounds="[0,2190][1080,2200]" />
    </node>
    <node index="1" text="Shorts" resource-id="com.google.android.youtube:id/pivot_bar_item"
          class="android.widget.Button" package="com.google.android.youtube"
          content-desc="Shorts" selected="true" bounds="[216,2200][432,2340]" />
  </node>
</hierarchy>"""

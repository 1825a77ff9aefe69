"""
Accessibility Tree Model
========================

Snapshot types for the on-screen accessibility tree.

A ``UINode`` owns its children exclusively: snapshots are trees, never
graphs, so traversal always terminates.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class EventType(Enum):
    """Accessibility event types the blocker listens for."""

    WINDOW_STATE_CHANGED = "window_state_changed"
    WINDOW_CONTENT_CHANGED = "window_content_changed"
    VIEW_SCROLLED = "view_scrolled"


@dataclass(frozen=True)
class Bounds:
    """
    Screen bounding rectangle of a node.

    Attributes:
        left: X coordinate of the left edge.
        top: Y coordinate of the top edge.
        width: Width in pixels.
        height: Height in pixels.
    """

    left: int = 0
    top: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def from_corners(cls, left: int, top: int, right: int, bottom: int) -> "Bounds":
        """Build bounds from ``[left,top][right,bottom]`` corners."""
        return cls(left=left, top=top, width=right - left, height=bottom - top)

    @property
    def aspect_ratio(self) -> float:
        """Height divided by width, ``0.0`` for zero-width bounds."""
        if self.width == 0:
            return 0.0
        return self.height / self.width


@dataclass
class UINode:
    """
    Snapshot of one accessible element and its subtree.

    Attributes:
        resource_id: View identifier (e.g. ``com.app:id/reel_progress_bar``).
        class_name: Android view class name.
        text: Visible text.
        content_desc: Accessibility content description.
        bounds: Screen bounding rectangle.
        selected: Whether the element is marked selected.
        children: Ordered child nodes.
    """

    resource_id: Optional[str] = None
    class_name: Optional[str] = None
    text: Optional[str] = None
    content_desc: Optional[str] = None
    bounds: Bounds = field(default_factory=Bounds)
    selected: bool = False
    children: list["UINode"] = field(default_factory=list)

    def add_child(self, child: "UINode") -> "UINode":
        """Append a child and return it."""
        self.children.append(child)
        return child


@dataclass
class UIWindow:
    """A top-level window with an optional root node."""

    window_id: int = 0
    package: str = ""
    root: Optional[UINode] = None


@dataclass(frozen=True)
class AccessibilityEvent:
    """
    Accessibility event delivered to the detection engine.

    Attributes:
        event_type: Type of the event.
        package_name: Application that owns the event source.
        class_name: UI class name hint (usually the foreground activity).
        timestamp: Monotonic time the event was produced, in seconds.
    """

    event_type: EventType
    package_name: str
    class_name: Optional[str] = None
    timestamp: float = field(default_factory=time.monotonic)

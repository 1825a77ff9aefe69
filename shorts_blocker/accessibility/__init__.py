"""
Accessibility Module
====================

Accessibility tree snapshots for detection.

This package contains:
    - node: UINode, UIWindow, AccessibilityEvent and Bounds types
    - tree_parser: uiautomator XML to UINode conversion
"""

from shorts_blocker.accessibility.node import (
    AccessibilityEvent,
    Bounds,
    EventType,
    UINode,
    UIWindow,
)
from shorts_blocker.accessibility.tree_parser import TreeParser, parse_bounds

__all__ = [
    "AccessibilityEvent",
    "Bounds",
    "EventType",
    "UINode",
    "UIWindow",
    "TreeParser",
    "parse_bounds",
]

"""
Tree Parser
===========

Parse ``uiautomator dump`` XML into ``UINode`` trees.

Every top-level ``<node>`` under ``<hierarchy>`` becomes the root of one
``UIWindow``. Parsing is iterative so deep hierarchies never hit the
interpreter's recursion limit.

Usage:
    from shorts_blocker.accessibility import TreeParser

    parser = TreeParser()
    windows = parser.parse_windows(xml_content)
"""

import re
from typing import Optional
from xml.etree import ElementTree

from shorts_blocker.accessibility.node import Bounds, UINode, UIWindow
from shorts_blocker.utils.logger import get_logger

logger = get_logger(__name__)

_BOUNDS_RE = re.compile(r"\[(-?\d+),(-?\d+)\]\[(-?\d+),(-?\d+)\]")


def parse_bounds(bounds_str: str) -> Bounds:
    """Parse bounds string '[x1,y1][x2,y2]' into ``Bounds``."""
    match = _BOUNDS_RE.match(bounds_str or "")
    if match:
        x1, y1, x2, y2 = map(int, match.groups())
        return Bounds.from_corners(x1, y1, x2, y2)
    return Bounds()


def _optional(value: Optional[str]) -> Optional[str]:
    """uiautomator writes absent attributes as empty strings."""
    return value if value else None


class TreeParser:
    """Converts uiautomator XML into accessibility windows."""

    def __init__(self, default_package: str = "") -> None:
        """
        Initialize the parser.

        Args:
            default_package: Package assigned to windows whose root node
                carries no ``package`` attribute.
        """
        self.default_package = default_package

    def parse_windows(self, xml_content: str) -> list[UIWindow]:
        """
        Parse a hierarchy dump into windows.

        Args:
            xml_content: Raw XML produced by ``uiautomator dump``.

        Returns:
            One ``UIWindow`` per top-level node; empty on malformed input.
        """
        if not xml_content or not xml_content.strip():
            return []

        try:
            root = ElementTree.fromstring(xml_content)
        except ElementTree.ParseError as e:
            logger.error("Failed to parse UI XML", error=str(e))
            return []

        top_level = [root] if root.tag == "node" else root.findall("node")

        windows = []
        for window_id, element in enumerate(top_level):
            windows.append(
                UIWindow(
                    window_id=window_id,
                    package=element.attrib.get("package") or self.default_package,
                    root=self.parse_node(element),
                )
            )

        logger.debug("Parsed UI hierarchy", windows=len(windows))
        return windows

    def parse_node(self, element: ElementTree.Element) -> UINode:
        """Convert an XML ``<node>`` element and its subtree into a ``UINode``."""
        root = self._to_node(element)
        pending = [(element, root)]

        while pending:
            xml_node, ui_node = pending.pop()
            for xml_child in xml_node.findall("node"):
                ui_child = ui_node.add_child(self._to_node(xml_child))
                pending.append((xml_child, ui_child))

        return root

    def _to_node(self, element: ElementTree.Element) -> UINode:
        attrib = element.attrib
        return UINode(
            resource_id=_optional(attrib.get("resource-id")),
            class_name=_optional(attrib.get("class")),
            text=_optional(attrib.get("text")),
            content_desc=_optional(attrib.get("content-desc")),
            bounds=parse_bounds(attrib.get("bounds", "")),
            selected=attrib.get("selected", "false") == "true",
        )

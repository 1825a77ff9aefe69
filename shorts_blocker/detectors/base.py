"""
Content Detector Contract
=========================

Base class and traversal helpers shared by all per-app detectors.

A detector answers a single question for one application: is the window
rooted at ``root`` showing short-form video content? Detectors are pure:
they hold no state across calls besides constant pattern lists, and every
scan is bounded by a per-detector node ceiling so a pathological tree can
never stall the event loop.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, Iterator, Optional, Protocol

from shorts_blocker.accessibility.node import AccessibilityEvent, UINode


class ResourceLookup(Protocol):
    """Resolves string resource ids to localized strings."""

    def get_string(self, resource_id: str) -> str:
        ...


class DefaultResources:
    """Resource lookup that returns the id unchanged."""

    def get_string(self, resource_id: str) -> str:
        return resource_id


def bfs(root: UINode, limit: int) -> Iterator[UINode]:
    """
    Breadth-first traversal that stops after ``limit`` visited nodes.

    Args:
        root: Node to start from.
        limit: Maximum number of nodes to yield.

    Yields:
        Nodes in FIFO order.
    """
    queue = deque([root])
    visited = 0
    while queue and visited < limit:
        node = queue.popleft()
        visited += 1
        queue.extend(node.children)
        yield node


def contains_any(value: Optional[str], patterns: Iterable[str]) -> bool:
    """Case-insensitive substring match against any of ``patterns``."""
    if not value:
        return False
    lowered = value.lower()
    return any(pattern.lower() in lowered for pattern in patterns)


class ContentDetector(ABC):
    """
    Strategy contract for per-app short-form content detection.

    Attributes:
        package_name: Application package this detector handles.
        max_nodes: Node-visit ceiling of the primary scan.
    """

    package_name: str = ""
    max_nodes: int = 0

    @abstractmethod
    def is_short_form_content(
        self,
        event: AccessibilityEvent,
        root: UINode,
        resources: ResourceLookup,
    ) -> bool:
        """
        Decide whether the window rooted at ``root`` shows short-form content.

        Args:
            event: Event that triggered the check.
            root: Root node of the window being inspected.
            resources: Localized string lookup.

        Returns:
            True if short-form content is on screen.
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(package_name={self.package_name!r})"

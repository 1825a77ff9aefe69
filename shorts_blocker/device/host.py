"""
Accessibility Host Abstraction
==============================

Abstract base class for the platform side of the blocker: something that
can list the current windows with their accessibility trees, report the
foreground application, and perform the global "back" action.

Usage:
    from shorts_blocker.device import create_host

    host = create_host()
    await host.connect()
    windows = await host.get_windows()
    await host.perform_global_back()
    await host.disconnect()
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from shorts_blocker.accessibility.node import UIWindow


class DeviceState(Enum):
    """State of the host connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass
class DeviceInfo:
    """
    Information about a connected device.

    Attributes:
        device_id: Device serial.
        os_version: Android version string.
        screen_width: Screen width in pixels.
        screen_height: Screen height in pixels.
        model: Device model name.
    """

    device_id: str
    os_version: str = ""
    screen_width: int = 1080
    screen_height: int = 2340
    model: str = ""


@dataclass(frozen=True)
class ForegroundInfo:
    """Foreground application and activity."""

    package: str = ""
    activity: Optional[str] = None


@dataclass
class ActionResult:
    """
    Result of a device action.

    ``success`` means the platform accepted the request, not that the
    foreground app actually reacted to it.
    """

    success: bool
    error: Optional[str] = None
    duration_ms: int = 0


class AccessibilityHost(ABC):
    """Platform capabilities consumed by the blocker service."""

    def __init__(self, device_id: Optional[str] = None) -> None:
        self.device_id = device_id
        self.state = DeviceState.DISCONNECTED
        self.info: Optional[DeviceInfo] = None

    @property
    def is_connected(self) -> bool:
        """Check if the host is currently connected."""
        return self.state == DeviceState.CONNECTED

    @abstractmethod
    async def connect(self) -> bool:
        """
        Connect to the device.

        Returns:
            True if connection successful, False otherwise.
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Disconnect from the device and release resources."""
        pass

    @abstractmethod
    async def get_windows(self) -> list[UIWindow]:
        """
        Snapshot the currently open windows.

        Returns:
            Windows with their accessibility trees; empty on failure.
        """
        pass

    @abstractmethod
    async def get_foreground(self) -> ForegroundInfo:
        """Return the foreground package and activity."""
        pass

    @abstractmethod
    async def perform_global_back(self) -> ActionResult:
        """Issue the platform-level "navigate back" action."""
        pass


def create_host(
    device_id: Optional[str] = None,
    adb_path: Optional[str] = None,
    timeout: Optional[float] = None,
) -> AccessibilityHost:
    """
    Create the accessibility host for the configured device.

    Args:
        device_id: ADB serial. Defaults to the configured serial.
        adb_path: Path to adb. Defaults to the configured path.
        timeout: ADB command timeout. Defaults to the configured timeout.

    Returns:
        Host instance (not yet connected).
    """
    from shorts_blocker.config import get_settings
    from shorts_blocker.device.adb_device import ADBDevice

    settings = get_settings().device
    return ADBDevice(
        device_id=device_id or settings.adb_device_serial or None,
        adb_path=adb_path or settings.adb_path or None,
        timeout=timeout if timeout is not None else settings.adb_timeout,
    )

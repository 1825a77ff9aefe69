"""
Device Integration Module
=========================

Accessibility host layer.

This package contains:
    - host: Abstract accessibility host and result types
    - adb_device: Local Android device/emulator via ADB
"""

from shorts_blocker.device.host import (
    AccessibilityHost,
    ActionResult,
    DeviceInfo,
    DeviceState,
    ForegroundInfo,
    create_host,
)
from shorts_blocker.device.adb_device import ADBDevice, ADBError, parse_resumed_activity

__all__ = [
    "AccessibilityHost",
    "ActionResult",
    "DeviceInfo",
    "DeviceState",
    "ForegroundInfo",
    "create_host",
    "ADBDevice",
    "ADBError",
    "parse_resumed_activity",
]

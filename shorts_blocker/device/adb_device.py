"""
ADB Accessibility Host
======================

Accessibility host backed by a local Android device or emulator via ADB.

ADB (Android Debug Bridge) is included with Android SDK and provides
everything the blocker needs:
- UI hierarchy (accessibility tree) retrieval via uiautomator
- Foreground activity via dumpsys
- Key presses for the back action

Prerequisites:
    1. Android SDK installed with platform-tools (adb)
    2. Android Emulator running OR physical device connected via USB
    3. ADB available in PATH or ANDROID_HOME set

Usage:
    from shorts_blocker.device import ADBDevice

    device = ADBDevice()
    await device.connect()
    windows = await device.get_windows()
    await device.perform_global_back()
"""

import asyncio
import os
import re
import shutil
import subprocess
import time
from pathlib import Path
from typing import Optional

from shorts_blocker.accessibility.node import UIWindow
from shorts_blocker.accessibility.tree_parser import TreeParser
from shorts_blocker.device.host import (
    AccessibilityHost,
    ActionResult,
    DeviceInfo,
    DeviceState,
    ForegroundInfo,
)
from shorts_blocker.utils.logger import get_logger

logger = get_logger(__name__)

DUMP_PATH = "/sdcard/shorts_blocker_dump.xml"
KEYCODE_BACK = "KEYCODE_BACK"

_RESUMED_RE = re.compile(
    r"(?<![A-Za-z])(?:topResumedActivity|mResumedActivity|ResumedActivity)\W.*?([A-Za-z0-9_.]+)/([A-Za-z0-9_.$]+)"
)


class ADBError(RuntimeError):
    """An ADB command could not be run or failed."""


def parse_resumed_activity(dumpsys_output: str) -> ForegroundInfo:
    """
    Extract the resumed activity from ``dumpsys activity activities``.

    Args:
        dumpsys_output: Raw dumpsys output.

    Returns:
        ForegroundInfo with the package and fully qualified activity,
        empty when nothing is resumed.
    """
    for line in dumpsys_output.splitlines():
        match = _RESUMED_RE.search(line)
        if not match:
            continue
        package, activity = match.groups()
        # Activities can be given relative to the package
        if activity.startswith("."):
            activity = package + activity
        return ForegroundInfo(package=package, activity=activity)
    return ForegroundInfo()


class ADBDevice(AccessibilityHost):
    """
    Local Android device control via ADB.

    Uses subprocess to call ADB commands, run in a worker thread so the
    asyncio loop is never blocked.
    """

    def __init__(
        self,
        device_id: Optional[str] = None,
        adb_path: Optional[str] = None,
        timeout: float = 15.0,
    ) -> None:
        """
        Initialize ADB device client.

        Args:
            device_id: Optional device serial (from 'adb devices').
                       If None, uses the first available device.
            adb_path: Optional path to adb executable.
                      If None, searches PATH and ANDROID_HOME.
            timeout: Timeout for a single ADB command in seconds.
        """
        super().__init__(device_id)

        self.adb_path = adb_path or self._find_adb()
        self.timeout = timeout
        self._device_serial: Optional[str] = device_id
        self._parser = TreeParser()

        if not self.adb_path:
            logger.warning(
                "ADB not found. Please install Android SDK platform-tools "
                "and ensure 'adb' is in PATH or set ANDROID_HOME."
            )

    def _find_adb(self) -> Optional[str]:
        """Find ADB executable in system."""
        adb_in_path = shutil.which("adb")
        if adb_in_path:
            return adb_in_path

        android_home = os.environ.get("ANDROID_HOME") or os.environ.get("ANDROID_SDK_ROOT")
        if android_home:
            for candidate in (
                Path(android_home) / "platform-tools" / "adb",
                Path(android_home) / "platform-tools" / "adb.exe",
            ):
                if candidate.exists():
                    return str(candidate)

        for path in (
            Path.home() / "Android" / "Sdk" / "platform-tools" / "adb",
            Path("/usr/local/android-sdk/platform-tools/adb"),
            Path("/opt/android-sdk/platform-tools/adb"),
        ):
            if path.exists():
                return str(path)

        return None

    async def _run_adb(self, *args: str, timeout: Optional[float] = None) -> subprocess.CompletedProcess:
        """
        Run an ADB command asynchronously.

        Args:
            *args: ADB command arguments.
            timeout: Command timeout in seconds. Defaults to ``self.timeout``.

        Returns:
            CompletedProcess with command result.

        Raises:
            ADBError: If ADB is not available or the command timed out.
        """
        if not self.adb_path:
            raise ADBError("ADB not found. Please install Android SDK platform-tools.")

        cmd = [self.adb_path]
        if self._device_serial:
            cmd.extend(["-s", self._device_serial])
        cmd.extend(args)

        timeout = timeout if timeout is not None else self.timeout
        logger.debug("Running ADB command", cmd=" ".join(cmd))

        try:
            return await asyncio.to_thread(
                subprocess.run,
                cmd,
                capture_output=True,
                timeout=timeout,
                text=True,
            )
        except subprocess.TimeoutExpired as e:
            raise ADBError(f"ADB command timed out after {timeout}s") from e
        except OSError as e:
            raise ADBError(f"Failed to run ADB: {e}") from e

    async def _shell(self, *args: str) -> str:
        """Run ``adb shell`` and return stdout, raising on non-zero exit."""
        result = await self._run_adb("shell", *args)
        if result.returncode != 0:
            raise ADBError(f"'{' '.join(args)}' failed: {result.stderr.strip()}")
        return result.stdout

    async def connect(self) -> bool:
        """
        Connect to an Android device/emulator via ADB.

        Returns:
            True if connection successful.
        """
        self.state = DeviceState.CONNECTING
        logger.info("Connecting to ADB device", device_id=self._device_serial)

        try:
            result = await self._run_adb("devices", "-l")
            if result.returncode != 0:
                logger.error("Failed to get device list", error=result.stderr)
                self.state = DeviceState.ERROR
                return False

            devices = []
            for line in result.stdout.strip().split("\n")[1:]:
                parts = line.split()
                if len(parts) >= 2 and parts[1] == "device":
                    model = ""
                    for part in parts:
                        if part.startswith("model:"):
                            model = part.split(":", 1)[1]
                    devices.append({"serial": parts[0], "model": model})

            if not devices:
                logger.error("No Android devices found. Start an emulator or connect a device.")
                self.state = DeviceState.ERROR
                return False

            if self._device_serial:
                matching = [d for d in devices if d["serial"] == self._device_serial]
                if not matching:
                    logger.error(
                        "Specified device not found",
                        device_id=self._device_serial,
                        available=[d["serial"] for d in devices],
                    )
                    self.state = DeviceState.ERROR
                    return False
                device = matching[0]
            else:
                device = devices[0]
                self._device_serial = device["serial"]

            width, height = await self._get_screen_size()
            self.info = DeviceInfo(
                device_id=self._device_serial,
                os_version=(await self._shell("getprop", "ro.build.version.release")).strip(),
                screen_width=width,
                screen_height=height,
                model=device["model"] or "Unknown",
            )

            self.state = DeviceState.CONNECTED
            logger.info(
                "Connected to ADB device",
                serial=self._device_serial,
                model=self.info.model,
                android_version=self.info.os_version,
                screen_size=f"{width}x{height}",
            )
            return True

        except ADBError as e:
            logger.error("Failed to connect to ADB device", error=str(e))
            self.state = DeviceState.ERROR
            return False

    async def _get_screen_size(self) -> tuple[int, int]:
        """Get device screen dimensions."""
        output = await self._shell("wm", "size")
        # "Physical size: 1080x2340"
        match = re.search(r"(\d+)x(\d+)", output)
        if match:
            return int(match.group(1)), int(match.group(2))
        return 1080, 2340

    async def disconnect(self) -> None:
        """Disconnect from the device (cleanup)."""
        self.state = DeviceState.DISCONNECTED
        logger.info("Disconnected from ADB device", serial=self._device_serial)

    async def dump_hierarchy(self) -> str:
        """
        Dump the UI hierarchy as uiautomator XML.

        Raises:
            ADBError: If the dump could not be produced or read.
        """
        await self._shell("uiautomator", "dump", DUMP_PATH)
        xml_content = await self._shell("cat", DUMP_PATH)
        await self._run_adb("shell", "rm", "-f", DUMP_PATH)
        return xml_content

    async def get_windows(self) -> list[UIWindow]:
        """
        Snapshot the current windows.

        Returns:
            Parsed windows, or an empty list when the dump failed.
        """
        if not self.is_connected:
            logger.warning("Window snapshot requested while disconnected")
            return []

        start_time = time.monotonic()
        try:
            xml_content = await self.dump_hierarchy()
        except ADBError as e:
            logger.error("Failed to get UI hierarchy", error=str(e))
            return []

        windows = self._parser.parse_windows(xml_content)
        logger.debug(
            "Windows captured",
            windows=len(windows),
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
        return windows

    async def get_foreground(self) -> ForegroundInfo:
        """Get the foreground package and activity."""
        if not self.is_connected:
            return ForegroundInfo()

        try:
            output = await self._shell("dumpsys", "activity", "activities")
        except ADBError as e:
            logger.error("Failed to get foreground activity", error=str(e))
            return ForegroundInfo()

        return parse_resumed_activity(output)

    async def perform_global_back(self) -> ActionResult:
        """
        Press the back key.

        Returns:
            ActionResult indicating whether ADB accepted the key event.
        """
        if not self.is_connected:
            return ActionResult(success=False, error="Device not connected")

        start_time = time.monotonic()
        try:
            result = await self._run_adb("shell", "input", "keyevent", KEYCODE_BACK)
        except ADBError as e:
            return ActionResult(success=False, error=str(e))

        duration_ms = int((time.monotonic() - start_time) * 1000)
        if result.returncode != 0:
            return ActionResult(
                success=False,
                error=f"Back key failed: {result.stderr.strip()}",
                duration_ms=duration_ms,
            )

        logger.debug("Key pressed", key=KEYCODE_BACK)
        return ActionResult(success=True, duration_ms=duration_ms)

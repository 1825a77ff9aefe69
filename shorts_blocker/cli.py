"""
Command Line Interface
======================

Usage:
    # Watch the connected device and dismiss Shorts / Reels
    shorts-blocker run [--serial SERIAL] [--interval 1.0] [--dry-run]

    # Run a detector against a saved uiautomator dump
    shorts-blocker scan dump.xml --package com.google.android.youtube

    # Preferences API plus blocker service
    shorts-blocker serve [--host 127.0.0.1] [--port 8000]

    # Show or change tracked apps
    shorts-blocker packages [--enable PKG] [--disable PKG]
"""

import argparse
import asyncio
import signal
import sys
from pathlib import Path
from typing import Optional, Sequence

from shorts_blocker.accessibility.node import AccessibilityEvent, EventType
from shorts_blocker.accessibility.tree_parser import TreeParser
from shorts_blocker.config import get_settings
from shorts_blocker.detectors.base import DefaultResources
from shorts_blocker.detectors.registry import build_default_registry
from shorts_blocker.device.host import create_host
from shorts_blocker.preferences.catalog import find_package
from shorts_blocker.preferences.store import PreferencesStore
from shorts_blocker.service import BlockerService
from shorts_blocker.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shorts-blocker",
        description="Detect and dismiss short-form video content on an Android device",
    )
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default=None)
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Watch the device and dismiss short-form content")
    run.add_argument("--serial", help="ADB device serial (if multiple devices)")
    run.add_argument("--interval", type=float, default=None, help="Polling interval in seconds")
    run.add_argument("--dry-run", action="store_true", help="Log detections without pressing back")
    run.add_argument("--max-polls", type=int, default=None, help="Stop after N polls")

    scan = subparsers.add_parser("scan", help="Run a detector on a saved uiautomator dump")
    scan.add_argument("dump", type=Path, help="Path to the uiautomator XML dump")
    scan.add_argument("--package", required=True, help="Package the dump belongs to")
    scan.add_argument("--class-name", default=None, help="Foreground activity class name")

    serve = subparsers.add_parser("serve", help="Run the preferences API with the blocker service")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--serial", help="ADB device serial (if multiple devices)")
    serve.add_argument("--no-service", action="store_true", help="Serve preferences only")

    packages = subparsers.add_parser("packages", help="Show or change tracked apps")
    group = packages.add_mutually_exclusive_group()
    group.add_argument("--enable", metavar="PACKAGE")
    group.add_argument("--disable", metavar="PACKAGE")

    return parser


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    host = create_host(device_id=args.serial)
    service = BlockerService.from_settings(host, settings=settings, dry_run=args.dry_run)
    if args.interval is not None:
        service.poll_interval = args.interval

    if not await service.connect():
        print("Failed to connect to device. Run 'adb devices' to check connected devices.", file=sys.stderr)
        return 1

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, service.stop)
        except NotImplementedError:
            # Windows event loops do not support signal handlers
            pass

    try:
        await service.run(max_iterations=args.max_polls)
    finally:
        await host.disconnect()

    print(f"Done. {service.engine.stats()}")
    return 0


def _scan(args: argparse.Namespace) -> int:
    try:
        xml_content = args.dump.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Cannot read {args.dump}: {e}", file=sys.stderr)
        return 2

    registry = build_default_registry(get_settings().detection)
    detector = registry.get(args.package)
    if detector is None:
        print(f"No detector for package {args.package}", file=sys.stderr)
        return 2

    windows = TreeParser(default_package=args.package).parse_windows(xml_content)
    event = AccessibilityEvent(
        event_type=EventType.WINDOW_STATE_CHANGED,
        package_name=args.package,
        class_name=args.class_name,
    )
    for window in windows:
        if window.root is not None and detector.is_short_form_content(event, window.root, DefaultResources()):
            print(f"{args.package}: short-form content in window {window.window_id}")
            return 0

    print(f"{args.package}: no short-form content ({len(windows)} windows)")
    return 1


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from shorts_blocker.main import create_app

    settings = get_settings()
    service: Optional[BlockerService] = None
    if not args.no_service:
        service = BlockerService.from_settings(create_host(device_id=args.serial), settings=settings)

    uvicorn.run(
        create_app(service=service),
        host=args.host or settings.server.server_host,
        port=args.port or settings.server.server_port,
        log_level=settings.server.log_level.lower(),
    )
    return 0


def _packages(args: argparse.Namespace) -> int:
    store = PreferencesStore(get_settings().service.preferences_path)

    target = args.enable or args.disable
    if target:
        if find_package(target) is None:
            print(f"Unknown package: {target}", file=sys.stderr)
            return 2
        store.toggle_package(target, enabled=bool(args.enable))

    for pkg in store.get_tracked_packages_with_status():
        mark = "x" if pkg.enabled else " "
        print(f"[{mark}] {pkg.display_name:<10} {pkg.package_name:<30} {pkg.description}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, json_logs=args.json_logs or None)

    if args.command == "run":
        return asyncio.run(_run(args))
    if args.command == "scan":
        return _scan(args)
    if args.command == "serve":
        return _serve(args)
    return _packages(args)


if __name__ == "__main__":
    raise SystemExit(main())

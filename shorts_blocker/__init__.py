"""
Short-Form Content Blocker
==========================

Detects short-form video content (YouTube Shorts, Instagram Reels) on a
connected Android device and navigates back out of it.

Modules:
    - accessibility: UI tree model and uiautomator dump parsing
    - detectors: Per-app content detectors and the detector registry
    - engine: Event routing and dismiss-action cooldown
    - device: Accessibility host abstraction (local ADB)
    - preferences: Tracked-package and onboarding preferences
    - service: Long-running blocker service
    - api: FastAPI settings and status routes
    - utils: Logging utilities
"""

__version__ = "1.0.0"
__author__ = "Short-Form Blocker Team"

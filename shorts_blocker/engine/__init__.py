"""
Engine Module
=============

Event routing and action rate limiting.

This package contains:
    - router: DetectionEngine dispatching events to detectors
    - rate_limiter: Cooldown table for dismiss actions
"""

from shorts_blocker.engine.rate_limiter import DEFAULT_COOLDOWN_MS, RateLimiter, monotonic_ms
from shorts_blocker.engine.router import (
    DEFAULT_ACTION_KEY,
    LEGACY_ACTION_KEY,
    DetectionEngine,
    DetectionOutcome,
    EngineStats,
)

__all__ = [
    "DEFAULT_COOLDOWN_MS",
    "RateLimiter",
    "monotonic_ms",
    "DEFAULT_ACTION_KEY",
    "LEGACY_ACTION_KEY",
    "DetectionEngine",
    "DetectionOutcome",
    "EngineStats",
]

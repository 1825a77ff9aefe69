"""
Utility modules for the short-form content blocker.

This package contains:
    - logger: structlog configuration
"""

from shorts_blocker.utils.logger import get_logger, render_enums, setup_logging

__all__ = [
    "get_logger",
    "render_enums",
    "setup_logging",
]

"""
Test Package
============

Unit and integration tests for the Shorts Blocker.

Test organization:
    - test_detectors.py: detector heuristics and registry
    - test_engine.py: rate limiter and event router
    - test_accessibility.py: node model and uiautomator parsing
    - test_device.py: ADB host
    - test_preferences.py: preferences store
    - test_service.py: polling service and event filter
    - test_api.py: FastAPI endpoint tests
    - test_cli.py: command line interface

Run tests with:
    pytest tests/ -v
"""

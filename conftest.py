"""Pytest configuration and shared fixtures."""

import os
import pytest

# Load env vars
from dotenv import load_dotenv
load_dotenv()


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test (hits external services)")
    config.addinivalue_line("markers", "online: mark test as online test (hits external APIs)")


def pytest_collection_modifyitems(config, items):
    """Skip online tests unless RUN_ONLINE_TESTS=1."""
    if os.getenv("RUN_ONLINE_TESTS") == "1":
        return
    skip_online = pytest.mark.skip(reason="online test: set RUN_ONLINE_TESTS=1 to run")
    for item in items:
        if "online" in item.keywords:
            item.add_marker(skip_online)

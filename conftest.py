"""
Pytest configuration and shared fixtures.

This file contains pytest configuration and fixtures that are available
to all test modules in the project.
"""

import os

import pytest

# Import all fixtures from the fixtures module
from tests.fixtures import *


def pytest_configure(config):
    """Configure pytest settings."""
    # Register custom markers
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test component interactions"
    )
    config.addinivalue_line(
        "markers", "config: Configuration-related tests"
    )
    config.addinivalue_line(
        "markers", "routing: Route matching and resolution tests"
    )
    config.addinivalue_line(
        "markers", "negotiation: Accept header content negotiation tests"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location and content."""
    for item in items:
        # Mark tests based on file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)

        # Mark tests based on function name patterns
        if "config" in item.name:
            item.add_marker(pytest.mark.config)

        if "route" in item.name or "match" in item.name or "resolve" in item.name:
            item.add_marker(pytest.mark.routing)

        if "accept" in item.name or "negotiat" in item.name:
            item.add_marker(pytest.mark.negotiation)


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up the test environment before any tests run."""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["TESTING"] = "true"

    yield

    os.environ.pop("ENVIRONMENT", None)
    os.environ.pop("TESTING", None)


@pytest.fixture(autouse=True)
def isolate_tests():
    """Isolate tests from each other by resetting global state."""
    import routekit.config

    routekit.config._router_config = None

    yield

    routekit.config._router_config = None

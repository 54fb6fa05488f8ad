# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

import os
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from coursedesk.core.config import clear_settings_cache


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_environment() -> dict[str, str]:
    """Provide test environment variables.

    Returns:
        Dictionary of environment variables for testing.
    """
    return {
        "ENVIRONMENT": "development",
        "DEBUG": "true",
        "LOG_LEVEL": "DEBUG",
        "DATABASE_URL": "sqlite+aiosqlite://",
        "DATABASE_CREATE_SCHEMA": "true",
        "CLIENT_BASE_URL": "http://testserver",
    }


@pytest.fixture(autouse=True)
def isolated_settings(test_environment: dict[str, str]) -> Iterator[None]:
    """Run every test against the test environment with fresh settings."""
    with patch.dict(os.environ, test_environment):
        clear_settings_cache()
        yield
    clear_settings_cache()


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (in-memory SQLite)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for CourseDesk.

Settings are Pydantic-based and loaded from environment variables.

Example:
    >>> from coursedesk.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.database.url)
"""

from coursedesk.core.config.settings import (
    APISettings,
    ClientSettings,
    CORSSettings,
    DatabaseSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "CORSSettings",
    "APISettings",
    "ClientSettings",
]

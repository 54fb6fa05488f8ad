# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Python client for the CourseDesk enrollment API.

Provides the HTTP client, the per-context enrollment state managers with
optimistic updates, and list pagination helpers.
"""

from coursedesk.client.api_client import EnrollmentAPIClient, EnrollmentAPIError
from coursedesk.client.cache import CacheSnapshot, QueryCache
from coursedesk.client.notifications import LoggingNotifier, Notifier
from coursedesk.client.pagination import PaginatedSearch
from coursedesk.client.result import Err, Ok, Result
from coursedesk.client.state import (
    PROVISIONAL,
    ByCourseEnrollmentState,
    ByStudentEnrollmentState,
    EmptySelectionError,
    EnrollmentStateError,
    EnrollmentStateManager,
    MutationInProgressError,
    NoAnchorSelectedError,
)

__all__ = [
    "PROVISIONAL",
    "ByCourseEnrollmentState",
    "ByStudentEnrollmentState",
    "CacheSnapshot",
    "EmptySelectionError",
    "EnrollmentAPIClient",
    "EnrollmentAPIError",
    "EnrollmentStateError",
    "EnrollmentStateManager",
    "Err",
    "LoggingNotifier",
    "MutationInProgressError",
    "NoAnchorSelectedError",
    "Notifier",
    "Ok",
    "PaginatedSearch",
    "QueryCache",
    "Result",
]

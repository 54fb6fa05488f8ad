# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain: partition reads and enroll/unenroll writes."""

from coursedesk.domains.enrollment.query import EnrollmentQueryService
from coursedesk.domains.enrollment.service import (
    EnrollmentConflictError,
    EnrollmentService,
    EnrollmentValidationError,
)

__all__ = [
    "EnrollmentConflictError",
    "EnrollmentQueryService",
    "EnrollmentService",
    "EnrollmentValidationError",
]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for CourseDesk.

Tables:
- students
- courses
- enrollments (student/course join with enrolled_at)
"""

from coursedesk.infrastructure.database.models.base import Base, TimestampMixin
from coursedesk.infrastructure.database.models.course import Course
from coursedesk.infrastructure.database.models.enrollment import Enrollment
from coursedesk.infrastructure.database.models.student import Student

__all__ = [
    "Base",
    "TimestampMixin",
    "Student",
    "Course",
    "Enrollment",
]

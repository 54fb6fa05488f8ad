# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain exception hierarchy.

The API layer maps these to HTTP statuses:
- NotFoundError -> 404
- RecordValidationError -> 422
- ConflictError -> 409
"""


class DomainError(Exception):
    """Base exception for domain service errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    pass


class StudentNotFoundError(NotFoundError):
    """Raised when student is not found."""

    def __init__(self, student_id: int) -> None:
        super().__init__(f"Student {student_id} not found")
        self.student_id = student_id


class CourseNotFoundError(NotFoundError):
    """Raised when course is not found."""

    def __init__(self, course_id: int) -> None:
        super().__init__(f"Course {course_id} not found")
        self.course_id = course_id


class RecordValidationError(DomainError):
    """Raised when a request is well-formed but references invalid data."""

    pass


class ConflictError(DomainError):
    """Raised when a write collides with existing data."""

    pass


class DuplicateRecordError(ConflictError):
    """Raised when a unique field (email, course code, course name) is taken."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"The {field} '{value}' has already been taken")
        self.field = field
        self.value = value

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request/response models for CourseDesk."""

from coursedesk.models.common import ApiResponse, ErrorResponse
from coursedesk.models.course import CourseCreateRequest, CourseResponse, CourseUpdateRequest
from coursedesk.models.enrollment import (
    CoursePartition,
    CourseWithStudents,
    EnrollByCourseRequest,
    EnrollByStudentRequest,
    EnrolledCourse,
    EnrolledStudent,
    StudentPartition,
    StudentWithCourses,
)
from coursedesk.models.student import (
    StudentBrief,
    StudentCreateRequest,
    StudentResponse,
    StudentUpdateRequest,
)

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "CourseCreateRequest",
    "CourseUpdateRequest",
    "CourseResponse",
    "StudentCreateRequest",
    "StudentUpdateRequest",
    "StudentBrief",
    "StudentResponse",
    "EnrollByCourseRequest",
    "EnrollByStudentRequest",
    "EnrolledCourse",
    "EnrolledStudent",
    "StudentWithCourses",
    "CourseWithStudents",
    "CoursePartition",
    "StudentPartition",
]

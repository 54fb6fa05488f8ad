# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    students: Student record endpoints (CRUD).
    courses: Course record endpoints (CRUD).
    course_with_student: By-course enrollment endpoints.
    student_with_course: By-student enrollment endpoints.
"""

from fastapi import APIRouter

from coursedesk.api.v1 import course_with_student, courses, student_with_course, students

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(students.router, prefix="/students", tags=["Students"])
router.include_router(courses.router, prefix="/courses", tags=["Courses"])
router.include_router(
    course_with_student.router,
    prefix="/course-with-student",
    tags=["Enrollment by Course"],
)
router.include_router(
    student_with_course.router,
    prefix="/student-with-course",
    tags=["Enrollment by Student"],
)

__all__ = ["router"]

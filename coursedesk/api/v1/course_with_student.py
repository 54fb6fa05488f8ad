# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""By-course enrollment API endpoints.

Endpoints backing the "enroll students into a course" dialog:
- GET / - List courses (the anchors)
- GET /{course_id} - Enrolled and unenrolled students of a course
- POST / - Enroll one or more students into a course
- DELETE /{course_id}/{student_id} - Unenroll a student from a course
"""

import logging

from fastapi import APIRouter, Depends, status

from coursedesk.api.dependencies import (
    RecordIdPath,
    get_enrollment_query_service,
    get_enrollment_service,
)
from coursedesk.api.errors import to_api_error
from coursedesk.domains.enrollment import EnrollmentQueryService, EnrollmentService
from coursedesk.domains.errors import DomainError
from coursedesk.models.common import ApiResponse
from coursedesk.models.course import CourseResponse
from coursedesk.models.enrollment import (
    CoursePartition,
    CourseWithStudents,
    EnrollByCourseRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[CourseResponse]],
    summary="List courses",
)
async def list_courses(
    queries: EnrollmentQueryService = Depends(get_enrollment_query_service),
) -> ApiResponse[list[CourseResponse]]:
    courses = await queries.list_courses()
    return ApiResponse(message="Courses fetched successfully!", data=courses)


@router.get(
    "/{course_id}",
    response_model=ApiResponse[CoursePartition],
    summary="Get course enrollment",
    description="Students enrolled in the course and students not enrolled in it.",
)
async def get_course_enrollment(
    course_id: RecordIdPath,
    queries: EnrollmentQueryService = Depends(get_enrollment_query_service),
) -> ApiResponse[CoursePartition]:
    """Get the enrolled/unenrolled split for a course.

    Args:
        course_id: Course identifier.
        queries: Enrollment query service.

    Returns:
        Partition of all students with respect to the course.

    Raises:
        ApiError: 404 if the course does not exist.
    """
    try:
        partition = await queries.get_course_partition(course_id)
    except DomainError as e:
        raise to_api_error(e, "Error Fetching Enrolled Students!")

    return ApiResponse(message="Data fetched successfully!", data=partition)


@router.post(
    "",
    response_model=ApiResponse[CourseWithStudents],
    status_code=status.HTTP_201_CREATED,
    summary="Enroll students into a course",
)
async def enroll_students(
    data: EnrollByCourseRequest,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[CourseWithStudents]:
    """Enroll students into a course.

    Already-enrolled students are skipped. If the course or any student
    does not exist nothing is written.

    Args:
        data: Course id and student ids.
        service: Enrollment service.

    Returns:
        The course with all of its enrolled students.

    Raises:
        ApiError: 422 if the course or any student does not exist.
    """
    logger.info(
        "Enrolling students into course: course=%s, students=%s",
        data.selected_course_id,
        data.student,
    )

    try:
        course = await service.enroll_students_in_course(
            course_id=data.selected_course_id,
            student_ids=data.student,
        )
    except DomainError as e:
        raise to_api_error(e, "Unable to enroll student.")

    return ApiResponse(message="Students Enrolled Successfully!", data=course)


@router.delete(
    "/{course_id}/{student_id}",
    response_model=ApiResponse[CourseWithStudents],
    summary="Unenroll a student from a course",
)
async def unenroll_student(
    course_id: RecordIdPath,
    student_id: RecordIdPath,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[CourseWithStudents]:
    """Unenroll a student from a course.

    Unenrolling a student that is not enrolled is a no-op.

    Raises:
        ApiError: 404 if the course does not exist.
    """
    try:
        course = await service.unenroll_student_from_course(
            course_id=course_id,
            student_id=student_id,
        )
    except DomainError as e:
        raise to_api_error(e, "Unable to unenroll student")

    return ApiResponse(message="Student Unenrolled Successfully!", data=course)

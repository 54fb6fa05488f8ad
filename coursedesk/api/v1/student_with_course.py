# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""By-student enrollment API endpoints.

Endpoints backing the "enroll a student into courses" dialog:
- GET / - List students (the anchors)
- GET /{student_id} - A student with its courses, plus courses it is not in
- POST / - Enroll a student into one or more courses
- DELETE /{student_id}/{course_id} - Unenroll a course from a student
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
from coursedesk.models.enrollment import (
    EnrollByStudentRequest,
    StudentPartition,
    StudentWithCourses,
)
from coursedesk.models.student import StudentResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[StudentResponse]],
    summary="List students",
)
async def list_students(
    queries: EnrollmentQueryService = Depends(get_enrollment_query_service),
) -> ApiResponse[list[StudentResponse]]:
    students = await queries.list_students()
    return ApiResponse(message="Students fetched successfully!", data=students)


@router.get(
    "/{student_id}",
    response_model=ApiResponse[StudentPartition],
    summary="Get student enrollment",
)
async def get_student_enrollment(
    student_id: RecordIdPath,
    queries: EnrollmentQueryService = Depends(get_enrollment_query_service),
) -> ApiResponse[StudentPartition]:
    """Get a student with its enrolled courses and the courses it is not in.

    Raises:
        ApiError: 404 if the student does not exist.
    """
    try:
        partition = await queries.get_student_partition(student_id)
    except DomainError as e:
        raise to_api_error(e, "Unable to fetch data")

    return ApiResponse(message="Data fetched successfully!", data=partition)


@router.post(
    "",
    response_model=ApiResponse[StudentWithCourses],
    status_code=status.HTTP_201_CREATED,
    summary="Enroll a student into courses",
)
async def enroll_courses(
    data: EnrollByStudentRequest,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[StudentWithCourses]:
    """Enroll a student into courses.

    Args:
        data: Student id and course ids.
        service: Enrollment service.

    Returns:
        The student with all of its enrolled courses.

    Raises:
        ApiError: 422 if the student or any course does not exist.
    """
    logger.info(
        "Enrolling student into courses: student=%s, courses=%s",
        data.selected_student_id,
        data.course,
    )

    try:
        student = await service.enroll_student_in_courses(
            student_id=data.selected_student_id,
            course_ids=data.course,
        )
    except DomainError as e:
        raise to_api_error(e, "Unable to enroll student")

    return ApiResponse(message="Student Enrolled Successfully!", data=student)


@router.delete(
    "/{student_id}/{course_id}",
    response_model=ApiResponse[StudentWithCourses],
    summary="Unenroll a course from a student",
)
async def unenroll_course(
    student_id: RecordIdPath,
    course_id: RecordIdPath,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[StudentWithCourses]:
    try:
        student = await service.unenroll_course_from_student(
            student_id=student_id,
            course_id=course_id,
        )
    except DomainError as e:
        raise to_api_error(e, "Unable to unenroll student")

    return ApiResponse(message="Student Unenrolled Successfully!", data=student)

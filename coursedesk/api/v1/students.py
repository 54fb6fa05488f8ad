# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student record API endpoints.

- GET / - List students
- POST / - Create a student
- GET /{student_id} - Get student details
- PUT /{student_id} - Update student
- DELETE /{student_id} - Delete student and its enrollments
"""

import logging

from fastapi import APIRouter, Depends, status

from coursedesk.api.dependencies import RecordIdPath, get_student_service
from coursedesk.api.errors import to_api_error
from coursedesk.domains.errors import DomainError
from coursedesk.domains.student import StudentService
from coursedesk.models.common import ApiResponse
from coursedesk.models.student import (
    StudentCreateRequest,
    StudentResponse,
    StudentUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[StudentResponse]],
    summary="List students",
)
async def list_students(
    service: StudentService = Depends(get_student_service),
) -> ApiResponse[list[StudentResponse]]:
    students = await service.list_students()
    return ApiResponse(message="Students fetched successfully!", data=students)


@router.post(
    "",
    response_model=ApiResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create student",
)
async def create_student(
    data: StudentCreateRequest,
    service: StudentService = Depends(get_student_service),
) -> ApiResponse[StudentResponse]:
    """Create a new student.

    Raises:
        ApiError: 409 if the email is already taken.
    """
    try:
        student = await service.create_student(data)
    except DomainError as e:
        raise to_api_error(e, "Unable to add student")

    return ApiResponse(message="Student added successfully!", data=student)


@router.get(
    "/{student_id}",
    response_model=ApiResponse[StudentResponse],
    summary="Get student",
)
async def get_student(
    student_id: RecordIdPath,
    service: StudentService = Depends(get_student_service),
) -> ApiResponse[StudentResponse]:
    try:
        student = await service.get_student(student_id)
    except DomainError as e:
        raise to_api_error(e, "Unable to fetch student")

    return ApiResponse(message="Data fetched successfully!", data=student)


@router.put(
    "/{student_id}",
    response_model=ApiResponse[StudentResponse],
    summary="Update student",
)
async def update_student(
    student_id: RecordIdPath,
    data: StudentUpdateRequest,
    service: StudentService = Depends(get_student_service),
) -> ApiResponse[StudentResponse]:
    """Update a student.

    Raises:
        ApiError: 404 if the student does not exist, 409 if the email
            belongs to another student.
    """
    try:
        student = await service.update_student(student_id, data)
    except DomainError as e:
        raise to_api_error(e, "Unable to update student")

    return ApiResponse(message="Student updated successfully!", data=student)


@router.delete(
    "/{student_id}",
    response_model=ApiResponse[None],
    summary="Delete student",
)
async def delete_student(
    student_id: RecordIdPath,
    service: StudentService = Depends(get_student_service),
) -> ApiResponse[None]:
    """Delete a student. Its enrollments are removed with it."""
    try:
        await service.delete_student(student_id)
    except DomainError as e:
        raise to_api_error(e, "Unable to delete student")

    return ApiResponse(message="Student deleted successfully!", data=None)

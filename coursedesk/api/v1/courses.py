# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course record API endpoints.

- GET / - List courses
- POST / - Create a course
- GET /{course_id} - Get course details
- PUT /{course_id} - Update course
- DELETE /{course_id} - Delete course and its enrollments
"""

import logging

from fastapi import APIRouter, Depends, status

from coursedesk.api.dependencies import RecordIdPath, get_course_service
from coursedesk.api.errors import to_api_error
from coursedesk.domains.errors import DomainError
from coursedesk.domains.course import CourseService
from coursedesk.models.common import ApiResponse
from coursedesk.models.course import (
    CourseCreateRequest,
    CourseResponse,
    CourseUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[CourseResponse]],
    summary="List courses",
)
async def list_courses(
    service: CourseService = Depends(get_course_service),
) -> ApiResponse[list[CourseResponse]]:
    courses = await service.list_courses()
    return ApiResponse(message="Courses fetched successfully!", data=courses)


@router.post(
    "",
    response_model=ApiResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
)
async def create_course(
    data: CourseCreateRequest,
    service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseResponse]:
    """Create a course. Code and name must both be unused."""
    try:
        course = await service.create_course(data)
    except DomainError as e:
        raise to_api_error(e, "Unable to add course")

    return ApiResponse(message="Course added successfully!", data=course)


@router.get(
    "/{course_id}",
    response_model=ApiResponse[CourseResponse],
    summary="Get course",
)
async def get_course(
    course_id: RecordIdPath,
    service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseResponse]:
    try:
        course = await service.get_course(course_id)
    except DomainError as e:
        raise to_api_error(e, "Unable to fetch course")

    return ApiResponse(message="Data fetched successfully!", data=course)


@router.put(
    "/{course_id}",
    response_model=ApiResponse[CourseResponse],
    summary="Update course",
)
async def update_course(
    course_id: RecordIdPath,
    data: CourseUpdateRequest,
    service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseResponse]:
    """Update a course.

    Raises:
        ApiError: 404 if the course does not exist, 409 if the code or
            name belongs to another course.
    """
    try:
        course = await service.update_course(course_id, data)
    except DomainError as e:
        raise to_api_error(e, "Unable to update course")

    return ApiResponse(message="Course updated successfully!", data=course)


@router.delete(
    "/{course_id}",
    response_model=ApiResponse[None],
    summary="Delete course",
)
async def delete_course(
    course_id: RecordIdPath,
    service: CourseService = Depends(get_course_service),
) -> ApiResponse[None]:
    """Delete a course. Its enrollments are removed with it."""
    try:
        await service.delete_course(course_id)
    except DomainError as e:
        raise to_api_error(e, "Unable to delete course")

    return ApiResponse(message="Course deleted successfully!", data=None)

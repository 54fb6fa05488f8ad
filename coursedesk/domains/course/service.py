# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course service for managing course records.

Course code and name are both unique. Deleting a course removes its
enrollments through the database cascade.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coursedesk.domains.errors import CourseNotFoundError, DuplicateRecordError
from coursedesk.infrastructure.database.models import Course
from coursedesk.models.course import (
    CourseCreateRequest,
    CourseResponse,
    CourseUpdateRequest,
)

logger = logging.getLogger(__name__)


class CourseService:
    """Service for course CRUD operations.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_courses(self) -> list[CourseResponse]:
        """List all courses ordered by id."""
        result = await self.db.execute(select(Course).order_by(Course.id))
        return [CourseResponse.model_validate(c) for c in result.scalars().all()]

    async def get_course(self, course_id: int) -> CourseResponse:
        """Get a single course.

        Raises:
            CourseNotFoundError: If course not found.
        """
        course = await self._get_course(course_id)
        return CourseResponse.model_validate(course)

    async def create_course(self, request: CourseCreateRequest) -> CourseResponse:
        """Create a new course.

        Args:
            request: Course creation data.

        Returns:
            Created course.

        Raises:
            DuplicateRecordError: If the code or name is already taken.
        """
        await self._ensure_unique(request.code, request.name)

        course = Course(
            code=request.code,
            name=request.name,
            description=request.description,
            units=request.units,
        )
        self.db.add(course)
        await self._commit_or_conflict(request.code)
        await self.db.refresh(course)

        logger.info("Created course: id=%s, code=%s", course.id, course.code)

        return CourseResponse.model_validate(course)

    async def update_course(
        self,
        course_id: int,
        request: CourseUpdateRequest,
    ) -> CourseResponse:
        """Update an existing course.

        Raises:
            CourseNotFoundError: If course not found.
            DuplicateRecordError: If the code or name belongs to another course.
        """
        course = await self._get_course(course_id)
        await self._ensure_unique(request.code, request.name, exclude_id=course_id)

        course.code = request.code
        course.name = request.name
        course.description = request.description
        course.units = request.units

        await self._commit_or_conflict(request.code)
        await self.db.refresh(course)

        logger.info("Updated course: id=%s", course_id)

        return CourseResponse.model_validate(course)

    async def delete_course(self, course_id: int) -> None:
        """Delete a course and, through the cascade, its enrollments.

        Raises:
            CourseNotFoundError: If course not found.
        """
        course = await self._get_course(course_id)

        await self.db.delete(course)
        await self.db.commit()

        logger.info("Deleted course: id=%s", course_id)

    async def _get_course(self, course_id: int) -> Course:
        result = await self.db.execute(select(Course).where(Course.id == course_id))
        course = result.scalar_one_or_none()

        if not course:
            raise CourseNotFoundError(course_id)

        return course

    async def _ensure_unique(self, code: str, name: str, exclude_id: int | None = None) -> None:
        for field, column, value in (("code", Course.code, code), ("name", Course.name, name)):
            query = select(Course.id).where(column == value)
            if exclude_id is not None:
                query = query.where(Course.id != exclude_id)

            result = await self.db.execute(query)
            if result.scalar_one_or_none() is not None:
                raise DuplicateRecordError(field, value)

    async def _commit_or_conflict(self, code: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateRecordError("code", code) from e

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student service for managing student records.

This module provides the StudentService class for:
- Listing students
- Creating, updating and deleting students

Deleting a student removes its enrollments through the database cascade.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coursedesk.domains.errors import DuplicateRecordError, StudentNotFoundError
from coursedesk.infrastructure.database.models import Student
from coursedesk.models.student import (
    StudentCreateRequest,
    StudentResponse,
    StudentUpdateRequest,
)

logger = logging.getLogger(__name__)


class StudentService:
    """Service for student CRUD operations.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_students(self) -> list[StudentResponse]:
        """List all students ordered by id."""
        result = await self.db.execute(select(Student).order_by(Student.id))
        return [StudentResponse.model_validate(s) for s in result.scalars().all()]

    async def get_student(self, student_id: int) -> StudentResponse:
        """Get a single student.

        Raises:
            StudentNotFoundError: If student not found.
        """
        student = await self._get_student(student_id)
        return StudentResponse.model_validate(student)

    async def create_student(self, request: StudentCreateRequest) -> StudentResponse:
        """Create a new student.

        Args:
            request: Student creation data.

        Returns:
            Created student.

        Raises:
            DuplicateRecordError: If the email is already taken.
        """
        await self._ensure_email_available(request.email)

        student = Student(
            name=request.name,
            email=request.email,
            birthdate=request.birthdate,
            address=request.address,
        )
        self.db.add(student)
        await self._commit_or_conflict("email", request.email)
        await self.db.refresh(student)

        logger.info("Created student: id=%s, email=%s", student.id, student.email)

        return StudentResponse.model_validate(student)

    async def update_student(
        self,
        student_id: int,
        request: StudentUpdateRequest,
    ) -> StudentResponse:
        """Update an existing student.

        Raises:
            StudentNotFoundError: If student not found.
            DuplicateRecordError: If the new email belongs to another student.
        """
        student = await self._get_student(student_id)
        await self._ensure_email_available(request.email, exclude_id=student_id)

        student.name = request.name
        student.email = request.email
        student.birthdate = request.birthdate
        student.address = request.address

        await self._commit_or_conflict("email", request.email)
        await self.db.refresh(student)

        logger.info("Updated student: id=%s", student_id)

        return StudentResponse.model_validate(student)

    async def delete_student(self, student_id: int) -> None:
        """Delete a student and, through the cascade, its enrollments.

        Raises:
            StudentNotFoundError: If student not found.
        """
        student = await self._get_student(student_id)

        await self.db.delete(student)
        await self.db.commit()

        logger.info("Deleted student: id=%s", student_id)

    async def _get_student(self, student_id: int) -> Student:
        result = await self.db.execute(select(Student).where(Student.id == student_id))
        student = result.scalar_one_or_none()

        if not student:
            raise StudentNotFoundError(student_id)

        return student

    async def _ensure_email_available(self, email: str, exclude_id: int | None = None) -> None:
        query = select(Student.id).where(Student.email == email)
        if exclude_id is not None:
            query = query.where(Student.id != exclude_id)

        result = await self.db.execute(query)
        if result.scalar_one_or_none() is not None:
            raise DuplicateRecordError("email", email)

    async def _commit_or_conflict(self, field: str, value: str) -> None:
        # A concurrent writer can still take the value between check and commit
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateRecordError(field, value) from e

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read-side enrollment queries.

This module provides the EnrollmentQueryService class for:
- Listing the students enrolled / not enrolled in a course
- Listing the courses a student is enrolled / not enrolled in
- Building the composite partition views served to enrollment dialogs

Every call reads the store at call time; nothing is cached here.
For any anchor, enrolled and unenrolled lists are disjoint and together
cover every target record.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coursedesk.domains.errors import CourseNotFoundError, StudentNotFoundError
from coursedesk.infrastructure.database.models import Course, Enrollment, Student
from coursedesk.models.course import CourseResponse
from coursedesk.models.enrollment import (
    CoursePartition,
    CourseWithStudents,
    EnrolledCourse,
    EnrolledStudent,
    StudentPartition,
    StudentWithCourses,
)
from coursedesk.models.student import StudentBrief, StudentResponse
from coursedesk.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


class EnrollmentQueryService:
    """Service for enrollment reads.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize enrollment query service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def list_courses(self) -> list[CourseResponse]:
        """List every course, for the by-course enrollment view."""
        result = await self.db.execute(select(Course).order_by(Course.id))
        return [CourseResponse.model_validate(c) for c in result.scalars().all()]

    async def list_students(self) -> list[StudentResponse]:
        """List every student, for the by-student enrollment view."""
        result = await self.db.execute(select(Student).order_by(Student.id))
        return [StudentResponse.model_validate(s) for s in result.scalars().all()]

    async def list_enrolled_for_course(self, course_id: int) -> list[EnrolledStudent]:
        """List students currently enrolled in a course.

        Args:
            course_id: Course identifier.

        Returns:
            Enrolled students ordered by id, with enrollment timestamps.

        Raises:
            CourseNotFoundError: If course not found.
        """
        await self._get_course(course_id)
        return await self._enrolled_students(course_id)

    async def list_unenrolled_for_course(self, course_id: int) -> list[StudentBrief]:
        """List students not enrolled in a course.

        Only id, name and email are loaded.

        Raises:
            CourseNotFoundError: If course not found.
        """
        await self._get_course(course_id)
        return await self._unenrolled_students(course_id)

    async def list_enrolled_for_student(self, student_id: int) -> list[EnrolledCourse]:
        """List courses a student is enrolled in.

        Raises:
            StudentNotFoundError: If student not found.
        """
        await self._get_student(student_id)
        return await self._enrolled_courses(student_id)

    async def list_unenrolled_for_student(self, student_id: int) -> list[CourseResponse]:
        """List courses a student is not enrolled in.

        Raises:
            StudentNotFoundError: If student not found.
        """
        await self._get_student(student_id)
        return await self._unenrolled_courses(student_id)

    async def get_course_partition(self, course_id: int) -> CoursePartition:
        """Get the enrolled/unenrolled student split for a course.

        Raises:
            CourseNotFoundError: If course not found.
        """
        await self._get_course(course_id)
        return CoursePartition(
            enrolled=await self._enrolled_students(course_id),
            unenrolled=await self._unenrolled_students(course_id),
        )

    async def get_student_partition(self, student_id: int) -> StudentPartition:
        """Get a student with its courses plus the courses it is not in.

        Raises:
            StudentNotFoundError: If student not found.
        """
        student = await self._get_student(student_id)
        return StudentPartition(
            student=await self._student_with_courses(student),
            course=await self._unenrolled_courses(student_id),
        )

    async def get_student_with_courses(self, student_id: int) -> StudentWithCourses:
        """Get a student together with its enrolled courses.

        Raises:
            StudentNotFoundError: If student not found.
        """
        student = await self._get_student(student_id)
        return await self._student_with_courses(student)

    async def get_course_with_students(self, course_id: int) -> CourseWithStudents:
        """Get a course together with its enrolled students.

        Raises:
            CourseNotFoundError: If course not found.
        """
        course = await self._get_course(course_id)
        base = CourseResponse.model_validate(course)
        return CourseWithStudents(
            **base.model_dump(),
            students=await self._enrolled_students(course_id),
        )

    async def _student_with_courses(self, student: Student) -> StudentWithCourses:
        base = StudentResponse.model_validate(student)
        return StudentWithCourses(
            **base.model_dump(),
            courses=await self._enrolled_courses(student.id),
        )

    async def _enrolled_students(self, course_id: int) -> list[EnrolledStudent]:
        query = (
            select(Student, Enrollment.enrolled_at)
            .join(Enrollment, Enrollment.student_id == Student.id)
            .where(Enrollment.course_id == course_id)
            .order_by(Student.id)
        )
        result = await self.db.execute(query)

        return [
            EnrolledStudent(
                **StudentResponse.model_validate(student).model_dump(),
                enrolled_at=ensure_utc(enrolled_at),
            )
            for student, enrolled_at in result.all()
        ]

    async def _unenrolled_students(self, course_id: int) -> list[StudentBrief]:
        enrolled_ids = select(Enrollment.student_id).where(Enrollment.course_id == course_id)
        query = (
            select(Student.id, Student.name, Student.email)
            .where(Student.id.not_in(enrolled_ids))
            .order_by(Student.id)
        )
        result = await self.db.execute(query)

        return [
            StudentBrief(id=row.id, name=row.name, email=row.email)
            for row in result.all()
        ]

    async def _enrolled_courses(self, student_id: int) -> list[EnrolledCourse]:
        query = (
            select(Course, Enrollment.enrolled_at)
            .join(Enrollment, Enrollment.course_id == Course.id)
            .where(Enrollment.student_id == student_id)
            .order_by(Course.id)
        )
        result = await self.db.execute(query)

        return [
            EnrolledCourse(
                **CourseResponse.model_validate(course).model_dump(),
                enrolled_at=ensure_utc(enrolled_at),
            )
            for course, enrolled_at in result.all()
        ]

    async def _unenrolled_courses(self, student_id: int) -> list[CourseResponse]:
        enrolled_ids = select(Enrollment.course_id).where(Enrollment.student_id == student_id)
        query = select(Course).where(Course.id.not_in(enrolled_ids)).order_by(Course.id)
        result = await self.db.execute(query)

        return [CourseResponse.model_validate(c) for c in result.scalars().all()]

    async def _get_student(self, student_id: int) -> Student:
        """Get student by ID.

        Raises:
            StudentNotFoundError: If not found.
        """
        result = await self.db.execute(select(Student).where(Student.id == student_id))
        student = result.scalar_one_or_none()

        if not student:
            raise StudentNotFoundError(student_id)

        return student

    async def _get_course(self, course_id: int) -> Course:
        """Get course by ID.

        Raises:
            CourseNotFoundError: If not found.
        """
        result = await self.db.execute(select(Course).where(Course.id == course_id))
        course = result.scalar_one_or_none()

        if not course:
            raise CourseNotFoundError(course_id)

        return course

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for managing student/course enrollments.

This module provides the EnrollmentService class for:
- Bulk enrollment of a student into courses
- Bulk enrollment of students into a course
- Unenrolling a single (student, course) pair

Enroll validates the anchor and every target before writing anything and
then commits all new rows together. Pairs that are already enrolled are
skipped, so enrolling twice never creates a second row. A pair inserted by a
concurrent writer counts as already enrolled. Unenroll of a pair
that is not enrolled is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import delete, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coursedesk.domains.enrollment.query import EnrollmentQueryService
from coursedesk.domains.errors import (
    ConflictError,
    CourseNotFoundError,
    RecordValidationError,
    StudentNotFoundError,
)
from coursedesk.infrastructure.database.models import Course, Enrollment, Student
from coursedesk.models.enrollment import CourseWithStudents, StudentWithCourses
from coursedesk.utils.datetime import utc_now

logger = logging.getLogger(__name__)

# One retry after a pair conflict, with the existing pairs re-read
ATTACH_ATTEMPTS = 2


class EnrollmentValidationError(RecordValidationError):
    """Raised when an enroll request references missing records or is empty.

    Attributes:
        field: Request field the error belongs to.
        invalid_ids: IDs that do not reference an existing record.
    """

    def __init__(self, message: str, field: str, invalid_ids: Sequence[int] = ()) -> None:
        super().__init__(message)
        self.field = field
        self.invalid_ids = list(invalid_ids)


class EnrollmentConflictError(ConflictError):
    """Raised when concurrent writers keep colliding on the same pairs."""

    pass


def _unique_ids(ids: Iterable[int]) -> list[int]:
    """Drop repeated ids while keeping first-seen order."""
    return list(dict.fromkeys(ids))


class EnrollmentService:
    """Service for enrollment writes.

    Attributes:
        db: Async database session.
        queries: Read-side service used to return the updated anchor.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize enrollment service.

        Args:
            db: Async database session.
        """
        self.db = db
        self.queries = EnrollmentQueryService(db)

    async def enroll_student_in_courses(
        self,
        student_id: int,
        course_ids: Sequence[int],
    ) -> StudentWithCourses:
        """Enroll a student into one or more courses.

        Args:
            student_id: Student to enroll (the anchor).
            course_ids: Courses to enroll the student in.

        Returns:
            The student with its full set of enrolled courses.

        Raises:
            EnrollmentValidationError: If the list is empty, the student does
                not exist, or any course does not exist. Nothing is written.
        """
        targets = _unique_ids(course_ids)
        if not targets:
            raise EnrollmentValidationError(
                "At least one course must be selected", field="course"
            )

        if await self._missing_ids(Student, [student_id]):
            raise EnrollmentValidationError(
                f"Student {student_id} does not exist",
                field="selectedStudentId",
                invalid_ids=[student_id],
            )

        missing = await self._missing_ids(Course, targets)
        if missing:
            raise EnrollmentValidationError(
                f"Courses do not exist: {', '.join(str(i) for i in missing)}",
                field="course",
                invalid_ids=missing,
            )

        try:
            created = await self._attach(student_ids=[student_id], course_ids=targets)
        except EnrollmentConflictError as e:
            logger.warning(
                "Enrollment conflict treated as already enrolled: student=%s, error=%s",
                student_id,
                e,
            )
            created = 0

        logger.info(
            "Enrolled student in courses: student=%s, requested=%d, created=%d",
            student_id,
            len(targets),
            created,
        )

        return await self.queries.get_student_with_courses(student_id)

    async def enroll_students_in_course(
        self,
        course_id: int,
        student_ids: Sequence[int],
    ) -> CourseWithStudents:
        """Enroll one or more students into a course.

        Args:
            course_id: Course to enroll into (the anchor).
            student_ids: Students to enroll.

        Returns:
            The course with its full set of enrolled students.

        Raises:
            EnrollmentValidationError: If the list is empty, the course does
                not exist, or any student does not exist. Nothing is written.
        """
        targets = _unique_ids(student_ids)
        if not targets:
            raise EnrollmentValidationError(
                "At least one student must be selected", field="student"
            )

        if await self._missing_ids(Course, [course_id]):
            raise EnrollmentValidationError(
                f"Course {course_id} does not exist",
                field="selectedCourseId",
                invalid_ids=[course_id],
            )

        missing = await self._missing_ids(Student, targets)
        if missing:
            raise EnrollmentValidationError(
                f"Students do not exist: {', '.join(str(i) for i in missing)}",
                field="student",
                invalid_ids=missing,
            )

        try:
            created = await self._attach(student_ids=targets, course_ids=[course_id])
        except EnrollmentConflictError as e:
            logger.warning(
                "Enrollment conflict treated as already enrolled: course=%s, error=%s",
                course_id,
                e,
            )
            created = 0

        logger.info(
            "Enrolled students in course: course=%s, requested=%d, created=%d",
            course_id,
            len(targets),
            created,
        )

        return await self.queries.get_course_with_students(course_id)

    async def unenroll_course_from_student(
        self,
        student_id: int,
        course_id: int,
    ) -> StudentWithCourses:
        """Remove one course from a student's enrollments.

        Args:
            student_id: Student identifier (the anchor).
            course_id: Course to drop. Unknown or not-enrolled ids are a no-op.

        Returns:
            The student with its remaining courses.

        Raises:
            StudentNotFoundError: If student not found.
        """
        if await self._missing_ids(Student, [student_id]):
            raise StudentNotFoundError(student_id)

        removed = await self._detach(student_id, course_id)

        logger.info(
            "Unenrolled course from student: student=%s, course=%s, removed=%d",
            student_id,
            course_id,
            removed,
        )

        return await self.queries.get_student_with_courses(student_id)

    async def unenroll_student_from_course(
        self,
        course_id: int,
        student_id: int,
    ) -> CourseWithStudents:
        """Remove one student from a course.

        Args:
            course_id: Course identifier (the anchor).
            student_id: Student to drop. Unknown or not-enrolled ids are a no-op.

        Returns:
            The course with its remaining students.

        Raises:
            CourseNotFoundError: If course not found.
        """
        if await self._missing_ids(Course, [course_id]):
            raise CourseNotFoundError(course_id)

        removed = await self._detach(student_id, course_id)

        logger.info(
            "Unenrolled student from course: course=%s, student=%s, removed=%d",
            course_id,
            student_id,
            removed,
        )

        return await self.queries.get_course_with_students(course_id)

    async def _missing_ids(
        self,
        model: type[Student] | type[Course],
        ids: Sequence[int],
    ) -> list[int]:
        """Return the ids in `ids` that have no row in the model table."""
        result = await self.db.execute(select(model.id).where(model.id.in_(ids)))
        found = set(result.scalars().all())
        return [i for i in ids if i not in found]

    async def _existing_pairs(
        self,
        student_ids: Sequence[int],
        course_ids: Sequence[int],
    ) -> set[tuple[int, int]]:
        # One side is always a single anchor id, so this is exactly the pair set
        query = select(Enrollment.student_id, Enrollment.course_id).where(
            Enrollment.student_id.in_(student_ids),
            Enrollment.course_id.in_(course_ids),
        )
        result = await self.db.execute(query)
        return {(row.student_id, row.course_id) for row in result.all()}

    async def _attach(self, student_ids: Sequence[int], course_ids: Sequence[int]) -> int:
        """Insert the missing pairs in one transaction.

        Returns:
            Number of rows inserted.

        Raises:
            EnrollmentConflictError: If the insert still conflicts after
                re-reading the existing pairs.
        """
        for attempt in range(1, ATTACH_ATTEMPTS + 1):
            existing = await self._existing_pairs(student_ids, course_ids)
            now = utc_now()
            rows: list[dict[str, Any]] = [
                {
                    "student_id": sid,
                    "course_id": cid,
                    "enrolled_at": now,
                    "created_at": now,
                    "updated_at": now,
                }
                for sid in student_ids
                for cid in course_ids
                if (sid, cid) not in existing
            ]
            if not rows:
                return 0

            try:
                await self.db.execute(self._insert_statement(rows))
                await self.db.commit()
                return len(rows)
            except IntegrityError as e:
                await self.db.rollback()
                logger.warning(
                    "Enrollment insert conflicted (attempt %d/%d): %s",
                    attempt,
                    ATTACH_ATTEMPTS,
                    e.orig,
                )

        raise EnrollmentConflictError("Enrollment changed concurrently, please retry")

    async def _detach(self, student_id: int, course_id: int) -> int:
        result = await self.db.execute(
            delete(Enrollment).where(
                Enrollment.student_id == student_id,
                Enrollment.course_id == course_id,
            )
        )
        await self.db.commit()
        return result.rowcount or 0

    def _insert_statement(self, rows: list[dict[str, Any]]) -> Any:
        """Build an INSERT that ignores pairs another writer just added."""
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert(Enrollment).values(rows).on_conflict_do_nothing(
                index_elements=["student_id", "course_id"],
            )
        if dialect == "sqlite":
            return sqlite_insert(Enrollment).values(rows).on_conflict_do_nothing(
                index_elements=["student_id", "course_id"],
            )
        return insert(Enrollment).values(rows)

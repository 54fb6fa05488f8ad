# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the enrollment read service."""

from datetime import date, datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from coursedesk.domains.enrollment.query import EnrollmentQueryService
from coursedesk.domains.errors import CourseNotFoundError, StudentNotFoundError


def scalars_result(values):
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    return result


def rows_result(rows):
    result = MagicMock()
    result.all.return_value = rows
    return result


def scalar_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def make_student(student_id, name):
    return SimpleNamespace(
        id=student_id,
        name=name,
        email=f"{name.lower()}@example.com",
        birthdate=date(2002, 3, 14),
        address="Main Street",
    )


def make_course(course_id, code):
    return SimpleNamespace(
        id=course_id,
        code=code,
        name=f"Course {code}",
        description="An introductory course",
        units=3.0,
    )


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.execute = AsyncMock()
    return db


@pytest.fixture
def query_service(mock_db):
    return EnrollmentQueryService(db=mock_db)


class TestCoursePartition:
    """Tests for the by-course partition."""

    @pytest.mark.asyncio
    async def test_partition_splits_students(self, query_service, mock_db):
        enrolled_at = datetime(2025, 2, 1, tzinfo=timezone.utc)
        ada = make_student(1, "Ada")
        mock_db.execute.side_effect = [
            scalar_result(make_course(2, "CS102")),
            rows_result([(ada, enrolled_at)]),
            rows_result([SimpleNamespace(id=3, name="Grace", email="grace@example.com")]),
        ]

        partition = await query_service.get_course_partition(2)

        assert [s.id for s in partition.enrolled] == [1]
        assert partition.enrolled[0].enrolled_at == enrolled_at
        assert [s.id for s in partition.unenrolled] == [3]
        # unenrolled entries only carry id, name and email
        assert set(partition.unenrolled[0].model_dump()) == {"id", "name", "email"}

    @pytest.mark.asyncio
    async def test_missing_course_raises(self, query_service, mock_db):
        mock_db.execute.side_effect = [scalar_result(None)]

        with pytest.raises(CourseNotFoundError) as exc_info:
            await query_service.get_course_partition(404)

        assert exc_info.value.course_id == 404
        assert mock_db.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_list_enrolled_for_course(self, query_service, mock_db):
        mock_db.execute.side_effect = [
            scalar_result(make_course(2, "CS102")),
            rows_result([(make_student(1, "Ada"), None)]),
        ]

        students = await query_service.list_enrolled_for_course(2)

        assert [s.name for s in students] == ["Ada"]
        assert students[0].enrolled_at is None

    @pytest.mark.asyncio
    async def test_list_unenrolled_for_course_missing(self, query_service, mock_db):
        mock_db.execute.side_effect = [scalar_result(None)]

        with pytest.raises(CourseNotFoundError):
            await query_service.list_unenrolled_for_course(5)


class TestStudentPartition:
    """Tests for the by-student partition."""

    @pytest.mark.asyncio
    async def test_partition_nests_courses_under_student(self, query_service, mock_db):
        enrolled_at = datetime(2025, 2, 1, 8, 30)
        mock_db.execute.side_effect = [
            scalar_result(make_student(1, "Ada")),
            rows_result([(make_course(2, "CS102"), enrolled_at), (make_course(3, "CS103"), enrolled_at)]),
            scalars_result([make_course(4, "CS104")]),
        ]

        partition = await query_service.get_student_partition(1)

        assert partition.student.id == 1
        assert [c.id for c in partition.student.courses] == [2, 3]
        assert [c.id for c in partition.course] == [4]
        # naive timestamps from the store are read as UTC
        assert partition.student.courses[0].enrolled_at.tzinfo == timezone.utc

    @pytest.mark.asyncio
    async def test_missing_student_raises(self, query_service, mock_db):
        mock_db.execute.side_effect = [scalar_result(None)]

        with pytest.raises(StudentNotFoundError):
            await query_service.get_student_partition(404)

    @pytest.mark.asyncio
    async def test_list_unenrolled_for_student(self, query_service, mock_db):
        mock_db.execute.side_effect = [
            scalar_result(make_student(1, "Ada")),
            scalars_result([make_course(4, "CS104"), make_course(5, "CS105")]),
        ]

        courses = await query_service.list_unenrolled_for_student(1)

        assert [c.code for c in courses] == ["CS104", "CS105"]


class TestAnchorLists:
    @pytest.mark.asyncio
    async def test_list_courses(self, query_service, mock_db):
        mock_db.execute.return_value = scalars_result([make_course(1, "CS101"), make_course(2, "CS102")])

        courses = await query_service.list_courses()

        assert [c.id for c in courses] == [1, 2]

    @pytest.mark.asyncio
    async def test_list_students_empty(self, query_service, mock_db):
        mock_db.execute.return_value = scalars_result([])

        assert await query_service.list_students() == []

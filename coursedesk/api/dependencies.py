# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get service instances

Example:
    @router.get("/students")
    async def list_students(
        service: StudentService = Depends(get_student_service),
    ):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from coursedesk.core.config import get_settings
from coursedesk.domains.course import CourseService
from coursedesk.domains.enrollment import EnrollmentQueryService, EnrollmentService
from coursedesk.domains.student import StudentService
from coursedesk.infrastructure.database import (
    close_database,
    get_session,
    init_database,
)
from coursedesk.models.common import MAX_RECORD_ID

logger = logging.getLogger(__name__)

RecordIdPath = Annotated[int, Path(gt=0, le=MAX_RECORD_ID)]


async def init_db() -> None:
    """Initialize the database engine and session factory."""
    await init_database(get_settings())


async def close_db() -> None:
    """Dispose of the database engine."""
    await close_database()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for one request.

    Yields:
        AsyncSession, committed when the request succeeds.
    """
    async with get_session() as session:
        yield session


def get_student_service(db: AsyncSession = Depends(get_db)) -> StudentService:
    return StudentService(db=db)


def get_course_service(db: AsyncSession = Depends(get_db)) -> CourseService:
    return CourseService(db=db)


def get_enrollment_query_service(
    db: AsyncSession = Depends(get_db),
) -> EnrollmentQueryService:
    return EnrollmentQueryService(db=db)


def get_enrollment_service(db: AsyncSession = Depends(get_db)) -> EnrollmentService:
    return EnrollmentService(db=db)

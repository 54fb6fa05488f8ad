# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for CourseDesk.

This package provides SQLAlchemy async connections, the ORM models for
students, courses and enrollments, and the Alembic migration environment.

Example:
    from coursedesk.infrastructure.database import get_session

    async with get_session() as session:
        result = await session.execute(select(Course))
"""

from coursedesk.infrastructure.database.connection import (
    DatabaseError,
    build_engine,
    build_sessionmaker,
    close_database,
    create_schema,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)

__all__ = [
    "DatabaseError",
    "build_engine",
    "build_sessionmaker",
    "close_database",
    "create_schema",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
]

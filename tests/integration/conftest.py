# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for integration tests.

Every test gets a fresh in-memory SQLite database with the full schema.
"""

from datetime import date
from typing import AsyncGenerator

import httpx
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from coursedesk.api.app import create_app
from coursedesk.api.dependencies import close_db, init_db
from coursedesk.infrastructure.database import (
    build_engine,
    build_sessionmaker,
    create_schema,
    get_sessionmaker,
)
from coursedesk.infrastructure.database.models import Course, Student


async def seed(session: AsyncSession, students: int = 6, courses: int = 6) -> None:
    """Insert students 1..n and courses 1..m with predictable fields."""
    session.add_all(
        Student(
            id=i,
            name=f"Student {i}",
            email=f"student{i}@example.com",
            birthdate=date(2000, 1, i),
            address=f"{i} College Road",
        )
        for i in range(1, students + 1)
    )
    session.add_all(
        Course(
            id=i,
            code=f"CS10{i}",
            name=f"Course {i}",
            description=f"Description of course {i}",
            units=3,
        )
        for i in range(1, courses + 1)
    )
    await session.commit()


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite engine with the schema."""
    engine = build_engine("sqlite+aiosqlite://")
    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session with seeded students and courses."""
    async_session = build_sessionmaker(db_engine)

    async with async_session() as session:
        await seed(session)
        yield session


@pytest_asyncio.fixture(scope="function")
async def app() -> AsyncGenerator[FastAPI, None]:
    """Application wired to a fresh seeded in-memory database."""
    await init_db()

    async with get_sessionmaker()() as session:
        await seed(session)

    yield create_app()

    await close_db()


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client that talks to the ASGI app in-process."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student model."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coursedesk.infrastructure.database.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from coursedesk.infrastructure.database.models.course import Course
    from coursedesk.infrastructure.database.models.enrollment import Enrollment


class Student(Base, TimestampMixin):
    """A student record.

    Enrollment rows are removed by the database when the student is deleted
    (ON DELETE CASCADE), so the ORM side uses passive deletes.
    """

    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    birthdate: Mapped[date] = mapped_column(Date, nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False)

    enrollments: Mapped[list[Enrollment]] = relationship(
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    courses: Mapped[list[Course]] = relationship(
        secondary="enrollments",
        viewonly=True,
        order_by="Course.id",
    )

    def __repr__(self) -> str:
        return f"<Student id={self.id} email={self.email!r}>"

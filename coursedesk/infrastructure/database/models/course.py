# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coursedesk.infrastructure.database.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from coursedesk.infrastructure.database.models.enrollment import Enrollment
    from coursedesk.infrastructure.database.models.student import Student


class Course(Base, TimestampMixin):
    """A course record with unique code and name."""

    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("units >= 0", name="units_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    units: Mapped[float] = mapped_column(
        Numeric(6, 2, asdecimal=False),
        nullable=False,
        default=0,
    )

    enrollments: Mapped[list[Enrollment]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    students: Mapped[list[Student]] = relationship(
        secondary="enrollments",
        viewonly=True,
        order_by="Student.id",
    )

    def __repr__(self) -> str:
        return f"<Course id={self.id} code={self.code!r}>"

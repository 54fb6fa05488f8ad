# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student request and response models."""

from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class StudentCreateRequest(BaseModel):
    """Payload for creating a student."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., description="Unique email address")
    birthdate: date
    address: str = Field(..., min_length=1, max_length=255)


class StudentUpdateRequest(StudentCreateRequest):
    """Payload for updating a student. All fields are required."""


class StudentBrief(BaseModel):
    """Minimal student projection used for selection lists."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class StudentResponse(StudentBrief):
    """Full student record."""

    birthdate: date
    address: str

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course request and response models."""

from pydantic import BaseModel, ConfigDict, Field


class CourseCreateRequest(BaseModel):
    """Payload for creating a course."""

    code: str = Field(..., min_length=1, max_length=32, description="Unique course code")
    name: str = Field(..., min_length=1, max_length=255, description="Unique course name")
    description: str = Field(..., min_length=1)
    units: float = Field(..., ge=0, description="Credit units")


class CourseUpdateRequest(CourseCreateRequest):
    """Payload for updating a course. All fields are required."""


class CourseResponse(BaseModel):
    """Course record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    description: str
    units: float

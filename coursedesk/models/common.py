# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Common response envelopes shared by all endpoints.

Every successful response is wrapped as {"message": ..., "data": ...}
and every error as {"message": ..., "detail": ...}.
"""

from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")

# Primary keys are 32-bit INTEGER columns
MAX_RECORD_ID = 2**31 - 1

RecordId = Annotated[int, Field(gt=0, le=MAX_RECORD_ID)]


class ApiResponse(BaseModel, Generic[DataT]):
    """Success envelope."""

    message: str = Field(description="Human-readable outcome")
    data: DataT | None = Field(None, description="Response payload")


class ErrorResponse(BaseModel):
    """Error envelope."""

    message: str = Field(description="Human-readable error message")
    detail: str | None = Field(None, description="What triggered the error")

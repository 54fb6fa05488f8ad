# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the enrollment client against the in-process API."""

import copy
from typing import Any, AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from coursedesk.client import (
    PROVISIONAL,
    ByCourseEnrollmentState,
    ByStudentEnrollmentState,
    EnrollmentAPIClient,
    EnrollmentAPIError,
)

pytestmark = pytest.mark.integration


class SnapshotNotifier:
    """Notifier that captures the enrolled partition when a request starts."""

    def __init__(self) -> None:
        self.state: ByCourseEnrollmentState | ByStudentEnrollmentState | None = None
        self.in_flight: list[dict[str, Any]] | None = None
        self.events: list[tuple[str, str]] = []

    def loading(self, message: str) -> None:
        self.events.append(("loading", message))
        if self.state is not None:
            self.in_flight = copy.deepcopy(self.state.enrolled_partition)

    def success(self, message: str) -> None:
        self.events.append(("success", message))

    def error(self, message: str, detail: str | None = None) -> None:
        self.events.append(("error", message))


@pytest_asyncio.fixture
async def api(app: FastAPI) -> AsyncGenerator[EnrollmentAPIClient, None]:
    client = EnrollmentAPIClient(
        base_url="http://testserver",
        transport=httpx.ASGITransport(app=app),
    )
    async with client:
        yield client


class TestByCourseDialog:
    @pytest.mark.asyncio
    async def test_optimistic_enroll_then_refetch(self, api):
        notifier = SnapshotNotifier()
        state = ByCourseEnrollmentState(api, notifier=notifier)
        notifier.state = state

        assert await state.open_dialog(2) is True
        assert state.enrolled_partition == []

        state.toggle_target(5)
        state.toggle_target(6)
        result = await state.enroll_selected()

        assert result.ok
        assert [s["id"] for s in notifier.in_flight] == [5, 6]
        assert all(s[PROVISIONAL] for s in notifier.in_flight)

        assert [s["id"] for s in state.enrolled_partition] == [5, 6]
        assert all(PROVISIONAL not in s for s in state.enrolled_partition)
        assert 5 not in [s["id"] for s in state.unenrolled_partition]
        assert state.selected_target_ids == []
        assert notifier.events[-1] == ("success", "Student Enrolled Successfully!")

    @pytest.mark.asyncio
    async def test_failed_enroll_restores_partition(self, api):
        notifier = SnapshotNotifier()
        state = ByCourseEnrollmentState(api, notifier=notifier)
        notifier.state = state

        await state.open_dialog(2)
        state.toggle_target(1)
        await state.enroll_selected()
        before_enrolled = copy.deepcopy(state.enrolled_partition)
        before_unenrolled = copy.deepcopy(state.unenrolled_partition)

        state.toggle_target(5)
        state.toggle_target(9999)
        result = await state.enroll_selected()

        assert not result.ok
        assert isinstance(result.error, EnrollmentAPIError)
        assert result.error.status_code == 422
        assert [s["id"] for s in notifier.in_flight] == [1, 5, 9999]
        assert state.enrolled_partition == before_enrolled
        assert state.unenrolled_partition == before_unenrolled
        assert notifier.events[-1] == ("error", "Failed to enroll the student.")

    @pytest.mark.asyncio
    async def test_unenroll_removes_target(self, api):
        state = ByCourseEnrollmentState(api, notifier=SnapshotNotifier())
        await state.open_dialog(3)
        state.toggle_target(2)
        await state.enroll_selected()

        result = await state.unenroll(2)

        assert result.ok
        assert state.enrolled_partition == []
        assert 2 in [s["id"] for s in state.unenrolled_partition]


class TestByStudentDialog:
    @pytest.mark.asyncio
    async def test_enroll_courses(self, api):
        state = ByStudentEnrollmentState(api, notifier=SnapshotNotifier())

        assert await state.load_anchors() is True
        assert [s["id"] for s in state.anchors] == [1, 2, 3, 4, 5, 6]

        await state.open_dialog(1)
        state.toggle_target(2)
        state.toggle_target(3)
        result = await state.enroll_selected()

        assert result.ok
        assert [c["id"] for c in state.enrolled_partition] == [2, 3]
        assert [c["id"] for c in state.unenrolled_partition] == [1, 4, 5, 6]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the enrollment HTTP client."""

import json

import httpx
import pytest

from coursedesk.client.api_client import EnrollmentAPIClient, EnrollmentAPIError


def make_client(handler):
    return EnrollmentAPIClient(base_url="http://api.test", transport=httpx.MockTransport(handler))


class TestEnrollmentAPIClient:
    @pytest.mark.asyncio
    async def test_unwraps_success_envelope(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v1/course-with-student/2"
            return httpx.Response(
                200,
                json={"message": "Data fetched successfully!", "data": {"enrolled": [], "unenrolled": []}},
            )

        async with make_client(handler) as api:
            data = await api.get_course_enrollment(2)

        assert data == {"enrolled": [], "unenrolled": []}

    @pytest.mark.asyncio
    async def test_enroll_sends_wire_names(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"message": "ok", "data": {"id": 1, "courses": []}})

        async with make_client(handler) as api:
            await api.enroll_courses(1, [2, 3])

        assert seen["method"] == "POST"
        assert seen["body"] == {"selectedStudentId": 1, "course": [2, 3]}

    @pytest.mark.asyncio
    async def test_unenroll_path(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "DELETE"
            assert request.url.path == "/api/v1/course-with-student/2/1"
            return httpx.Response(200, json={"message": "ok", "data": {"id": 2, "students": []}})

        async with make_client(handler) as api:
            data = await api.unenroll_student(2, 1)

        assert data["students"] == []

    @pytest.mark.asyncio
    async def test_error_envelope_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                422,
                json={"message": "Unable to enroll student.", "detail": "Students do not exist: 9999"},
            )

        async with make_client(handler) as api:
            with pytest.raises(EnrollmentAPIError) as exc_info:
                await api.enroll_students(2, [9999])

        error = exc_info.value
        assert error.status_code == 422
        assert error.message == "Unable to enroll student."
        assert error.detail == "Students do not exist: 9999"
        assert str(error) == "Unable to enroll student.: Students do not exist: 9999"

    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        async with make_client(handler) as api:
            with pytest.raises(EnrollmentAPIError) as exc_info:
                await api.list_courses()

        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "List courses failed"
        assert exc_info.value.detail == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_non_json_success_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        async with make_client(handler) as api:
            with pytest.raises(EnrollmentAPIError) as exc_info:
                await api.get_course_enrollment(2)

        assert exc_info.value.status_code == 200
        assert exc_info.value.message == "Fetch course enrollment failed: invalid response"
        assert exc_info.value.detail == "<html>maintenance</html>"

    @pytest.mark.asyncio
    async def test_success_body_without_envelope(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, json=[1, 2])

        async with make_client(handler) as api:
            with pytest.raises(EnrollmentAPIError) as exc_info:
                await api.enroll_students(2, [1])

        assert exc_info.value.status_code == 201

    @pytest.mark.asyncio
    async def test_transport_failure_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as api:
            with pytest.raises(EnrollmentAPIError) as exc_info:
                await api.list_students()

        assert exc_info.value.status_code is None
        assert "connection refused" in exc_info.value.detail

    def test_base_url_from_settings(self):
        api = EnrollmentAPIClient()

        assert api.base_url == "http://testserver"

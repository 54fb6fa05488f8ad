# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP client for the CourseDesk enrollment API.

Wraps the /api/v1/course-with-student and /api/v1/student-with-course
endpoints. Responses are unwrapped from the {"message", "data"} envelope;
error envelopes and transport failures raise EnrollmentAPIError.

Example:
    async with EnrollmentAPIClient() as api:
        partition = await api.get_course_enrollment(2)
        await api.enroll_students(2, [1, 4])
"""

import logging
from typing import Any

import httpx

from coursedesk.core.config import get_settings

logger = logging.getLogger(__name__)


class EnrollmentAPIError(Exception):
    """Raised when the API answers with an error or cannot be reached.

    Attributes:
        message: Message from the error envelope, or a transport summary.
        status_code: HTTP status, None for transport failures.
        detail: Detail from the error envelope, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class EnrollmentAPIClient:
    """Async client for the enrollment endpoints.

    Attributes:
        base_url: API base URL, e.g. http://localhost:8000.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API base URL. Defaults to CLIENT_BASE_URL.
            timeout: Request timeout in seconds. Defaults to CLIENT_TIMEOUT.
            transport: Optional httpx transport (used to mount an ASGI app
                or a mock in tests).
        """
        settings = get_settings().client
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "EnrollmentAPIClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the underlying HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    def _handle_response(self, response: httpx.Response, operation: str) -> Any:
        """Unwrap a success envelope or raise for an error one."""
        if response.is_success:
            try:
                return response.json().get("data")
            except (ValueError, AttributeError) as e:
                logger.warning(
                    "Malformed API response: operation=%s, status=%s",
                    operation,
                    response.status_code,
                )
                raise EnrollmentAPIError(
                    f"{operation} failed: invalid response",
                    status_code=response.status_code,
                    detail=response.text or None,
                ) from e

        message = f"{operation} failed"
        detail: str | None = None
        try:
            body = response.json()
            message = body.get("message") or message
            detail = body.get("detail")
        except ValueError:
            detail = response.text or None

        logger.warning(
            "API error: operation=%s, status=%s, message=%s",
            operation,
            response.status_code,
            message,
        )
        raise EnrollmentAPIError(message, status_code=response.status_code, detail=detail)

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._get_client().request(method, path, json=json)
        except httpx.RequestError as e:
            logger.error("Connection error to CourseDesk API: %s", e)
            raise EnrollmentAPIError(
                f"{operation} failed: API not reachable",
                detail=str(e),
            ) from e

        return self._handle_response(response, operation)

    # =========================================================================
    # By-course endpoints
    # =========================================================================

    async def list_courses(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/api/v1/course-with-student", "List courses")

    async def get_course_enrollment(self, course_id: int) -> dict[str, Any]:
        """Get {"enrolled": [...], "unenrolled": [...]} for a course."""
        return await self._request(
            "GET",
            f"/api/v1/course-with-student/{course_id}",
            "Fetch course enrollment",
        )

    async def enroll_students(self, course_id: int, student_ids: list[int]) -> dict[str, Any]:
        """Enroll students into a course; returns the course with its students."""
        return await self._request(
            "POST",
            "/api/v1/course-with-student",
            "Enroll students",
            json={"selectedCourseId": course_id, "student": student_ids},
        )

    async def unenroll_student(self, course_id: int, student_id: int) -> dict[str, Any]:
        return await self._request(
            "DELETE",
            f"/api/v1/course-with-student/{course_id}/{student_id}",
            "Unenroll student",
        )

    # =========================================================================
    # By-student endpoints
    # =========================================================================

    async def list_students(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/api/v1/student-with-course", "List students")

    async def get_student_enrollment(self, student_id: int) -> dict[str, Any]:
        """Get {"student": {..., "courses": [...]}, "course": [...]} for a student."""
        return await self._request(
            "GET",
            f"/api/v1/student-with-course/{student_id}",
            "Fetch student enrollment",
        )

    async def enroll_courses(self, student_id: int, course_ids: list[int]) -> dict[str, Any]:
        """Enroll a student into courses; returns the student with its courses."""
        return await self._request(
            "POST",
            "/api/v1/student-with-course",
            "Enroll courses",
            json={"selectedStudentId": student_id, "course": course_ids},
        )

    async def unenroll_course(self, student_id: int, course_id: int) -> dict[str, Any]:
        return await self._request(
            "DELETE",
            f"/api/v1/student-with-course/{student_id}/{course_id}",
            "Unenroll course",
        )

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Client-side enrollment state managers.

One manager per enrollment context:
- ByCourseEnrollmentState: anchor is a course, targets are students
- ByStudentEnrollmentState: anchor is a student, targets are courses

Each manager owns its own QueryCache; the two contexts never share cached
partitions even though they describe the same enrollments.

Mutations follow snapshot / optimistic edit / request:
- Ok: the anchor's cache entry is invalidated and refetched
- Err: the snapshot is restored exactly and the notifier is told

Every partition fetch is tagged with the anchor it was issued for. A
response that arrives after the active anchor changed, or after a newer
fetch was issued, is dropped. Starting a mutation also outdates every fetch
in flight, and a fetch for the anchor being mutated is not applied until the
mutation settles, so provisional entries stay visible until the server
answers.

Example:
    async with EnrollmentAPIClient() as api:
        state = ByCourseEnrollmentState(api)
        await state.open_dialog(2)
        state.toggle_target(5)
        state.toggle_target(6)
        result = await state.enroll_selected()
        if not result.ok:
            print(result.error)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

from coursedesk.client.api_client import EnrollmentAPIClient, EnrollmentAPIError
from coursedesk.client.cache import QueryCache
from coursedesk.client.notifications import LoggingNotifier, Notifier
from coursedesk.client.pagination import PaginatedSearch
from coursedesk.client.result import Err, Ok, Result
from coursedesk.utils.logging import get_logger

logger = get_logger(__name__)

PROVISIONAL = "provisional"

Partition = dict[str, Any]


class EnrollmentStateError(Exception):
    """Raised (as an Err payload) when a mutation cannot be started."""

    pass


class MutationInProgressError(EnrollmentStateError):
    """A mutation is already in flight for this context."""

    def __init__(self) -> None:
        super().__init__("Another enrollment change is still in progress")


class NoAnchorSelectedError(EnrollmentStateError):
    """No student or course is selected for the dialog."""

    def __init__(self) -> None:
        super().__init__("No anchor is selected")


class EmptySelectionError(EnrollmentStateError):
    """Enroll was triggered without any selected targets."""

    def __init__(self) -> None:
        super().__init__("Nothing is selected to enroll")


class EnrollmentStateManager(ABC):
    """Shared state machine for one enrollment dialog context.

    Attributes:
        api: Enrollment API client.
        cache: Query cache owned by this manager.
        notifier: Receives loading/success/error messages.
        active_anchor_id: Student or course the dialog is showing.
        is_dialog_open: Whether the enrollment dialog is open.
        anchor_search: Search and pagination over the loaded anchor list.
    """

    #: Cache key prefix of this context, e.g. "course-with-student".
    cache_prefix: str = ""
    #: Noun used in notifications for an anchor, e.g. "course".
    anchor_label: str = ""
    #: Noun used in notifications for a target, e.g. "student".
    target_label: str = ""

    def __init__(
        self,
        api: EnrollmentAPIClient,
        notifier: Notifier | None = None,
        cache: QueryCache | None = None,
    ) -> None:
        self.api = api
        self.cache = cache if cache is not None else QueryCache()
        self.notifier: Notifier = notifier if notifier is not None else LoggingNotifier()
        self.active_anchor_id: int | None = None
        self.is_dialog_open = False
        # dict keeps insertion order, used as an ordered set
        self._selected: dict[int, None] = {}
        self._fetch_seq = 0
        self._mutation_pending = False
        self._mutating_anchor_id: int | None = None
        self.anchor_search = PaginatedSearch()

    # =========================================================================
    # Context-specific hooks
    # =========================================================================

    @abstractmethod
    async def _fetch_anchors(self) -> list[dict[str, Any]]:
        """Fetch every anchor record."""

    @abstractmethod
    async def _fetch_partition(self, anchor_id: int) -> Partition:
        """Fetch {"enrolled": [...], "unenrolled": [...]} for an anchor."""

    @abstractmethod
    async def _enroll(self, anchor_id: int, target_ids: list[int]) -> dict[str, Any]:
        """Send the enroll request; returns the updated anchor."""

    @abstractmethod
    async def _unenroll(self, anchor_id: int, target_id: int) -> dict[str, Any]:
        """Send the unenroll request; returns the updated anchor."""

    # =========================================================================
    # State
    # =========================================================================

    @property
    def anchors_key(self) -> tuple[str, str]:
        return (self.cache_prefix, "list")

    def partition_key(self, anchor_id: int) -> tuple[str, int]:
        return (self.cache_prefix, anchor_id)

    @property
    def anchors(self) -> list[dict[str, Any]]:
        return self.cache.get(self.anchors_key, [])

    @property
    def selected_target_ids(self) -> list[int]:
        return list(self._selected)

    @property
    def is_mutating(self) -> bool:
        return self._mutation_pending

    def _active_partition(self) -> Partition | None:
        if self.active_anchor_id is None:
            return None
        return self.cache.get(self.partition_key(self.active_anchor_id))

    @property
    def enrolled_partition(self) -> list[dict[str, Any]] | None:
        """Targets enrolled with the active anchor, None until fetched."""
        partition = self._active_partition()
        return None if partition is None else partition["enrolled"]

    @property
    def unenrolled_partition(self) -> list[dict[str, Any]] | None:
        """Targets not enrolled with the active anchor, None until fetched."""
        partition = self._active_partition()
        return None if partition is None else partition["unenrolled"]

    # =========================================================================
    # Dialog and selection
    # =========================================================================

    async def load_anchors(self) -> bool:
        """Fetch the anchor list into the cache and the anchor search.

        Returns:
            True if the list was loaded.
        """
        try:
            anchors = await self._fetch_anchors()
        except EnrollmentAPIError as e:
            self.notifier.error(f"Error Fetching {self.anchor_label.title()}s", str(e))
            return False

        self.cache.set(self.anchors_key, anchors)
        self.anchor_search.set_data(anchors)
        return True

    async def open_dialog(self, anchor_id: int) -> bool:
        """Open the dialog for an anchor and fetch its partitions.

        Returns:
            True if the partitions were fetched and applied.
        """
        self._set_anchor(anchor_id)
        self.is_dialog_open = True
        logger.debug("dialog_opened", context=self.cache_prefix, anchor_id=anchor_id)
        return await self.refresh()

    def close_dialog(self) -> None:
        self.active_anchor_id = None
        self._selected.clear()
        self.is_dialog_open = False

    async def select_anchor(self, anchor_id: int) -> bool:
        """Switch the active anchor; fetch only while the dialog is open."""
        self._set_anchor(anchor_id)
        if not self.is_dialog_open:
            return False
        return await self.refresh()

    def toggle_target(self, target_id: int) -> bool:
        """Add or remove a target from the selection.

        Returns:
            True if the target is selected afterwards.
        """
        if target_id in self._selected:
            del self._selected[target_id]
            return False
        self._selected[target_id] = None
        return True

    def clear_selection(self) -> None:
        self._selected.clear()

    def _set_anchor(self, anchor_id: int) -> None:
        self.active_anchor_id = anchor_id
        self._selected.clear()
        self.cache.invalidate(self.partition_key(anchor_id))

    async def refresh(self) -> bool:
        """Fetch partitions for the active anchor.

        Returns:
            True if the response was applied, False if there is no active
            anchor, the request failed, the response went stale, or a
            mutation for the anchor is still pending.
        """
        anchor_id = self.active_anchor_id
        if anchor_id is None:
            return False

        self._fetch_seq += 1
        seq = self._fetch_seq

        try:
            partition = await self._fetch_partition(anchor_id)
        except EnrollmentAPIError as e:
            if self._is_current(anchor_id, seq):
                self.notifier.error(f"Error Fetching {self.target_label}s", str(e))
            return False

        if not self._is_current(anchor_id, seq):
            logger.info(
                "stale_response_dropped",
                context=self.cache_prefix,
                anchor_id=anchor_id,
                active_anchor_id=self.active_anchor_id,
            )
            return False

        if self._mutation_pending and anchor_id == self._mutating_anchor_id:
            logger.info(
                "fetch_dropped_during_mutation",
                context=self.cache_prefix,
                anchor_id=anchor_id,
            )
            return False

        self.cache.set(self.partition_key(anchor_id), partition)
        return True

    def _is_current(self, anchor_id: int, seq: int) -> bool:
        return anchor_id == self.active_anchor_id and seq == self._fetch_seq

    # =========================================================================
    # Mutations
    # =========================================================================

    async def enroll_selected(self) -> Result[dict[str, Any], Exception]:
        """Enroll every selected target with the active anchor.

        Selected targets show up in the enrolled partition right away,
        flagged ``provisional``, until the server answers.

        Returns:
            Ok(updated anchor) or Err(error). State errors (no anchor,
            empty selection, mutation already running) leave the cache
            untouched.
        """
        if self._mutation_pending:
            return Err(MutationInProgressError())
        anchor_id = self.active_anchor_id
        if anchor_id is None:
            return Err(NoAnchorSelectedError())
        target_ids = self.selected_target_ids
        if not target_ids:
            return Err(EmptySelectionError())

        key = self.partition_key(anchor_id)

        async def send() -> dict[str, Any]:
            return await self._enroll(anchor_id, target_ids)

        result = await self._mutate(
            key,
            apply=lambda p: self._optimistic_enroll(p, target_ids),
            send=send,
            loading="Enrolling...",
            success=f"{self.target_label.title()} Enrolled Successfully!",
            failure=f"Failed to enroll the {self.target_label}.",
        )
        if result.ok and self.active_anchor_id == anchor_id:
            self._selected.clear()
        if result.ok:
            await self._after_success(anchor_id)
        return result

    async def unenroll(self, target_id: int) -> Result[dict[str, Any], Exception]:
        """Remove one target from the active anchor.

        The target disappears from the enrolled partition right away.

        Returns:
            Ok(updated anchor) or Err(error).
        """
        if self._mutation_pending:
            return Err(MutationInProgressError())
        anchor_id = self.active_anchor_id
        if anchor_id is None:
            return Err(NoAnchorSelectedError())

        key = self.partition_key(anchor_id)

        async def send() -> dict[str, Any]:
            return await self._unenroll(anchor_id, target_id)

        result = await self._mutate(
            key,
            apply=lambda p: self._optimistic_unenroll(p, target_id),
            send=send,
            loading="Unenrolling...",
            success=f"{self.target_label.title()} Unenrolled Successfully!",
            failure=f"Failed to unenroll the {self.target_label}",
        )
        if result.ok:
            await self._after_success(anchor_id)
        return result

    async def _mutate(
        self,
        key: tuple[str, int],
        apply: Callable[[Partition], Partition],
        send: Callable[[], Awaitable[dict[str, Any]]],
        loading: str,
        success: str,
        failure: str,
    ) -> Result[dict[str, Any], Exception]:
        """Run one mutation: snapshot, optimistic edit, request, settle."""
        self._mutation_pending = True
        self._mutating_anchor_id = key[1]
        # Fetches issued before this point must not overwrite the optimistic edit
        self._fetch_seq += 1
        try:
            snapshot = self.cache.snapshot(key)
            partition = self.cache.get(key)
            if partition is not None:
                self.cache.set(key, apply(partition))

            self.notifier.loading(loading)
            try:
                value = await send()
            except EnrollmentAPIError as e:
                self.cache.restore(snapshot)
                self.notifier.error(failure, e.message if e.detail is None else e.detail)
                logger.warning("mutation_failed", key=key, status=e.status_code, error=str(e))
                return Err(e)
            except Exception:
                self.cache.restore(snapshot)
                self.notifier.error(failure)
                raise

            self.notifier.success(success)
            return Ok(value)
        finally:
            self._mutation_pending = False
            self._mutating_anchor_id = None

    async def _after_success(self, anchor_id: int) -> None:
        # The anchor list carries no enrollment data, so only the partition goes
        self.cache.invalidate(self.partition_key(anchor_id))
        if self.is_dialog_open and self.active_anchor_id == anchor_id:
            await self.refresh()

    @staticmethod
    def _optimistic_enroll(partition: Partition, target_ids: list[int]) -> Partition:
        wanted = set(target_ids)
        by_id = {t["id"]: t for t in partition["unenrolled"]}
        enrolled_ids = {t["id"] for t in partition["enrolled"]}

        placeholders = [
            {**by_id.get(tid, {"id": tid}), PROVISIONAL: True}
            for tid in target_ids
            if tid not in enrolled_ids
        ]
        return {
            **partition,
            "enrolled": [*partition["enrolled"], *placeholders],
            "unenrolled": [t for t in partition["unenrolled"] if t["id"] not in wanted],
        }

    @staticmethod
    def _optimistic_unenroll(partition: Partition, target_id: int) -> Partition:
        return {
            **partition,
            "enrolled": [t for t in partition["enrolled"] if t["id"] != target_id],
        }


class ByCourseEnrollmentState(EnrollmentStateManager):
    """Enrollment dialog for a course: enroll/unenroll students."""

    cache_prefix = "course-with-student"
    anchor_label = "course"
    target_label = "student"

    async def _fetch_anchors(self) -> list[dict[str, Any]]:
        return await self.api.list_courses()

    async def _fetch_partition(self, anchor_id: int) -> Partition:
        data = await self.api.get_course_enrollment(anchor_id)
        return {"enrolled": data["enrolled"], "unenrolled": data["unenrolled"]}

    async def _enroll(self, anchor_id: int, target_ids: list[int]) -> dict[str, Any]:
        return await self.api.enroll_students(anchor_id, target_ids)

    async def _unenroll(self, anchor_id: int, target_id: int) -> dict[str, Any]:
        return await self.api.unenroll_student(anchor_id, target_id)


class ByStudentEnrollmentState(EnrollmentStateManager):
    """Enrollment dialog for a student: enroll/unenroll courses.

    The student record itself (without its course list) is kept in the
    partition under "anchor".
    """

    cache_prefix = "student-with-course"
    anchor_label = "student"
    target_label = "course"

    async def _fetch_anchors(self) -> list[dict[str, Any]]:
        return await self.api.list_students()

    async def _fetch_partition(self, anchor_id: int) -> Partition:
        data = await self.api.get_student_enrollment(anchor_id)
        student = dict(data["student"])
        courses = student.pop("courses", [])
        return {"anchor": student, "enrolled": courses, "unenrolled": data["course"]}

    async def _enroll(self, anchor_id: int, target_ids: list[int]) -> dict[str, Any]:
        return await self.api.enroll_courses(anchor_id, target_ids)

    async def _unenroll(self, anchor_id: int, target_id: int) -> dict[str, Any]:
        return await self.api.unenroll_course(anchor_id, target_id)

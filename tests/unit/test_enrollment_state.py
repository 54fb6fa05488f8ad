# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the client enrollment state managers."""

import asyncio
import copy

import pytest

from coursedesk.client.api_client import EnrollmentAPIError
from coursedesk.client.state import (
    PROVISIONAL,
    ByCourseEnrollmentState,
    ByStudentEnrollmentState,
    EmptySelectionError,
    MutationInProgressError,
    NoAnchorSelectedError,
)


class RecordingNotifier:
    def __init__(self):
        self.events = []

    def loading(self, message):
        self.events.append(("loading", message))

    def success(self, message):
        self.events.append(("success", message))

    def error(self, message, detail=None):
        self.events.append(("error", message, detail))


def student(student_id):
    return {"id": student_id, "name": f"Student {student_id}", "email": f"s{student_id}@example.com"}


class FakeCourseAPI:
    """In-memory stand-in for the by-course endpoints."""

    def __init__(self):
        self.enrolled = {2: [1]}
        self.all_students = [1, 4, 5, 6]
        self.fetch_gate = None
        self.mutation_gate = None
        self.fail_with = None
        self.calls = []

    async def list_courses(self):
        return [{"id": 2, "code": "CS102"}]

    async def get_course_enrollment(self, course_id):
        self.calls.append(("get", course_id))
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        ids = self.enrolled.get(course_id, [])
        return {
            "enrolled": [student(i) for i in ids],
            "unenrolled": [student(i) for i in self.all_students if i not in ids],
        }

    async def enroll_students(self, course_id, student_ids):
        self.calls.append(("enroll", course_id, list(student_ids)))
        if self.mutation_gate is not None:
            await self.mutation_gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        ids = self.enrolled.setdefault(course_id, [])
        ids.extend(i for i in student_ids if i not in ids)
        return {"id": course_id, "students": [student(i) for i in ids]}

    async def unenroll_student(self, course_id, student_id):
        self.calls.append(("unenroll", course_id, student_id))
        if self.mutation_gate is not None:
            await self.mutation_gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        self.enrolled[course_id] = [i for i in self.enrolled.get(course_id, []) if i != student_id]
        return {"id": course_id, "students": [student(i) for i in self.enrolled[course_id]]}


@pytest.fixture
def api():
    return FakeCourseAPI()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def state(api, notifier):
    return ByCourseEnrollmentState(api, notifier=notifier)


class TestDialog:
    @pytest.mark.asyncio
    async def test_open_dialog_fetches_partitions(self, state):
        applied = await state.open_dialog(2)

        assert applied is True
        assert state.is_dialog_open is True
        assert [s["id"] for s in state.enrolled_partition] == [1]
        assert [s["id"] for s in state.unenrolled_partition] == [4, 5, 6]

    @pytest.mark.asyncio
    async def test_select_anchor_while_closed_does_not_fetch(self, state, api):
        applied = await state.select_anchor(2)

        assert applied is False
        assert api.calls == []
        assert state.enrolled_partition is None

    @pytest.mark.asyncio
    async def test_close_dialog_clears_state(self, state):
        await state.open_dialog(2)
        state.toggle_target(4)

        state.close_dialog()

        assert state.active_anchor_id is None
        assert state.selected_target_ids == []
        assert state.is_dialog_open is False

    def test_toggle_target_keeps_order(self, state):
        assert state.toggle_target(6) is True
        assert state.toggle_target(4) is True
        assert state.toggle_target(6) is False
        state.toggle_target(5)

        assert state.selected_target_ids == [4, 5]

    @pytest.mark.asyncio
    async def test_load_anchors(self, state):
        assert await state.load_anchors() is True
        assert state.anchors == [{"id": 2, "code": "CS102"}]

    @pytest.mark.asyncio
    async def test_loaded_anchors_are_searchable(self, state):
        await state.load_anchors()

        assert state.anchor_search.page_items == [{"id": 2, "code": "CS102"}]

        state.anchor_search.set_search("cs1")
        assert state.anchor_search.total == 1

        state.anchor_search.set_search("math")
        assert state.anchor_search.page_items == []


class TestStaleResponses:
    @pytest.mark.asyncio
    async def test_response_for_previous_anchor_is_dropped(self, state, api):
        api.fetch_gate = asyncio.Event()
        await state.select_anchor(2)
        state.is_dialog_open = True

        slow = asyncio.create_task(state.refresh())
        await asyncio.sleep(0)

        # user switches to course 3 before course 2 answers
        state.active_anchor_id = 3
        api.fetch_gate.set()

        assert await slow is False
        assert state.cache.get(state.partition_key(2)) is None
        assert state.enrolled_partition is None


class TestEnrollSelected:
    @pytest.mark.asyncio
    async def test_provisional_entries_then_refetch(self, state, api, notifier):
        await state.open_dialog(2)
        state.toggle_target(5)
        state.toggle_target(6)

        api.mutation_gate = asyncio.Event()
        task = asyncio.create_task(state.enroll_selected())
        await asyncio.sleep(0)

        # optimistic view before the server answers
        enrolled = state.enrolled_partition
        assert [s["id"] for s in enrolled] == [1, 5, 6]
        assert [s.get("provisional", False) for s in enrolled] == [False, True, True]
        assert [s["id"] for s in state.unenrolled_partition] == [4]
        assert enrolled[1]["name"] == "Student 5"

        api.mutation_gate.set()
        result = await task

        assert result.ok is True
        assert state.selected_target_ids == []
        assert [s["id"] for s in state.enrolled_partition] == [1, 5, 6]
        assert not any(s.get("provisional") for s in state.enrolled_partition)
        assert ("success", "Student Enrolled Successfully!") in notifier.events

    @pytest.mark.asyncio
    async def test_error_restores_previous_partition_exactly(self, state, api, notifier):
        await state.open_dialog(2)
        before = state.cache.snapshot(state.partition_key(2)).entries[state.partition_key(2)]
        state.toggle_target(5)
        state.toggle_target(6)
        api.fail_with = EnrollmentAPIError("Unable to enroll student.", status_code=422, detail="boom")

        result = await state.enroll_selected()

        assert result.ok is False
        assert result.error is api.fail_with
        assert state.cache.get(state.partition_key(2)) == before
        assert state.selected_target_ids == [5, 6]
        assert notifier.events[-1] == ("error", "Failed to enroll the student.", "boom")

    @pytest.mark.asyncio
    async def test_second_mutation_rejected_while_pending(self, state, api):
        await state.open_dialog(2)
        state.toggle_target(5)
        api.mutation_gate = asyncio.Event()

        first = asyncio.create_task(state.enroll_selected())
        await asyncio.sleep(0)
        cached = state.cache.get(state.partition_key(2))

        second = await state.unenroll(1)

        assert second.ok is False
        assert isinstance(second.error, MutationInProgressError)
        assert state.cache.get(state.partition_key(2)) is cached

        api.mutation_gate.set()
        assert (await first).ok is True

    @pytest.mark.asyncio
    async def test_requires_anchor_and_selection(self, state):
        no_anchor = await state.enroll_selected()
        assert isinstance(no_anchor.error, NoAnchorSelectedError)

        await state.open_dialog(2)
        empty = await state.enroll_selected()
        assert isinstance(empty.error, EmptySelectionError)


class TestMutationRaces:
    @pytest.mark.asyncio
    async def test_fetch_in_flight_does_not_replace_provisional_entries(self, state, api):
        await state.open_dialog(2)
        api.fetch_gate = asyncio.Event()
        slow = asyncio.create_task(state.refresh())
        await asyncio.sleep(0)

        state.toggle_target(5)
        state.toggle_target(6)
        api.mutation_gate = asyncio.Event()
        task = asyncio.create_task(state.enroll_selected())
        await asyncio.sleep(0)

        # the fetch issued before the enroll answers while it is pending
        api.fetch_gate.set()
        assert await slow is False

        enrolled = state.enrolled_partition
        assert [(s["id"], s.get(PROVISIONAL, False)) for s in enrolled] == [
            (1, False),
            (5, True),
            (6, True),
        ]

        api.mutation_gate.set()
        result = await task

        assert result.ok is True
        assert [s["id"] for s in state.enrolled_partition] == [1, 5, 6]
        assert not any(s.get(PROVISIONAL) for s in state.enrolled_partition)

    @pytest.mark.asyncio
    async def test_refresh_of_mutating_anchor_waits_for_result(self, state, api):
        await state.open_dialog(2)
        state.toggle_target(5)
        api.mutation_gate = asyncio.Event()
        task = asyncio.create_task(state.enroll_selected())
        await asyncio.sleep(0)

        assert await state.refresh() is False
        assert [s["id"] for s in state.enrolled_partition] == [1, 5]
        assert state.enrolled_partition[1][PROVISIONAL] is True

        api.mutation_gate.set()
        assert (await task).ok is True
        assert state.enrolled_partition[1] == student(5)

    @pytest.mark.asyncio
    async def test_anchor_switch_during_successful_enroll(self, state, api):
        await state.open_dialog(2)
        state.toggle_target(5)
        api.mutation_gate = asyncio.Event()
        task = asyncio.create_task(state.enroll_selected())
        await asyncio.sleep(0)

        assert await state.select_anchor(3) is True
        state.toggle_target(4)
        calls = list(api.calls)

        api.mutation_gate.set()
        result = await task

        assert result.ok is True
        assert state.active_anchor_id == 3
        assert state.selected_target_ids == [4]
        # course 3 is neither refetched nor touched
        assert api.calls == calls
        assert state.enrolled_partition == []
        assert state.cache.get(state.partition_key(2)) is None

    @pytest.mark.asyncio
    async def test_anchor_switch_during_failed_enroll(self, state, api, notifier):
        await state.open_dialog(2)
        before = copy.deepcopy(state.cache.get(state.partition_key(2)))
        state.toggle_target(5)
        api.fail_with = EnrollmentAPIError("Unable to enroll student.", status_code=422)
        api.mutation_gate = asyncio.Event()
        task = asyncio.create_task(state.enroll_selected())
        await asyncio.sleep(0)

        await state.select_anchor(3)
        state.toggle_target(4)
        course_3 = copy.deepcopy(state.cache.get(state.partition_key(3)))

        api.mutation_gate.set()
        result = await task

        assert result.ok is False
        assert state.cache.get(state.partition_key(2)) == before
        assert state.cache.get(state.partition_key(3)) == course_3
        assert state.active_anchor_id == 3
        assert state.selected_target_ids == [4]
        assert notifier.events[-1][:2] == ("error", "Failed to enroll the student.")


class TestUnenroll:
    @pytest.mark.asyncio
    async def test_unenroll_removes_then_refetches(self, state, api):
        await state.open_dialog(2)

        result = await state.unenroll(1)

        assert result.ok is True
        assert state.enrolled_partition == []
        assert [s["id"] for s in state.unenrolled_partition] == [1, 4, 5, 6]

    @pytest.mark.asyncio
    async def test_unenroll_failure_rolls_back(self, state, api, notifier):
        await state.open_dialog(2)
        api.fail_with = EnrollmentAPIError("Unable to unenroll student", status_code=404)

        result = await state.unenroll(1)

        assert result.ok is False
        assert [s["id"] for s in state.enrolled_partition] == [1]
        assert notifier.events[-1][0] == "error"


class FakeStudentAPI:
    async def list_students(self):
        return [{"id": 1, "name": "Ada"}]

    async def get_student_enrollment(self, student_id):
        return {
            "student": {"id": student_id, "name": "Ada", "courses": [{"id": 2}, {"id": 3}]},
            "course": [{"id": 4}],
        }


class TestByStudentState:
    @pytest.mark.asyncio
    async def test_partition_shape(self):
        state = ByStudentEnrollmentState(FakeStudentAPI(), notifier=RecordingNotifier())

        await state.open_dialog(1)

        assert [c["id"] for c in state.enrolled_partition] == [2, 3]
        assert [c["id"] for c in state.unenrolled_partition] == [4]
        partition = state.cache.get(("student-with-course", 1))
        assert partition["anchor"] == {"id": 1, "name": "Ada"}

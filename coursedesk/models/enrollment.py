# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment request and response models.

Request bodies keep the wire names used by the enrollment dialogs
(selectedCourseId / student, selectedStudentId / course).
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from coursedesk.models.common import RecordId
from coursedesk.models.course import CourseResponse
from coursedesk.models.student import StudentBrief, StudentResponse


class EnrollByCourseRequest(BaseModel):
    """Enroll one or more students into a course."""

    model_config = ConfigDict(populate_by_name=True)

    selected_course_id: RecordId = Field(..., alias="selectedCourseId")
    student: list[RecordId] = Field(..., min_length=1, description="Student IDs to enroll")


class EnrollByStudentRequest(BaseModel):
    """Enroll a student into one or more courses."""

    model_config = ConfigDict(populate_by_name=True)

    selected_student_id: RecordId = Field(..., alias="selectedStudentId")
    course: list[RecordId] = Field(..., min_length=1, description="Course IDs to enroll in")


class EnrolledStudent(StudentResponse):
    """A student as seen from a course, with the enrollment timestamp."""

    enrolled_at: datetime | None = None


class EnrolledCourse(CourseResponse):
    """A course as seen from a student, with the enrollment timestamp."""

    enrolled_at: datetime | None = None


class StudentWithCourses(StudentResponse):
    """A student together with the courses it is enrolled in."""

    courses: list[EnrolledCourse] = Field(default_factory=list)


class CourseWithStudents(CourseResponse):
    """A course together with its enrolled students."""

    students: list[EnrolledStudent] = Field(default_factory=list)


class CoursePartition(BaseModel):
    """Enrolled and unenrolled students for one course."""

    enrolled: list[EnrolledStudent] = Field(default_factory=list)
    unenrolled: list[StudentBrief] = Field(default_factory=list)


class StudentPartition(BaseModel):
    """A student with its enrolled courses, plus the courses it is not in."""

    student: StudentWithCourses
    course: list[CourseResponse] = Field(default_factory=list, description="Unenrolled courses")

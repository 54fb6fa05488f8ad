# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services for CourseDesk.

- student: Student record management
- course: Course record management
- enrollment: Enrollment queries and mutations
"""

"""CourseDesk Backend.

Student and course administration with many-to-many enrollment management,
a REST API over relational storage, and an async client that keeps
enrollment dialogs consistent with server state.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"

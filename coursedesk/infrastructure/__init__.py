# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer for CourseDesk.

- database: SQLAlchemy async engine, sessions, models and migrations
"""

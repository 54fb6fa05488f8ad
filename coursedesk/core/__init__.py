# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for CourseDesk.

This package contains shared application infrastructure:
- config: Application configuration and settings
"""

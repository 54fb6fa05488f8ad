# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for CourseDesk.

All timestamps are stored in UTC and all Python datetimes are
timezone-aware. SQLite drops tzinfo on read, so values coming back from it
go through ensure_utc().

Usage:
    from coursedesk.utils.datetime import utc_now

    enrolled_at: Mapped[datetime] = mapped_column(default=utc_now)
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are assumed to already be UTC.

    Args:
        dt: Datetime to normalize, or None.

    Returns:
        UTC-aware datetime, or None if dt was None.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

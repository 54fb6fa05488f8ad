# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Keyed query cache with explicit invalidation.

Each client state manager owns one QueryCache. Keys are tuples such as
("student-with-course", 7); invalidating ("student-with-course",) drops
every entry under that prefix. Nothing is invalidated implicitly.

Example:
    cache = QueryCache()
    cache.set(("course-with-student", 2), partition)
    snapshot = cache.snapshot(("course-with-student", 2))
    ...  # optimistic edits
    cache.restore(snapshot)
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Hashable

logger = logging.getLogger(__name__)

CacheKey = tuple[Hashable, ...]

_MISSING = object()


@dataclass(frozen=True)
class CacheSnapshot:
    """Deep copy of some cache entries taken before an optimistic edit.

    Attributes:
        entries: Copied values by key. Keys that were absent map to a
            sentinel so restore() removes them again.
    """

    entries: dict[CacheKey, Any] = field(default_factory=dict)


class QueryCache:
    """In-memory cache of query results keyed by tuples."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, Any] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[CacheKey]:
        return list(self._entries)

    def get(self, key: CacheKey, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def set(self, key: CacheKey, value: Any) -> None:
        self._entries[key] = value

    def invalidate(self, key: CacheKey) -> int:
        """Drop the entry for ``key`` and every entry that starts with it.

        Args:
            key: Exact key or key prefix.

        Returns:
            Number of entries removed.
        """
        size = len(key)
        doomed = [k for k in self._entries if k[:size] == key]
        for k in doomed:
            del self._entries[k]

        if doomed:
            logger.debug("Invalidated cache entries: prefix=%s, count=%d", key, len(doomed))
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def snapshot(self, *keys: CacheKey) -> CacheSnapshot:
        """Copy the current values of ``keys``.

        Values are deep-copied, so later edits to cached objects do not
        leak into the snapshot.
        """
        return CacheSnapshot(
            entries={
                key: copy.deepcopy(self._entries[key]) if key in self._entries else _MISSING
                for key in keys
            }
        )

    def restore(self, snapshot: CacheSnapshot) -> None:
        """Put every snapshotted key back exactly as it was."""
        for key, value in snapshot.entries.items():
            if value is _MISSING:
                self._entries.pop(key, None)
            else:
                self._entries[key] = copy.deepcopy(value)

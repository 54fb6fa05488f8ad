# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-memory search and pagination over record lists.

Used by list views of students and courses: a case-insensitive substring
search across every field value, then a page slice. Pages are numbered
from 0; changing the search text or the page size goes back to page 0.
"""

import math
from typing import Any, Sequence

DEFAULT_PAGE_SIZE = 10


class PaginatedSearch:
    """Filter and page a list of records.

    Attributes:
        search: Current search text.
        page: Current page, starting at 0.
        page_size: Rows per page.
    """

    def __init__(
        self,
        data: Sequence[dict[str, Any]] = (),
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._data: list[dict[str, Any]] = list(data)
        self.search = ""
        self.page = 0
        self.page_size = page_size

    @property
    def data(self) -> list[dict[str, Any]]:
        return self._data

    def set_data(self, data: Sequence[dict[str, Any]]) -> None:
        self._data = list(data)

    def set_search(self, search: str) -> None:
        self.search = search
        self.page = 0

    def set_page(self, page: int) -> None:
        if page < 0:
            raise ValueError("page must not be negative")
        self.page = page

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self.page = 0

    @property
    def filtered(self) -> list[dict[str, Any]]:
        """Records with any field value containing the search text."""
        needle = self.search.strip().lower()
        if not needle:
            return list(self._data)
        return [
            item
            for item in self._data
            if any(needle in str(value).lower() for value in item.values())
        ]

    @property
    def page_items(self) -> list[dict[str, Any]]:
        start = self.page * self.page_size
        return self.filtered[start : start + self.page_size]

    @property
    def total(self) -> int:
        return len(self.filtered)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

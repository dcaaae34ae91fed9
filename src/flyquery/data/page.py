# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Page of results returned by paginated queries."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Page(Generic[T]):
    """A page of results from a paginated query.

    Attributes:
        items: The items on this page.
        total: Total number of items across all pages.
        page: Current page number (1-based).
        total_pages: Number of pages the result set spans.
        size: Requested page size, ``None`` for an unpaged result.
    """

    items: list[T]
    total: int
    page: int
    total_pages: int
    size: int | None = None

    @staticmethod
    def of(items: list[T], total: int, page: int, size: int) -> Page[T]:
        """Build a page, deriving ``total_pages = ceil(total / size)``."""
        return Page(items=items, total=total, page=page, total_pages=math.ceil(total / size), size=size)

    @staticmethod
    def single(items: list[T]) -> Page[T]:
        """A single unpaged page holding every item."""
        return Page(items=items, total=len(items), page=1, total_pages=1)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def __len__(self) -> int:
        return len(self.items)

    def map(self, func: Callable[[T], U]) -> Page[U]:
        """Transform items using a mapping function, preserving pagination metadata."""
        return Page(
            items=[func(item) for item in self.items],
            total=self.total,
            page=self.page,
            total_pages=self.total_pages,
            size=self.size,
        )

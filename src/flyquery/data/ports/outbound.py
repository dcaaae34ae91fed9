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
"""Outbound ports: repository interfaces."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

from flyquery.data.filter import Filter
from flyquery.data.identity import Identity
from flyquery.data.page import Page
from flyquery.data.pageable import Pageable, Sort
from flyquery.data.projection import Fields

T = TypeVar("T")
R = TypeVar("R")


@runtime_checkable
class ReadRepository(Protocol[T]):
    """Query side of a repository."""

    async def find(self, id: Identity[Any] | Any, fields: Fields | None = None) -> Any: ...

    async def find_by(
        self, filter: Filter | None = None, sort: Sort | None = None, fields: Fields | None = None
    ) -> list[Any]: ...

    async def find_by_distinct(
        self, distinct_fields: Fields, filter: Filter | None = None, sort: Sort | None = None
    ) -> list[Any]: ...

    async def count(self, filter: Filter | None = None) -> int: ...

    async def exists(self, id: Identity[Any] | Any) -> bool: ...


@runtime_checkable
class WriteRepository(Protocol[T]):
    """Command side of a repository."""

    async def add(self, entity: T) -> T: ...

    async def add_all(self, entities: list[T]) -> list[T]: ...

    async def remove(self, id: Identity[Any] | Any) -> bool: ...

    async def remove_all(self, filter: Filter | None = None) -> bool: ...

    async def transactional(self, work: Callable[[], Awaitable[R] | R]) -> R: ...


@runtime_checkable
class PageRepository(Protocol[T]):
    """Paginated reads."""

    async def find_all(self, pageable: Pageable | None = None) -> Page[Any]: ...

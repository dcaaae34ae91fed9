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
"""Generic async repository built on SQLAlchemy 2.0."""

from __future__ import annotations

import threading
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar, cast, get_args, get_origin

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from flyquery.data.compiler import FilterCompiler, SortCompiler
from flyquery.data.filter import Filter
from flyquery.data.identity import Identity
from flyquery.data.page import Page
from flyquery.data.pageable import Pageable, Sort
from flyquery.data.projection import Fields
from flyquery.data.relational.sqlalchemy.descriptor import ModelDescriptor
from flyquery.data.relational.sqlalchemy.query_builder import SqlAlchemyQueryBuilder
from flyquery.data.relational.sqlalchemy.transactional import run_in_transaction
from flyquery.kernel.exceptions import TransactionException, TypeGuardException

T = TypeVar("T")
ID = TypeVar("ID")
R = TypeVar("R")

logger = structlog.get_logger("flyquery.data.repository")


class Repository(Generic[T, ID]):
    """Filter/sort/paginate repository for one SQLAlchemy model.

    Implements the read, write and page repository ports. Every query is
    built on a fresh :class:`SqlAlchemyQueryBuilder`; filters and sorts are
    applied through :class:`FilterCompiler` and :class:`SortCompiler`.

    Type Parameters:
        T: The entity type (any mapped SQLAlchemy model).
        ID: The primary key type (e.g. UUID, int, str).

    Usage::

        class UserRepository(Repository[User, UUID]):
            pass

        repo = UserRepository(session=session)
        active = await repo.find_by(Filter.builder().must().equal("status", "active").build())
    """

    _entity_type: type | None = None
    _id_type: type | None = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for base in getattr(cls, "__orig_bases__", []):
            if get_origin(base) is Repository:
                args = get_args(base)
                if args and not isinstance(args[0], TypeVar):
                    cls._entity_type = args[0]
                if len(args) > 1 and not isinstance(args[1], TypeVar):
                    cls._id_type = args[1]
                break

    def __init__(
        self,
        model: type[T] | None = None,
        session: AsyncSession | None = None,
        *,
        descriptor: ModelDescriptor[T] | None = None,
        filter_compiler: FilterCompiler | None = None,
        sort_compiler: SortCompiler | None = None,
    ) -> None:
        resolved = model or (descriptor.model if descriptor is not None else None) or type(self)._entity_type
        if resolved is None:
            raise TypeError(
                f"{type(self).__name__} requires either Repository[Entity, ID] declaration or explicit model argument"
            )
        self._model: type[T] = cast(type[T], resolved)
        self._session = session
        self._descriptor = descriptor
        self._descriptor_lock = threading.Lock()
        self._filters = filter_compiler or FilterCompiler()
        self._sorts = sort_compiler or SortCompiler()

    @property
    def model(self) -> type[T]:
        return self._model

    @property
    def descriptor(self) -> ModelDescriptor[T]:
        """The model descriptor, inspected on first use and reused afterwards."""
        if self._descriptor is None:
            with self._descriptor_lock:
                if self._descriptor is None:
                    self._descriptor = ModelDescriptor.of(self._model)
                    logger.debug(
                        "model_descriptor_initialized",
                        model=self._model.__name__,
                        primary_key=self._descriptor.primary_key,
                    )
        return self._descriptor

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise TransactionException(f"No AsyncSession configured on {type(self).__name__}")
        return self._session

    def _query(self) -> SqlAlchemyQueryBuilder:
        return self.descriptor.new_query(self._require_session())

    def _filtered(self, filter: Filter | None, sort: Sort | None = None) -> SqlAlchemyQueryBuilder:
        query = self._filters.compile(self._query(), filter)
        return self._sorts.compile(query, sort)

    def _key(self, id: Identity[Any] | Any) -> Any:
        """Primary-key value for an identity, a raw key or an entity of the model."""
        return self.descriptor.key_of(Identity.of(id).value)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find(self, id: Identity[ID] | ID | T, fields: Fields | None = None) -> Any | None:
        """Return the row with primary key *id*, or ``None``.

        Whole entities are returned when *fields* is omitted; otherwise a
        dict holding only the requested fields.
        """
        query = self._query().where(self.descriptor.primary_key, "=", self._key(id))
        return await query.first((fields or Fields()).columns())

    async def find_by(
        self,
        filter: Filter | None = None,
        sort: Sort | None = None,
        fields: Fields | None = None,
    ) -> list[Any]:
        """Return every row matching *filter*, ordered by *sort*, projected to *fields*."""
        return await self._filtered(filter, sort).get((fields or Fields()).columns())

    async def find_by_distinct(
        self,
        distinct_fields: Fields,
        filter: Filter | None = None,
        sort: Sort | None = None,
    ) -> list[Any]:
        """Return the distinct rows over *distinct_fields* matching *filter*."""
        query = self._filtered(filter, sort).distinct()
        return await query.get(distinct_fields.columns())

    async def find_all(self, pageable: Pageable | None = None) -> Page[Any]:
        """Return one page of results.

        Without a pageable every row is returned as a single page
        (``page == total_pages == 1``). With one, its filter and sort are
        applied, ``distinct_fields`` (when set) forces a DISTINCT projection
        over those fields in place of ``fields``, and the total is counted
        once over the same filtered query.
        """
        if pageable is None:
            return Page.single(await self._query().get())

        query = self._filtered(pageable.filter, pageable.sort)
        if pageable.is_distinct:
            query.distinct()

        items, total = await query.paginate(pageable.size, pageable.columns(), pageable.page)
        return Page.of(items, total, pageable.page, pageable.size)

    async def count(self, filter: Filter | None = None) -> int:
        """Number of rows matching *filter* (all rows when omitted)."""
        return await self._filtered(filter).count()

    async def exists(self, id: Identity[ID] | ID | T) -> bool:
        """Whether a row with primary key *id* exists, answered through :meth:`count`."""
        filter = Filter.builder().must().equal(self.descriptor.primary_key, self._key(id)).build()
        return await self.count(filter) > 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _guard(self, entity: Any) -> None:
        if not isinstance(entity, self._model):
            raise TypeGuardException(
                f"Expected an instance of {self._model.__name__}, got {type(entity).__name__}",
                code="TYPE_GUARD",
                context={"expected": self._model.__name__, "actual": type(entity).__name__},
            )

    async def add(self, entity: T) -> T:
        """Persist *entity* and return it with generated values loaded.

        Raises:
            TypeGuardException: *entity* is not an instance of the repository model.
        """
        self._guard(entity)
        session = self._require_session()
        session.add(entity)
        await session.flush()
        await session.refresh(entity)
        return entity

    async def add_all(self, entities: list[T]) -> list[T]:
        """Persist *entities* one by one; the first failure stops the rest."""
        for entity in entities:
            await self.add(entity)
        return entities

    async def remove(self, id: Identity[ID] | ID | T) -> bool:
        """Delete the row with primary key *id*; ``False`` when there was none."""
        query = self._query().where(self.descriptor.primary_key, "=", self._key(id))
        return await query.delete() > 0

    async def remove_all(self, filter: Filter | None = None) -> bool:
        """Delete every row matching *filter*, or all rows when omitted.

        Returns whether any row was deleted.
        """
        return await self._filtered(filter).delete() > 0

    async def transactional(self, work: Callable[[], Awaitable[R] | R]) -> R:
        """Run *work* as one unit of work: commit on success, roll back and re-raise on error."""
        return await run_in_transaction(self._require_session(), work)

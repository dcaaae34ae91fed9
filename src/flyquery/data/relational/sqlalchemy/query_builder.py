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
"""QueryBuilderPort implementation over a SQLAlchemy ``Select``.

Predicates are collected as ``(connective, clause)`` pairs and folded into
one WHERE clause when a statement is rendered. The fold follows SQL
precedence for a flat chain such as ``a AND b OR c AND NOT d``: AND and
AND NOT bind tighter than OR, giving ``(a AND b) OR (c AND NOT d)``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import ColumnElement, Select, and_, func, not_, or_, select
from sqlalchemy import delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession

from flyquery.data.filter import Connective
from flyquery.data.pageable import Direction
from flyquery.data.projection import ALL_COLUMNS
from flyquery.kernel.exceptions import ValidationException

if TYPE_CHECKING:
    from flyquery.data.relational.sqlalchemy.descriptor import ModelDescriptor

logger = structlog.get_logger("flyquery.data.relational")

_OPERATORS: dict[str, Callable[[Any, Any], ColumnElement[bool]]] = {
    "=": lambda col, v: col == v,
    "!=": lambda col, v: col != v,
    ">": lambda col, v: col > v,
    ">=": lambda col, v: col >= v,
    "<": lambda col, v: col < v,
    "<=": lambda col, v: col <= v,
    "LIKE": lambda col, v: col.like(v),
    "NOT LIKE": lambda col, v: col.not_like(v),
}


class SqlAlchemyQueryBuilder:
    """Mutable query handle bound to one model and one ``AsyncSession``.

    Predicate and ordering methods return ``self`` so calls chain. The
    coroutine methods (``get``, ``first``, ``count``, ``paginate``,
    ``delete``) execute against the session.
    """

    def __init__(self, descriptor: ModelDescriptor[Any], session: AsyncSession) -> None:
        self._descriptor = descriptor
        self._session = session
        self._wheres: list[tuple[Connective, ColumnElement[bool]]] = []
        self._orders: list[ColumnElement[Any]] = []
        self._distinct = False

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def where(
        self, field: str, operator: str, value: Any, boolean: Connective = Connective.AND
    ) -> SqlAlchemyQueryBuilder:
        build = _OPERATORS.get(operator.upper())
        if build is None:
            raise ValidationException(f"Unsupported operator '{operator}'", code="UNKNOWN_OPERATOR")
        return self._push(boolean, build(self._descriptor.column(field), value))

    def where_between(
        self, field: str, bounds: tuple[Any, Any], boolean: Connective = Connective.AND
    ) -> SqlAlchemyQueryBuilder:
        low, high = bounds
        return self._push(boolean, self._descriptor.column(field).between(low, high))

    def where_not_between(
        self, field: str, bounds: tuple[Any, Any], boolean: Connective = Connective.AND
    ) -> SqlAlchemyQueryBuilder:
        low, high = bounds
        return self._push(boolean, not_(self._descriptor.column(field).between(low, high)))

    def where_in(
        self, field: str, values: Sequence[Any], boolean: Connective = Connective.AND
    ) -> SqlAlchemyQueryBuilder:
        return self._push(boolean, self._descriptor.column(field).in_(list(values)))

    def where_not_in(
        self, field: str, values: Sequence[Any], boolean: Connective = Connective.AND
    ) -> SqlAlchemyQueryBuilder:
        return self._push(boolean, self._descriptor.column(field).not_in(list(values)))

    def _push(self, boolean: Connective, clause: ColumnElement[bool]) -> SqlAlchemyQueryBuilder:
        self._wheres.append((Connective(boolean), clause))
        return self

    # ------------------------------------------------------------------
    # Ordering / projection
    # ------------------------------------------------------------------

    def order_by(self, field: str, direction: Direction = Direction.ASC) -> SqlAlchemyQueryBuilder:
        col = self._descriptor.column(field)
        self._orders.append(col.desc() if Direction(direction) is Direction.DESC else col.asc())
        return self

    def distinct(self) -> SqlAlchemyQueryBuilder:
        self._distinct = True
        return self

    @property
    def whereclause(self) -> ColumnElement[bool] | None:
        """The folded WHERE clause, or ``None`` when no predicate was added."""
        disjuncts: list[list[ColumnElement[bool]]] = []
        for boolean, clause in self._wheres:
            if boolean is Connective.AND_NOT:
                clause = not_(clause)
            if boolean is Connective.OR or not disjuncts:
                disjuncts.append([clause])
            else:
                disjuncts[-1].append(clause)

        if not disjuncts:
            return None
        terms = [and_(*conj) if len(conj) > 1 else conj[0] for conj in disjuncts]
        return or_(*terms) if len(terms) > 1 else terms[0]

    def statement(self, columns: Sequence[str] = (ALL_COLUMNS,)) -> Select[Any]:
        """Render the SELECT for *columns* (``["*"]`` selects whole entities)."""
        if self._selects_entities(columns):
            stmt = select(self._descriptor.model)
        else:
            stmt = select(*(self._descriptor.column(c).label(c) for c in columns))

        clause = self.whereclause
        if clause is not None:
            stmt = stmt.where(clause)
        if self._distinct:
            stmt = stmt.distinct()
        if self._orders:
            stmt = stmt.order_by(*self._orders)
        return stmt

    @staticmethod
    def _selects_entities(columns: Sequence[str]) -> bool:
        return not columns or list(columns) == [ALL_COLUMNS]

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def get(
        self,
        columns: Sequence[str] = (ALL_COLUMNS,),
        *,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[Any]:
        """Fetch rows: mapped entities for ``["*"]``, dicts for a projection."""
        stmt = self.statement(columns)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self._session.execute(stmt)
        if self._selects_entities(columns):
            rows: list[Any] = list(result.scalars().all())
        else:
            rows = [dict(row._mapping) for row in result.all()]
        logger.debug("query_executed", model=self._descriptor.model.__name__, rows=len(rows))
        return rows

    async def first(self, columns: Sequence[str] = (ALL_COLUMNS,)) -> Any | None:
        rows = await self.get(columns, limit=1)
        return rows[0] if rows else None

    async def count(self, columns: Sequence[str] = (ALL_COLUMNS,)) -> int:
        """Count rows the SELECT for *columns* would return, ignoring ordering."""
        inner = self.statement(columns).order_by(None).subquery()
        result = await self._session.execute(select(func.count()).select_from(inner))
        return int(result.scalar_one())

    async def paginate(
        self, page_size: int, columns: Sequence[str] = (ALL_COLUMNS,), page_number: int = 1
    ) -> tuple[list[Any], int]:
        """Return ``(items, total)`` for one page; ``total`` ignores paging."""
        total = await self.count(columns)
        items = await self.get(columns, offset=(page_number - 1) * page_size, limit=page_size)
        logger.debug("page_fetched", page=page_number, size=page_size, total=total)
        return items, total

    async def delete(self) -> int:
        """Delete matching rows and return how many were removed."""
        stmt = sa_delete(self._descriptor.model)
        clause = self.whereclause
        if clause is not None:
            stmt = stmt.where(clause)
        result = await self._session.execute(stmt.execution_options(synchronize_session=False))
        await self._session.flush()
        deleted = int(result.rowcount or 0)  # type: ignore[attr-defined]
        logger.debug("rows_deleted", model=self._descriptor.model.__name__, rows=deleted)
        return deleted

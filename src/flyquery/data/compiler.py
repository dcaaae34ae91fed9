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
"""Compile Filter and Sort value objects onto a :class:`QueryBuilderPort`.

Both compilers mutate the query handle in place and return it. They never
execute anything, so structural problems surface before a statement is
sent to storage.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import structlog

from flyquery.data.filter import (
    BooleanGroup,
    Comparison,
    Condition,
    ConditionGroup,
    ConditionKind,
    Connective,
    Filter,
    Membership,
    Range,
)
from flyquery.data.pageable import Sort
from flyquery.data.ports.compiler import QueryBuilderPort
from flyquery.kernel.exceptions import ValidationException

Q = TypeVar("Q", bound=QueryBuilderPort)

logger = structlog.get_logger("flyquery.data.compiler")


def _same(value: Any) -> Any:
    return value


# STARTS_WITH places the wildcard before the value and ENDS_WITH after it.
_SCALAR_OPERATORS: dict[ConditionKind, tuple[str, Callable[[Any], Any]]] = {
    ConditionKind.GREATER_THAN_OR_EQUAL: (">=", _same),
    ConditionKind.GREATER_THAN: (">", _same),
    ConditionKind.LESS_THAN_OR_EQUAL: ("<=", _same),
    ConditionKind.LESS_THAN: ("<", _same),
    ConditionKind.CONTAINS: ("LIKE", lambda v: f"%{v}%"),
    ConditionKind.NOT_CONTAINS: ("NOT LIKE", lambda v: f"%{v}%"),
    ConditionKind.STARTS_WITH: ("LIKE", lambda v: f"%{v}"),
    ConditionKind.ENDS_WITH: ("LIKE", lambda v: f"{v}%"),
    ConditionKind.EQUALS: ("=", _same),
    ConditionKind.NOT_EQUAL: ("!=", _same),
}


class FilterCompiler:
    """Translate a :class:`Filter` into WHERE predicates.

    Groups are applied in the order MUST, MUST_NOT, SHOULD with the
    connectives AND, AND NOT and OR respectively. Every predicate joins the
    same flat WHERE chain; there is no nesting below the group level.
    """

    def compile(self, query: Q, filter: Filter | None) -> Q:
        if filter is None:
            return query

        emitted = 0
        for group in BooleanGroup:
            buckets = self._prune(filter.group(group))
            if buckets:
                emitted += self._apply(query, buckets, group.connective)

        logger.debug("filter_compiled", predicates=emitted)
        return query

    @staticmethod
    def _prune(group: ConditionGroup) -> list[tuple[ConditionKind, list[Condition]]]:
        """Drop empty membership payloads, then buckets left with no entries."""
        pruned: list[tuple[ConditionKind, list[Condition]]] = []
        for kind, conditions in group.items():
            kept = [c for c in conditions if not (isinstance(c, Membership) and not c.values)]
            if kept:
                pruned.append((kind, kept))
        return pruned

    def _apply(
        self,
        query: QueryBuilderPort,
        buckets: list[tuple[ConditionKind, list[Condition]]],
        boolean: Connective,
    ) -> int:
        count = 0
        for kind, conditions in buckets:
            for condition in conditions:
                if isinstance(condition, Range):
                    self._apply_range(query, kind, condition, boolean)
                elif isinstance(condition, Membership):
                    self._apply_membership(query, kind, condition, boolean)
                else:
                    self._apply_scalar(query, kind, condition, boolean)
                count += 1
        return count

    @staticmethod
    def _apply_range(query: QueryBuilderPort, kind: ConditionKind, condition: Range, boolean: Connective) -> None:
        bounds = (condition.low, condition.high)
        if kind is ConditionKind.RANGES:
            query.where_between(condition.field, bounds, boolean)
        elif kind is ConditionKind.NOT_RANGES:
            query.where_not_between(condition.field, bounds, boolean)
        else:
            raise _mismatch(kind, condition)

    @staticmethod
    def _apply_membership(
        query: QueryBuilderPort, kind: ConditionKind, condition: Membership, boolean: Connective
    ) -> None:
        values = list(condition.values)
        if kind is ConditionKind.GROUP:
            query.where_in(condition.field, values, boolean)
        elif kind is ConditionKind.NOT_GROUP:
            query.where_not_in(condition.field, values, boolean)
        else:
            raise _mismatch(kind, condition)

    @staticmethod
    def _apply_scalar(
        query: QueryBuilderPort, kind: ConditionKind, condition: Comparison, boolean: Connective
    ) -> None:
        entry = _SCALAR_OPERATORS.get(kind)
        if entry is None:
            raise _mismatch(kind, condition)
        operator, render = entry
        query.where(condition.field, operator, render(condition.value), boolean)


def _mismatch(kind: ConditionKind, condition: Condition) -> ValidationException:
    return ValidationException(
        f"'{kind.value}' cannot hold a {type(condition).__name__} condition on '{condition.field}'",
        code="FILTER_ARITY",
        context={"kind": kind.value, "field": condition.field},
    )


class SortCompiler:
    """Append one ORDER BY directive per order, first order first."""

    def compile(self, query: Q, sort: Sort | None) -> Q:
        if sort is None:
            return query
        for order in sort.orders:
            query.order_by(order.property, order.direction)
        return query

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
"""Tests for FilterCompiler and SortCompiler against a recording query handle."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest
from structlog.testing import capture_logs

from flyquery.data.compiler import FilterCompiler, SortCompiler
from flyquery.data.filter import (
    Comparison,
    ConditionGroup,
    ConditionKind,
    Connective,
    Filter,
    Membership,
    Range,
)
from flyquery.data.pageable import Direction, Order, Sort
from flyquery.data.ports.compiler import QueryBuilderPort
from flyquery.kernel.exceptions import ValidationException


class RecordingQuery:
    """QueryBuilderPort that records every call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def where(self, field: str, operator: str, value: Any, boolean: Connective = Connective.AND) -> RecordingQuery:
        self.calls.append(("where", field, operator, value, boolean))
        return self

    def where_between(
        self, field: str, bounds: tuple[Any, Any], boolean: Connective = Connective.AND
    ) -> RecordingQuery:
        self.calls.append(("where_between", field, bounds, boolean))
        return self

    def where_not_between(
        self, field: str, bounds: tuple[Any, Any], boolean: Connective = Connective.AND
    ) -> RecordingQuery:
        self.calls.append(("where_not_between", field, bounds, boolean))
        return self

    def where_in(self, field: str, values: Sequence[Any], boolean: Connective = Connective.AND) -> RecordingQuery:
        self.calls.append(("where_in", field, list(values), boolean))
        return self

    def where_not_in(
        self, field: str, values: Sequence[Any], boolean: Connective = Connective.AND
    ) -> RecordingQuery:
        self.calls.append(("where_not_in", field, list(values), boolean))
        return self

    def order_by(self, field: str, direction: Direction = Direction.ASC) -> RecordingQuery:
        self.calls.append(("order_by", field, direction))
        return self

    def distinct(self) -> RecordingQuery:
        self.calls.append(("distinct",))
        return self


@pytest.fixture
def query() -> RecordingQuery:
    return RecordingQuery()


class TestRecordingQuery:
    def test_satisfies_port(self, query: RecordingQuery) -> None:
        assert isinstance(query, QueryBuilderPort)


class TestFilterCompiler:
    def test_none_and_empty_filters_are_no_ops(self, query: RecordingQuery) -> None:
        compiler = FilterCompiler()
        assert compiler.compile(query, None) is query
        assert compiler.compile(query, Filter.empty()) is query
        assert query.calls == []

    def test_groups_compile_in_order_with_their_connectives(self, query: RecordingQuery) -> None:
        f = (
            Filter.builder()
            .should().contains("name", "jo")
            .must_not().equal("status", "banned")
            .must().equal("status", "active")
            .build()
        )
        FilterCompiler().compile(query, f)

        assert query.calls == [
            ("where", "status", "=", "active", Connective.AND),
            ("where", "status", "=", "banned", Connective.AND_NOT),
            ("where", "name", "LIKE", "%jo%", Connective.OR),
        ]

    @pytest.mark.parametrize(
        "method, operator, value, expected",
        [
            ("equal", "=", 1, 1),
            ("not_equal", "!=", 1, 1),
            ("greater_than", ">", 5, 5),
            ("greater_than_or_equal", ">=", 5, 5),
            ("less_than", "<", 5, 5),
            ("less_than_or_equal", "<=", 5, 5),
            ("contains", "LIKE", "jo", "%jo%"),
            ("not_contains", "NOT LIKE", "jo", "%jo%"),
            ("starts_with", "LIKE", "jo", "%jo"),
            ("ends_with", "LIKE", "jo", "jo%"),
        ],
    )
    def test_scalar_kinds(
        self, query: RecordingQuery, method: str, operator: str, value: Any, expected: Any
    ) -> None:
        builder = Filter.builder().must()
        getattr(builder, method)("name", value)
        FilterCompiler().compile(query, builder.build())

        assert query.calls == [("where", "name", operator, expected, Connective.AND)]

    def test_ranges_compile_to_between(self, query: RecordingQuery) -> None:
        f = Filter.builder().must().ranges("age", 10, 20).not_ranges("age", 50, 60).build()
        FilterCompiler().compile(query, f)

        assert query.calls == [
            ("where_between", "age", (10, 20), Connective.AND),
            ("where_not_between", "age", (50, 60), Connective.AND),
        ]

    def test_groups_compile_to_in(self, query: RecordingQuery) -> None:
        f = Filter.builder().should().group("city", ["Madrid"]).not_group("city", ["Rome", "Paris"]).build()
        FilterCompiler().compile(query, f)

        assert query.calls == [
            ("where_in", "city", ["Madrid"], Connective.OR),
            ("where_not_in", "city", ["Rome", "Paris"], Connective.OR),
        ]

    def test_every_field_of_a_multi_value_bucket_is_compiled(self, query: RecordingQuery) -> None:
        f = Filter.builder().must().ranges("age", 1, 2).ranges("score", 3, 4).build()
        FilterCompiler().compile(query, f)

        assert [call[1] for call in query.calls] == ["age", "score"]

    def test_empty_membership_is_dropped(self, query: RecordingQuery) -> None:
        f = Filter.builder().must().group("city", []).equal("status", "active").build()
        FilterCompiler().compile(query, f)

        assert query.calls == [("where", "status", "=", "active", Connective.AND)]

    def test_kinds_compile_in_declaration_order(self, query: RecordingQuery) -> None:
        f = Filter.builder().must().group("city", ["Madrid"]).equal("status", "active").build()
        FilterCompiler().compile(query, f)

        assert [call[0] for call in query.calls] == ["where", "where_in"]

    def test_mismatched_condition_raises(self, query: RecordingQuery) -> None:
        f = Filter(must=ConditionGroup({ConditionKind.EQUALS: (Range("age", 1, 2),)}))
        with pytest.raises(ValidationException) as exc_info:
            FilterCompiler().compile(query, f)
        assert exc_info.value.code == "FILTER_ARITY"

    def test_scalar_in_range_kind_raises(self, query: RecordingQuery) -> None:
        f = Filter(must=ConditionGroup({ConditionKind.RANGES: (Comparison("age", 1),)}))
        with pytest.raises(ValidationException):
            FilterCompiler().compile(query, f)

    def test_membership_in_scalar_kind_raises(self, query: RecordingQuery) -> None:
        f = Filter(must=ConditionGroup({ConditionKind.EQUALS: (Membership("city", ("a",)),)}))
        with pytest.raises(ValidationException):
            FilterCompiler().compile(query, f)

    def test_logs_predicate_count(self, query: RecordingQuery) -> None:
        f = Filter.builder().must().equal("a", 1).should().group("b", [1, 2]).build()
        with capture_logs() as logs:
            FilterCompiler().compile(query, f)
        assert {"event": "filter_compiled", "predicates": 2, "log_level": "debug"} in logs


class TestSortCompiler:
    def test_orders_applied_in_sequence(self, query: RecordingQuery) -> None:
        SortCompiler().compile(query, Sort.of(("a", "asc"), ("b", "desc")))

        assert query.calls == [
            ("order_by", "a", Direction.ASC),
            ("order_by", "b", Direction.DESC),
        ]

    def test_none_and_unsorted_are_no_ops(self, query: RecordingQuery) -> None:
        assert SortCompiler().compile(query, None) is query
        SortCompiler().compile(query, Sort.unsorted())
        assert query.calls == []

    def test_order_objects(self, query: RecordingQuery) -> None:
        SortCompiler().compile(query, Sort.of(Order.desc("created_at")))
        assert query.calls == [("order_by", "created_at", Direction.DESC)]

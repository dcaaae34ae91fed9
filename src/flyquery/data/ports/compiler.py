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
"""Query builder port: the narrow query-construction interface compilers target.

:class:`~flyquery.data.compiler.FilterCompiler` and
:class:`~flyquery.data.compiler.SortCompiler` only ever call the
synchronous predicate/ordering methods below, so they stay independent of
any storage engine. Execution methods are coroutines and belong to the
adapter (see ``flyquery.data.relational.sqlalchemy.query_builder``).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from flyquery.data.filter import Connective
from flyquery.data.pageable import Direction


@runtime_checkable
class QueryBuilderPort(Protocol):
    """Mutable query handle; every predicate call appends to the WHERE chain."""

    def where(self, field: str, operator: str, value: Any, boolean: Connective = Connective.AND) -> Any:
        """Append ``field <operator> value``; operator is one of ``= != > >= < <= LIKE`` or ``NOT LIKE``."""

    def where_between(
        self, field: str, bounds: tuple[Any, Any], boolean: Connective = Connective.AND
    ) -> Any: ...

    def where_not_between(
        self, field: str, bounds: tuple[Any, Any], boolean: Connective = Connective.AND
    ) -> Any: ...

    def where_in(self, field: str, values: Sequence[Any], boolean: Connective = Connective.AND) -> Any: ...

    def where_not_in(self, field: str, values: Sequence[Any], boolean: Connective = Connective.AND) -> Any: ...

    def order_by(self, field: str, direction: Direction = Direction.ASC) -> Any: ...

    def distinct(self) -> Any: ...

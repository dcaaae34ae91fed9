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
"""flyquery data: storage-agnostic query value objects and their compilers.

Framework-agnostic types (Filter, Sort, Fields, Pageable, Page, Identity,
compilers, ports) are exported directly. The SQLAlchemy adapter lives in
``flyquery.data.relational.sqlalchemy`` and its Repository is re-exported
for convenience.
"""

from flyquery.data.compiler import FilterCompiler, SortCompiler
from flyquery.data.filter import (
    BooleanGroup,
    Comparison,
    ConditionGroup,
    ConditionKind,
    Connective,
    Filter,
    FilterBuilder,
    GroupBuilder,
    Membership,
    Range,
)
from flyquery.data.identity import Identity
from flyquery.data.page import Page
from flyquery.data.pageable import Direction, Order, Pageable, Sort
from flyquery.data.ports.compiler import QueryBuilderPort
from flyquery.data.ports.outbound import PageRepository, ReadRepository, WriteRepository
from flyquery.data.projection import Fields
from flyquery.data.relational.sqlalchemy import Base, BaseEntity, Repository, transactional

__all__ = [
    # Value objects
    "BooleanGroup",
    "Comparison",
    "ConditionGroup",
    "ConditionKind",
    "Connective",
    "Direction",
    "Fields",
    "Filter",
    "FilterBuilder",
    "GroupBuilder",
    "Identity",
    "Membership",
    "Order",
    "Page",
    "Pageable",
    "Range",
    "Sort",
    # Compilers and ports
    "FilterCompiler",
    "PageRepository",
    "QueryBuilderPort",
    "ReadRepository",
    "SortCompiler",
    "WriteRepository",
    # Default adapter (SQLAlchemy)
    "Base",
    "BaseEntity",
    "Repository",
    "transactional",
]

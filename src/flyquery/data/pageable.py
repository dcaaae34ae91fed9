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
"""Sort and Pageable request types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from flyquery.data.filter import Filter
from flyquery.data.projection import Fields
from flyquery.kernel.exceptions import ValidationException


class Direction(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Order:
    """A single sort order: property name + direction."""

    property: str
    direction: Direction = Direction.ASC

    @staticmethod
    def asc(property: str) -> Order:
        return Order(property=property, direction=Direction.ASC)

    @staticmethod
    def desc(property: str) -> Order:
        return Order(property=property, direction=Direction.DESC)


@dataclass(frozen=True)
class Sort:
    """Ordered sequence of sort orders; the first order is the primary key."""

    orders: tuple[Order, ...] = ()

    @staticmethod
    def by(*properties: str) -> Sort:
        """Create ascending sort by properties."""
        return Sort(orders=tuple(Order.asc(p) for p in properties))

    @staticmethod
    def of(*orders: Order | tuple[str, str]) -> Sort:
        """Create a sort from orders or ``(property, direction)`` pairs."""
        resolved: list[Order] = []
        for order in orders:
            if isinstance(order, Order):
                resolved.append(order)
                continue
            prop, direction = order
            try:
                resolved.append(Order(property=prop, direction=Direction(direction.lower())))
            except ValueError:
                raise ValidationException(
                    f"Unknown sort direction '{direction}' for '{prop}'",
                    code="SORT_DIRECTION",
                ) from None
        return Sort(orders=tuple(resolved))

    @staticmethod
    def unsorted() -> Sort:
        return Sort()

    @property
    def is_unsorted(self) -> bool:
        return not self.orders

    def and_then(self, other: Sort) -> Sort:
        """Combine sorts, appending *other*'s orders after this sort's orders."""
        return Sort(orders=self.orders + other.orders)

    def descending(self) -> Sort:
        """Return same sort but all directions flipped to desc."""
        return Sort(orders=tuple(Order.desc(o.property) for o in self.orders))

    def ascending(self) -> Sort:
        """Return same sort but all directions flipped to asc."""
        return Sort(orders=tuple(Order.asc(o.property) for o in self.orders))


@dataclass(frozen=True)
class Pageable:
    """Request for one page of results.

    ``filter``, ``sort`` and ``fields`` default to their empty forms, which
    the repository treats as no-ops. A non-empty ``distinct_fields`` forces
    a DISTINCT projection over those fields and overrides ``fields``.
    """

    page: int = 1
    size: int = 20
    filter: Filter = field(default_factory=Filter)
    sort: Sort = field(default_factory=Sort)
    fields: Fields = field(default_factory=Fields)
    distinct_fields: Fields = field(default_factory=Fields)

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationException(f"page must be >= 1, got {self.page}", code="PAGE_NUMBER")
        if self.size < 1:
            raise ValidationException(f"size must be >= 1, got {self.size}", code="PAGE_SIZE")

    @staticmethod
    def of(
        page: int,
        size: int,
        *,
        filter: Filter | None = None,
        sort: Sort | None = None,
        fields: Fields | None = None,
        distinct_fields: Fields | None = None,
    ) -> Pageable:
        return Pageable(
            page=page,
            size=size,
            filter=filter or Filter(),
            sort=sort or Sort(),
            fields=fields or Fields(),
            distinct_fields=distinct_fields or Fields(),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    @property
    def is_distinct(self) -> bool:
        return not self.distinct_fields.is_all

    def columns(self) -> list[str]:
        """Columns to select: distinct fields win over the requested fields."""
        if self.is_distinct:
            return self.distinct_fields.columns()
        return self.fields.columns()

    def next(self) -> Pageable:
        return Pageable(
            page=self.page + 1,
            size=self.size,
            filter=self.filter,
            sort=self.sort,
            fields=self.fields,
            distinct_fields=self.distinct_fields,
        )

    def previous(self) -> Pageable:
        """Pageable for the previous page (min page 1)."""
        return Pageable(
            page=max(1, self.page - 1),
            size=self.size,
            filter=self.filter,
            sort=self.sort,
            fields=self.fields,
            distinct_fields=self.distinct_fields,
        )

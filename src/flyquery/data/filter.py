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
"""Boolean-grouped filter value objects.

A :class:`Filter` holds three boolean groups (``must``, ``must_not`` and
``should``), each mapping a :class:`ConditionKind` to the conditions
registered under it. Filters are frozen; build them with
:class:`FilterBuilder`::

    filter = (
        Filter.builder()
        .must().equal("status", "active")
        .should().contains("name", "jo")
        .build()
    )

The payload arity of each kind is carried by the condition type:
:class:`Comparison` holds one scalar, :class:`Range` exactly two bounds and
:class:`Membership` a set of values.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from flyquery.kernel.exceptions import ValidationException


class Connective(StrEnum):
    """Boolean connective used to append a predicate to a query."""

    AND = "and"
    AND_NOT = "and not"
    OR = "or"


class BooleanGroup(StrEnum):
    """The three filter groups, in compilation order."""

    MUST = "must"
    MUST_NOT = "must_not"
    SHOULD = "should"

    @property
    def connective(self) -> Connective:
        return _GROUP_CONNECTIVES[self]


_GROUP_CONNECTIVES = {
    BooleanGroup.MUST: Connective.AND,
    BooleanGroup.MUST_NOT: Connective.AND_NOT,
    BooleanGroup.SHOULD: Connective.OR,
}


class ConditionKind(StrEnum):
    """Closed set of condition kinds a filter group can hold."""

    EQUALS = "equals"
    NOT_EQUAL = "not_equal"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    RANGES = "ranges"
    NOT_RANGES = "not_ranges"
    GROUP = "group"
    NOT_GROUP = "not_group"

    @property
    def is_range(self) -> bool:
        return self in (ConditionKind.RANGES, ConditionKind.NOT_RANGES)

    @property
    def is_membership(self) -> bool:
        return self in (ConditionKind.GROUP, ConditionKind.NOT_GROUP)

    @property
    def is_scalar(self) -> bool:
        return not (self.is_range or self.is_membership)


# ---------------------------------------------------------------------------
# Condition variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Comparison:
    """Single-value condition: ``field <op> value``."""

    field: str
    value: Any

    def payload(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Range:
    """Closed interval condition: ``low <= field <= high``."""

    field: str
    low: Any
    high: Any

    def payload(self) -> list[Any]:
        return [self.low, self.high]


@dataclass(frozen=True)
class Membership:
    """Set membership condition: ``field IN (values)``.

    An empty ``values`` tuple is legal and is dropped at compile time.
    """

    field: str
    values: tuple[Any, ...]

    def payload(self) -> list[Any]:
        return list(self.values)


Condition = Comparison | Range | Membership


# ---------------------------------------------------------------------------
# Frozen value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConditionGroup:
    """Read-only mapping of condition kind to its registered conditions."""

    buckets: Mapping[ConditionKind, tuple[Condition, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def get(self, kind: ConditionKind) -> tuple[Condition, ...]:
        return self.buckets.get(kind, ())

    def items(self) -> list[tuple[ConditionKind, tuple[Condition, ...]]]:
        """Buckets in :class:`ConditionKind` declaration order."""
        return [(kind, self.buckets[kind]) for kind in ConditionKind if kind in self.buckets]

    @property
    def is_empty(self) -> bool:
        return not any(self.buckets.values())


@dataclass(frozen=True)
class Filter:
    """Immutable boolean-grouped filter."""

    must: ConditionGroup = field(default_factory=ConditionGroup)
    must_not: ConditionGroup = field(default_factory=ConditionGroup)
    should: ConditionGroup = field(default_factory=ConditionGroup)

    @staticmethod
    def builder() -> FilterBuilder:
        return FilterBuilder()

    @staticmethod
    def empty() -> Filter:
        """A filter with no conditions; compiling it is a no-op."""
        return Filter()

    def group(self, group: BooleanGroup) -> ConditionGroup:
        return getattr(self, group.value)

    @property
    def is_empty(self) -> bool:
        return all(self.group(g).is_empty for g in BooleanGroup)

    def to_dict(self) -> dict[str, dict[str, dict[str, Any]]]:
        """Nested ``group -> kind -> field -> payload`` mapping.

        Several conditions on the same field under one kind are emitted as a
        list of payloads.
        """
        result: dict[str, dict[str, dict[str, Any]]] = {}
        for group in BooleanGroup:
            kinds: dict[str, dict[str, Any]] = {}
            for kind, conditions in self.group(group).items():
                payloads: dict[str, list[Any]] = {}
                for condition in conditions:
                    payloads.setdefault(condition.field, []).append(condition.payload())
                kinds[kind.value] = {
                    name: values[0] if len(values) == 1 else values for name, values in payloads.items()
                }
            if kinds:
                result[group.value] = kinds
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> Filter:
        """Build a filter from the nested ``group -> kind -> field -> payload`` form.

        Scalar kinds accept a bare value or a one-element list. Range kinds
        require exactly two bounds. Group kinds accept any iterable (or a
        bare scalar, treated as a one-element set). Empty lists are pruned.

        Raises:
            ValidationException: unknown group/kind names or bad payload arity.
        """
        builder = FilterBuilder()
        for group_name, kinds in data.items():
            group = _parse_enum(BooleanGroup, group_name, "boolean group")
            target = builder._groups[group]
            for kind_name, fields in kinds.items():
                kind = _parse_enum(ConditionKind, kind_name, "condition kind")
                for field_name, payload in fields.items():
                    target._add_payload(kind, field_name, payload)
        return builder.build()


def _parse_enum(enum_cls: type[StrEnum], name: str, label: str) -> Any:
    try:
        return enum_cls(name)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationException(
            f"Unknown {label} '{name}' (expected one of: {allowed})",
            code="FILTER_UNKNOWN_NAME",
            context={"name": name},
        ) from None


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


class GroupBuilder:
    """Collects conditions for one boolean group.

    Every method returns the builder so calls chain; ``must()``,
    ``must_not()``, ``should()`` and ``build()`` hand back to the owning
    :class:`FilterBuilder`.
    """

    def __init__(self, owner: FilterBuilder) -> None:
        self._owner = owner
        self._buckets: dict[ConditionKind, list[Condition]] = {}

    # -- navigation ------------------------------------------------------

    def must(self) -> GroupBuilder:
        return self._owner.must()

    def must_not(self) -> GroupBuilder:
        return self._owner.must_not()

    def should(self) -> GroupBuilder:
        return self._owner.should()

    def build(self) -> Filter:
        return self._owner.build()

    # -- scalar conditions -----------------------------------------------

    def equal(self, field: str, value: Any) -> GroupBuilder:
        return self._scalar(ConditionKind.EQUALS, field, value)

    def not_equal(self, field: str, value: Any) -> GroupBuilder:
        return self._scalar(ConditionKind.NOT_EQUAL, field, value)

    def contains(self, field: str, value: Any) -> GroupBuilder:
        return self._scalar(ConditionKind.CONTAINS, field, value)

    def not_contains(self, field: str, value: Any) -> GroupBuilder:
        return self._scalar(ConditionKind.NOT_CONTAINS, field, value)

    def starts_with(self, field: str, value: Any) -> GroupBuilder:
        return self._scalar(ConditionKind.STARTS_WITH, field, value)

    def ends_with(self, field: str, value: Any) -> GroupBuilder:
        return self._scalar(ConditionKind.ENDS_WITH, field, value)

    def greater_than(self, field: str, value: Any) -> GroupBuilder:
        return self._scalar(ConditionKind.GREATER_THAN, field, value)

    def greater_than_or_equal(self, field: str, value: Any) -> GroupBuilder:
        return self._scalar(ConditionKind.GREATER_THAN_OR_EQUAL, field, value)

    def less_than(self, field: str, value: Any) -> GroupBuilder:
        return self._scalar(ConditionKind.LESS_THAN, field, value)

    def less_than_or_equal(self, field: str, value: Any) -> GroupBuilder:
        return self._scalar(ConditionKind.LESS_THAN_OR_EQUAL, field, value)

    # -- multi-value conditions ------------------------------------------

    def ranges(self, field: str, low: Any, high: Any) -> GroupBuilder:
        """Closed interval ``[low, high]``."""
        return self._append(ConditionKind.RANGES, Range(_check_field(field), low, high))

    def not_ranges(self, field: str, low: Any, high: Any) -> GroupBuilder:
        return self._append(ConditionKind.NOT_RANGES, Range(_check_field(field), low, high))

    def group(self, field: str, values: Iterable[Any]) -> GroupBuilder:
        """Membership in *values*; an empty collection adds nothing."""
        return self._add_payload(ConditionKind.GROUP, field, _as_values(field, values))

    def not_group(self, field: str, values: Iterable[Any]) -> GroupBuilder:
        return self._add_payload(ConditionKind.NOT_GROUP, field, _as_values(field, values))

    def clear(self) -> GroupBuilder:
        """Drop every condition registered on this group."""
        self._buckets.clear()
        return self

    # -- internals ---------------------------------------------------------

    def _scalar(self, kind: ConditionKind, field: str, value: Any) -> GroupBuilder:
        return self._add_payload(kind, field, value)

    def _append(self, kind: ConditionKind, condition: Condition) -> GroupBuilder:
        self._buckets.setdefault(kind, []).append(condition)
        return self

    def _add_payload(self, kind: ConditionKind, field: str, payload: Any) -> GroupBuilder:
        """Register a raw payload, enforcing the arity of *kind*.

        Empty collections are skipped and a one-element collection given to
        a scalar kind is unwrapped.
        """
        _check_field(field)
        is_sequence = isinstance(payload, (list, tuple, set, frozenset))
        if is_sequence and len(payload) == 0:
            return self

        if kind.is_membership:
            values = tuple(payload) if is_sequence else (payload,)
            return self._append(kind, Membership(field, values))
        if kind.is_range:
            if not isinstance(payload, (list, tuple)) or len(payload) != 2:
                raise ValidationException(
                    f"'{kind.value}' on field '{field}' requires exactly two bounds",
                    code="FILTER_ARITY",
                    context={"kind": kind.value, "field": field, "payload": payload},
                )
            return self._append(kind, Range(field, payload[0], payload[1]))
        if is_sequence:
            if len(payload) != 1:
                raise ValidationException(
                    f"'{kind.value}' on field '{field}' takes a single value, got {len(payload)}",
                    code="FILTER_ARITY",
                    context={"kind": kind.value, "field": field, "payload": payload},
                )
            payload = next(iter(payload))
        return self._append(kind, Comparison(field, payload))

    def _freeze(self) -> ConditionGroup:
        return ConditionGroup(
            MappingProxyType({kind: tuple(conds) for kind, conds in self._buckets.items()})
        )


class FilterBuilder:
    """Mutable builder that freezes into a :class:`Filter`."""

    def __init__(self) -> None:
        self._groups: dict[BooleanGroup, GroupBuilder] = {g: GroupBuilder(self) for g in BooleanGroup}

    def must(self) -> GroupBuilder:
        return self._groups[BooleanGroup.MUST]

    def must_not(self) -> GroupBuilder:
        return self._groups[BooleanGroup.MUST_NOT]

    def should(self) -> GroupBuilder:
        return self._groups[BooleanGroup.SHOULD]

    def build(self) -> Filter:
        return Filter(
            must=self._groups[BooleanGroup.MUST]._freeze(),
            must_not=self._groups[BooleanGroup.MUST_NOT]._freeze(),
            should=self._groups[BooleanGroup.SHOULD]._freeze(),
        )


def _check_field(field: str) -> str:
    if not isinstance(field, str) or not field:
        raise ValidationException(
            f"Field name must be a non-empty string, got {field!r}",
            code="FILTER_FIELD",
        )
    return field


def _as_values(field: str, values: Iterable[Any]) -> tuple[Any, ...]:
    if isinstance(values, (str, bytes)):
        raise ValidationException(
            f"Group values for field '{field}' must be a collection, not a string",
            code="FILTER_ARITY",
            context={"field": field},
        )
    return tuple(values)

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
"""Model descriptor: primary key, column lookup and query handle factory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute, Mapper

from flyquery.data.relational.sqlalchemy.query_builder import SqlAlchemyQueryBuilder
from flyquery.kernel.exceptions import ValidationException

T = TypeVar("T")


@dataclass(frozen=True)
class ModelDescriptor(Generic[T]):
    """Everything the repository needs to know about a mapped model.

    Built once per repository and read-only afterwards, so it can be shared
    between concurrent callers.
    """

    model: type[T]
    mapper: Mapper[Any]
    primary_key: str

    @classmethod
    def of(cls, model: type[T]) -> ModelDescriptor[T]:
        """Inspect *model*; it must be mapped with a single-column primary key."""
        try:
            mapper: Mapper[Any] = sa_inspect(model)
        except NoInspectionAvailable:
            raise ValidationException(
                f"{getattr(model, '__name__', model)!r} is not a mapped SQLAlchemy model",
                code="MODEL_NOT_MAPPED",
            ) from None

        if len(mapper.primary_key) != 1:
            raise ValidationException(
                f"{model.__name__} must declare exactly one primary key column, found {len(mapper.primary_key)}",
                code="MODEL_PRIMARY_KEY",
            )
        pk_key = mapper.get_property_by_column(mapper.primary_key[0]).key
        return cls(model=model, mapper=mapper, primary_key=pk_key)

    def key_of(self, value: Any) -> Any:
        """Primary-key value of *value* when it is a model instance, else *value* itself."""
        if isinstance(value, self.model):
            return getattr(value, self.primary_key)
        return value

    def column(self, field: str) -> InstrumentedAttribute[Any]:
        """Resolve a field name to its mapped column attribute."""
        if field not in self.mapper.column_attrs:
            raise ValidationException(
                f"Unknown field '{field}' on {self.model.__name__}",
                code="UNKNOWN_FIELD",
                context={"field": field, "model": self.model.__name__},
            )
        return getattr(self.model, field)

    def new_query(self, session: AsyncSession) -> SqlAlchemyQueryBuilder:
        """Fresh query handle over this model."""
        return SqlAlchemyQueryBuilder(self, session)

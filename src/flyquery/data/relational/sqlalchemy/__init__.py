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
"""SQLAlchemy adapter: async repository over mapped models."""

from flyquery.data.relational.sqlalchemy.datasource import create_engine, create_schema, create_session_factory
from flyquery.data.relational.sqlalchemy.descriptor import ModelDescriptor
from flyquery.data.relational.sqlalchemy.entity import Base, BaseEntity
from flyquery.data.relational.sqlalchemy.query_builder import SqlAlchemyQueryBuilder
from flyquery.data.relational.sqlalchemy.repository import Repository
from flyquery.data.relational.sqlalchemy.transactional import run_in_transaction, transaction_scope, transactional

__all__ = [
    "Base",
    "BaseEntity",
    "ModelDescriptor",
    "Repository",
    "SqlAlchemyQueryBuilder",
    "create_engine",
    "create_schema",
    "create_session_factory",
    "run_in_transaction",
    "transaction_scope",
    "transactional",
]

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
"""Engine and session factories built from :class:`DataSourceProperties`."""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from flyquery.config.properties.data import DataSourceProperties
from flyquery.core.config import Config
from flyquery.data.relational.sqlalchemy.entity import Base


def create_engine(config: Config) -> AsyncEngine:
    """Create an ``AsyncEngine`` from ``flyquery.data.datasource.*``."""
    props = config.bind(DataSourceProperties)
    return create_async_engine(props.url, echo=props.echo)


def create_session_factory(
    config: Config, engine: AsyncEngine | None = None
) -> async_sessionmaker[AsyncSession]:
    """Create an ``async_sessionmaker`` bound to *engine* (built from config when omitted)."""
    props = config.bind(DataSourceProperties)
    return async_sessionmaker(engine or create_engine(config), expire_on_commit=props.expire_on_commit)


async def create_schema(engine: AsyncEngine, metadata: MetaData | None = None) -> None:
    """Create every table in *metadata* (``Base.metadata`` by default) that does not exist yet."""
    target = metadata if metadata is not None else Base.metadata
    async with engine.begin() as conn:
        await conn.run_sync(target.create_all)

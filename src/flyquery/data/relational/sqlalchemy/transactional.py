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
"""Transaction scope: begin, then commit on success or roll back on error."""

from __future__ import annotations

import functools
import inspect
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from flyquery.kernel.exceptions import TransactionException

F = TypeVar("F", bound=Callable[..., Any])
R = TypeVar("R")

logger = structlog.get_logger("flyquery.data.transaction")

# session.info key marking that an outer scope owns the session's transaction.
_SCOPE_OWNER = "flyquery.transaction_scope"


@asynccontextmanager
async def transaction_scope(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run the enclosed block as one unit of work on *session*.

    A transaction already opened on the session (for instance by an earlier
    autobegin) is adopted, so everything pending on the session is committed
    or rolled back together. Any exception triggers a rollback and is then
    re-raised unchanged; a failed commit is rolled back the same way.

    A scope opened while another scope owns the session joins it: only the
    outermost scope commits or rolls back.
    """
    if session.info.get(_SCOPE_OWNER):
        logger.debug("transaction_joined")
        yield session
        return

    session.info[_SCOPE_OWNER] = True
    try:
        if not session.in_transaction():
            await session.begin()
        try:
            yield session
            await session.commit()
        except BaseException as exc:
            await session.rollback()
            logger.warning("transaction_rolled_back", error=type(exc).__name__)
            raise
    finally:
        session.info.pop(_SCOPE_OWNER, None)
    logger.debug("transaction_committed")


async def run_in_transaction(session: AsyncSession, work: Callable[[], Awaitable[R] | R]) -> R:
    """Call *work* inside :func:`transaction_scope` and return its result.

    *work* may be a plain callable or return an awaitable.
    """
    async with transaction_scope(session):
        result = work()
        if inspect.isawaitable(result):
            result = await result
        return result  # type: ignore[return-value]


def transactional(func: F) -> F:
    """Run an async service method inside a transaction on ``self._session``.

    Usage::

        class TransferService:
            def __init__(self, session: AsyncSession) -> None:
                self._session = session
                self._accounts = AccountRepository(session=session)

            @transactional
            async def transfer(self, source: Account, target: Account) -> None:
                ...
    """

    @functools.wraps(func)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        session: AsyncSession | None = getattr(self, "_session", None)
        if session is None:
            raise TransactionException(
                f"{type(self).__name__} has no _session; inject an AsyncSession before calling {func.__name__}"
            )
        async with transaction_scope(session):
            return await func(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]

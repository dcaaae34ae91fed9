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
"""Exception hierarchy for flyquery.

Every error raised by the library derives from :class:`FlyQueryException`,
so callers can catch one type for all library failures or a specific
subclass for targeted handling. Storage-level errors raised by SQLAlchemy
are *not* wrapped; they propagate unchanged.
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class FlyQueryException(Exception):
    """Base exception for all flyquery errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "FILTER_ARITY").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(FlyQueryException):
    """Caller supplied something the repository contract does not accept."""


class ValidationException(BusinessException):
    """Malformed query input: bad payload arity, unknown names, bad paging."""


class TypeGuardException(BusinessException):
    """Entity handed to a write operation is not an instance of the repository model."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(FlyQueryException):
    """Infrastructure misconfiguration detected by the library itself."""


class TransactionException(InfrastructureException):
    """No session is available to run a query or a unit of work."""

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
"""Tests for the flyquery exception hierarchy."""

import pytest

from flyquery.kernel.exceptions import (
    BusinessException,
    FlyQueryException,
    InfrastructureException,
    TransactionException,
    TypeGuardException,
    ValidationException,
)


class TestFlyQueryException:
    def test_message_code_and_context(self):
        exc = FlyQueryException("bad input", code="FILTER_ARITY", context={"field": "age"})
        assert str(exc) == "bad input"
        assert exc.code == "FILTER_ARITY"
        assert exc.context == {"field": "age"}

    def test_defaults(self):
        exc = FlyQueryException("oops")
        assert exc.code is None
        assert exc.context == {}


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_type, parent",
        [
            (ValidationException, BusinessException),
            (TypeGuardException, BusinessException),
            (TransactionException, InfrastructureException),
            (BusinessException, FlyQueryException),
            (InfrastructureException, FlyQueryException),
        ],
    )
    def test_subclassing(self, exc_type: type[Exception], parent: type[Exception]):
        assert issubclass(exc_type, parent)

    def test_catch_all_library_errors(self):
        with pytest.raises(FlyQueryException):
            raise TypeGuardException("wrong entity", code="TYPE_GUARD")

    def test_business_and_infrastructure_are_disjoint(self):
        assert not issubclass(ValidationException, InfrastructureException)
        assert not issubclass(TransactionException, BusinessException)

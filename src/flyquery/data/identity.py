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
"""Identity: opaque wrapper around a primary-key value."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

ID = TypeVar("ID")


@dataclass(frozen=True)
class Identity(Generic[ID]):
    """Reference to an entity by primary key."""

    value: ID

    @staticmethod
    def of(value: Any) -> Identity[Any]:
        """Wrap *value*; an existing :class:`Identity` is returned as-is.

        *value* may also be an entity; repositories resolve it to its primary key.
        """
        if isinstance(value, Identity):
            return value
        return Identity(value)

    def __str__(self) -> str:
        return str(self.value)

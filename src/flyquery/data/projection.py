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
"""Field projection value object."""

from __future__ import annotations

from dataclasses import dataclass

ALL_COLUMNS = "*"


@dataclass(frozen=True)
class Fields:
    """Set of field names to project.

    An empty set means "all fields" and renders as ``["*"]``.
    """

    names: tuple[str, ...] = ()

    @staticmethod
    def of(*names: str) -> Fields:
        """Create a projection; duplicates are dropped, first occurrence wins."""
        return Fields(names=tuple(dict.fromkeys(n for n in names if n != ALL_COLUMNS)))

    @staticmethod
    def all() -> Fields:
        return Fields()

    @property
    def is_all(self) -> bool:
        return not self.names

    def columns(self) -> list[str]:
        return [ALL_COLUMNS] if self.is_all else list(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self):
        return iter(self.names)

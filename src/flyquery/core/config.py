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
"""Configuration: packaged defaults, an optional YAML/TOML file and env overrides.

Values are addressed by dotted keys (``flyquery.data.datasource.url``) and
bound onto dataclasses marked with :func:`config_properties`. An environment
variable named after the key (``FLYQUERY_DATA_DATASOURCE_URL``) wins over
any file value.
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

T = TypeVar("T")

_PREFIX_ATTR = "__flyquery_config_prefix__"
_ENV_PREFIX = "FLYQUERY_"
_DEFAULTS = "flyquery-defaults.yaml"
_TRUTHY = ("true", "1", "yes", "on")


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Bind a dataclass to the configuration keys under *prefix*."""

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Read-only view over nested configuration data."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    @classmethod
    def defaults(cls) -> Config:
        """The defaults shipped in ``flyquery/resources``."""
        resource = importlib.resources.files("flyquery.resources").joinpath(_DEFAULTS)
        return cls(yaml.safe_load(resource.read_text(encoding="utf-8")) or {})

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Overlay a ``.yaml``/``.yml`` or ``.toml`` file on the packaged defaults.

        A missing file leaves the defaults untouched.
        """
        path = Path(path)
        data = cls.defaults()._data if load_defaults else {}
        if path.exists():
            if path.suffix == ".toml":
                loaded = tomllib.loads(path.read_text(encoding="utf-8"))
            else:
                loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            data = _merge(data, loaded)
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        env_value = os.environ.get(_env_name(key))
        if env_value is not None:
            return env_value

        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return default if node is None else node

    def bind(self, cls: type[T]) -> T:
        """Instantiate a :func:`config_properties` dataclass from this config.

        Each field is looked up as ``<prefix>.<field-name>`` (dashes) and
        then ``<prefix>.<field_name>``; missing fields keep their dataclass
        default. Strings from the environment are coerced to the field's
        ``bool``, ``int`` or ``float`` annotation.
        """
        prefix = getattr(cls, _PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{cls.__name__} is not decorated with @config_properties")

        hints = get_type_hints(cls)
        values: dict[str, Any] = {}
        for field in dataclasses.fields(cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{field.name.replace('_', '-')}")
            if value is None:
                value = self.get(f"{prefix}.{field.name}")
            if value is not None:
                values[field.name] = _coerce(value, hints.get(field.name))
        return cls(**values)


def _env_name(key: str) -> str:
    # flyquery.data.datasource.expire-on-commit -> FLYQUERY_DATA_DATASOURCE_EXPIRE_ON_COMMIT
    return _ENV_PREFIX + key.removeprefix("flyquery.").upper().replace(".", "_").replace("-", "_")


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _coerce(value: Any, target: Any) -> Any:
    if not isinstance(value, str):
        return value
    if target is bool:
        return value.strip().lower() in _TRUTHY
    if target is int:
        return int(value)
    if target is float:
        return float(value)
    return value

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
"""Tests for Config, config_properties binding and DataSourceProperties."""

from dataclasses import dataclass
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from flyquery.config.properties.data import DataSourceProperties
from flyquery.core.config import Config, config_properties
from flyquery.data.relational.sqlalchemy.datasource import create_engine, create_session_factory


class TestConfig:
    def test_get_value(self):
        config = Config({"app": {"port": 8080}})
        assert config.get("app.port") == 8080

    def test_get_with_default(self):
        config = Config({"app": {"port": None}})
        assert config.get("missing.key", "default") == "default"
        assert config.get("app.port", 80) == 80
        assert config.get("app.port.number") is None

    def test_false_is_a_value(self):
        assert Config({"flag": False}).get("flag", True) is False

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FLYQUERY_DATA_DATASOURCE_URL", "sqlite+aiosqlite:///:memory:")
        config = Config({"flyquery": {"data": {"datasource": {"url": "postgresql+asyncpg://db/app"}}}})
        assert config.get("flyquery.data.datasource.url") == "sqlite+aiosqlite:///:memory:"

    def test_env_var_for_dashed_key(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FLYQUERY_DATA_DATASOURCE_EXPIRE_ON_COMMIT", "true")
        assert Config({}).get("flyquery.data.datasource.expire-on-commit") == "true"


class TestConfigFiles:
    def test_library_defaults(self):
        config = Config.defaults()
        assert config.get("flyquery.data.datasource.url") == "sqlite+aiosqlite:///./flyquery.db"
        assert config.get("flyquery.data.datasource.echo") is False

    def test_yaml_file_overlays_defaults(self, tmp_path: Path):
        config_file = tmp_path / "flyquery.yaml"
        config_file.write_text("flyquery:\n  data:\n    datasource:\n      echo: true\n")
        config = Config.from_file(config_file)
        assert config.get("flyquery.data.datasource.echo") is True
        assert config.get("flyquery.data.datasource.url") == "sqlite+aiosqlite:///./flyquery.db"

    def test_toml_file_without_defaults(self, tmp_path: Path):
        config_file = tmp_path / "flyquery.toml"
        config_file.write_text('[flyquery.data.datasource]\nurl = "sqlite+aiosqlite:///./toml.db"\n')
        config = Config.from_file(config_file, load_defaults=False)
        assert config.get("flyquery.data.datasource.url") == "sqlite+aiosqlite:///./toml.db"
        assert config.get("flyquery.data.datasource.echo") is None

    def test_missing_file_keeps_defaults(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.get("flyquery.data.datasource.expire-on-commit") is False

    def test_empty_file(self, tmp_path: Path):
        config_file = tmp_path / "flyquery.yaml"
        config_file.write_text("")
        assert Config.from_file(config_file, load_defaults=False).get("flyquery") is None


class TestConfigProperties:
    def test_bind_to_dataclass(self):
        @config_properties(prefix="database")
        @dataclass
        class DatabaseConfig:
            url: str = "sqlite:///test.db"
            pool_size: int = 5

        config = Config({"database": {"url": "postgresql://localhost/mydb", "pool-size": 20}})
        db_config = config.bind(DatabaseConfig)
        assert db_config.url == "postgresql://localhost/mydb"
        assert db_config.pool_size == 20

    def test_bind_accepts_underscored_keys(self):
        @config_properties(prefix="database")
        @dataclass
        class DatabaseConfig:
            pool_size: int = 5

        assert Config({"database": {"pool_size": 9}}).bind(DatabaseConfig).pool_size == 9

    def test_bind_uses_defaults(self):
        @config_properties(prefix="database")
        @dataclass
        class DatabaseConfig:
            url: str = "sqlite:///default.db"
            pool_size: int = 5

        db_config = Config({}).bind(DatabaseConfig)
        assert db_config.url == "sqlite:///default.db"
        assert db_config.pool_size == 5

    def test_bind_coerces_env_strings(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FLYQUERY_DATA_DATASOURCE_ECHO", "yes")
        props = Config.defaults().bind(DataSourceProperties)
        assert props.echo is True

    def test_bind_requires_decorator(self):
        @dataclass
        class Plain:
            value: int = 1

        with pytest.raises(ValueError, match="config_properties"):
            Config({}).bind(Plain)


class TestDataSource:
    def test_properties_from_defaults(self):
        props = Config.defaults().bind(DataSourceProperties)
        assert props.url == "sqlite+aiosqlite:///./flyquery.db"
        assert props.echo is False
        assert props.expire_on_commit is False

    @pytest.mark.asyncio
    async def test_engine_and_session_factory(self):
        config = Config({"flyquery": {"data": {"datasource": {"url": "sqlite+aiosqlite:///:memory:"}}}})
        engine = create_engine(config)
        try:
            assert isinstance(engine, AsyncEngine)
            factory = create_session_factory(config, engine)
            assert isinstance(factory, async_sessionmaker)
            assert factory.kw["expire_on_commit"] is False
        finally:
            await engine.dispose()

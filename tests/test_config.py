# fluentdb — thin fluent SQL wrapper for MySQL, PostgreSQL and SQLite
# Copyright (C) 2024-2026 Dr Horst Herb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


"""Tests for fluentdb.config."""

from __future__ import annotations

import pytest

from fluentdb.config import ConfigurationError, ConnectionConfig
from fluentdb.dialects import Dialect


class TestValidate:
    def test_unknown_driver(self):
        with pytest.raises(ConfigurationError, match="Unsupported driver 'oracle'"):
            ConnectionConfig(driver="oracle", database="x", username="u").validate()

    def test_missing_database(self):
        with pytest.raises(ConfigurationError, match="'database' is required"):
            ConnectionConfig(driver="mysql", username="u").validate()

    def test_empty_username(self):
        with pytest.raises(ConfigurationError, match="'username' is required"):
            ConnectionConfig(driver="pgsql", database="music", username="").validate()

    def test_sqlite_needs_nothing(self):
        config = ConnectionConfig(driver="sqlite")
        assert config.validate() is config
        assert config.dialect is Dialect.SQLITE

    def test_is_a_value_error(self):
        assert issubclass(ConfigurationError, ValueError)


class TestFromDict:
    def test_known_keys(self):
        config = ConnectionConfig.from_dict(
            {"driver": "pgsql", "database": "music", "username": "app", "prefix": "app_"}
        )
        assert config.dialect is Dialect.POSTGRES
        assert config.prefix == "app_"

    def test_unknown_keys(self):
        with pytest.raises(ConfigurationError, match="Unknown option"):
            ConnectionConfig.from_dict({"driver": "sqlite", "dbname": "x"})


class TestFromEnv:
    def test_reads_prefixed_variables(self):
        config = ConnectionConfig.from_env(
            {
                "FLUENTDB_DRIVER": "pgsql",
                "FLUENTDB_HOST": "db.example.org",
                "FLUENTDB_PORT": "5433",
                "FLUENTDB_DATABASE": "music",
                "FLUENTDB_USERNAME": "app",
                "FLUENTDB_PASSWORD": "",
                "UNRELATED": "x",
            }
        )
        assert config.driver == "pgsql"
        assert config.host == "db.example.org"
        assert config.port == 5433
        assert config.password is None

    def test_custom_prefix(self):
        config = ConnectionConfig.from_env({"APP_DB_DRIVER": "sqlite"}, prefix="APP_DB_")
        assert config.dialect is Dialect.SQLITE

    def test_bad_port(self):
        with pytest.raises(ConfigurationError, match="PORT must be an integer"):
            ConnectionConfig.from_env({"FLUENTDB_PORT": "abc"})


class TestConnectKwargs:
    def test_sqlite_defaults_to_memory(self):
        assert ConnectionConfig(driver="sqlite").connect_kwargs() == {"path": ":memory:"}

    def test_sqlite_options(self):
        config = ConnectionConfig(driver="sqlite", database="/tmp/x.db", options={"wal_mode": False})
        assert config.connect_kwargs() == {"path": "/tmp/x.db", "wal_mode": False}

    def test_server(self):
        config = ConnectionConfig(
            driver="mysql", database="music", username="app", password="pw", port=3307
        )
        assert config.connect_kwargs() == {
            "host": "localhost",
            "database": "music",
            "user": "app",
            "password": "pw",
            "charset": "utf8",
            "port": 3307,
        }

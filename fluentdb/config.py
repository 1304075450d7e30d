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

"""Connection settings.

Settings can be given as keyword arguments, as a plain mapping
(:meth:`ConnectionConfig.from_dict`) or through environment variables
(:meth:`ConnectionConfig.from_env`)::

    FLUENTDB_DRIVER=pgsql
    FLUENTDB_HOST=db.example.org
    FLUENTDB_DATABASE=music
    FLUENTDB_USERNAME=app
    FLUENTDB_PASSWORD=secret
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

from fluentdb.dialects import Dialect

ENV_PREFIX = "FLUENTDB_"
SQLITE_MEMORY = ":memory:"


class ConfigurationError(ValueError):
    """Missing, empty or unsupported connection setting."""


@dataclass
class ConnectionConfig:
    """Everything needed to open a :class:`~fluentdb.connection.Connection`.

    Attributes:
        driver: Dialect token: ``"mysql"``, ``"pgsql"`` or ``"sqlite"``.
        host: Server host (ignored for SQLite).
        port: Server port; the driver default when ``None``.
        database: Database name, or file path for SQLite.
        username: Login user (required for MySQL and PostgreSQL).
        password: Login password.
        charset: Client character set.
        prefix: Prepended to every table name.
        options: Extra keyword arguments for the driver factory.
    """

    driver: str = Dialect.MYSQL.value
    host: str = "localhost"
    port: int | None = None
    database: str | None = None
    username: str | None = None
    password: str | None = None
    charset: str = "utf8"
    prefix: str | None = None
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def dialect(self) -> Dialect:
        try:
            return Dialect.from_token(self.driver)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

    def validate(self) -> ConnectionConfig:
        """Check the settings and return ``self``.

        Raises :class:`ConfigurationError` for an unknown driver, or a
        missing/empty ``database`` or ``username`` on server dialects.
        """
        if self.dialect is not Dialect.SQLITE:
            for name in ("database", "username"):
                if not getattr(self, name):
                    raise ConfigurationError(
                        f"Option {name!r} is required and should not be empty."
                    )
        return self

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> ConnectionConfig:
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(unknown)}")
        return cls(**options)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        prefix: str = ENV_PREFIX,
    ) -> ConnectionConfig:
        """Read ``<prefix>DRIVER``, ``<prefix>HOST``, ... from the environment."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name == "options":
                continue
            raw = env.get(prefix + f.name.upper())
            if raw is None or raw == "":
                continue
            if f.name == "port":
                try:
                    values["port"] = int(raw)
                except ValueError:
                    raise ConfigurationError(
                        f"{prefix}PORT must be an integer, got {raw!r}"
                    ) from None
            else:
                values[f.name] = raw
        return cls(**values)

    def connect_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for the matching factory in :mod:`fluentdb.db.connection`."""
        dialect = self.dialect
        if dialect is Dialect.SQLITE:
            return {"path": self.database or SQLITE_MEMORY, **self.options}
        kwargs: dict[str, Any] = {
            "host": self.host,
            "database": self.database,
            "user": self.username,
            "password": self.password,
            "charset": self.charset,
        }
        if self.port is not None:
            kwargs["port"] = self.port
        return {**kwargs, **self.options}

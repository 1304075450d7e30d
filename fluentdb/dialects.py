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

"""Supported SQL dialects and their capability tables.

Every dialect-dependent decision in fluentdb is a lookup in one of the
tables below (or an explicit three-way branch in the module that owns the
concern), never a subclass override.  The tables are keyed by
:class:`Dialect` and must cover all three members.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Dialect(str, Enum):
    """The three SQL dialects fluentdb can talk to.

    The values double as the configuration tokens accepted by
    :meth:`from_token` (``"mysql"``, ``"pgsql"``, ``"sqlite"``).
    """

    MYSQL = "mysql"
    POSTGRES = "pgsql"
    SQLITE = "sqlite"

    @classmethod
    def from_token(cls, token: str | Dialect | None) -> Dialect:
        """Resolve a configuration token to a :class:`Dialect`.

        Raises :class:`ValueError` for unknown or missing tokens.
        """
        if isinstance(token, Dialect):
            return token
        try:
            return cls(token)
        except ValueError:
            expected = ", ".join(repr(d.value) for d in cls)
            raise ValueError(
                f"Unsupported driver {token!r} provided, {expected} expected"
            ) from None

    @property
    def capabilities(self) -> DialectCapabilities:
        return CAPABILITIES[self]


@dataclass(frozen=True)
class DialectCapabilities:
    """Static facts about a dialect.

    Attributes:
        ordered_dml: ``UPDATE``/``DELETE`` accept ``ORDER BY`` and ``LIMIT``.
        databases: ``CREATE DATABASE`` / ``DROP DATABASE`` exist.
        database_guards: those statements accept ``IF [NOT] EXISTS``.
        alter_column: a column's type can be changed in place.
        foreign_key_ddl: ``ALTER TABLE ... ADD CONSTRAINT ... FOREIGN KEY``
            is available.
        drop_index_needs_table: ``DROP INDEX`` requires ``ON <table>``.
        table_suffix: appended to every ``CREATE TABLE`` statement.
    """

    ordered_dml: bool
    databases: bool
    database_guards: bool
    alter_column: bool
    foreign_key_ddl: bool
    drop_index_needs_table: bool
    table_suffix: str = ""


CAPABILITIES: dict[Dialect, DialectCapabilities] = {
    Dialect.MYSQL: DialectCapabilities(
        ordered_dml=True,
        databases=True,
        database_guards=True,
        alter_column=True,
        foreign_key_ddl=True,
        drop_index_needs_table=True,
        table_suffix=" ENGINE InnoDB",
    ),
    Dialect.POSTGRES: DialectCapabilities(
        ordered_dml=False,
        databases=True,
        database_guards=False,
        alter_column=True,
        foreign_key_ddl=True,
        drop_index_needs_table=False,
    ),
    Dialect.SQLITE: DialectCapabilities(
        ordered_dml=False,
        databases=False,
        database_guards=False,
        alter_column=False,
        foreign_key_ddl=False,
        drop_index_needs_table=False,
    ),
}

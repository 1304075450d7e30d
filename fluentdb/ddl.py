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

"""DDL statement builders.

Each builder is a pure function returning SQL text.  Builders for
operations a dialect cannot express return ``None``:

* ``CREATE/DROP DATABASE`` on SQLite (a database is a file)
* changing a column's type on SQLite (would need a table rebuild)

Foreign keys on SQLite are downgraded to a plain index on the referencing
column; referential integrity is *not* enforced there.

Table names passed to the builders are unescaped and already carry any
configured table prefix.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any

from fluentdb.dialects import Dialect
from fluentdb.escaping import EscapeMode, escape, quote_identifier
from fluentdb.type_map import translate_type

DEFAULT_COLUMN_TYPE = "VARCHAR(255)"


@dataclass
class ColumnDefinition:
    """Portable description of a table column.

    Attributes:
        type: Portable or native type name, optionally with ``(size)``.
        nullable: Emit ``NULL`` (True) or ``NOT NULL`` (False).
        default: Default value; ``None`` means no DEFAULT clause.
        auto_increment: Column is a generated integer key.
        primary: Column is (part of) the primary key.
    """

    type: str = DEFAULT_COLUMN_TYPE
    nullable: bool = True
    default: Any = None
    auto_increment: bool = False
    primary: bool = False

    @classmethod
    def coerce(cls, definition: ColumnDefinition | Mapping[str, Any] | str) -> ColumnDefinition:
        """Build a definition from a mapping or a bare type name.

        Mappings may spell nullability as ``"null"`` or ``"nullable"``;
        unknown keys are ignored.
        """
        if isinstance(definition, ColumnDefinition):
            return definition
        if isinstance(definition, str):
            return cls(type=definition)
        data = dict(definition)
        if "null" in data:
            data["nullable"] = data.pop("null")
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


Columns = Mapping[str, "ColumnDefinition | Mapping[str, Any] | str"]
Quote = Callable[[str], str]


# ---------------------------------------------------------------------------
# Column fragments
# ---------------------------------------------------------------------------


def format_default(value: Any, dialect: Dialect, quote: Quote | None = None) -> str:
    """Render a DEFAULT value as SQL."""
    if isinstance(value, str):
        return escape(value, EscapeMode.VALUE, quote)
    if isinstance(value, bool):
        if dialect is Dialect.POSTGRES:
            return "TRUE" if value else "FALSE"
        return "1" if value else "0"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    return "NULL"


def column_body_sql(
    dialect: Dialect,
    definition: ColumnDefinition | Mapping[str, Any] | str,
    quote: Quote | None = None,
) -> str:
    """Column definition without the leading column name."""
    column = ColumnDefinition.coerce(definition)
    nullable: bool | None = column.nullable

    if not column.auto_increment:
        parts = [translate_type(column.type, dialect)]
    elif dialect is Dialect.MYSQL:
        native = translate_type(column.type, dialect).replace(" AUTO_INCREMENT", "")
        if "INT" not in native.upper():
            native = "BIGINT UNSIGNED"
        parts = [f"{native} AUTO_INCREMENT"]
        nullable = False
    elif dialect is Dialect.POSTGRES:
        parts = ["BIGSERIAL" if "BIG" in column.type.upper() else "SERIAL"]
        # SERIAL implies NOT NULL
        nullable = None
    else:
        parts = ["INTEGER PRIMARY KEY AUTOINCREMENT"]
        nullable = False

    if nullable is not None:
        parts.append("NULL" if nullable else "NOT NULL")

    if column.default is not None and not (column.auto_increment and dialect is Dialect.SQLITE):
        parts.append(f"DEFAULT {format_default(column.default, dialect, quote)}")

    return " ".join(parts)


def column_definition_sql(
    dialect: Dialect,
    name: str,
    definition: ColumnDefinition | Mapping[str, Any] | str,
    quote: Quote | None = None,
) -> str:
    """``"name" <type> [NULL|NOT NULL] [DEFAULT ...]``."""
    return f"{quote_identifier(name)} {column_body_sql(dialect, definition, quote)}"


def primary_key_columns(
    dialect: Dialect,
    columns: Columns,
    primary_key: Sequence[str] | None = None,
) -> list[str]:
    """Columns for the table-level PRIMARY KEY clause.

    Explicit *primary_key* entries come first, followed by columns flagged
    ``primary``, de-duplicated in first-seen order.  SQLite auto-increment
    columns already carry an inline PRIMARY KEY and are left out.
    """
    inline = set()
    if dialect is Dialect.SQLITE:
        inline = {
            name for name, d in columns.items() if ColumnDefinition.coerce(d).auto_increment
        }

    keys: list[str] = []
    for name in primary_key or ():
        if name not in keys and name not in inline:
            keys.append(name)
    for name, definition in columns.items():
        column = ColumnDefinition.coerce(definition)
        if column.primary and name not in keys and name not in inline:
            keys.append(name)
    return keys


# ---------------------------------------------------------------------------
# Databases
# ---------------------------------------------------------------------------


def create_database_sql(dialect: Dialect, database: str) -> str | None:
    if not dialect.capabilities.databases:
        return None
    guard = " IF NOT EXISTS" if dialect.capabilities.database_guards else ""
    return f"CREATE DATABASE{guard} {quote_identifier(database)}"


def drop_database_sql(dialect: Dialect, database: str) -> str | None:
    if not dialect.capabilities.databases:
        return None
    guard = " IF EXISTS" if dialect.capabilities.database_guards else ""
    return f"DROP DATABASE{guard} {quote_identifier(database)}"


# ---------------------------------------------------------------------------
# Tables and columns
# ---------------------------------------------------------------------------


def create_table_sql(
    dialect: Dialect,
    table: str,
    columns: Columns,
    primary_key: Sequence[str] | None = None,
    if_not_exists: bool = True,
    quote: Quote | None = None,
) -> str:
    """``CREATE TABLE`` with per-dialect auto-increment and key handling.

    Args:
        dialect: Target dialect.
        table: Table name (prefixed, unescaped).
        columns: Ordered mapping of column name to definition.
        primary_key: Explicit primary key columns, merged with the
            columns flagged ``primary``.
        if_not_exists: Add ``IF NOT EXISTS``.
        quote: Literal quoting for string defaults.
    """
    fragments = [
        column_definition_sql(dialect, name, definition, quote)
        for name, definition in columns.items()
    ]
    keys = primary_key_columns(dialect, columns, primary_key)
    if keys:
        fragments.append("PRIMARY KEY (" + ", ".join(quote_identifier(k) for k in keys) + ")")

    guard = " IF NOT EXISTS" if if_not_exists else ""
    sql = f"CREATE TABLE{guard} {quote_identifier(table)} ({', '.join(fragments)})"
    return sql + dialect.capabilities.table_suffix


def drop_table_sql(table: str, if_exists: bool = True) -> str:
    guard = " IF EXISTS" if if_exists else ""
    return f"DROP TABLE{guard} {quote_identifier(table)}"


def add_column_sql(
    dialect: Dialect,
    table: str,
    column: str,
    definition: ColumnDefinition | Mapping[str, Any] | str,
    quote: Quote | None = None,
) -> str:
    body = column_body_sql(dialect, definition, quote)
    return f"ALTER TABLE {quote_identifier(table)} ADD COLUMN {quote_identifier(column)} {body}"


def drop_column_sql(table: str, column: str) -> str:
    return f"ALTER TABLE {quote_identifier(table)} DROP COLUMN {quote_identifier(column)}"


def modify_column_sql(
    dialect: Dialect,
    table: str,
    column: str,
    definition: ColumnDefinition | Mapping[str, Any] | str,
    quote: Quote | None = None,
) -> str | None:
    """Change a column's definition in place; ``None`` on SQLite.

    PostgreSQL only changes the type; nullability and defaults are left as
    they are.
    """
    if not dialect.capabilities.alter_column:
        return None
    table_sql = quote_identifier(table)
    column_sql = quote_identifier(column)
    if dialect is Dialect.MYSQL:
        body = column_body_sql(dialect, definition, quote)
        return f"ALTER TABLE {table_sql} MODIFY COLUMN {column_sql} {body}"
    native = translate_type(ColumnDefinition.coerce(definition).type, dialect)
    return f"ALTER TABLE {table_sql} ALTER COLUMN {column_sql} TYPE {native}"


# ---------------------------------------------------------------------------
# Indexes and foreign keys
# ---------------------------------------------------------------------------


def index_name(table: str, columns: Sequence[str], unique: bool = False) -> str:
    """Default index name, e.g. ``idx_users_email_name``."""
    prefix = "unique_" if unique else "idx_"
    return f"{prefix}{table}_{'_'.join(columns)}"


def foreign_key_name(table: str, column: str, referenced_table: str) -> str:
    """Default constraint name, e.g. ``fk_posts_user_id_users``."""
    return f"fk_{table}_{column}_{referenced_table}"


def create_index_sql(
    table: str,
    columns: Sequence[str],
    name: str,
    unique: bool = False,
) -> str:
    column_list = ", ".join(quote_identifier(c) for c in columns)
    kind = "UNIQUE INDEX" if unique else "INDEX"
    return f"CREATE {kind} {quote_identifier(name)} ON {quote_identifier(table)} ({column_list})"


def drop_index_sql(dialect: Dialect, table: str, name: str) -> str:
    if dialect.capabilities.drop_index_needs_table:
        return f"DROP INDEX {quote_identifier(name)} ON {quote_identifier(table)}"
    return f"DROP INDEX {quote_identifier(name)}"


def add_foreign_key_sql(
    dialect: Dialect,
    table: str,
    column: str,
    referenced_table: str,
    referenced_column: str,
    name: str,
) -> str:
    """Foreign key constraint, or an index on *column* for SQLite."""
    table_sql = quote_identifier(table)
    column_sql = quote_identifier(column)
    name_sql = quote_identifier(name)
    if not dialect.capabilities.foreign_key_ddl:
        return f"CREATE INDEX IF NOT EXISTS {name_sql} ON {table_sql} ({column_sql})"
    return (
        f"ALTER TABLE {table_sql} ADD CONSTRAINT {name_sql}"
        f" FOREIGN KEY ({column_sql})"
        f" REFERENCES {quote_identifier(referenced_table)} ({quote_identifier(referenced_column)})"
    )

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

"""CRUD and aggregate statement builders.

Every builder returns ``(sql, params)`` with ``?`` placeholders.  Table
names are unescaped and already prefixed.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from fluentdb.clauses import (
    DEFAULT_PRIMARY_KEY,
    Sort,
    build_id_subquery,
    build_query_suffix,
    needs_id_subquery,
)
from fluentdb.dialects import Dialect
from fluentdb.escaping import EscapeMode, escape, escape_column, quote_identifier
from fluentdb.filters import Filter

AGGREGATES = frozenset({"AVG", "COUNT", "MAX", "MIN", "SUM"})

Statement = tuple[str, list[Any]]


def selection_sql(columns: str | Sequence[str] | None) -> str:
    """Render the SELECT list; ``name{alias}`` entries become ``AS`` aliases."""
    if columns is None or columns == "*":
        return "*"
    if isinstance(columns, str):
        return escape(columns, EscapeMode.ALIAS)
    return ", ".join(escape(column, EscapeMode.ALIAS) for column in columns)


def select_sql(
    dialect: Dialect,
    table: str,
    columns: str | Sequence[str] | None = None,
    filter: Filter | None = None,
    sort: Sort | None = None,
    max_rows: int = 0,
    start: int = 0,
) -> Statement:
    table_sql = escape(table, EscapeMode.ALIAS)
    suffix = build_query_suffix(dialect, filter, sort, max_rows, start)
    return f"SELECT {selection_sql(columns)} FROM {table_sql}{suffix.sql}", suffix.params


def insert_sql(dialect: Dialect, table: str, values: Mapping[str, Any]) -> Statement:
    table_sql = quote_identifier(table)
    if not values:
        if dialect is Dialect.MYSQL:
            return f"INSERT INTO {table_sql} () VALUES ()", []
        return f"INSERT INTO {table_sql} DEFAULT VALUES", []
    columns = ", ".join(escape_column(column) for column in values)
    placeholders = ", ".join("?" for _ in values)
    return f"INSERT INTO {table_sql} ({columns}) VALUES ({placeholders})", list(values.values())


def update_sql(
    dialect: Dialect,
    table: str,
    values: Mapping[str, Any],
    filter: Filter | None = None,
    sort: Sort | None = None,
    max_rows: int = 0,
    start: int = 0,
    primary_key: str = DEFAULT_PRIMARY_KEY,
) -> Statement:
    """``UPDATE`` with SET parameters first, then filter parameters.

    On dialects without ordered DML a sort or row cap is applied through a
    primary key subquery.
    """
    table_sql = quote_identifier(table)
    assignments = ", ".join(f"{escape_column(column)} = ?" for column in values)
    params = list(values.values())
    sql = f"UPDATE {table_sql} SET {assignments}"

    if needs_id_subquery(dialect, sort, max_rows):
        inner = build_id_subquery(dialect, table, filter, sort, max_rows, start, primary_key)
        return f"{sql} WHERE {quote_identifier(primary_key)} IN ({inner.sql})", params + inner.params

    suffix = build_query_suffix(dialect, filter, sort, max_rows, start, allow_order_by_limit=False)
    return sql + suffix.sql, params + suffix.params


def delete_sql(
    dialect: Dialect,
    table: str,
    filter: Filter | None = None,
    sort: Sort | None = None,
    max_rows: int = 0,
    start: int = 0,
    primary_key: str = DEFAULT_PRIMARY_KEY,
) -> Statement:
    table_sql = quote_identifier(table)
    sql = f"DELETE FROM {table_sql}"

    if needs_id_subquery(dialect, sort, max_rows):
        inner = build_id_subquery(dialect, table, filter, sort, max_rows, start, primary_key)
        return f"{sql} WHERE {quote_identifier(primary_key)} IN ({inner.sql})", inner.params

    suffix = build_query_suffix(dialect, filter, sort, max_rows, start, allow_order_by_limit=False)
    return sql + suffix.sql, suffix.params


def aggregate_sql(
    dialect: Dialect,
    table: str,
    function: str,
    column: str = "*",
    filter: Filter | None = None,
    sort: Sort | None = None,
    max_rows: int = 0,
    start: int = 0,
) -> Statement:
    """``SELECT FN(column) AS "value" FROM ...``.

    Raises :class:`ValueError` for functions outside :data:`AGGREGATES`.
    """
    function = function.upper()
    if function not in AGGREGATES:
        raise ValueError(f"Unknown aggregate {function!r}. Available: {sorted(AGGREGATES)}")
    target = column if column == "*" else escape_column(column)
    suffix = build_query_suffix(dialect, filter, sort, max_rows, start)
    sql = f'SELECT {function}({target}) AS "value" FROM {quote_identifier(table)}{suffix.sql}'
    return sql, suffix.params

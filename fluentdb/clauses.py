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

"""WHERE / ORDER BY / LIMIT suffix assembly.

``UPDATE`` and ``DELETE`` only accept ``ORDER BY`` and ``LIMIT`` on MySQL.
For PostgreSQL and SQLite the statement builders rewrite such requests as
``... WHERE "id" IN (SELECT "id" FROM t ... ORDER BY ... LIMIT ...)`` using
:func:`build_id_subquery`.
"""

from __future__ import annotations

from collections.abc import Mapping

from fluentdb.dialects import Dialect
from fluentdb.escaping import escape_column, quote_identifier
from fluentdb.filters import CompiledPredicate, Filter, compile_filter

DEFAULT_PRIMARY_KEY = "id"

Sort = Mapping[str, str]


def build_order_by(sort: Sort | None) -> str:
    """Return `` ORDER BY ...`` for *sort*, or ``""`` when it is empty."""
    if not sort:
        return ""
    order = [f"{escape_column(column)} {direction.upper()}" for column, direction in sort.items()]
    return " ORDER BY " + ", ".join(order)


def build_limit(dialect: Dialect, max_rows: int, start: int = 0) -> str:
    """Return the dialect's LIMIT/OFFSET clause, or ``""`` if unbounded."""
    if max_rows <= 0:
        return ""
    if dialect is Dialect.MYSQL:
        return f" LIMIT {start}, {max_rows}" if start > 0 else f" LIMIT {max_rows}"
    return f" LIMIT {max_rows} OFFSET {start}"


def build_query_suffix(
    dialect: Dialect,
    filter: Filter | None = None,
    sort: Sort | None = None,
    max_rows: int = 0,
    start: int = 0,
    allow_order_by_limit: bool = True,
) -> CompiledPredicate:
    """Build the ``WHERE ... ORDER BY ... LIMIT ...`` tail of a statement.

    Args:
        dialect: Target dialect.
        filter: Filter mapping (see :mod:`fluentdb.filters`).
        sort: Ordered column -> ``ASC``/``DESC`` mapping.
        max_rows: Row cap, ``0`` for none.
        start: Offset, only used together with *max_rows*.
        allow_order_by_limit: ``True`` for SELECT-class statements.  When
            ``False`` ordering and pagination are only emitted if the
            dialect supports them in ``UPDATE``/``DELETE``.
    """
    where = compile_filter(filter)
    sql = f" WHERE {where.sql}" if where.sql else ""

    if allow_order_by_limit or dialect.capabilities.ordered_dml:
        sql += build_order_by(sort)
        sql += build_limit(dialect, max_rows, start)

    return CompiledPredicate(sql, where.params)


def needs_id_subquery(dialect: Dialect, sort: Sort | None, max_rows: int) -> bool:
    """True when an UPDATE/DELETE must go through :func:`build_id_subquery`."""
    return not dialect.capabilities.ordered_dml and (bool(sort) or max_rows > 0)


def build_id_subquery(
    dialect: Dialect,
    table: str,
    filter: Filter | None = None,
    sort: Sort | None = None,
    max_rows: int = 0,
    start: int = 0,
    primary_key: str = DEFAULT_PRIMARY_KEY,
) -> CompiledPredicate:
    """``SELECT <pk> FROM <table>`` restricted, ordered and paginated.

    *table* is the unescaped, already prefixed table name.
    """
    suffix = build_query_suffix(dialect, filter, sort, max_rows, start)
    sql = f"SELECT {quote_identifier(primary_key)} FROM {quote_identifier(table)}{suffix.sql}"
    return CompiledPredicate(sql, suffix.params)

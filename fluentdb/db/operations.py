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

"""Pure-function cursor helpers.

All functions take a DB-API connection as their first argument.  SQL is
passed in directly, using the driver's own placeholder style (``?`` for
SQLite, ``%s`` for PostgreSQL and MySQL).  Passing ``params=None`` skips
parameter interpolation entirely, which matters for ``format``-style
drivers when the SQL contains a literal ``%``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from fluentdb.dialects import Dialect

logger = logging.getLogger(__name__)


def detect_dialect(conn: Any) -> Dialect:
    """Infer the dialect from the connection's driver module."""
    module_name = type(conn).__module__
    if "sqlite3" in module_name:
        return Dialect.SQLITE
    if "psycopg" in module_name:
        return Dialect.POSTGRES
    if "pymysql" in module_name or "MySQLdb" in module_name:
        return Dialect.MYSQL
    raise ValueError(f"Cannot detect SQL dialect for connection type {type(conn)!r}")


def execute(conn: Any, sql: str, params: Sequence | None = ()) -> Any:
    """Execute a single statement and return the cursor.

    Useful for INSERT / UPDATE / DELETE where you might need
    ``cursor.lastrowid`` or ``cursor.rowcount``.  The caller closes the
    returned cursor.
    """
    cur = conn.cursor()
    if params is None:
        cur.execute(sql)
    else:
        cur.execute(sql, params)
    return cur


def fetch_one(conn: Any, sql: str, params: Sequence | None = ()) -> Any:
    """Execute and return the first row, or ``None``."""
    cur = execute(conn, sql, params)
    try:
        return cur.fetchone()
    finally:
        cur.close()


def fetch_all(conn: Any, sql: str, params: Sequence | None = ()) -> list[Any]:
    """Execute and return all rows."""
    cur = execute(conn, sql, params)
    try:
        return list(cur.fetchall())
    finally:
        cur.close()


def fetch_scalar(conn: Any, sql: str, params: Sequence | None = ()) -> Any:
    """Execute and return the first column of the first row, or ``None``."""
    row = fetch_one(conn, sql, params)
    if row is None:
        return None
    # Dict rows (psycopg2 RealDictRow, pymysql DictCursor) have no
    # positional access; sqlite3.Row and tuples do.
    if isinstance(row, dict):
        return next(iter(row.values()), None)
    try:
        return row[0]
    except (IndexError, KeyError):
        return None


def table_exists(conn: Any, name: str) -> bool:
    """Check whether a table exists on any of the supported backends."""
    dialect = detect_dialect(conn)
    if dialect is Dialect.SQLITE:
        row = fetch_one(
            conn,
            "SELECT 1 FROM sqlite_master WHERE type='table' AND name=?",
            (name,),
        )
    elif dialect is Dialect.MYSQL:
        row = fetch_one(
            conn,
            "SELECT 1 FROM information_schema.tables"
            " WHERE table_schema = DATABASE() AND table_name=%s",
            (name,),
        )
    else:
        row = fetch_one(
            conn,
            "SELECT 1 FROM information_schema.tables WHERE table_name=%s",
            (name,),
        )
    return row is not None


def execute_script(conn: Any, script: str) -> None:
    """Execute a (possibly multi-statement) SQL script.

    For SQLite the entire string is executed via ``executescript()``.
    Other backends receive one statement at a time, split on ``;``, so
    the script must not contain semicolons inside literals.
    """
    if detect_dialect(conn) is Dialect.SQLITE:
        conn.executescript(script)
        return
    cur = conn.cursor()
    try:
        for statement in script.split(";"):
            if statement.strip():
                cur.execute(statement)
    finally:
        cur.close()

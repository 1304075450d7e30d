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

"""Database connection factories.

Each function returns a standard DB-API 2.0 connection in autocommit mode;
transactions are opened explicitly by
:class:`~fluentdb.db.executor.DBAPIExecutor`.  SQLite uses the built-in
``sqlite3`` module; PostgreSQL uses ``psycopg2`` and MySQL/MariaDB uses
``pymysql`` (both optional dependencies).

All sessions must accept ANSI double-quoted identifiers, so MySQL sessions
are switched to ``ANSI_QUOTES`` mode on connect.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def connect_sqlite(
    path: str | Path,
    *,
    wal_mode: bool = True,
    foreign_keys: bool = True,
) -> sqlite3.Connection:
    """Open (or create) a SQLite database and return a connection.

    Args:
        path: File path (``":memory:"`` for in-memory).
        wal_mode: Enable WAL journal mode for better concurrent access.
        foreign_keys: Enforce foreign key constraints.
    """
    path = str(Path(path).expanduser()) if path != ":memory:" else ":memory:"

    if path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
    conn.row_factory = sqlite3.Row

    if wal_mode and path != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")
    if foreign_keys:
        conn.execute("PRAGMA foreign_keys=ON")

    logger.debug("SQLite connection opened: %s", path)
    return conn


def connect_postgresql(
    dsn: str | None = None,
    *,
    host: str = "localhost",
    port: int = 5432,
    database: str = "fluentdb",
    user: str = "fluentdb",
    password: str | None = None,
    charset: str = "utf8",
) -> Any:
    """Open a PostgreSQL connection via psycopg2.

    Either provide a full *dsn* string, or individual parameters.

    Returns:
        A ``psycopg2`` connection with ``RealDictCursor`` as the default
        cursor factory and autocommit enabled.
    """
    try:
        import psycopg2
        import psycopg2.extras
    except ImportError:
        raise ImportError(
            "psycopg2 not installed. Install with: pip install fluentdb[postgresql]"
        )

    if dsn:
        conn = psycopg2.connect(dsn, cursor_factory=psycopg2.extras.RealDictCursor)
    else:
        conn = psycopg2.connect(
            host=host,
            port=port,
            database=database,
            user=user,
            password=password,
            cursor_factory=psycopg2.extras.RealDictCursor,
        )
    conn.autocommit = True
    with conn.cursor() as cur:
        cur.execute(f"SET NAMES '{charset}'")

    logger.debug("PostgreSQL connection opened: %s:%s/%s", host, port, database)
    return conn


def connect_mysql(
    *,
    host: str = "localhost",
    port: int = 3306,
    database: str = "fluentdb",
    user: str = "fluentdb",
    password: str | None = None,
    charset: str = "utf8",
) -> Any:
    """Open a MySQL/MariaDB connection via pymysql.

    Returns:
        A ``pymysql`` connection with ``DictCursor`` as the default cursor
        class, autocommit enabled and ``SQL_MODE=ANSI_QUOTES``.
    """
    try:
        import pymysql
        import pymysql.cursors
    except ImportError:
        raise ImportError(
            "pymysql not installed. Install with: pip install fluentdb[mysql]"
        )

    conn = pymysql.connect(
        host=host,
        port=port,
        database=database,
        user=user,
        password=password or "",
        charset=charset,
        autocommit=True,
        cursorclass=pymysql.cursors.DictCursor,
        init_command="SET SQL_MODE=ANSI_QUOTES",
    )

    logger.debug("MySQL connection opened: %s:%s/%s", host, port, database)
    return conn

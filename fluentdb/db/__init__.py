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


"""Driver layer — connection factories, cursor helpers and the executor.

Supports SQLite (built-in), PostgreSQL (optional, via psycopg2) and
MySQL/MariaDB (optional, via pymysql).

Usage::

    from fluentdb.db import DBAPIExecutor, connect_sqlite, transaction

    executor = DBAPIExecutor(connect_sqlite("~/.myapp/data.db"))
    with transaction(executor):
        executor.execute("INSERT INTO papers (doi, title) VALUES (?, ?)", ["10.1101/x", "A paper"])
    rows = executor.query("SELECT * FROM papers")
"""

from fluentdb.db.connection import connect_mysql, connect_postgresql, connect_sqlite
from fluentdb.db.executor import DBAPIExecutor, Executor, to_format_paramstyle
from fluentdb.db.operations import (
    detect_dialect,
    execute,
    execute_script,
    fetch_all,
    fetch_one,
    fetch_scalar,
    table_exists,
)
from fluentdb.db.transactions import transaction

__all__ = [
    "connect_sqlite",
    "connect_postgresql",
    "connect_mysql",
    "detect_dialect",
    "execute",
    "execute_script",
    "fetch_one",
    "fetch_all",
    "fetch_scalar",
    "table_exists",
    "transaction",
    "Executor",
    "DBAPIExecutor",
    "to_format_paramstyle",
]

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

"""The fluent :class:`Connection` façade.

``Connection`` owns one :class:`~fluentdb.db.executor.Executor` and a fixed
:class:`~fluentdb.dialects.Dialect`.  Its methods assemble statements with
the builders in :mod:`fluentdb.statements` and :mod:`fluentdb.ddl` and hand
them to the executor.  DDL methods return ``False`` when the operation has
no equivalent on the active dialect; driver errors propagate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import asdict
from typing import Any, TypeVar

from fluentdb import ddl, statements
from fluentdb.clauses import DEFAULT_PRIMARY_KEY, Sort
from fluentdb.config import ConnectionConfig
from fluentdb.db.connection import connect_mysql, connect_postgresql, connect_sqlite
from fluentdb.db.executor import DBAPIExecutor, Executor
from fluentdb.db.transactions import transaction
from fluentdb.ddl import ColumnDefinition, Columns
from fluentdb.dialects import Dialect
from fluentdb.escaping import EscapeMode, escape
from fluentdb.filters import Filter

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FACTORIES: dict[Dialect, Callable[..., Any]] = {
    Dialect.MYSQL: connect_mysql,
    Dialect.POSTGRES: connect_postgresql,
    Dialect.SQLITE: connect_sqlite,
}


class Connection:
    """CRUD, aggregation and DDL helpers bound to one database session.

    Usage::

        db = Connection.connect({"driver": "sqlite", "database": ":memory:"})
        db.create("music", {
            "id": {"type": "INTEGER", "auto_increment": True, "primary": True},
            "title": {"type": "VARCHAR(255)", "null": False},
            "duration": "SMALLINT",
        })
        db.insert("music", {"title": "Blue", "duration": 200})
        db.select("music", ["title"], {"duration{>}": 100}, {"duration": "DESC"}, 10)

    Parameters
    ----------
    executor:
        The SQL executor to run statements on.
    dialect:
        Dialect of the executor's session; fixed for the connection's
        lifetime.
    prefix:
        Prepended to every table name.
    database:
        Database name used by :meth:`create` / :meth:`drop` without a table.
    """

    def __init__(
        self,
        executor: Executor,
        dialect: Dialect | str,
        *,
        prefix: str | None = None,
        database: str | None = None,
    ) -> None:
        self._executor = executor
        self._dialect = Dialect.from_token(dialect)
        self.prefix = prefix
        self.database = database

    @classmethod
    def connect(
        cls,
        config: ConnectionConfig | Mapping[str, Any] | None = None,
        **settings: Any,
    ) -> Connection:
        """Open a driver connection from *config* (or keyword settings).

        Keyword *settings* override the matching fields of *config*.
        Raises :class:`~fluentdb.config.ConfigurationError` for invalid
        settings and :class:`ImportError` when the driver is not installed.
        """
        if config is None:
            config = ConnectionConfig.from_dict(settings)
        elif isinstance(config, ConnectionConfig):
            if settings:
                config = ConnectionConfig.from_dict({**asdict(config), **settings})
        else:
            config = ConnectionConfig.from_dict({**config, **settings})
        config.validate()

        dialect = config.dialect
        raw = _FACTORIES[dialect](**config.connect_kwargs())
        return cls(
            DBAPIExecutor(raw, dialect),
            dialect,
            prefix=config.prefix,
            database=config.database,
        )

    # --- Session ---

    @property
    def executor(self) -> Executor:
        return self._executor

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    def close(self) -> None:
        self._executor.close()

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _table(self, table: str) -> str:
        return f"{self.prefix}{table}" if self.prefix else table

    def escape(self, value: str, mode: EscapeMode = EscapeMode.VALUE) -> str:
        """Quote *value* as a literal, identifier or alias (see :class:`EscapeMode`)."""
        return escape(value, mode, self._executor.quote)

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> int:
        """Run raw SQL with ``?`` placeholders; return the affected row count."""
        return self._executor.execute(sql, params)

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run a raw query with ``?`` placeholders."""
        return self._executor.query(sql, params)

    def id(self, sequence: str | None = None) -> str | None:
        """ID generated by the last INSERT."""
        return self._executor.last_insert_id(sequence)

    def batch(self, callback: Callable[[Connection], T]) -> T:
        """Run ``callback(self)`` in a transaction and return its result.

        Commits when the callback returns, rolls back and re-raises when it
        raises.  Inside an already open transaction the callback just runs.
        """
        with transaction(self._executor):
            return callback(self)

    # --- Reads ---

    def select(
        self,
        table: str,
        columns: str | Sequence[str] | None = None,
        filter: Filter | None = None,
        sort: Sort | None = None,
        max_rows: int = 0,
        start: int = 0,
    ) -> list[dict[str, Any]]:
        """Rows of *table* matching *filter*.

        *table* and *columns* accept ``name{alias}``.  *columns* may be
        ``None`` or ``"*"`` for all columns.
        """
        sql, params = statements.select_sql(
            self._dialect, self._table(table), columns, filter, sort, max_rows, start
        )
        return self._executor.query(sql, params)

    def first(
        self,
        table: str,
        filter: Filter | None = None,
        sort: Sort | None = None,
        start: int = 0,
    ) -> dict[str, Any] | None:
        rows = self.select(table, "*", filter, sort, 1, start)
        return rows[0] if rows else None

    def aggregate(
        self,
        table: str,
        function: str,
        column: str = "*",
        filter: Filter | None = None,
        sort: Sort | None = None,
        max_rows: int = 0,
        start: int = 0,
    ) -> int | None:
        """``function(column)`` over matching rows as ``int``; ``None`` for SQL NULL."""
        sql, params = statements.aggregate_sql(
            self._dialect, self._table(table), function, column, filter, sort, max_rows, start
        )
        rows = self._executor.query(sql, params)
        if not rows or rows[0].get("value") is None:
            return None
        return int(rows[0]["value"])

    def count(
        self,
        table: str,
        column: str = "*",
        filter: Filter | None = None,
        sort: Sort | None = None,
        max_rows: int = 0,
        start: int = 0,
    ) -> int:
        return self.aggregate(table, "COUNT", column, filter, sort, max_rows, start) or 0

    def exists(self, table: str, filter: Filter | None = None) -> bool:
        return self.count(table, "*", filter) > 0

    def average(
        self,
        table: str,
        column: str,
        filter: Filter | None = None,
        sort: Sort | None = None,
        max_rows: int = 0,
        start: int = 0,
    ) -> int | None:
        return self.aggregate(table, "AVG", column, filter, sort, max_rows, start)

    def sum(
        self,
        table: str,
        column: str,
        filter: Filter | None = None,
        sort: Sort | None = None,
        max_rows: int = 0,
        start: int = 0,
    ) -> int | None:
        return self.aggregate(table, "SUM", column, filter, sort, max_rows, start)

    def min(
        self,
        table: str,
        column: str,
        filter: Filter | None = None,
        sort: Sort | None = None,
        max_rows: int = 0,
        start: int = 0,
    ) -> int | None:
        return self.aggregate(table, "MIN", column, filter, sort, max_rows, start)

    def max(
        self,
        table: str,
        column: str,
        filter: Filter | None = None,
        sort: Sort | None = None,
        max_rows: int = 0,
        start: int = 0,
    ) -> int | None:
        return self.aggregate(table, "MAX", column, filter, sort, max_rows, start)

    # --- Writes ---

    def insert(self, table: str, values: Mapping[str, Any]) -> int:
        sql, params = statements.insert_sql(self._dialect, self._table(table), values)
        return self._executor.execute(sql, params)

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        filter: Filter | None = None,
        sort: Sort | None = None,
        max_rows: int = 0,
        start: int = 0,
        *,
        primary_key: str = DEFAULT_PRIMARY_KEY,
    ) -> int:
        """Update matching rows; return the affected row count.

        With *sort* or *max_rows* on PostgreSQL/SQLite the target rows are
        picked through a subquery on *primary_key*.
        """
        sql, params = statements.update_sql(
            self._dialect, self._table(table), values, filter, sort, max_rows, start, primary_key
        )
        return self._executor.execute(sql, params)

    def delete(
        self,
        table: str,
        filter: Filter | None = None,
        sort: Sort | None = None,
        max_rows: int = 0,
        start: int = 0,
        *,
        primary_key: str = DEFAULT_PRIMARY_KEY,
    ) -> int:
        sql, params = statements.delete_sql(
            self._dialect, self._table(table), filter, sort, max_rows, start, primary_key
        )
        return self._executor.execute(sql, params)

    # --- DDL ---

    def _run_ddl(self, sql: str | None, operation: str) -> bool:
        if sql is None:
            logger.warning("%s is not supported on %s", operation, self._dialect.value)
            return False
        self._executor.execute(sql)
        return True

    def create(
        self,
        table: str | None = None,
        columns: Columns | None = None,
        primary_key: Sequence[str] | None = None,
        *,
        if_not_exists: bool = True,
    ) -> bool:
        """Create *table*, or the configured database when *table* is ``None``."""
        if table is None:
            if not self.database:
                logger.warning("CREATE DATABASE needs a database name")
                return False
            return self._run_ddl(
                ddl.create_database_sql(self._dialect, self.database), "CREATE DATABASE"
            )
        sql = ddl.create_table_sql(
            self._dialect,
            self._table(table),
            columns or {},
            primary_key,
            if_not_exists,
            self._executor.quote,
        )
        return self._run_ddl(sql, "CREATE TABLE")

    def drop(
        self,
        table: str | None = None,
        column: str | None = None,
        *,
        if_exists: bool = True,
    ) -> bool:
        """Drop *column* of *table*, *table*, or the configured database."""
        if table is None:
            if not self.database:
                logger.warning("DROP DATABASE needs a database name")
                return False
            return self._run_ddl(
                ddl.drop_database_sql(self._dialect, self.database), "DROP DATABASE"
            )
        if column is not None:
            return self._run_ddl(ddl.drop_column_sql(self._table(table), column), "DROP COLUMN")
        return self._run_ddl(ddl.drop_table_sql(self._table(table), if_exists), "DROP TABLE")

    def add(
        self,
        table: str,
        column: str,
        definition: ColumnDefinition | Mapping[str, Any] | str,
    ) -> bool:
        sql = ddl.add_column_sql(
            self._dialect, self._table(table), column, definition, self._executor.quote
        )
        return self._run_ddl(sql, "ADD COLUMN")

    def modify(
        self,
        table: str,
        column: str,
        definition: ColumnDefinition | Mapping[str, Any] | str,
    ) -> bool:
        """Change a column's definition; always ``False`` on SQLite."""
        sql = ddl.modify_column_sql(
            self._dialect, self._table(table), column, definition, self._executor.quote
        )
        return self._run_ddl(sql, "MODIFY COLUMN")

    def index(self, table: str, columns: str | Sequence[str], name: str | None = None) -> bool:
        return self._create_index(table, columns, name, unique=False)

    def unique(self, table: str, columns: str | Sequence[str], name: str | None = None) -> bool:
        return self._create_index(table, columns, name, unique=True)

    def _create_index(
        self,
        table: str,
        columns: str | Sequence[str],
        name: str | None,
        unique: bool,
    ) -> bool:
        columns = [columns] if isinstance(columns, str) else list(columns)
        name = name or ddl.index_name(table, columns, unique)
        sql = ddl.create_index_sql(self._table(table), columns, name, unique)
        return self._run_ddl(sql, "CREATE INDEX")

    def unindex(self, table: str, identifier: str | Sequence[str]) -> bool:
        """Drop an index by name, or by the columns of a default-named index."""
        if isinstance(identifier, str):
            name = identifier
        else:
            name = ddl.index_name(table, list(identifier))
        return self._run_ddl(
            ddl.drop_index_sql(self._dialect, self._table(table), name), "DROP INDEX"
        )

    def foreign(
        self,
        table: str,
        column: str,
        references: Sequence[str],
        name: str | None = None,
    ) -> bool:
        """Reference ``references = (table, column)`` from *table*.*column*.

        SQLite gets an index on *column* instead of a constraint.
        """
        if len(references) != 2:
            logger.warning("Foreign key references must be (table, column), got %r", references)
            return False
        referenced_table, referenced_column = references
        name = name or ddl.foreign_key_name(table, column, referenced_table)
        sql = ddl.add_foreign_key_sql(
            self._dialect,
            self._table(table),
            column,
            self._table(referenced_table),
            referenced_column,
            name,
        )
        return self._run_ddl(sql, "ADD FOREIGN KEY")

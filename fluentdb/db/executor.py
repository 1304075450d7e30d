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

"""SQL executor — the only component that talks to a driver.

The statement builders emit ``?`` placeholders.  :class:`DBAPIExecutor`
runs that SQL on a DB-API connection, rewriting placeholders for drivers
using the ``format`` paramstyle (psycopg2, pymysql).  Driver errors
propagate unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from fluentdb.db.operations import detect_dialect, execute, fetch_all, fetch_scalar
from fluentdb.dialects import Dialect
from fluentdb.escaping import quote_literal

logger = logging.getLogger(__name__)


@runtime_checkable
class Executor(Protocol):
    """What the :class:`~fluentdb.connection.Connection` façade needs."""

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> int: ...

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]: ...

    def quote(self, value: str) -> str: ...

    def last_insert_id(self, sequence: str | None = None) -> str | None: ...

    def begin(self) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def close(self) -> None: ...


def to_format_paramstyle(sql: str, backslash_escapes: bool = False) -> str:
    """Rewrite ``?`` placeholders as ``%s`` and escape literal ``%``.

    Question marks inside single- or double-quoted sections are left
    alone.  With *backslash_escapes* (MySQL) a backslash inside a quoted
    section escapes the next character.
    """
    out: list[str] = []
    quote: str | None = None
    escaped = False
    for ch in sql:
        if ch == "%":
            out.append("%%")
            continue
        if quote is not None:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\" and backslash_escapes and quote == "'":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
            out.append(ch)
        elif ch == "?":
            out.append("%s")
        else:
            out.append(ch)
    return "".join(out)


class DBAPIExecutor:
    """:class:`Executor` over a DB-API 2.0 connection in autocommit mode.

    Parameters
    ----------
    connection:
        An open ``sqlite3``, ``psycopg2`` or ``pymysql`` connection, as
        returned by the factories in :mod:`fluentdb.db.connection`.
    dialect:
        The connection's dialect; detected from the driver when omitted.
    """

    def __init__(self, connection: Any, dialect: Dialect | None = None) -> None:
        self.connection = connection
        self.dialect = dialect or detect_dialect(connection)
        self._in_transaction = False
        self._last_rowid: Any = None

    def _prepare(self, sql: str, params: Sequence[Any] | None) -> tuple[str, Sequence[Any] | None]:
        if self.dialect is Dialect.SQLITE:
            return sql, list(params or ())
        if not params:
            return sql, None
        return to_format_paramstyle(sql, self.dialect is Dialect.MYSQL), list(params)

    def _run(self, sql: str) -> None:
        execute(self.connection, sql, None).close()

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> int:
        """Run a statement and return the affected row count."""
        logger.debug("execute: %s %r", sql, params)
        cur = execute(self.connection, *self._prepare(sql, params))
        try:
            self._last_rowid = cur.lastrowid
            return cur.rowcount
        finally:
            cur.close()

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run a query and return every row as a plain ``dict``."""
        logger.debug("query: %s %r", sql, params)
        return [dict(row) for row in fetch_all(self.connection, *self._prepare(sql, params))]

    def quote(self, value: str) -> str:
        """Quote *value* as a string literal using the driver's rules."""
        if self.dialect is Dialect.MYSQL:
            return self.connection.escape(value)
        if self.dialect is Dialect.POSTGRES:
            with self.connection.cursor() as cur:
                return cur.mogrify("%s", (value,)).decode()
        return quote_literal(value)

    def last_insert_id(self, sequence: str | None = None) -> str | None:
        """ID generated by the last INSERT (or *sequence*'s current value)."""
        if self.dialect is Dialect.POSTGRES:
            if sequence:
                value = fetch_scalar(self.connection, "SELECT currval(%s)", (sequence,))
            else:
                value = fetch_scalar(self.connection, "SELECT lastval()", None)
        else:
            value = self._last_rowid
        return None if value is None else str(value)

    @property
    def in_transaction(self) -> bool:
        if self.dialect is Dialect.SQLITE:
            return self._in_transaction or self.connection.in_transaction
        return self._in_transaction

    def begin(self) -> bool:
        """Open a transaction; ``False`` if one is already open."""
        if self.in_transaction:
            return False
        self._run("BEGIN")
        self._in_transaction = True
        return True

    def commit(self) -> None:
        self._run("COMMIT")
        self._in_transaction = False

    def rollback(self) -> None:
        try:
            self._run("ROLLBACK")
        finally:
            self._in_transaction = False

    def close(self) -> None:
        self.connection.close()
        logger.debug("%s connection closed", self.dialect.value)

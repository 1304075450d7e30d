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

"""Column type translation between dialects.

Column definitions are written with portable type names (``BOOLEAN``,
``VARCHAR(255)``, ``DATETIME``, ``UUID`` ...) and translated to the native
type of the active dialect.  Types missing from the tables are passed
through untouched, so dialect-specific types can still be used directly.
"""

from __future__ import annotations

import re

from fluentdb.dialects import Dialect

_GROUP_RE = re.compile(r"\([^)]*\)")
_PARAMS_RE = re.compile(r"\(([^)]+)\)")

# Native types that accept a (size) / (precision, scale) suffix
PARAMETERIZED = frozenset({"VARCHAR", "CHAR", "DECIMAL", "NUMERIC", "FLOAT", "DOUBLE"})

TYPE_MAP: dict[Dialect, dict[str, str]] = {
    Dialect.MYSQL: {
        "BOOLEAN": "TINYINT(1)",
        "BOOL": "TINYINT(1)",
        "TEXT": "TEXT",
        "LONGTEXT": "LONGTEXT",
        "MEDIUMTEXT": "MEDIUMTEXT",
        "TINYTEXT": "TINYTEXT",
        "BLOB": "BLOB",
        "LONGBLOB": "LONGBLOB",
        "MEDIUMBLOB": "MEDIUMBLOB",
        "TINYBLOB": "TINYBLOB",
        "BYTEA": "BLOB",
        "SERIAL": "INT AUTO_INCREMENT",
        "BIGSERIAL": "BIGINT AUTO_INCREMENT",
        "INTEGER": "INT",
        "INT": "INT",
        "SMALLINT": "SMALLINT",
        "BIGINT": "BIGINT",
        "TINYINT": "TINYINT",
        "DECIMAL": "DECIMAL",
        "NUMERIC": "DECIMAL",
        "REAL": "DOUBLE",
        "DOUBLE": "DOUBLE",
        "FLOAT": "FLOAT",
        "DATE": "DATE",
        "TIME": "TIME",
        "DATETIME": "DATETIME",
        "TIMESTAMP": "TIMESTAMP",
        "YEAR": "YEAR",
        "CHAR": "CHAR",
        "VARCHAR": "VARCHAR",
        "BINARY": "BINARY",
        "VARBINARY": "VARBINARY",
        "JSON": "JSON",
        "UUID": "CHAR(36)",
    },
    Dialect.POSTGRES: {
        "BOOLEAN": "BOOLEAN",
        "BOOL": "BOOLEAN",
        "TEXT": "TEXT",
        "LONGTEXT": "TEXT",
        "MEDIUMTEXT": "TEXT",
        "TINYTEXT": "TEXT",
        "BLOB": "BYTEA",
        "LONGBLOB": "BYTEA",
        "MEDIUMBLOB": "BYTEA",
        "TINYBLOB": "BYTEA",
        "SERIAL": "SERIAL",
        "BIGSERIAL": "BIGSERIAL",
        "INTEGER": "INTEGER",
        "INT": "INTEGER",
        "SMALLINT": "SMALLINT",
        "BIGINT": "BIGINT",
        "TINYINT": "SMALLINT",
        "DECIMAL": "DECIMAL",
        "NUMERIC": "NUMERIC",
        "REAL": "REAL",
        "DOUBLE": "DOUBLE PRECISION",
        "FLOAT": "REAL",
        "DATE": "DATE",
        "TIME": "TIME",
        "DATETIME": "TIMESTAMP",
        "TIMESTAMP": "TIMESTAMP",
        "YEAR": "INTEGER",
        "CHAR": "CHAR",
        "VARCHAR": "VARCHAR",
        "BINARY": "BYTEA",
        "VARBINARY": "BYTEA",
        "JSON": "JSON",
        "JSONB": "JSONB",
        "UUID": "UUID",
    },
    Dialect.SQLITE: {
        "BOOLEAN": "INTEGER",
        "BOOL": "INTEGER",
        "TEXT": "TEXT",
        "LONGTEXT": "TEXT",
        "MEDIUMTEXT": "TEXT",
        "TINYTEXT": "TEXT",
        "BLOB": "BLOB",
        "LONGBLOB": "BLOB",
        "MEDIUMBLOB": "BLOB",
        "TINYBLOB": "BLOB",
        "BYTEA": "BLOB",
        "SERIAL": "INTEGER",
        "BIGSERIAL": "INTEGER",
        "INTEGER": "INTEGER",
        "INT": "INTEGER",
        "SMALLINT": "INTEGER",
        "BIGINT": "INTEGER",
        "TINYINT": "INTEGER",
        "DECIMAL": "REAL",
        "NUMERIC": "REAL",
        "REAL": "REAL",
        "DOUBLE": "REAL",
        "FLOAT": "REAL",
        "DATE": "TEXT",
        "TIME": "TEXT",
        "DATETIME": "TEXT",
        "TIMESTAMP": "TEXT",
        "YEAR": "INTEGER",
        "CHAR": "TEXT",
        "VARCHAR": "TEXT",
        "BINARY": "BLOB",
        "VARBINARY": "BLOB",
        "JSON": "TEXT",
        "JSONB": "TEXT",
        "UUID": "TEXT",
    },
}


def split_type(type_name: str) -> tuple[str, str | None]:
    """Split ``"varchar(255)"`` into ``("VARCHAR", "255")``.

    The base type is upper-cased with every parenthesised group removed;
    the second element is the text of the first non-empty group, or ``None``.
    """
    base = _GROUP_RE.sub("", type_name).strip().upper()
    match = _PARAMS_RE.search(type_name)
    return base, match.group(1) if match else None


def translate_type(type_name: str, dialect: Dialect) -> str:
    """Translate a portable column type to *dialect*'s native type.

    >>> translate_type("BOOLEAN", Dialect.MYSQL)
    'TINYINT(1)'
    >>> translate_type("NUMERIC(10,2)", Dialect.MYSQL)
    'DECIMAL(10,2)'
    >>> translate_type("CUSTOM_TYPE", Dialect.SQLITE)
    'CUSTOM_TYPE'
    """
    base, params = split_type(type_name)
    translated = TYPE_MAP[dialect].get(base)
    if translated is None:
        return type_name
    if params is not None and "(" not in translated and translated in PARAMETERIZED:
        return f"{translated}({params})"
    return translated

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

"""Identifier, alias and literal quoting.

All three dialects are addressed with ANSI double-quoted identifiers (MySQL
sessions are switched to ``ANSI_QUOTES`` when the connection is opened), so
identifier quoting is dialect independent.  Literal quoting is delegated to
the executor, which knows the driver's own escaping rules.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from enum import Enum

IDENTIFIER_QUOTE = '"'

_ALIAS_RE = re.compile(r"(?P<name>[A-Za-z0-9_]+)\{(?P<alias>[A-Za-z0-9_]+)\}")
_QUALIFIED_RE = re.compile(r"(?P<table>[A-Za-z0-9_]+)\.(?P<column>[A-Za-z0-9_]+)")


class EscapeMode(Enum):
    """Which quoting rule :func:`escape` applies."""

    ALIAS = 1  # "name{alias}" -> "name" AS "alias"
    IDENTIFIER = 2  # "name" -> "name"
    QUALIFIED_IDENTIFIER = 3  # "table.column" -> "table"."column"
    VALUE = 4  # string literal


def quote_identifier(name: str) -> str:
    """Wrap *name* in double quotes, doubling any embedded quote."""
    doubled = name.replace(IDENTIFIER_QUOTE, IDENTIFIER_QUOTE * 2)
    return f"{IDENTIFIER_QUOTE}{doubled}{IDENTIFIER_QUOTE}"


def quote_literal(value: str) -> str:
    """Standard SQL string literal; used when no executor quoting is available."""
    return "'" + value.replace("'", "''") + "'"


def escape(
    value: str,
    mode: EscapeMode = EscapeMode.VALUE,
    quote: Callable[[str], str] | None = None,
) -> str:
    """Escape *value* according to *mode*.

    Args:
        value: Identifier, alias expression or literal to escape.
        mode: The quoting rule to apply.
        quote: Literal quoting function for :attr:`EscapeMode.VALUE`,
            normally ``executor.quote``.  Falls back to :func:`quote_literal`.
    """
    if mode is EscapeMode.VALUE:
        return (quote or quote_literal)(value)
    if mode is EscapeMode.ALIAS:
        match = _ALIAS_RE.fullmatch(value)
        if match:
            return f"{quote_identifier(match['name'])} AS {quote_identifier(match['alias'])}"
    elif mode is EscapeMode.QUALIFIED_IDENTIFIER:
        match = _QUALIFIED_RE.fullmatch(value)
        if match:
            return f"{quote_identifier(match['table'])}.{quote_identifier(match['column'])}"
    return quote_identifier(value)


def escape_column(column: str) -> str:
    """Shorthand for a possibly table-qualified column reference."""
    return escape(column, EscapeMode.QUALIFIED_IDENTIFIER)

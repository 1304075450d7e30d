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

"""Filter compiler — nested filter mappings to a WHERE expression.

A filter is a mapping whose keys are either the combinators ``"AND"`` /
``"OR"`` (value: a nested filter) or a column reference with an optional
operator suffix in braces::

    {
        "duration{>}": 100,
        "OR": {"category": "electronics", "featured": True},
    }

compiles to ``"duration" > ? AND ("category" = ? OR "featured" = ?)`` with
parameters ``[100, "electronics", "1"]``.

Operator tokens and the SQL they produce:

=========  ===========  ===========  ===========
token      scalar       ``None``     list
=========  ===========  ===========  ===========
(none)     ``=``        ``IS``       ``IN``
``!``      ``!=``       ``IS NOT``   ``NOT IN``
``>`` ...  unchanged    unchanged    unchanged
``~``      ``LIKE``
``!~``     ``NOT LIKE``
=========  ===========  ===========  ===========

Comparison operators are not checked against the value kind; a ``{>}``
with a list produces SQL the database will reject.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from fluentdb.escaping import escape_column

COMBINATORS = ("AND", "OR")
ALWAYS_FALSE = "1 = 0"

Filter = Mapping[str, Any]


@dataclass
class CompiledPredicate:
    """SQL boolean expression plus its positional parameters.

    The Nth ``?`` in :attr:`sql` binds to ``params[N]``.
    """

    sql: str = ""
    params: list[Any] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.sql)


def parse_filter_key(key: str) -> tuple[str, str]:
    """Split ``"column{op}"`` into ``("column", "op")``.

    Keys without a trailing ``{...}`` group are a bare column with the
    default ``=`` token.  The split happens at the first ``{`` so a column
    name can never contain one.
    """
    if key.endswith("}"):
        brace = key.find("{")
        if brace > 0:
            return key[:brace], key[brace + 1 : -1]
    return key, "="


def normalize_operator(token: str, value: Any) -> str:
    """Map an operator token plus the runtime value kind to SQL."""
    if token in ("!", "!="):
        if value is None:
            return "IS NOT"
        if _is_list(value):
            return "NOT IN"
        return "!="
    if token in (">", ">=", "<", "<="):
        return token
    if token == "~":
        return "LIKE"
    if token == "!~":
        return "NOT LIKE"
    if value is None:
        return "IS"
    if _is_list(value):
        return "IN"
    return "="


def bind_value(value: Any) -> Any:
    """Coerce a Python value to what is bound for a placeholder."""
    if isinstance(value, bool):
        return "1" if value else "0"
    return value


def compile_filter(filter: Filter | None, bool_op: str = "AND") -> CompiledPredicate:
    """Compile *filter* into a :class:`CompiledPredicate`.

    Entries are visited in insertion order and joined with *bool_op*.
    Nested ``AND``/``OR`` groups are parenthesised; empty groups vanish.
    List values bind one placeholder per non-``None`` member; an empty
    list (or one holding only ``None``) makes the clause ``1 = 0``,
    whether the operator is ``IN`` or ``NOT IN``.
    """
    clauses: list[str] = []
    params: list[Any] = []

    for key, value in (filter or {}).items():
        if key in COMBINATORS:
            nested = compile_filter(value, key)
            if nested.sql:
                clauses.append(f"({nested.sql})")
                params.extend(nested.params)
            continue

        column, token = parse_filter_key(key)
        operator = normalize_operator(token, value)
        lhs = f"{escape_column(column)} {operator}"

        if value is None:
            clauses.append(f"{lhs} NULL")
        elif _is_list(value):
            members = [bind_value(item) for item in value if item is not None]
            if not members:
                clauses.append(ALWAYS_FALSE)
            else:
                placeholders = ", ".join("?" for _ in members)
                clauses.append(f"{lhs} ({placeholders})")
                params.extend(members)
        else:
            clauses.append(f"{lhs} ?")
            params.append(bind_value(value))

    return CompiledPredicate(f" {bool_op} ".join(clauses).strip(), params)


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))

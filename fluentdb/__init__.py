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


"""Thin fluent SQL wrapper for MySQL, PostgreSQL and SQLite.

Statements are assembled from plain mappings (filters, sort orders,
column definitions) and run through an executor that owns the driver
connection.

Usage::

    from fluentdb import Connection

    db = Connection.connect(driver="sqlite", database="~/.myapp/music.db")
    db.create("music", {
        "id": {"type": "INTEGER", "auto_increment": True, "primary": True},
        "title": "VARCHAR(255)",
        "duration": "SMALLINT",
        "category": "VARCHAR(64)",
        "featured": "BOOLEAN",
    })
    db.insert("music", {"title": "Blue", "duration": 200, "featured": True})
    rows = db.select(
        "music",
        ["title", "duration{length}"],
        {"duration{>}": 100, "OR": {"category": "electronics", "featured": True}},
        {"title": "ASC"},
        10,
    )
"""

from fluentdb.config import ConfigurationError, ConnectionConfig
from fluentdb.connection import Connection
from fluentdb.ddl import ColumnDefinition
from fluentdb.dialects import Dialect
from fluentdb.escaping import EscapeMode
from fluentdb.type_map import translate_type

__all__ = [
    "Connection",
    "ConnectionConfig",
    "ConfigurationError",
    "ColumnDefinition",
    "Dialect",
    "EscapeMode",
    "translate_type",
]

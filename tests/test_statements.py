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


"""Tests for fluentdb.statements."""

from __future__ import annotations

import pytest

from fluentdb.dialects import Dialect
from fluentdb.statements import (
    aggregate_sql,
    delete_sql,
    insert_sql,
    select_sql,
    selection_sql,
    update_sql,
)


class TestSelection:
    def test_all(self):
        assert selection_sql(None) == "*"
        assert selection_sql("*") == "*"

    def test_aliases(self):
        assert selection_sql(["title", "duration{length}"]) == (
            '"title", "duration" AS "length"'
        )


class TestSelect:
    def test_filter_sort_limit(self):
        sql, params = select_sql(
            Dialect.POSTGRES,
            "music",
            ["title"],
            {"duration{>}": 100, "OR": {"category": "electronics", "featured": True}},
            {"title": "ASC"},
            10,
            20,
        )
        assert sql == (
            'SELECT "title" FROM "music"'
            ' WHERE "duration" > ? AND ("category" = ? OR "featured" = ?)'
            ' ORDER BY "title" ASC LIMIT 10 OFFSET 20'
        )
        assert params == [100, "electronics", "1"]

    def test_table_alias(self):
        sql, _ = select_sql(Dialect.SQLITE, "music{m}", ["title"])
        assert sql == 'SELECT "title" FROM "music" AS "m"'

    def test_mysql_limit(self):
        sql, _ = select_sql(Dialect.MYSQL, "music", None, None, None, 5, 10)
        assert sql == 'SELECT * FROM "music" LIMIT 10, 5'


class TestInsert:
    def test_values(self):
        sql, params = insert_sql(Dialect.SQLITE, "music", {"title": "Blue", "duration": 200})
        assert sql == 'INSERT INTO "music" ("title", "duration") VALUES (?, ?)'
        assert params == ["Blue", 200]

    def test_empty_values_mysql(self):
        assert insert_sql(Dialect.MYSQL, "t", {}) == ('INSERT INTO "t" () VALUES ()', [])

    def test_empty_values_elsewhere(self):
        assert insert_sql(Dialect.POSTGRES, "t", {}) == ('INSERT INTO "t" DEFAULT VALUES', [])


class TestUpdate:
    def test_set_params_come_first(self):
        sql, params = update_sql(Dialect.SQLITE, "music", {"title": "Red"}, {"id": 3})
        assert sql == 'UPDATE "music" SET "title" = ? WHERE "id" = ?'
        assert params == ["Red", 3]

    def test_mysql_order_and_limit_inline(self):
        sql, params = update_sql(
            Dialect.MYSQL, "music", {"featured": False}, {"duration{<}": 60}, {"id": "DESC"}, 2
        )
        assert sql == (
            'UPDATE "music" SET "featured" = ? WHERE "duration" < ? ORDER BY "id" DESC LIMIT 2'
        )
        assert params == [False, 60]

    def test_subquery_fallback(self):
        sql, params = update_sql(
            Dialect.POSTGRES, "music", {"featured": True}, {"duration{<}": 60}, {"id": "DESC"}, 2
        )
        assert sql == (
            'UPDATE "music" SET "featured" = ? WHERE "id" IN'
            ' (SELECT "id" FROM "music" WHERE "duration" < ? ORDER BY "id" DESC LIMIT 2 OFFSET 0)'
        )
        assert params == [True, 60]

    def test_subquery_custom_primary_key(self):
        sql, _ = update_sql(
            Dialect.SQLITE, "t", {"a": 1}, None, None, 1, primary_key="uid"
        )
        assert sql == (
            'UPDATE "t" SET "a" = ? WHERE "uid" IN (SELECT "uid" FROM "t" LIMIT 1 OFFSET 0)'
        )


class TestDelete:
    def test_plain(self):
        sql, params = delete_sql(Dialect.POSTGRES, "music", {"id": [1, 2]})
        assert sql == 'DELETE FROM "music" WHERE "id" IN (?, ?)'
        assert params == [1, 2]

    def test_everything(self):
        assert delete_sql(Dialect.SQLITE, "music") == ('DELETE FROM "music"', [])

    def test_mysql_limit(self):
        sql, _ = delete_sql(Dialect.MYSQL, "music", None, {"id": "ASC"}, 1)
        assert sql == 'DELETE FROM "music" ORDER BY "id" ASC LIMIT 1'

    def test_subquery_fallback(self):
        sql, params = delete_sql(Dialect.SQLITE, "music", {"featured": True}, None, 1)
        assert sql == (
            'DELETE FROM "music" WHERE "id" IN'
            ' (SELECT "id" FROM "music" WHERE "featured" = ? LIMIT 1 OFFSET 0)'
        )
        assert params == ["1"]


class TestAggregate:
    def test_count_star(self):
        sql, params = aggregate_sql(Dialect.SQLITE, "music", "count")
        assert sql == 'SELECT COUNT(*) AS "value" FROM "music"'
        assert params == []

    def test_column_with_filter(self):
        sql, params = aggregate_sql(Dialect.MYSQL, "music", "AVG", "duration", {"featured": True})
        assert sql == 'SELECT AVG("duration") AS "value" FROM "music" WHERE "featured" = ?'
        assert params == ["1"]

    def test_unknown_function(self):
        with pytest.raises(ValueError, match="Unknown aggregate"):
            aggregate_sql(Dialect.SQLITE, "music", "MEDIAN")


class TestDeterminism:
    FILTER = {"duration{>}": 100, "OR": {"category": ["jazz", "ambient"], "featured": False}}
    SORT = {"title": "ASC", "duration": "DESC"}

    @pytest.mark.parametrize("dialect", list(Dialect))
    def test_select_is_repeatable(self, dialect):
        first = select_sql(dialect, "music", ["title"], dict(self.FILTER), dict(self.SORT), 10, 5)
        second = select_sql(dialect, "music", ["title"], dict(self.FILTER), dict(self.SORT), 10, 5)
        assert first == second

    @pytest.mark.parametrize("dialect", list(Dialect))
    def test_delete_is_repeatable(self, dialect):
        first = delete_sql(dialect, "music", dict(self.FILTER), dict(self.SORT), 2)
        second = delete_sql(dialect, "music", dict(self.FILTER), dict(self.SORT), 2)
        assert first == second
        assert first[1] == [100, "jazz", "ambient", "0"]

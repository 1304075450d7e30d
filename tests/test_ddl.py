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


"""Tests for fluentdb.ddl."""

from __future__ import annotations

from fluentdb.ddl import (
    ColumnDefinition,
    add_column_sql,
    add_foreign_key_sql,
    column_body_sql,
    create_database_sql,
    create_index_sql,
    create_table_sql,
    drop_column_sql,
    drop_database_sql,
    drop_index_sql,
    drop_table_sql,
    foreign_key_name,
    format_default,
    index_name,
    modify_column_sql,
    primary_key_columns,
)
from fluentdb.dialects import Dialect

AUTO_ID = {"type": "INTEGER", "auto_increment": True, "primary": True}


class TestColumnDefinition:
    def test_from_type_string(self):
        assert ColumnDefinition.coerce("TEXT") == ColumnDefinition(type="TEXT")

    def test_from_mapping_with_null_key(self):
        column = ColumnDefinition.coerce({"type": "TEXT", "null": False, "comment": "x"})
        assert column.type == "TEXT"
        assert column.nullable is False

    def test_instance_is_returned_unchanged(self):
        column = ColumnDefinition(type="INT")
        assert ColumnDefinition.coerce(column) is column

    def test_default_type(self):
        assert ColumnDefinition.coerce({}).type == "VARCHAR(255)"


class TestFormatDefault:
    def test_string(self):
        assert format_default("it's", Dialect.SQLITE) == "'it''s'"

    def test_bool(self):
        assert format_default(True, Dialect.POSTGRES) == "TRUE"
        assert format_default(False, Dialect.MYSQL) == "0"

    def test_number(self):
        assert format_default(1.5, Dialect.MYSQL) == "1.5"


class TestColumnBody:
    def test_plain(self):
        body = column_body_sql(
            Dialect.MYSQL, {"type": "VARCHAR(255)", "null": False, "default": "x"}
        )
        assert body == "VARCHAR(255) NOT NULL DEFAULT 'x'"

    def test_auto_increment_mysql(self):
        assert column_body_sql(Dialect.MYSQL, AUTO_ID) == "INT AUTO_INCREMENT NOT NULL"

    def test_auto_increment_mysql_serial(self):
        body = column_body_sql(Dialect.MYSQL, {"type": "SERIAL", "auto_increment": True})
        assert body == "INT AUTO_INCREMENT NOT NULL"

    def test_auto_increment_mysql_non_integer_widens(self):
        body = column_body_sql(Dialect.MYSQL, {"type": "VARCHAR(10)", "auto_increment": True})
        assert body == "BIGINT UNSIGNED AUTO_INCREMENT NOT NULL"

    def test_auto_increment_postgres(self):
        assert column_body_sql(Dialect.POSTGRES, AUTO_ID) == "SERIAL"
        big = {"type": "BIGINT", "auto_increment": True}
        assert column_body_sql(Dialect.POSTGRES, big) == "BIGSERIAL"

    def test_auto_increment_sqlite(self):
        assert column_body_sql(Dialect.SQLITE, AUTO_ID) == (
            "INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL"
        )

    def test_quote_callable_is_used_for_defaults(self):
        body = column_body_sql(Dialect.POSTGRES, {"type": "TEXT", "default": "a"}, lambda v: "<a>")
        assert body == "TEXT NULL DEFAULT <a>"


class TestCreateTable:
    COLUMNS = {"id": AUTO_ID, "email": "VARCHAR(255)"}

    def test_mysql(self):
        assert create_table_sql(Dialect.MYSQL, "users", self.COLUMNS) == (
            'CREATE TABLE IF NOT EXISTS "users" ("id" INT AUTO_INCREMENT NOT NULL,'
            ' "email" VARCHAR(255) NULL, PRIMARY KEY ("id")) ENGINE InnoDB'
        )

    def test_postgres(self):
        assert create_table_sql(Dialect.POSTGRES, "users", self.COLUMNS) == (
            'CREATE TABLE IF NOT EXISTS "users" ("id" SERIAL,'
            ' "email" VARCHAR(255) NULL, PRIMARY KEY ("id"))'
        )

    def test_sqlite_inlines_autoincrement_key(self):
        assert create_table_sql(Dialect.SQLITE, "users", self.COLUMNS, if_not_exists=False) == (
            'CREATE TABLE "users" ("id" INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,'
            ' "email" TEXT NULL)'
        )

    def test_composite_primary_key(self):
        columns = {"a": "INT", "b": {"type": "INT", "primary": True}, "c": "TEXT"}
        assert primary_key_columns(Dialect.SQLITE, columns, ["a"]) == ["a", "b"]
        sql = create_table_sql(Dialect.SQLITE, "t", columns, ["a", "b"])
        assert sql.endswith('PRIMARY KEY ("a", "b"))')


class TestDatabases:
    def test_mysql(self):
        assert create_database_sql(Dialect.MYSQL, "music") == (
            'CREATE DATABASE IF NOT EXISTS "music"'
        )
        assert drop_database_sql(Dialect.MYSQL, "music") == 'DROP DATABASE IF EXISTS "music"'

    def test_postgres(self):
        assert create_database_sql(Dialect.POSTGRES, "music") == 'CREATE DATABASE "music"'

    def test_sqlite_unsupported(self):
        assert create_database_sql(Dialect.SQLITE, "music") is None
        assert drop_database_sql(Dialect.SQLITE, "music") is None


class TestColumns:
    def test_drop_table(self):
        assert drop_table_sql("t") == 'DROP TABLE IF EXISTS "t"'
        assert drop_table_sql("t", if_exists=False) == 'DROP TABLE "t"'

    def test_add_column(self):
        assert add_column_sql(Dialect.SQLITE, "t", "flag", "BOOLEAN") == (
            'ALTER TABLE "t" ADD COLUMN "flag" INTEGER NULL'
        )

    def test_drop_column(self):
        assert drop_column_sql("t", "c") == 'ALTER TABLE "t" DROP COLUMN "c"'

    def test_modify_mysql(self):
        assert modify_column_sql(Dialect.MYSQL, "t", "c", {"type": "LONGTEXT", "null": False}) == (
            'ALTER TABLE "t" MODIFY COLUMN "c" LONGTEXT NOT NULL'
        )

    def test_modify_postgres(self):
        assert modify_column_sql(Dialect.POSTGRES, "t", "c", "LONGTEXT") == (
            'ALTER TABLE "t" ALTER COLUMN "c" TYPE TEXT'
        )

    def test_modify_sqlite_unsupported(self):
        assert modify_column_sql(Dialect.SQLITE, "t", "c", "TEXT") is None


class TestIndexes:
    def test_index_name(self):
        assert index_name("users", ["email", "name"]) == "idx_users_email_name"
        assert index_name("users", ["email"], unique=True) == "unique_users_email"

    def test_create_index(self):
        assert create_index_sql("users", ["email", "name"], "idx_users_email_name") == (
            'CREATE INDEX "idx_users_email_name" ON "users" ("email", "name")'
        )
        assert create_index_sql("users", ["email"], "u", unique=True) == (
            'CREATE UNIQUE INDEX "u" ON "users" ("email")'
        )

    def test_drop_index(self):
        assert drop_index_sql(Dialect.MYSQL, "users", "i") == 'DROP INDEX "i" ON "users"'
        assert drop_index_sql(Dialect.POSTGRES, "users", "i") == 'DROP INDEX "i"'
        assert drop_index_sql(Dialect.SQLITE, "users", "i") == 'DROP INDEX "i"'


class TestForeignKeys:
    def test_name(self):
        assert foreign_key_name("posts", "user_id", "users") == "fk_posts_user_id_users"

    def test_constraint(self):
        sql = add_foreign_key_sql(Dialect.POSTGRES, "posts", "user_id", "users", "id", "fk")
        assert sql == (
            'ALTER TABLE "posts" ADD CONSTRAINT "fk" FOREIGN KEY ("user_id")'
            ' REFERENCES "users" ("id")'
        )

    def test_sqlite_gets_an_index(self):
        sql = add_foreign_key_sql(Dialect.SQLITE, "posts", "user_id", "users", "id", "fk")
        assert sql == 'CREATE INDEX IF NOT EXISTS "fk" ON "posts" ("user_id")'

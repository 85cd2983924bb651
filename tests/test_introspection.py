"""Unit tests for catalog queries."""

from __future__ import annotations

from sqlcompose.schema.table import TableReference

HR_PEOPLE = TableReference(schema="hr", name="people")


def test_show_schemas(generator):
    assert generator.show_schemas_query() == "SELECT USERNAME FROM ALL_USERS;"


def test_version(generator):
    assert generator.version_query() == (
        "SELECT VERSION FROM PRODUCT_COMPONENT_VERSION GROUP BY VERSION"
    )


def test_show_tables(generator):
    assert generator.show_tables_query() == "SELECT TABLE_NAME FROM USER_TABLES"


class TestShowIndexes:
    def test_unqualified_table(self, generator):
        assert generator.show_indexes_query("users") == (
            "SELECT INDEX_NAME FROM USER_INDEXES WHERE TABLE_NAME = 'users'"
        )

    def test_schema_qualified_table(self, generator):
        assert generator.show_indexes_query(HR_PEOPLE) == (
            "SELECT INDEX_NAME FROM ALL_INDEXES WHERE TABLE_NAME = 'people' AND OWNER = 'hr'"
        )

    def test_table_name_is_a_literal(self, generator):
        sql = generator.show_indexes_query("x' OR '1'='1")
        assert sql.endswith("WHERE TABLE_NAME = 'x'' OR ''1''=''1'")


class TestDescribeTable:
    def test_unqualified_table(self, generator):
        assert generator.describe_table_query("users") == (
            "SELECT COLUMN_NAME, DATA_TYPE, DATA_LENGTH, NULLABLE, DATA_DEFAULT "
            "FROM USER_TAB_COLUMNS WHERE TABLE_NAME = 'users' ORDER BY COLUMN_ID"
        )

    def test_schema_qualified_table(self, generator):
        sql = generator.describe_table_query(HR_PEOPLE)
        assert "FROM ALL_TAB_COLUMNS WHERE TABLE_NAME = 'people' AND OWNER = 'hr' ORDER BY" in sql


class TestForeignKeys:
    def test_unqualified_table(self, generator):
        sql = generator.get_foreign_keys_query("users")
        assert "FROM USER_CONSTRAINTS C" in sql
        assert "JOIN USER_CONS_COLUMNS CC" in sql
        assert "JOIN ALL_CONSTRAINTS R ON R.CONSTRAINT_NAME = C.R_CONSTRAINT_NAME" in sql
        assert "JOIN ALL_CONS_COLUMNS RC ON RC.CONSTRAINT_NAME = R.CONSTRAINT_NAME" in sql
        assert "R.OWNER AS REFERENCED_TABLE_SCHEMA" in sql
        assert sql.endswith("WHERE C.CONSTRAINT_TYPE = 'R' AND C.TABLE_NAME = 'users'")

    def test_schema_qualified_table(self, generator):
        sql = generator.get_foreign_keys_query(HR_PEOPLE)
        assert "FROM ALL_CONSTRAINTS C" in sql
        assert "USER_" not in sql
        assert sql.endswith("C.TABLE_NAME = 'people' AND C.OWNER = 'hr'")

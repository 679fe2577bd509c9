"""Tests for the Snowflake driver against a fake connection."""

import pytest
import snowflake.connector

from sqlgen.database.models import SemanticType
from sqlgen.database.snowflake import SnowflakeDriver
from sqlgen.errors import QueryError


def _show_primary_key_row(column, sequence, constraint="SYS_PK"):
    # created_on, database, schema, table, column_name, key_sequence, constraint_name
    return ("", "DB", "PUBLIC", "ORDERS", column, sequence, constraint)


def _show_imported_key_row(fk_name, fk_column, pk_table, pk_column, sequence=1):
    row = [""] * 13
    row[3] = pk_table
    row[4] = pk_column
    row[8] = fk_column
    row[9] = sequence
    row[12] = fk_name
    return tuple(row)


@pytest.fixture
def driver(fake_connection):
    d = SnowflakeDriver(database="DB", account="acct", user="me", password="pw")
    d._connection = fake_connection
    return d


class TestSnowflakeDriver:
    """Test SnowflakeDriver metadata queries."""

    def test_capabilities(self):
        """Test Snowflake capability flags."""
        d = SnowflakeDriver(database="DB", account="acct")
        assert d.default_schema == "PUBLIC"
        assert d.use_last_insert_id() is False
        assert d.use_top_clause() is True
        assert d.left_quote() == '"'
        assert d.index_placeholders() is False

    def test_credentials_from_environment(self, monkeypatch):
        """Test missing credentials fall back to SNOWFLAKE_* variables."""
        monkeypatch.setenv("SNOWFLAKE_ACCOUNT", "env-acct")
        monkeypatch.setenv("SNOWFLAKE_USER", "env-user")
        d = SnowflakeDriver(database="DB")
        assert d.account == "env-acct"
        assert d.user == "env-user"

    def test_primary_key_sorted_by_sequence(self, driver, fake_connection):
        """Test SHOW PRIMARY KEYS rows are ordered by key sequence."""
        fake_connection.cursor_mock.fetchall.side_effect = [[
            _show_primary_key_row("LINE", 2),
            _show_primary_key_row("ORDER_ID", 1),
        ]]

        pkey = driver.primary_key_info("PUBLIC", "ORDERS")
        assert pkey.name == "SYS_PK"
        assert pkey.columns == ("ORDER_ID", "LINE")

        sql = fake_connection.cursor_mock.execute.call_args[0][0]
        assert sql == 'SHOW PRIMARY KEYS IN TABLE "DB"."PUBLIC"."ORDERS"'

    def test_foreign_keys(self, driver, fake_connection):
        """Test SHOW IMPORTED KEYS rows are read by position."""
        fake_connection.cursor_mock.fetchall.side_effect = [[
            _show_imported_key_row("FK_CUSTOMER", "CUSTOMER_ID", "CUSTOMERS", "ID"),
        ]]

        fkeys = driver.foreign_key_info("PUBLIC", "ORDERS")
        assert len(fkeys) == 1
        assert fkeys[0].name == "FK_CUSTOMER"
        assert fkeys[0].column == "CUSTOMER_ID"
        assert fkeys[0].foreign_table == "CUSTOMERS"
        assert fkeys[0].foreign_column == "ID"

    def test_columns(self, driver, fake_connection):
        """Test identity columns are generated and unique keys detected."""
        fake_connection.cursor_mock.fetchall.side_effect = [
            [
                ("ID", "NUMBER", 38, 0, None, "IDENTITY", "NO"),
                ("TOTAL", "NUMBER", 10, 2, None, None, "YES"),
                ("CODE", "TEXT", None, None, 16, None, "NO"),
            ],
            [_show_primary_key_row("ID", 1)],
            [("", "DB", "PUBLIC", "ORDERS", "CODE", 1, "UQ_CODE")],
        ]

        columns = driver.columns("PUBLIC", "ORDERS")

        assert columns[0].type_name == SemanticType.INT64
        assert columns[0].generated is True
        assert columns[0].unique is True
        assert columns[1].type_name == SemanticType.FLOAT64
        assert columns[1].full_db_type == "NUMBER(10,2)"
        assert columns[1].wrapper == "NullFloat64"
        assert columns[2].full_db_type == "TEXT(16)"
        assert columns[2].unique is True

    def test_primary_key_fetched_once_per_table(self, driver, fake_connection):
        """Test columns() and primary_key_info() share one SHOW PRIMARY KEYS."""
        fake_connection.cursor_mock.fetchall.side_effect = [
            [("ID", "NUMBER", 38, 0, None, None, "NO")],
            [_show_primary_key_row("ID", 1)],
            [],
        ]

        driver.columns("PUBLIC", "ORDERS")
        pkey = driver.primary_key_info("PUBLIC", "ORDERS")

        assert pkey.columns == ("ID",)
        statements = [c[0][0] for c in fake_connection.cursor_mock.execute.call_args_list]
        assert sum(1 for sql in statements if sql.startswith("SHOW PRIMARY KEYS")) == 1
        assert len(statements) == 3

    def test_close_forgets_primary_keys(self, driver, fake_connection):
        """Test a reopened connection queries keys again."""
        fake_connection.cursor_mock.fetchall.side_effect = [[_show_primary_key_row("ID", 1)]]
        driver.primary_key_info("PUBLIC", "ORDERS")

        driver.close()
        assert driver._primary_keys == {}

    def test_database_error_wrapped(self, driver, fake_connection):
        """Test connector errors surface as QueryError and the cursor is closed."""
        fake_connection.cursor_mock.execute.side_effect = snowflake.connector.errors.ProgrammingError("denied")

        with pytest.raises(QueryError):
            driver.table_names("PUBLIC")
        fake_connection.cursor_mock.close.assert_called_once()

"""Tests for the in-memory mock driver and the driver registry."""

import pytest

from sqlgen.config import RunConfig
from sqlgen.database.assembler import SchemaAssembler
from sqlgen.database.base import Driver
from sqlgen.database.duckdb import DuckDBDriver
from sqlgen.database.mock import MockDriver
from sqlgen.database.mysql import MySQLDriver
from sqlgen.database.postgres import PostgresDriver
from sqlgen.database.registry import create_driver, supported_drivers
from sqlgen.database.snowflake import SnowflakeDriver
from sqlgen.errors import ConfigurationError, ConnectionError


class TestMockDriver:
    """Test the mock driver's airport schema."""

    def test_default_schema_assembles(self, mock_driver):
        """Test every default table has a key and only the link table is a join."""
        mock_driver.open()
        tables = SchemaAssembler(mock_driver).assemble("public")

        assert len(tables) == 7
        assert [t.name for t in tables if t.is_join_table] == ["pilot_languages"]

    def test_jets_columns(self, mock_driver):
        """Test column translation through the Postgres mapper."""
        mock_driver.open()
        columns = {c.name: c for c in mock_driver.columns("public", "jets")}

        assert columns["cargo"].type_name.value == "bytes"
        assert columns["manifest"].type_name.value == "json"
        assert columns["manifest"].wrapper == "NullJSON"
        assert columns["created_at"].default == "now()"
        assert columns["id"].generated is True

    def test_unknown_table_is_empty(self, mock_driver):
        """Test metadata for an unknown table is empty rather than an error."""
        mock_driver.open()
        assert mock_driver.columns("public", "nope") == []
        assert mock_driver.primary_key_info("public", "nope") is None
        assert mock_driver.foreign_key_info("public", "nope") == []

    def test_fail_open(self):
        """Test fail_open simulates an unreachable database."""
        driver = MockDriver(fail_open=True)
        with pytest.raises(ConnectionError):
            driver.open()
        driver.close()
        assert driver.open_calls == 1
        assert driver.close_calls == 1


class TestDriverContract:
    """Test the Driver base class contract."""

    def test_fetchall_is_required(self):
        """Test a driver without a query runner cannot be built."""
        class NoQueryDriver(Driver):
            dialect = "none"

            def open(self): pass
            def close(self): pass
            def table_names(self, schema, whitelist=None, blacklist=None): return []
            def columns(self, schema, table): return []
            def primary_key_info(self, schema, table): return None
            def foreign_key_info(self, schema, table): return []
            def use_last_insert_id(self): return False
            def use_top_clause(self): return False
            def left_quote(self): return '"'
            def right_quote(self): return '"'
            def index_placeholders(self): return True

        with pytest.raises(TypeError):
            NoQueryDriver()

    def test_mock_query_returns_no_rows(self, mock_driver):
        """Test SQL against the mock yields an empty result."""
        mock_driver.open()
        assert mock_driver._query("anything", "SELECT 1") == []


class TestRegistry:
    """Test driver lookup by name."""

    def test_supported_drivers(self):
        """Test every dialect is registered."""
        assert set(supported_drivers()) == {"postgres", "mysql", "duckdb", "snowflake", "mock"}

    @pytest.mark.parametrize("name,driver_class", [
        ("postgres", PostgresDriver),
        ("mysql", MySQLDriver),
        ("duckdb", DuckDBDriver),
        ("snowflake", SnowflakeDriver),
        ("mock", MockDriver),
    ])
    def test_create_driver(self, name, driver_class):
        """Test each name builds its driver without connecting."""
        driver = create_driver(RunConfig(driver_name=name))
        assert isinstance(driver, driver_class)
        assert driver._connection is None

    def test_unknown_driver(self):
        """Test an unknown name is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            create_driver(RunConfig(driver_name="oracle"))
        assert "'oracle'" in exc_info.value.message

    def test_options_passed_through(self):
        """Test the tinyint switch reaches the driver."""
        driver = create_driver(RunConfig(driver_name="mysql", tinyint_as_bool=True))
        assert driver.options.tinyint_as_bool is True

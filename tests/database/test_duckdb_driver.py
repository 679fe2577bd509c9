"""Tests for the DuckDB driver against a real database file."""

import duckdb
import pytest

from sqlgen.database.assembler import SchemaAssembler
from sqlgen.database.duckdb import DuckDBDriver
from sqlgen.database.models import SemanticType
from sqlgen.errors import ConnectionError, QueryError


@pytest.fixture
def db_path(tmp_path):
    """DuckDB file holding users, roles and the user_roles link table."""
    path = str(tmp_path / "app.duckdb")
    conn = duckdb.connect(path)
    conn.execute("CREATE SEQUENCE users_id_seq")
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY DEFAULT nextval('users_id_seq'),
            email VARCHAR NOT NULL UNIQUE,
            age UTINYINT,
            balance DECIMAL(10,2),
            profile JSON,
            created_at TIMESTAMP
        )
    """)
    conn.execute("CREATE TABLE roles (id INTEGER PRIMARY KEY, name VARCHAR NOT NULL)")
    conn.execute("""
        CREATE TABLE user_roles (
            user_id INTEGER NOT NULL REFERENCES users(id),
            role_id INTEGER NOT NULL REFERENCES roles(id),
            PRIMARY KEY (user_id, role_id)
        )
    """)
    conn.execute("CREATE VIEW active_users AS SELECT * FROM users")
    conn.close()
    return path


@pytest.fixture
def driver(db_path):
    d = DuckDBDriver(database_path=db_path)
    d.open()
    yield d
    d.close()


class TestDuckDBDriver:
    """Test DuckDBDriver against an on-disk database."""

    @pytest.mark.parametrize("raw,expected", [
        (None, ":memory:"),
        ("", ":memory:"),
        ("duckdb:///data/app.duckdb", "data/app.duckdb"),
        ("duckdb://app.duckdb?threads=4", "app.duckdb"),
        ("/tmp/app.duckdb", "/tmp/app.duckdb"),
    ])
    def test_normalize_path(self, raw, expected):
        """Test database URLs are reduced to a file path."""
        assert DuckDBDriver(database_path=raw).database_path == expected

    def test_table_names_excludes_views(self, driver):
        """Test only base tables are listed, ordered by name."""
        assert driver.table_names("main") == ["roles", "user_roles", "users"]

    def test_table_names_filters(self, driver):
        """Test whitelist and blacklist filtering."""
        assert driver.table_names("main", whitelist=["users", "missing"]) == ["users"]
        assert driver.table_names("main", blacklist=["users"]) == ["roles", "user_roles"]

    def test_columns(self, driver):
        """Test column types, flags and defaults."""
        columns = {c.name: c for c in driver.columns("main", "users")}

        assert list(columns) == ["id", "email", "age", "balance", "profile", "created_at"]
        assert columns["id"].type_name == SemanticType.INT32
        assert columns["id"].generated is True
        assert columns["id"].unique is True
        assert columns["email"].unique is True
        assert columns["email"].nullable is False
        assert columns["age"].type_name == SemanticType.UINT8
        assert columns["age"].unsigned is True
        assert columns["age"].wrapper == "NullUint8"
        assert columns["balance"].type_name == SemanticType.FLOAT64
        assert columns["balance"].full_db_type == "DECIMAL(10,2)"
        assert columns["profile"].type_name == SemanticType.JSON
        assert columns["created_at"].type_name == SemanticType.TIME

    def test_primary_keys(self, driver):
        """Test single and composite primary keys."""
        assert driver.primary_key_info("main", "users").columns == ("id",)

        pkey = driver.primary_key_info("main", "user_roles")
        assert pkey.name == "user_roles_pkey"
        assert pkey.columns == ("user_id", "role_id")

    def test_foreign_keys(self, driver):
        """Test foreign keys of the link table."""
        fkeys = sorted(driver.foreign_key_info("main", "user_roles"), key=lambda fk: fk.column)

        assert [(fk.column, fk.foreign_table, fk.foreign_column) for fk in fkeys] == [
            ("role_id", "roles", "id"),
            ("user_id", "users", "id"),
        ]
        assert {fk.name for fk in fkeys} == {"user_roles_user_id_fkey", "user_roles_role_id_fkey"}

    def test_assemble(self, driver):
        """Test the whole schema assembles with user_roles as a join table."""
        tables = {t.name: t for t in SchemaAssembler(driver).assemble("main")}
        assert tables["user_roles"].is_join_table is True
        assert tables["users"].is_join_table is False

    def test_opened_read_only(self, driver):
        """Test the file is opened read-only by default."""
        with pytest.raises(QueryError):
            driver._query("write", "CREATE TABLE nope (id INTEGER)")

    def test_missing_file_read_only(self, tmp_path):
        """Test a missing file cannot be opened read-only."""
        d = DuckDBDriver(database_path=str(tmp_path / "missing.duckdb"))
        with pytest.raises(ConnectionError):
            d.open()
        d.close()

    def test_memory_database_is_empty(self):
        """Test an in-memory database opens and has no tables."""
        with DuckDBDriver() as d:
            d.open()
            assert d.table_names("main") == []

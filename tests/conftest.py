"""Shared pytest fixtures for sqlgen tests."""

import pytest
from unittest.mock import MagicMock

from sqlgen.config import RunConfig
from sqlgen.database.mock import MockDriver, MockTable, MockColumn
from sqlgen.database.models import PrimaryKey, ForeignKey


def _fk(table, column, foreign_table, foreign_column="id"):
    return ForeignKey(
        name=f"{table}_{column}_fkey",
        table=table,
        column=column,
        foreign_table=foreign_table,
        foreign_column=foreign_column,
    )


@pytest.fixture
def users_roles_tables():
    """users, roles and the user_roles link table between them."""
    return [
        MockTable(
            name="users",
            columns=[
                MockColumn("id", "integer", unique=True, default="nextval('users_id_seq'::regclass)"),
                MockColumn("name", "text"),
            ],
            pkey=PrimaryKey("users_pkey", ("id",)),
        ),
        MockTable(
            name="roles",
            columns=[
                MockColumn("id", "integer", unique=True),
                MockColumn("name", "character varying", "character varying(64)"),
            ],
            pkey=PrimaryKey("roles_pkey", ("id",)),
        ),
        MockTable(
            name="user_roles",
            columns=[MockColumn("user_id", "integer"), MockColumn("role_id", "integer")],
            pkey=PrimaryKey("user_roles_pkey", ("user_id", "role_id")),
            fkeys=[_fk("user_roles", "user_id", "users"), _fk("user_roles", "role_id", "roles")],
        ),
    ]


@pytest.fixture
def users_roles_driver(users_roles_tables):
    """Mock driver serving the users/roles schema."""
    return MockDriver(tables=users_roles_tables)


@pytest.fixture
def mock_driver():
    """Mock driver serving the default airport schema."""
    return MockDriver()


@pytest.fixture
def run_config(tmp_path):
    """Run config writing into a temporary output folder."""
    return RunConfig(
        driver_name="mock",
        out_folder=str(tmp_path / "out"),
        pkg_name="models",
    )


@pytest.fixture
def fake_connection():
    """DB-API connection whose cursor returns queued result sets.

    Queue results with ``fake_connection.cursor_mock.fetchall.side_effect``.
    The cursor works both as a context manager and as a plain object.
    """
    connection = MagicMock()
    cursor = MagicMock()
    cursor.__enter__.return_value = cursor
    connection.cursor.return_value = cursor
    connection.cursor_mock = cursor
    return connection

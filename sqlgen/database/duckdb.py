"""DuckDB dialect driver."""

import logging
from typing import Optional, List, Sequence, Set

from ..errors import ConnectionError
from .base import Driver
from .models import Column, PrimaryKey, ForeignKey
from .type_mappers import DuckDBTypeMapper, TranslationOptions

logger = logging.getLogger(__name__)


class DuckDBDriver(Driver):
    """Introspects a DuckDB database file.

    Columns come from information_schema; keys come from the
    duckdb_constraints() table function, which does not expose stable
    constraint names, so key names follow Postgres conventions
    (``<table>_pkey``, ``<table>_<column>_fkey``).
    """

    dialect = "duckdb"
    default_schema = "main"
    type_mapper = DuckDBTypeMapper()

    UNSIGNED_TYPES = {"utinyint", "usmallint", "uinteger", "ubigint"}

    def __init__(
        self,
        database_path: Optional[str] = None,
        read_only: bool = True,
        options: Optional[TranslationOptions] = None,
    ):
        """Initialize the DuckDB driver.

        Args:
            database_path: Path to a .duckdb file, a duckdb:/// URL, or
                :memory: (the default)
            read_only: Open the file read-only (ignored for :memory:)
            options: Per-run type translation options
        """
        super().__init__(options)
        self.database_path = self._normalize_path(database_path)
        self.read_only = read_only

    @staticmethod
    def _normalize_path(path: Optional[str]) -> str:
        if not path:
            return ":memory:"
        # Remove duckdb:/// prefix if present
        if path.startswith("duckdb:///"):
            path = path[10:]
        elif path.startswith("duckdb://"):
            path = path[9:]
        # Remove query parameters if any
        if "?" in path:
            path = path.split("?")[0]
        return path

    def open(self):
        """Connect to the DuckDB database file."""
        try:
            import duckdb
        except ImportError:
            raise ImportError(
                "duckdb is required. "
                "Install it with: pip install duckdb"
            )

        read_only = self.read_only and self.database_path != ":memory:"
        try:
            self._connection = duckdb.connect(self.database_path, read_only=read_only)
        except duckdb.Error as e:
            raise ConnectionError(
                f"unable to open duckdb database {self.database_path}: {e}",
                details={"dialect": self.dialect, "path": self.database_path},
            ) from e
        logger.debug("Opened duckdb database %s (read_only=%s)", self.database_path, read_only)
        return self._connection

    def close(self):
        """Close the DuckDB connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def _fetchall(self, sql, params):
        return self._connection.execute(sql, list(params)).fetchall()

    def _database_errors(self):
        import duckdb
        return (duckdb.Error,)

    def use_last_insert_id(self) -> bool:
        return False

    def use_top_clause(self) -> bool:
        return False

    def left_quote(self) -> str:
        return '"'

    def right_quote(self) -> str:
        return '"'

    def index_placeholders(self) -> bool:
        return True

    def generated_default(self, default: str) -> bool:
        return default.startswith("nextval(")

    def table_names(
        self,
        schema: str,
        whitelist: Optional[Sequence[str]] = None,
        blacklist: Optional[Sequence[str]] = None,
    ) -> List[str]:
        """Get base table names (views excluded)."""
        query = """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = ? AND table_type = 'BASE TABLE'"""
        clause, args = self._filter_clause("table_name", whitelist, blacklist, placeholder="?")
        query += clause + " ORDER BY table_name"

        rows = self._query(f"list tables in schema {schema}", query, [schema] + args)
        return [row[0] for row in rows]

    def _unique_columns(self, schema: str, table: str) -> Set[str]:
        """Columns covered by a single-column PRIMARY KEY or UNIQUE constraint."""
        rows = self._query(f"fetch unique constraints for table {table}", """
            SELECT constraint_column_names
            FROM duckdb_constraints()
            WHERE schema_name = ?
              AND table_name = ?
              AND constraint_type IN ('PRIMARY KEY', 'UNIQUE')
        """, [schema, table])
        return {names[0] for (names,) in rows if len(names) == 1}

    def columns(self, schema: str, table: str) -> List[Column]:
        """Get all columns for a table."""
        rows = self._query(f"fetch columns for table {table}", """
            SELECT
                column_name,
                data_type,
                column_default,
                is_nullable
            FROM information_schema.columns
            WHERE table_schema = ?
              AND table_name = ?
            ORDER BY ordinal_position
        """, [schema, table])
        unique = self._unique_columns(schema, table)

        columns = []
        for name, data_type, default, is_nullable in rows:
            db_type = data_type.split("(")[0].strip().lower()
            columns.append(self._build_column(
                name=name,
                db_type=db_type,
                full_db_type=data_type,
                nullable=(is_nullable == 'YES'),
                unsigned=db_type in self.UNSIGNED_TYPES,
                unique=name in unique,
                default=default,
            ))
        return columns

    def primary_key_info(self, schema: str, table: str) -> Optional[PrimaryKey]:
        """Get the primary key for a table."""
        rows = self._query(f"fetch primary key for table {table}", """
            SELECT constraint_column_names
            FROM duckdb_constraints()
            WHERE schema_name = ?
              AND table_name = ?
              AND constraint_type = 'PRIMARY KEY'
        """, [schema, table])
        if not rows:
            return None

        pk_columns = rows[0][0]
        if not isinstance(pk_columns, list):
            pk_columns = [pk_columns]
        return PrimaryKey(name=f"{table}_pkey", columns=tuple(pk_columns))

    def foreign_key_info(self, schema: str, table: str) -> List[ForeignKey]:
        """Get the foreign keys owned by a table."""
        rows = self._query(f"fetch foreign keys for table {table}", """
            SELECT constraint_column_names, referenced_table, referenced_column_names
            FROM duckdb_constraints()
            WHERE schema_name = ?
              AND table_name = ?
              AND constraint_type = 'FOREIGN KEY'
            ORDER BY constraint_index
        """, [schema, table])

        fkeys = []
        for columns, foreign_table, foreign_columns in rows:
            name = f"{table}_{'_'.join(columns)}_fkey"
            for column, foreign_column in zip(columns, foreign_columns):
                fkeys.append(ForeignKey(
                    name=name,
                    table=table,
                    column=column,
                    foreign_table=foreign_table,
                    foreign_column=foreign_column,
                ))
        return fkeys

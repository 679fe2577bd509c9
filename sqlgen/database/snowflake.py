"""Snowflake dialect driver."""

import logging
import os
from typing import Optional, List, Sequence, Set

from ..errors import ConnectionError
from .base import Driver
from .models import Column, PrimaryKey, ForeignKey
from .type_mappers import SnowflakeTypeMapper, TranslationOptions

logger = logging.getLogger(__name__)


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class SnowflakeDriver(Driver):
    """Introspects a Snowflake database.

    Columns come from INFORMATION_SCHEMA; keys come from SHOW PRIMARY KEYS /
    SHOW UNIQUE KEYS / SHOW IMPORTED KEYS, whose rows are read by position.
    """

    dialect = "snowflake"
    default_schema = "PUBLIC"
    type_mapper = SnowflakeTypeMapper()

    def __init__(
        self,
        database: str,
        account: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        warehouse: Optional[str] = None,
        role: Optional[str] = None,
        options: Optional[TranslationOptions] = None,
    ):
        super().__init__(options)
        self.database = database
        self.account = account or os.environ.get("SNOWFLAKE_ACCOUNT")
        self.user = user or os.environ.get("SNOWFLAKE_USER")
        self.password = password or os.environ.get("SNOWFLAKE_PASSWORD")
        self.warehouse = warehouse or os.environ.get("SNOWFLAKE_WAREHOUSE")
        self.role = role or os.environ.get("SNOWFLAKE_ROLE")
        # SHOW PRIMARY KEYS results, shared by columns() and primary_key_info()
        self._primary_keys = {}

    def open(self):
        """Connect to Snowflake."""
        try:
            import snowflake.connector
        except ImportError:
            raise ImportError(
                "snowflake-connector-python is required. "
                "Install it with: pip install snowflake-connector-python"
            )

        try:
            self._connection = snowflake.connector.connect(
                account=self.account,
                user=self.user,
                password=self.password,
                warehouse=self.warehouse,
                database=self.database,
                role=self.role,
            )
        except snowflake.connector.errors.Error as e:
            raise ConnectionError(
                f"unable to connect to snowflake account {self.account}: {e}",
                details={"dialect": self.dialect, "account": self.account},
            ) from e
        logger.debug("Connected to snowflake account %s, database %s", self.account, self.database)
        return self._connection

    def close(self):
        """Close the connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
        self._primary_keys = {}

    def _fetchall(self, sql, params):
        cursor = self._connection.cursor()
        try:
            if params:
                cursor.execute(sql, tuple(params))
            else:
                cursor.execute(sql)
            return cursor.fetchall()
        finally:
            cursor.close()

    def _database_errors(self):
        import snowflake.connector
        return (snowflake.connector.errors.Error,)

    def use_last_insert_id(self) -> bool:
        return False

    def use_top_clause(self) -> bool:
        return True

    def left_quote(self) -> str:
        return '"'

    def right_quote(self) -> str:
        return '"'

    def index_placeholders(self) -> bool:
        return False

    def generated_default(self, default: str) -> bool:
        return default == "IDENTITY" or default.upper().endswith(".NEXTVAL")

    def _table_path(self, schema: str, table: str) -> str:
        return ".".join(_quote(part) for part in (self.database, schema, table))

    def table_names(
        self,
        schema: str,
        whitelist: Optional[Sequence[str]] = None,
        blacklist: Optional[Sequence[str]] = None,
    ) -> List[str]:
        """Get base table names from INFORMATION_SCHEMA.TABLES."""
        query = """
            SELECT TABLE_NAME
            FROM INFORMATION_SCHEMA.TABLES
            WHERE TABLE_SCHEMA = %s AND TABLE_TYPE = 'BASE TABLE'"""
        clause, args = self._filter_clause("TABLE_NAME", whitelist, blacklist)
        query += clause + " ORDER BY TABLE_NAME"

        rows = self._query(f"list tables in schema {schema}", query, [schema] + args)
        return [row[0] for row in rows]

    def _unique_columns(self, schema: str, table: str, pkey: Optional[PrimaryKey]) -> Set[str]:
        rows = self._query(
            f"fetch unique keys for table {table}",
            f"SHOW UNIQUE KEYS IN TABLE {self._table_path(schema, table)}",
        )
        by_constraint = {}
        for row in rows:
            by_constraint.setdefault(row[6], []).append(row[4])

        unique = {cols[0] for cols in by_constraint.values() if len(cols) == 1}
        if pkey and len(pkey.columns) == 1:
            unique.add(pkey.columns[0])
        return unique

    def columns(self, schema: str, table: str) -> List[Column]:
        """Get all columns in a table."""
        rows = self._query(f"fetch columns for table {table}", """
            SELECT
                COLUMN_NAME,
                DATA_TYPE,
                NUMERIC_PRECISION,
                NUMERIC_SCALE,
                CHARACTER_MAXIMUM_LENGTH,
                IFF(IS_IDENTITY = 'YES', 'IDENTITY', COLUMN_DEFAULT),
                IS_NULLABLE
            FROM INFORMATION_SCHEMA.COLUMNS
            WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s
            ORDER BY ORDINAL_POSITION
        """, [schema, table])
        unique = self._unique_columns(schema, table, self.primary_key_info(schema, table))

        columns = []
        for name, data_type, precision, scale, length, default, is_nullable in rows:
            if precision is not None:
                full_type = f"{data_type}({precision},{scale or 0})"
            elif length is not None:
                full_type = f"{data_type}({length})"
            else:
                full_type = data_type
            columns.append(self._build_column(
                name=name,
                db_type=data_type,
                full_db_type=full_type,
                nullable=(is_nullable == 'YES'),
                unique=name in unique,
                default=default,
            ))
        return columns

    def primary_key_info(self, schema: str, table: str) -> Optional[PrimaryKey]:
        """Get the primary key for a table."""
        if (schema, table) not in self._primary_keys:
            self._primary_keys[(schema, table)] = self._fetch_primary_key(schema, table)
        return self._primary_keys[(schema, table)]

    def _fetch_primary_key(self, schema: str, table: str) -> Optional[PrimaryKey]:
        rows = self._query(
            f"fetch primary key for table {table}",
            f"SHOW PRIMARY KEYS IN TABLE {self._table_path(schema, table)}",
        )
        if not rows:
            return None

        # column_name = 4, key_sequence = 5, constraint_name = 6
        rows = sorted(rows, key=lambda row: row[5])
        return PrimaryKey(name=rows[0][6], columns=tuple(row[4] for row in rows))

    def foreign_key_info(self, schema: str, table: str) -> List[ForeignKey]:
        """Get the foreign keys owned by a table."""
        rows = self._query(
            f"fetch foreign keys for table {table}",
            f"SHOW IMPORTED KEYS IN TABLE {self._table_path(schema, table)}",
        )

        # pk_table_name = 3, pk_column_name = 4, fk_column_name = 8,
        # key_sequence = 9, fk_name = 12
        rows = sorted(rows, key=lambda row: (row[12], row[9]))
        return [
            ForeignKey(
                name=row[12],
                table=table,
                column=row[8],
                foreign_table=row[3],
                foreign_column=row[4],
            )
            for row in rows
        ]

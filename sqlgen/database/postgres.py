"""PostgreSQL dialect driver."""

import logging
from typing import Optional, List, Sequence

from ..errors import ConnectionError
from .base import Driver
from .models import Column, PrimaryKey, ForeignKey
from .type_mappers import PostgresTypeMapper, TranslationOptions

logger = logging.getLogger(__name__)


class PostgresDriver(Driver):
    """Introspects a PostgreSQL database through information_schema."""

    dialect = "postgres"
    default_schema = "public"
    type_mapper = PostgresTypeMapper()

    def __init__(
        self,
        user: str,
        password: str,
        dbname: str,
        host: str = "localhost",
        port: int = 5432,
        sslmode: Optional[str] = None,
        options: Optional[TranslationOptions] = None,
    ):
        super().__init__(options)
        self.user = user
        self.password = password
        self.dbname = dbname
        self.host = host
        self.port = port or 5432
        self.sslmode = sslmode or "prefer"

    def open(self):
        """Connect to PostgreSQL."""
        try:
            import psycopg2
        except ImportError:
            raise ImportError(
                "psycopg2 is required. "
                "Install it with: pip install psycopg2-binary"
            )

        try:
            self._connection = psycopg2.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password or None,
                dbname=self.dbname,
                sslmode=self.sslmode,
            )
        except psycopg2.Error as e:
            raise ConnectionError(
                f"unable to connect to postgres at {self.host}:{self.port}: {e}",
                details={"dialect": self.dialect, "host": self.host, "port": self.port},
            ) from e
        # Metadata reads only; keep every query out of a long transaction
        self._connection.autocommit = True
        logger.debug("Connected to postgres at %s:%s/%s", self.host, self.port, self.dbname)
        return self._connection

    def close(self):
        """Close the connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def _fetchall(self, sql, params):
        with self._connection.cursor() as cursor:
            cursor.execute(sql, tuple(params))
            return cursor.fetchall()

    def _database_errors(self):
        import psycopg2
        return (psycopg2.Error,)

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
        """Get base table names from information_schema.tables."""
        query = """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = %s AND table_type = 'BASE TABLE'"""
        clause, args = self._filter_clause("table_name", whitelist, blacklist)
        query += clause + " ORDER BY table_name"

        rows = self._query(f"list tables in schema {schema}", query, [schema] + args)
        return [row[0] for row in rows]

    def columns(self, schema: str, table: str) -> List[Column]:
        """Get the columns of a table.

        Arrays and user-defined types report their udt name as the full
        type (e.g. ``_int4``, ``mood``).
        """
        rows = self._query(f"fetch columns for table {table}", """
            SELECT
                c.column_name,
                c.data_type,
                CASE
                    WHEN c.data_type IN ('ARRAY', 'USER-DEFINED') THEN c.udt_name
                    WHEN c.character_maximum_length IS NOT NULL
                        THEN c.data_type || '(' || c.character_maximum_length || ')'
                    ELSE c.data_type
                END AS full_type,
                c.column_default,
                c.is_nullable = 'YES' AS nullable,
                EXISTS (
                    SELECT 1
                    FROM information_schema.table_constraints tc
                    INNER JOIN information_schema.key_column_usage kcu
                        ON tc.constraint_name = kcu.constraint_name
                        AND tc.table_schema = kcu.table_schema
                        AND tc.table_name = kcu.table_name
                    WHERE tc.table_schema = c.table_schema
                        AND tc.table_name = c.table_name
                        AND kcu.column_name = c.column_name
                        AND tc.constraint_type IN ('PRIMARY KEY', 'UNIQUE')
                        AND (
                            SELECT COUNT(*)
                            FROM information_schema.key_column_usage k2
                            WHERE k2.table_schema = tc.table_schema
                                AND k2.table_name = tc.table_name
                                AND k2.constraint_name = tc.constraint_name
                        ) = 1
                ) AS is_unique
            FROM information_schema.columns AS c
            WHERE c.table_name = %s AND c.table_schema = %s
            ORDER BY c.ordinal_position
        """, [table, schema])

        return [
            self._build_column(
                name=name,
                db_type=db_type,
                full_db_type=full_type,
                nullable=nullable,
                unique=unique,
                default=default,
            )
            for name, db_type, full_type, default, nullable, unique in rows
        ]

    def primary_key_info(self, schema: str, table: str) -> Optional[PrimaryKey]:
        """Look up the primary key for a table."""
        rows = self._query(f"fetch primary key for table {table}", """
            SELECT tc.constraint_name, kcu.column_name
            FROM information_schema.table_constraints AS tc
            INNER JOIN information_schema.key_column_usage AS kcu
                ON tc.constraint_name = kcu.constraint_name
                AND tc.table_schema = kcu.table_schema
                AND tc.table_name = kcu.table_name
            WHERE tc.table_name = %s AND tc.table_schema = %s AND tc.constraint_type = 'PRIMARY KEY'
            ORDER BY kcu.ordinal_position
        """, [table, schema])
        if not rows:
            return None

        return PrimaryKey(name=rows[0][0], columns=tuple(row[1] for row in rows))

    def foreign_key_info(self, schema: str, table: str) -> List[ForeignKey]:
        """Get the foreign keys owned by a table.

        Composite keys are matched column by column through
        position_in_unique_constraint.
        """
        rows = self._query(f"fetch foreign keys for table {table}", """
            SELECT
                kcu.constraint_name,
                kcu.column_name,
                ref.table_name AS foreign_table,
                ref.column_name AS foreign_column
            FROM information_schema.referential_constraints AS rc
            INNER JOIN information_schema.key_column_usage AS kcu
                ON rc.constraint_name = kcu.constraint_name
                AND rc.constraint_schema = kcu.constraint_schema
            INNER JOIN information_schema.key_column_usage AS ref
                ON rc.unique_constraint_name = ref.constraint_name
                AND rc.unique_constraint_schema = ref.constraint_schema
                AND ref.ordinal_position = kcu.position_in_unique_constraint
            WHERE kcu.table_schema = %s AND kcu.table_name = %s
            ORDER BY kcu.constraint_name, kcu.ordinal_position
        """, [schema, table])

        return [
            ForeignKey(
                name=name,
                table=table,
                column=column,
                foreign_table=foreign_table,
                foreign_column=foreign_column,
            )
            for name, column, foreign_table, foreign_column in rows
        ]

"""MySQL dialect driver."""

import logging
from typing import Optional, List, Sequence

from ..errors import ConnectionError
from .base import Driver
from .models import Column, PrimaryKey, ForeignKey
from .type_mappers import MySQLTypeMapper, TranslationOptions

logger = logging.getLogger(__name__)


class MySQLDriver(Driver):
    """Introspects a MySQL database through information_schema."""

    dialect = "mysql"
    type_mapper = MySQLTypeMapper()

    def __init__(
        self,
        user: str,
        password: str,
        dbname: str,
        host: str = "localhost",
        port: int = 3306,
        sslmode: Optional[str] = None,
        options: Optional[TranslationOptions] = None,
    ):
        """Initialize the MySQL driver.

        The connection is not opened here; call ``open()`` (and ``close()``)
        once the object has been obtained.

        Args:
            user: Database user
            password: Password (may be empty)
            dbname: Database name, also the default schema
            host: Server host
            port: Server port (0 means the MySQL default, 3306)
            sslmode: "true" / "skip-verify" enable TLS, anything else disables it
            options: Per-run type translation options
        """
        super().__init__(options)
        self.user = user
        self.password = password
        self.dbname = dbname
        self.host = host
        self.port = port or 3306
        self.sslmode = sslmode
        self.default_schema = dbname

    def _ssl_options(self) -> Optional[dict]:
        if self.sslmode in ("true", "required", "preferred"):
            return {"check_hostname": True}
        if self.sslmode == "skip-verify":
            return {"check_hostname": False}
        return None

    def open(self):
        """Connect to MySQL."""
        try:
            import pymysql
        except ImportError:
            raise ImportError(
                "pymysql is required. "
                "Install it with: pip install pymysql"
            )

        try:
            self._connection = pymysql.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password or "",
                database=self.dbname,
                ssl=self._ssl_options(),
            )
        except pymysql.MySQLError as e:
            raise ConnectionError(
                f"unable to connect to mysql at {self.host}:{self.port}: {e}",
                details={"dialect": self.dialect, "host": self.host, "port": self.port},
            ) from e
        logger.debug("Connected to mysql at %s:%s/%s", self.host, self.port, self.dbname)
        return self._connection

    def close(self):
        """Close the connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def _fetchall(self, sql, params):
        with self._connection.cursor() as cursor:
            cursor.execute(sql, tuple(params))
            return list(cursor.fetchall())

    def _database_errors(self):
        import pymysql
        return (pymysql.MySQLError,)

    def use_last_insert_id(self) -> bool:
        return True

    def use_top_clause(self) -> bool:
        return False

    def left_quote(self) -> str:
        return "`"

    def right_quote(self) -> str:
        return "`"

    def index_placeholders(self) -> bool:
        return False

    def generated_default(self, default: str) -> bool:
        return default == "auto_increment"

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

        Enum columns report their full type (``enum('a','b')``) as the raw
        type; auto_increment columns report a generated default.
        """
        rows = self._query(f"fetch columns for table {table}", """
            SELECT
                c.column_name,
                c.column_type,
                IF(c.data_type = 'enum', c.column_type, c.data_type),
                IF(c.extra = 'auto_increment', 'auto_increment', c.column_default),
                c.is_nullable = 'YES',
                c.column_type LIKE '%% unsigned',
                EXISTS (
                    SELECT c.column_name
                    FROM information_schema.table_constraints tc
                    INNER JOIN information_schema.key_column_usage kcu
                        ON tc.constraint_name = kcu.constraint_name
                        AND tc.table_name = kcu.table_name
                        AND tc.table_schema = kcu.table_schema
                    WHERE c.column_name = kcu.column_name
                        AND tc.table_name = c.table_name
                        AND (tc.constraint_type = 'PRIMARY KEY' OR tc.constraint_type = 'UNIQUE')
                        AND (
                            SELECT COUNT(*)
                            FROM information_schema.key_column_usage
                            WHERE table_schema = kcu.table_schema
                                AND table_name = tc.table_name
                                AND constraint_name = tc.constraint_name
                        ) = 1
                ) AS is_unique
            FROM information_schema.columns AS c
            WHERE c.table_name = %s AND c.table_schema = %s
            ORDER BY c.ordinal_position
        """, [table, schema])

        columns = []
        for name, full_type, db_type, default, nullable, unsigned, unique in rows:
            columns.append(self._build_column(
                name=name,
                db_type=db_type,
                full_db_type=full_type,
                nullable=bool(nullable),
                unsigned=bool(unsigned),
                unique=bool(unique),
                default=default,
            ))
        return columns

    def primary_key_info(self, schema: str, table: str) -> Optional[PrimaryKey]:
        """Look up the primary key for a table."""
        rows = self._query(f"fetch primary key for table {table}", """
            SELECT tc.constraint_name
            FROM information_schema.table_constraints AS tc
            WHERE tc.table_name = %s AND tc.constraint_type = 'PRIMARY KEY' AND tc.table_schema = %s
        """, [table, schema])
        if not rows:
            return None

        name = rows[0][0]
        column_rows = self._query(f"fetch primary key columns for table {table}", """
            SELECT kcu.column_name
            FROM information_schema.key_column_usage AS kcu
            WHERE kcu.table_name = %s AND kcu.constraint_name = %s AND kcu.table_schema = %s
            ORDER BY kcu.ordinal_position
        """, [table, name, schema])

        return PrimaryKey(name=name, columns=tuple(row[0] for row in column_rows))

    def foreign_key_info(self, schema: str, table: str) -> List[ForeignKey]:
        """Get the foreign keys owned by a table."""
        rows = self._query(f"fetch foreign keys for table {table}", """
            SELECT constraint_name, column_name, referenced_table_name, referenced_column_name
            FROM information_schema.key_column_usage
            WHERE table_schema = %s AND referenced_table_schema = %s AND table_name = %s
            ORDER BY constraint_name, ordinal_position
        """, [schema, schema, table])

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

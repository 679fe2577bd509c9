"""Abstract base class for dialect drivers."""

import logging
from abc import ABC, abstractmethod
from typing import Optional, List, Sequence, Tuple, Any

from ..errors import QueryError
from .models import Column, PrimaryKey, ForeignKey
from .type_mappers import TypeMapper, TranslationOptions

logger = logging.getLogger(__name__)


class Driver(ABC):
    """Introspection contract every supported database implements.

    ``open()`` must be called before any metadata query. ``close()`` is
    safe to call whether or not ``open()`` succeeded. Drivers are context
    managers: leaving the ``with`` block closes the connection.
    """

    dialect: str = ""
    default_schema: str = ""
    type_mapper: TypeMapper

    def __init__(self, options: Optional[TranslationOptions] = None):
        self.options = options or TranslationOptions()
        self._connection = None

    @abstractmethod
    def open(self):
        """Open the database connection.

        Raises:
            ConnectionError: if the database is unreachable or rejects
                the credentials
        """
        pass

    @abstractmethod
    def close(self):
        """Close the database connection."""
        pass

    @abstractmethod
    def table_names(
        self,
        schema: str,
        whitelist: Optional[Sequence[str]] = None,
        blacklist: Optional[Sequence[str]] = None,
    ) -> List[str]:
        """Get the base table names in a schema.

        Args:
            schema: Schema name
            whitelist: Only return these tables (if they exist)
            blacklist: Return every table except these; ignored when a
                whitelist is given

        Returns:
            Table names ordered by name
        """
        pass

    @abstractmethod
    def columns(self, schema: str, table: str) -> List[Column]:
        """Get the translated columns of a table in dialect order."""
        pass

    @abstractmethod
    def primary_key_info(self, schema: str, table: str) -> Optional[PrimaryKey]:
        """Get the primary key of a table, or None when it has none."""
        pass

    @abstractmethod
    def foreign_key_info(self, schema: str, table: str) -> List[ForeignKey]:
        """Get the foreign keys owned by a table, one entry per column."""
        pass

    @abstractmethod
    def use_last_insert_id(self) -> bool:
        """Whether generated code must read back inserted ids with LAST_INSERT_ID."""
        pass

    @abstractmethod
    def use_top_clause(self) -> bool:
        """Whether the dialect supports SELECT TOP."""
        pass

    @abstractmethod
    def left_quote(self) -> str:
        pass

    @abstractmethod
    def right_quote(self) -> str:
        pass

    @abstractmethod
    def index_placeholders(self) -> bool:
        """Whether the dialect uses indexed placeholders ($1, $2, ...)."""
        pass

    def generated_default(self, default: str) -> bool:
        """Whether a column default marks a database-generated value."""
        return False

    @abstractmethod
    def _fetchall(self, sql: str, params: Sequence[Any]) -> List[Tuple]:
        """Execute a query on the open connection and return all rows."""
        pass

    def _database_errors(self) -> Tuple[type, ...]:
        """Exception types raised by the underlying database library."""
        return ()

    def _ensure_open(self, operation: str):
        if self._connection is None:
            raise QueryError(
                f"{operation}: connection is not open",
                details={"dialect": self.dialect, "operation": operation},
            )

    def _query(self, operation: str, sql: str, params: Sequence[Any] = ()) -> List[Tuple]:
        """Run a metadata query, wrapping database failures in QueryError.

        Args:
            operation: Human readable description used in error messages
            sql: SQL to execute
            params: Query parameters

        Returns:
            List of result rows
        """
        self._ensure_open(operation)
        logger.debug("%s: %s %s", self.dialect, operation, list(params))
        try:
            return self._fetchall(sql, params)
        except self._database_errors() as e:
            raise QueryError(
                f"{operation} failed: {e}",
                details={"dialect": self.dialect, "operation": operation},
            ) from e

    def _build_column(
        self,
        name: str,
        db_type: str,
        full_db_type: str,
        nullable: bool,
        unsigned: bool = False,
        unique: bool = False,
        default: Optional[str] = None,
    ) -> Column:
        """Translate a raw column descriptor into a Column."""
        assignment = self.type_mapper.translate(db_type, full_db_type, nullable, unsigned, self.options)

        generated = False
        if default is not None:
            if self.generated_default(default):
                generated = True
                default = None
            elif default == "NULL":
                default = None

        return Column(
            name=name,
            db_type=db_type,
            full_db_type=full_db_type,
            type_name=assignment.type_name,
            nullable=bool(nullable),
            unsigned=bool(unsigned),
            unique=bool(unique),
            default=default,
            generated=generated,
            wrapper=assignment.wrapper,
        )

    @staticmethod
    def _filter_clause(
        column: str,
        whitelist: Optional[Sequence[str]],
        blacklist: Optional[Sequence[str]],
        placeholder: str = "%s",
    ) -> Tuple[str, List[str]]:
        """Build the whitelist/blacklist suffix for a table name query.

        The whitelist wins when both lists are given.
        """
        if whitelist:
            marks = ", ".join([placeholder] * len(whitelist))
            return f" AND {column} IN ({marks})", list(whitelist)
        if blacklist:
            marks = ", ".join([placeholder] * len(blacklist))
            return f" AND {column} NOT IN ({marks})", list(blacklist)
        return "", []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

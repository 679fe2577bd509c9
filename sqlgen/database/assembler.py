"""Builds the table graph from a driver."""

import logging
from typing import Optional, List, Sequence

from ..errors import SchemaError
from .base import Driver
from .models import Table
from .relationship import is_join_table, check_primary_keys

logger = logging.getLogger(__name__)


class SchemaAssembler:
    """Drives any Driver to produce the validated list of tables.

    The assembler keeps no state between calls; each ``assemble()`` is a
    complete introspection pass over an already opened driver.
    """

    def __init__(self, driver: Driver):
        self.driver = driver

    def assemble(
        self,
        schema: str,
        whitelist: Optional[Sequence[str]] = None,
        blacklist: Optional[Sequence[str]] = None,
    ) -> List[Table]:
        """Introspect a schema.

        Args:
            schema: Schema name
            whitelist: Only these tables
            blacklist: Every table except these (ignored with a whitelist)

        Returns:
            Tables in driver order, join tables flagged

        Raises:
            SchemaError: no tables found, or a table name reported twice
            ValidationError: one or more tables have no primary key
            QueryError: a metadata query failed
        """
        if whitelist and blacklist:
            logger.warning("Both whitelist and blacklist given; ignoring blacklist")
            blacklist = None

        names = self.driver.table_names(schema, whitelist or None, blacklist or None)
        if not names:
            raise SchemaError(
                f"no tables found in schema {schema}",
                details={"schema": schema, "dialect": self.driver.dialect},
            )

        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise SchemaError(
                f"tables reported more than once ({', '.join(duplicates)})",
                details={"schema": schema, "tables": duplicates},
            )

        tables = [self._build_table(schema, name) for name in names]
        logger.info(
            "Introspected %d tables (%d join tables) from schema %s",
            len(tables), sum(1 for t in tables if t.is_join_table), schema,
        )

        check_primary_keys(tables)
        return tables

    def _build_table(self, schema: str, name: str) -> Table:
        columns = self.driver.columns(schema, name)
        pkey = self.driver.primary_key_info(schema, name)
        fkeys = self.driver.foreign_key_info(schema, name)

        return Table(
            name=name,
            columns=tuple(columns),
            pkey=pkey,
            fkeys=tuple(fkeys),
            is_join_table=is_join_table(columns, pkey, fkeys),
        )

"""In-memory driver serving a fixed schema.

Used to try the generator without a database and as the driver behind the
test suite. Raw column descriptors go through the Postgres type mapper
exactly like real catalog rows would.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Sequence

from ..errors import ConnectionError
from .base import Driver
from .models import Column, PrimaryKey, ForeignKey
from .type_mappers import PostgresTypeMapper, TranslationOptions


@dataclass
class MockColumn:
    """Raw column descriptor as a catalog would report it."""
    name: str
    db_type: str
    full_db_type: Optional[str] = None
    nullable: bool = False
    unsigned: bool = False
    unique: bool = False
    default: Optional[str] = None


@dataclass
class MockTable:
    """Raw table description."""
    name: str
    columns: List[MockColumn] = field(default_factory=list)
    pkey: Optional[PrimaryKey] = None
    fkeys: List[ForeignKey] = field(default_factory=list)


def _fk(table: str, column: str, foreign_table: str, foreign_column: str = "id") -> ForeignKey:
    return ForeignKey(
        name=f"{table}_{column}_fkey",
        table=table,
        column=column,
        foreign_table=foreign_table,
        foreign_column=foreign_column,
    )


def _serial_id(table: str) -> MockColumn:
    return MockColumn("id", "integer", unique=True, default=f"nextval('{table}_id_seq'::regclass)")


def default_tables() -> List[MockTable]:
    """The airport fixture schema served by the "mock" driver."""
    return [
        MockTable(
            name="pilots",
            columns=[_serial_id("pilots"), MockColumn("name", "character varying", "character varying(255)")],
            pkey=PrimaryKey("pilots_pkey", ("id",)),
        ),
        MockTable(
            name="airports",
            columns=[_serial_id("airports"), MockColumn("size", "integer", nullable=True)],
            pkey=PrimaryKey("airports_pkey", ("id",)),
        ),
        MockTable(
            name="jets",
            columns=[
                _serial_id("jets"),
                MockColumn("pilot_id", "integer"),
                MockColumn("airport_id", "integer"),
                MockColumn("name", "text"),
                MockColumn("color", "text", nullable=True),
                MockColumn("identifier", "text", unique=True),
                MockColumn("cargo", "bytea"),
                MockColumn("manifest", "jsonb", nullable=True),
                MockColumn("created_at", "timestamp without time zone", default="now()"),
            ],
            pkey=PrimaryKey("jets_pkey", ("id",)),
            fkeys=[_fk("jets", "pilot_id", "pilots"), _fk("jets", "airport_id", "airports")],
        ),
        MockTable(
            name="licenses",
            columns=[_serial_id("licenses"), MockColumn("pilot_id", "integer")],
            pkey=PrimaryKey("licenses_pkey", ("id",)),
            fkeys=[_fk("licenses", "pilot_id", "pilots")],
        ),
        MockTable(
            name="hangars",
            columns=[_serial_id("hangars"), MockColumn("name", "text")],
            pkey=PrimaryKey("hangars_pkey", ("id",)),
        ),
        MockTable(
            name="languages",
            columns=[_serial_id("languages"), MockColumn("language", "text", unique=True)],
            pkey=PrimaryKey("languages_pkey", ("id",)),
        ),
        MockTable(
            name="pilot_languages",
            columns=[MockColumn("pilot_id", "integer"), MockColumn("language_id", "integer")],
            pkey=PrimaryKey("pilot_languages_pkey", ("pilot_id", "language_id")),
            fkeys=[
                _fk("pilot_languages", "pilot_id", "pilots"),
                _fk("pilot_languages", "language_id", "languages"),
            ],
        ),
    ]


class MockDriver(Driver):
    """Driver backed by MockTable descriptions instead of a database."""

    dialect = "mock"
    default_schema = "public"
    type_mapper = PostgresTypeMapper()

    def __init__(
        self,
        tables: Optional[List[MockTable]] = None,
        fail_open: bool = False,
        options: Optional[TranslationOptions] = None,
    ):
        super().__init__(options)
        self.tables = default_tables() if tables is None else tables
        self.fail_open = fail_open
        self.open_calls = 0
        self.close_calls = 0

    def open(self):
        self.open_calls += 1
        if self.fail_open:
            raise ConnectionError("unable to connect to mock database", details={"dialect": self.dialect})
        self._connection = {t.name: t for t in self.tables}
        return self._connection

    def close(self):
        self.close_calls += 1
        self._connection = None

    def generated_default(self, default: str) -> bool:
        return default.startswith("nextval(")

    def _fetchall(self, sql, params):
        # No SQL engine behind the mock; metadata comes from MockTable
        return []

    def _table(self, operation: str, table: str) -> MockTable:
        self._ensure_open(operation)
        if table not in self._connection:
            return MockTable(name=table)
        return self._connection[table]

    def table_names(
        self,
        schema: str,
        whitelist: Optional[Sequence[str]] = None,
        blacklist: Optional[Sequence[str]] = None,
    ) -> List[str]:
        self._ensure_open(f"list tables in schema {schema}")
        names = sorted(self._connection)
        if whitelist:
            return [n for n in names if n in whitelist]
        if blacklist:
            return [n for n in names if n not in blacklist]
        return names

    def columns(self, schema: str, table: str) -> List[Column]:
        mock = self._table(f"fetch columns for table {table}", table)
        return [
            self._build_column(
                name=c.name,
                db_type=c.db_type,
                full_db_type=c.full_db_type or c.db_type,
                nullable=c.nullable,
                unsigned=c.unsigned,
                unique=c.unique,
                default=c.default,
            )
            for c in mock.columns
        ]

    def primary_key_info(self, schema: str, table: str) -> Optional[PrimaryKey]:
        return self._table(f"fetch primary key for table {table}", table).pkey

    def foreign_key_info(self, schema: str, table: str) -> List[ForeignKey]:
        return list(self._table(f"fetch foreign keys for table {table}", table).fkeys)

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

"""Database-specific type mapping strategies.

Each mapper turns a raw column descriptor reported by its dialect into a
SemanticType. Translation never fails: anything unrecognized becomes a
string.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, NamedTuple

from .models import SemanticType


@dataclass(frozen=True)
class TranslationOptions:
    """Per-run switches for type translation.

    Set once before introspection starts and handed to every driver.
    """
    # MySQL only: map tinyint(1) to bool instead of int8
    tinyint_as_bool: bool = False


class TypeAssignment(NamedTuple):
    type_name: SemanticType
    wrapper: Optional[str]


NULL_WRAPPERS = {
    SemanticType.INT8: "NullInt8",
    SemanticType.INT16: "NullInt16",
    SemanticType.INT32: "NullInt32",
    SemanticType.INT64: "NullInt64",
    SemanticType.UINT8: "NullUint8",
    SemanticType.UINT16: "NullUint16",
    SemanticType.UINT32: "NullUint32",
    SemanticType.UINT64: "NullUint64",
    SemanticType.FLOAT32: "NullFloat32",
    SemanticType.FLOAT64: "NullFloat64",
    SemanticType.BOOL: "NullBool",
    SemanticType.TIME: "NullTime",
    SemanticType.BYTES: "NullBytes",
    SemanticType.JSON: "NullJSON",
    SemanticType.STRING: "NullString",
}

_SIGNED = {
    8: SemanticType.INT8,
    16: SemanticType.INT16,
    32: SemanticType.INT32,
    64: SemanticType.INT64,
}
_UNSIGNED = {
    8: SemanticType.UINT8,
    16: SemanticType.UINT16,
    32: SemanticType.UINT32,
    64: SemanticType.UINT64,
}


def integer_type(bits: int, unsigned: bool) -> SemanticType:
    """Pick the integer type of the given width and signedness."""
    return (_UNSIGNED if unsigned else _SIGNED)[bits]


class TypeMapper(ABC):
    """Abstract base class for database type mapping."""

    def translate(
        self,
        db_type: str,
        full_db_type: str,
        nullable: bool,
        unsigned: bool,
        options: Optional[TranslationOptions] = None,
    ) -> TypeAssignment:
        """Translate a raw column descriptor.

        Nullable columns get the wrapper that belongs to their base type;
        NOT NULL columns get no wrapper.
        """
        options = options or TranslationOptions()
        type_name = self.base_type(
            (db_type or "").strip().lower(),
            (full_db_type or "").strip().lower(),
            unsigned,
            options,
        )
        wrapper = NULL_WRAPPERS[type_name] if nullable else None
        return TypeAssignment(type_name, wrapper)

    @abstractmethod
    def base_type(
        self, db_type: str, full_db_type: str, unsigned: bool, options: TranslationOptions
    ) -> SemanticType:
        """Map a lower-cased raw type to its semantic type."""
        pass


class MySQLTypeMapper(TypeMapper):
    """Type mapper for MySQL column types."""

    INTEGER_WIDTHS = {
        "tinyint": 8,
        "smallint": 16,
        "mediumint": 32,
        "int": 32,
        "integer": 32,
        "bigint": 64,
    }
    BINARY_TYPES = {"binary", "varbinary", "tinyblob", "blob", "mediumblob", "longblob"}
    TIME_TYPES = {"date", "datetime", "timestamp", "time"}

    def base_type(self, db_type, full_db_type, unsigned, options):
        if db_type == "tinyint" and options.tinyint_as_bool and full_db_type == "tinyint(1)":
            return SemanticType.BOOL
        if db_type in self.INTEGER_WIDTHS:
            return integer_type(self.INTEGER_WIDTHS[db_type], unsigned)
        if db_type == "float":
            return SemanticType.FLOAT32
        if db_type in ("double", "double precision", "real"):
            return SemanticType.FLOAT64
        if db_type in ("boolean", "bool"):
            return SemanticType.BOOL
        if db_type in self.TIME_TYPES:
            return SemanticType.TIME
        if db_type in self.BINARY_TYPES:
            return SemanticType.BYTES
        if db_type == "json":
            return SemanticType.JSON
        return SemanticType.STRING


class PostgresTypeMapper(TypeMapper):
    """Type mapper for PostgreSQL column types.

    Postgres has no unsigned integers, so the unsigned flag is ignored.
    """

    INTEGER_WIDTHS = {
        "smallint": 16,
        "smallserial": 16,
        "integer": 32,
        "serial": 32,
        "bigint": 64,
        "bigserial": 64,
    }

    def base_type(self, db_type, full_db_type, unsigned, options):
        if db_type in self.INTEGER_WIDTHS:
            return integer_type(self.INTEGER_WIDTHS[db_type], False)
        if db_type == "real":
            return SemanticType.FLOAT32
        if db_type in ("double precision", "numeric", "decimal"):
            return SemanticType.FLOAT64
        if db_type in ("boolean", "bool"):
            return SemanticType.BOOL
        if db_type == "date" or db_type.startswith("time"):
            return SemanticType.TIME
        if db_type == "bytea":
            return SemanticType.BYTES
        if db_type in ("json", "jsonb"):
            return SemanticType.JSON
        return SemanticType.STRING


class DuckDBTypeMapper(TypeMapper):
    """Type mapper for DuckDB column types."""

    INTEGER_TYPES = {
        "tinyint": (8, False),
        "int1": (8, False),
        "smallint": (16, False),
        "int2": (16, False),
        "integer": (32, False),
        "int": (32, False),
        "int4": (32, False),
        "bigint": (64, False),
        "int8": (64, False),
        "utinyint": (8, True),
        "usmallint": (16, True),
        "uinteger": (32, True),
        "ubigint": (64, True),
    }

    def base_type(self, db_type, full_db_type, unsigned, options):
        # DECIMAL(18,3) -> decimal
        db_type = db_type.split("(")[0].strip()

        if db_type in self.INTEGER_TYPES:
            bits, is_unsigned = self.INTEGER_TYPES[db_type]
            return integer_type(bits, is_unsigned or unsigned)
        if db_type in ("float", "float4", "real"):
            return SemanticType.FLOAT32
        if db_type in ("double", "float8", "decimal", "numeric"):
            return SemanticType.FLOAT64
        if db_type in ("boolean", "bool"):
            return SemanticType.BOOL
        if db_type == "date" or db_type.startswith("time"):
            return SemanticType.TIME
        if db_type in ("blob", "bytea", "varbinary"):
            return SemanticType.BYTES
        if db_type == "json":
            return SemanticType.JSON
        return SemanticType.STRING


class SnowflakeTypeMapper(TypeMapper):
    """Type mapper for Snowflake column types.

    Snowflake stores every integer as NUMBER(38,0), so integers always map
    to int64 and every float is a double.
    """

    INTEGER_TYPES = {"int", "integer", "bigint", "smallint", "tinyint", "byteint"}
    _SCALE = re.compile(r"\(\s*\d+\s*,\s*(\d+)\s*\)")

    def base_type(self, db_type, full_db_type, unsigned, options):
        db_type = db_type.split("(")[0].strip()

        if db_type in self.INTEGER_TYPES:
            return SemanticType.INT64
        if db_type in ("number", "numeric", "decimal"):
            match = self._SCALE.search(full_db_type)
            if match and int(match.group(1)) > 0:
                return SemanticType.FLOAT64
            return SemanticType.INT64
        if db_type in ("float", "float4", "float8", "double", "double precision", "real"):
            return SemanticType.FLOAT64
        if db_type == "boolean":
            return SemanticType.BOOL
        if db_type in ("date", "datetime", "time") or db_type.startswith("timestamp"):
            return SemanticType.TIME
        if db_type in ("binary", "varbinary"):
            return SemanticType.BYTES
        if db_type in ("variant", "object", "array"):
            return SemanticType.JSON
        return SemanticType.STRING

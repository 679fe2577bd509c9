"""Database data models for schema introspection.

Every entity is frozen: the assembler builds each one exactly once and
nothing downstream is allowed to change it. Relationships between tables are
expressed through names, never through object references.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, List, Tuple, Dict, Any, Iterable


class SemanticType(str, Enum):
    """Dialect-independent column types assigned by the type mappers."""
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOL = "bool"
    TIME = "time"
    BYTES = "bytes"
    JSON = "json"
    STRING = "string"


@dataclass(frozen=True)
class Column:
    """Represents a database column."""
    name: str
    db_type: str
    full_db_type: str
    type_name: SemanticType
    nullable: bool = False
    unsigned: bool = False
    unique: bool = False
    default: Optional[str] = None
    generated: bool = False
    wrapper: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default is not None or self.generated


@dataclass(frozen=True)
class PrimaryKey:
    """Represents a primary key constraint; column order matters."""
    name: str
    columns: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ForeignKey:
    """Represents one column of a foreign key constraint."""
    name: str
    table: str
    column: str
    foreign_table: str
    foreign_column: str


@dataclass(frozen=True)
class Table:
    """Represents a database table."""
    name: str
    columns: Tuple[Column, ...] = ()
    pkey: Optional[PrimaryKey] = None
    fkeys: Tuple[ForeignKey, ...] = ()
    is_join_table: bool = False

    def get_column(self, name: str) -> Optional[Column]:
        """Find a column by name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def get_class_name(self) -> str:
        """Convert table name to class name (PascalCase)."""
        parts = self.name.lower().split('_')
        return ''.join(word.capitalize() for word in parts)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation of the table."""
        data = asdict(self)
        for column in data["columns"]:
            column["type_name"] = column["type_name"].value
        return data


def find_table(tables: Iterable[Table], name: str) -> Optional[Table]:
    """Find a table by name."""
    for table in tables:
        if table.name == name:
            return table
    return None

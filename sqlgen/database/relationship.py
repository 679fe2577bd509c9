"""Relationship analysis between introspected tables."""

from dataclasses import dataclass
from typing import Optional, List, Sequence, Iterable

from ..errors import ValidationError
from .models import Column, PrimaryKey, ForeignKey, Table, find_table


@dataclass(frozen=True)
class ToManyRelationship:
    """Reverse side of a foreign key that points at a table.

    For a plain foreign key, ``foreign_table``/``foreign_column`` is the
    table holding the key. When the key lives in a join table,
    ``join_table`` names it and ``foreign_table`` is the table on the far
    side of the join.
    """
    name: str
    table: str
    column: str
    foreign_table: str
    foreign_column: str
    join_table: Optional[str] = None
    join_local_column: Optional[str] = None
    join_foreign_column: Optional[str] = None

    @property
    def to_join_table(self) -> bool:
        return self.join_table is not None


def is_join_table(
    columns: Sequence[Column],
    pkey: Optional[PrimaryKey],
    fkeys: Sequence[ForeignKey],
) -> bool:
    """Decide whether a table only links two other tables.

    A join table has exactly two distinct foreign key constraints, no
    column outside those keys, and a primary key (if any) made of exactly
    the foreign key columns.
    """
    if len({fk.name for fk in fkeys}) != 2:
        return False

    fk_columns = {fk.column for fk in fkeys}
    if not columns or {c.name for c in columns} != fk_columns:
        return False

    if pkey is not None and set(pkey.columns) != fk_columns:
        return False

    return True


def check_primary_keys(tables: Iterable[Table]):
    """Ensure every table has a primary key.

    Raises:
        ValidationError: naming every table without one
    """
    missing = [t.name for t in tables if t.pkey is None]
    if missing:
        raise ValidationError(missing)


def to_many_relationships(table: Table, tables: Sequence[Table]) -> List[ToManyRelationship]:
    """Find every relationship where other rows point at ``table``."""
    relationships = []

    for other in tables:
        for fkey in other.fkeys:
            if fkey.foreign_table != table.name:
                continue

            if not other.is_join_table:
                relationships.append(ToManyRelationship(
                    name=fkey.name,
                    table=table.name,
                    column=fkey.foreign_column,
                    foreign_table=other.name,
                    foreign_column=fkey.column,
                ))
                continue

            for far in other.fkeys:
                if far.name == fkey.name:
                    continue
                relationships.append(ToManyRelationship(
                    name=far.name,
                    table=table.name,
                    column=fkey.foreign_column,
                    foreign_table=far.foreign_table,
                    foreign_column=far.foreign_column,
                    join_table=other.name,
                    join_local_column=fkey.column,
                    join_foreign_column=far.column,
                ))

    return relationships


def foreign_table_exists(fkey: ForeignKey, tables: Sequence[Table]) -> bool:
    return find_table(tables, fkey.foreign_table) is not None

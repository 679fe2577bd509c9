"""Renders tables as Python dataclass modules."""

import keyword
from typing import List, TextIO

from ..database.models import Column, SemanticType, Table
from ..database.relationship import to_many_relationships, foreign_table_exists
from .base import TemplateData, TableRenderer, TableTestRenderer

HEADER = '"""Code generated by sqlgen. DO NOT EDIT."""'

PYTHON_TYPES = {
    SemanticType.INT8: "int",
    SemanticType.INT16: "int",
    SemanticType.INT32: "int",
    SemanticType.INT64: "int",
    SemanticType.UINT8: "int",
    SemanticType.UINT16: "int",
    SemanticType.UINT32: "int",
    SemanticType.UINT64: "int",
    SemanticType.FLOAT32: "float",
    SemanticType.FLOAT64: "float",
    SemanticType.BOOL: "bool",
    SemanticType.TIME: "datetime",
    SemanticType.BYTES: "bytes",
    SemanticType.JSON: "Any",
    SemanticType.STRING: "str",
}


def field_name(column_name: str) -> str:
    """Convert a column name into a valid Python attribute name."""
    name = "".join(ch if ch.isalnum() or ch == "_" else "_" for ch in column_name)
    if name[:1].isdigit():
        name = "_" + name
    if keyword.iskeyword(name):
        name += "_"
    return name


def _optional(column: Column) -> bool:
    return column.nullable or column.has_default


class DataclassRenderer(TableRenderer):
    """Generates one ``@dataclass`` per table.

    Required columns come first so the dataclass stays valid; nullable and
    defaulted columns become ``Optional[...] = None``.
    """

    file_suffix = "_gen.py"

    def render(self, data: TemplateData, out: TextIO):
        out.write("\n".join(self.generate(data)))
        out.write("\n")

    def generate(self, data: TemplateData) -> List[str]:
        table = data.table
        class_name = table.get_class_name()
        pkey = tuple(table.pkey.columns) if table.pkey else ()

        lines = [HEADER, ""]
        lines.append("from dataclasses import dataclass")
        lines.append("from datetime import datetime")
        lines.append("from typing import Any, Optional")
        lines.append("")
        lines.append("")
        lines.append("@dataclass")
        lines.append(f"class {class_name}:")
        lines.append(f'    """Row of table {table.name}."""')
        lines.append("")
        lines.append(f"    __table__ = {table.name!r}")
        lines.append(f"    __quoted_table__ = {self._quoted_table(data)!r}")
        lines.append(f"    __primary_key__ = {pkey!r}")
        lines.append(f"    __select_by_pk__ = {self._select_by_pk(data)!r}")
        lines.append(f"    __use_last_insert_id__ = {data.use_last_insert_id!r}")

        fkeys = [fk for fk in table.fkeys if foreign_table_exists(fk, data.tables)]
        if fkeys:
            lines.append("    __foreign_keys__ = {")
            for fk in fkeys:
                lines.append(f"        {fk.column!r}: ({fk.foreign_table!r}, {fk.foreign_column!r}),")
            lines.append("    }")

        to_many = to_many_relationships(table, data.tables)
        if to_many:
            lines.append("    __to_many__ = {")
            for rel in to_many:
                through = f", {rel.join_table!r}" if rel.to_join_table else ""
                lines.append(f"        {rel.name!r}: ({rel.foreign_table!r}, {rel.foreign_column!r}{through}),")
            lines.append("    }")

        lines.append("")
        required = [c for c in table.columns if not _optional(c)]
        optional = [c for c in table.columns if _optional(c)]
        for column in required:
            lines.append(f"    {field_name(column.name)}: {PYTHON_TYPES[column.type_name]}")
        for column in optional:
            comment = f"  # {column.wrapper}" if column.wrapper else ""
            lines.append(
                f"    {field_name(column.name)}: Optional[{PYTHON_TYPES[column.type_name]}] = None{comment}"
            )

        return lines

    @staticmethod
    def _quoted_table(data: TemplateData) -> str:
        lq, rq = data.left_quote, data.right_quote
        name = f"{lq}{data.table.name}{rq}"
        if data.schema:
            return f"{lq}{data.schema}{rq}.{name}"
        return name

    def _select_by_pk(self, data: TemplateData) -> str:
        table = data.table
        if table.pkey is None:
            return ""
        lq, rq = data.left_quote, data.right_quote

        conditions = []
        for i, column in enumerate(table.pkey.columns, start=1):
            placeholder = f"${i}" if data.index_placeholders else "?"
            conditions.append(f"{lq}{column}{rq} = {placeholder}")

        columns = ", ".join(f"{lq}{c.name}{rq}" for c in table.columns)
        top = "TOP 1 " if data.use_top_clause else ""
        limit = "" if data.use_top_clause else " LIMIT 1"
        return (
            f"SELECT {top}{columns} FROM {self._quoted_table(data)} "
            f"WHERE {' AND '.join(conditions)}{limit}"
        )


class DataclassTestRenderer(TableTestRenderer):
    """Generates a pytest module checking the generated dataclass."""

    test_file_suffix = "_test_gen.py"

    def render_test(self, data: TemplateData, out: TextIO):
        out.write("\n".join(self.generate(data)))
        out.write("\n")

    def generate(self, data: TemplateData) -> List[str]:
        table: Table = data.table
        class_name = table.get_class_name()
        module = f"{data.pkg_name}.{table.name}.{table.name}_gen" if data.pkg_name else f"{table.name}_gen"

        lines = [HEADER, ""]
        lines.append("from dataclasses import fields")
        lines.append("")
        lines.append(f"from {module} import {class_name}")
        lines.append("")
        lines.append("")
        lines.append(f"def test_{table.name}_fields():")
        expected = sorted(field_name(c.name) for c in table.columns)
        lines.append(f"    assert sorted(f.name for f in fields({class_name})) == {expected!r}")
        lines.append("")
        lines.append("")
        lines.append(f"def test_{table.name}_primary_key():")
        pkey = tuple(table.pkey.columns) if table.pkey else ()
        lines.append(f"    assert {class_name}.__primary_key__ == {pkey!r}")
        return lines

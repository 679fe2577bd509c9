"""Database introspection module for sqlgen.

This module turns a live database schema into dialect-independent tables,
with drivers for PostgreSQL, MySQL, DuckDB and Snowflake plus an in-memory
mock.
"""

from .models import SemanticType, Column, PrimaryKey, ForeignKey, Table, find_table
from .base import Driver
from .assembler import SchemaAssembler
from .relationship import ToManyRelationship, is_join_table, check_primary_keys, to_many_relationships
from .type_mappers import (
    TranslationOptions,
    TypeAssignment,
    TypeMapper,
    MySQLTypeMapper,
    PostgresTypeMapper,
    DuckDBTypeMapper,
    SnowflakeTypeMapper,
)
from .postgres import PostgresDriver
from .mysql import MySQLDriver
from .duckdb import DuckDBDriver
from .snowflake import SnowflakeDriver
from .mock import MockDriver, MockTable, MockColumn
from .registry import create_driver, supported_drivers

__all__ = [
    # Data models
    "SemanticType",
    "Column",
    "PrimaryKey",
    "ForeignKey",
    "Table",
    "find_table",
    # Assembly
    "Driver",
    "SchemaAssembler",
    "ToManyRelationship",
    "is_join_table",
    "check_primary_keys",
    "to_many_relationships",
    # Type mappers
    "TranslationOptions",
    "TypeAssignment",
    "TypeMapper",
    "MySQLTypeMapper",
    "PostgresTypeMapper",
    "DuckDBTypeMapper",
    "SnowflakeTypeMapper",
    # Drivers
    "PostgresDriver",
    "MySQLDriver",
    "DuckDBDriver",
    "SnowflakeDriver",
    "MockDriver",
    "MockTable",
    "MockColumn",
    "create_driver",
    "supported_drivers",
]

"""Error types for sqlgen."""

from typing import Optional, Dict, Any, List


class SqlgenError(Exception):
    """Base exception for sqlgen errors."""

    def __init__(self, message: str, code: str = "SQLGEN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a dictionary for display or JSON output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConnectionError(SqlgenError):
    """The driver could not reach or authenticate to the database."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONNECTION_ERROR", details=details)


class QueryError(SqlgenError):
    """A metadata query failed at the database layer."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="QUERY_ERROR", details=details)


class SchemaError(SqlgenError):
    """The introspected schema cannot be used (e.g. no tables found)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="SCHEMA_ERROR", details=details)


class ValidationError(SqlgenError):
    """One or more tables lack a primary key.

    Every offending table is reported, not just the first one found.
    """

    def __init__(self, tables: List[str]):
        super().__init__(
            f"primary key missing in tables ({', '.join(tables)})",
            code="VALIDATION_ERROR",
            details={"tables": list(tables)},
        )
        self.tables = list(tables)


class ConfigurationError(SqlgenError):
    """Unrecognized driver name or missing renderer."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)


class RenderError(SqlgenError):
    """The rendering collaborator failed for a table."""

    def __init__(self, table: str, message: str, details: Optional[Dict[str, Any]] = None):
        error_details = details or {}
        error_details["table"] = table
        super().__init__(message, code="RENDER_ERROR", details=error_details)
        self.table = table


class OutputError(SqlgenError):
    """Output directory or file could not be created."""

    def __init__(self, path: str, message: str):
        super().__init__(message, code="OUTPUT_ERROR", details={"path": path})
        self.path = path

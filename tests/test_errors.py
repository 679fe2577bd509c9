"""Tests for sqlgen error types."""

from sqlgen.errors import (
    SqlgenError,
    ConnectionError,
    QueryError,
    SchemaError,
    ValidationError,
    ConfigurationError,
    RenderError,
    OutputError,
)


class TestErrors:
    """Test error codes and serialization."""

    def test_codes(self):
        assert ConnectionError("x").code == "CONNECTION_ERROR"
        assert QueryError("x").code == "QUERY_ERROR"
        assert SchemaError("x").code == "SCHEMA_ERROR"
        assert ConfigurationError("x").code == "CONFIGURATION_ERROR"
        assert RenderError("users", "x").code == "RENDER_ERROR"
        assert OutputError("/tmp/x", "x").code == "OUTPUT_ERROR"

    def test_all_share_base(self):
        """Test callers can catch every failure with one type."""
        for error in (ConnectionError("x"), ValidationError(["a"]), OutputError("p", "x")):
            assert isinstance(error, SqlgenError)

    def test_validation_error_lists_tables(self):
        """Test every offending table is named."""
        error = ValidationError(["orders", "audit_log"])
        assert str(error) == "primary key missing in tables (orders, audit_log)"
        assert error.to_dict() == {
            "code": "VALIDATION_ERROR",
            "message": "primary key missing in tables (orders, audit_log)",
            "details": {"tables": ["orders", "audit_log"]},
        }

    def test_render_error_details(self):
        """Test the failing table is recorded in details."""
        error = RenderError("users", "boom", details={"renderer": "dataclass"})
        assert error.table == "users"
        assert error.details == {"renderer": "dataclass", "table": "users"}

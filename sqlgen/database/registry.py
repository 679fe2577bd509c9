"""Driver lookup by dialect name."""

from typing import Callable, Dict, Tuple, TYPE_CHECKING

from ..errors import ConfigurationError
from .base import Driver
from .duckdb import DuckDBDriver
from .mock import MockDriver
from .mysql import MySQLDriver
from .postgres import PostgresDriver
from .snowflake import SnowflakeDriver

if TYPE_CHECKING:
    from ..config import RunConfig


def _postgres(config: "RunConfig") -> Driver:
    c = config.postgres
    return PostgresDriver(
        user=c.user,
        password=c.password,
        dbname=c.dbname,
        host=c.host,
        port=c.port,
        sslmode=c.sslmode,
        options=config.translation_options(),
    )


def _mysql(config: "RunConfig") -> Driver:
    c = config.mysql
    return MySQLDriver(
        user=c.user,
        password=c.password,
        dbname=c.dbname,
        host=c.host,
        port=c.port,
        sslmode=c.sslmode,
        options=config.translation_options(),
    )


def _duckdb(config: "RunConfig") -> Driver:
    return DuckDBDriver(
        database_path=config.duckdb.path,
        read_only=config.duckdb.read_only,
        options=config.translation_options(),
    )


def _snowflake(config: "RunConfig") -> Driver:
    c = config.snowflake
    return SnowflakeDriver(
        database=c.database,
        account=c.account,
        user=c.user,
        password=c.password,
        warehouse=c.warehouse,
        role=c.role,
        options=config.translation_options(),
    )


def _mock(config: "RunConfig") -> Driver:
    return MockDriver(options=config.translation_options())


_DRIVERS: Dict[str, Callable[["RunConfig"], Driver]] = {
    "postgres": _postgres,
    "mysql": _mysql,
    "duckdb": _duckdb,
    "snowflake": _snowflake,
    "mock": _mock,
}


def create_driver(config: "RunConfig") -> Driver:
    """Construct the driver for ``config.driver_name``.

    Raises:
        ConfigurationError: if the name is not a supported dialect
    """
    factory = _DRIVERS.get(config.driver_name)
    if factory is None:
        raise ConfigurationError(
            f"an invalid driver name was provided: {config.driver_name!r}",
            details={"driver": config.driver_name, "supported": list(_DRIVERS)},
        )
    return factory(config)


def supported_drivers() -> Tuple[str, ...]:
    """Return tuple of supported driver names."""
    return tuple(_DRIVERS.keys())

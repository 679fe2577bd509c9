"""Configuration management for sqlgen."""

import os
from pathlib import Path
from typing import Optional, List

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .database.type_mappers import TranslationOptions


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.sqlgen/.env
    3. Package directory (where this file is located)
    """
    # Current directory
    if os.path.exists(".env"):
        return ".env"

    # User config directory
    user_env = Path.home() / ".sqlgen" / ".env"
    if user_env.exists():
        return str(user_env)

    # Package directory
    package_dir = Path(__file__).parent.parent
    package_env = package_dir / ".env"
    if package_env.exists():
        return str(package_env)

    return None


class PostgresConfig(BaseModel):
    """Connection parameters for PostgreSQL."""
    user: str = ""
    password: str = ""
    dbname: str = ""
    host: str = "localhost"
    port: int = 5432
    sslmode: str = "prefer"


class MySQLConfig(BaseModel):
    """Connection parameters for MySQL."""
    user: str = ""
    password: str = ""
    dbname: str = ""
    host: str = "localhost"
    port: int = 3306
    sslmode: str = "false"


class DuckDBConfig(BaseModel):
    """Connection parameters for DuckDB."""
    path: Optional[str] = None
    read_only: bool = True


class SnowflakeConfig(BaseModel):
    """Connection parameters for Snowflake."""
    account: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    warehouse: Optional[str] = None
    role: Optional[str] = None
    database: str = ""


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Nested blocks use a double underscore, e.g. ``SQLGEN_POSTGRES__HOST``.
    """

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    mysql: MySQLConfig = Field(default_factory=MySQLConfig)
    duckdb: DuckDBConfig = Field(default_factory=DuckDBConfig)
    snowflake: SnowflakeConfig = Field(default_factory=SnowflakeConfig)

    output: str = Field(default="models", description="Output folder for generated code")
    pkg_name: str = Field(default="models", description="Package name used by generated code")
    tinyint_as_bool: bool = Field(
        default=False,
        description="Map MySQL tinyint(1) columns to bool instead of int8"
    )

    class Config:
        env_prefix = "SQLGEN_"
        env_nested_delimiter = "__"
        env_file = _find_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


class RunConfig(BaseModel):
    """Everything a single generator run needs."""
    driver_name: str
    schema_name: str = ""
    whitelist: List[str] = Field(default_factory=list)
    blacklist: List[str] = Field(default_factory=list)
    out_folder: str = "models"
    pkg_name: str = "models"
    debug: bool = False
    no_tests: bool = False
    wipe: bool = False
    tinyint_as_bool: bool = False

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    mysql: MySQLConfig = Field(default_factory=MySQLConfig)
    duckdb: DuckDBConfig = Field(default_factory=DuckDBConfig)
    snowflake: SnowflakeConfig = Field(default_factory=SnowflakeConfig)

    def translation_options(self) -> TranslationOptions:
        return TranslationOptions(tinyint_as_bool=self.tinyint_as_bool)

    @classmethod
    def from_settings(cls, settings: "Settings", driver_name: str, **overrides) -> "RunConfig":
        """Build a run config from settings, letting explicit values win."""
        values = {
            "driver_name": driver_name,
            "out_folder": settings.output,
            "pkg_name": settings.pkg_name,
            "tinyint_as_bool": settings.tinyint_as_bool,
            "postgres": settings.postgres,
            "mysql": settings.mysql,
            "duckdb": settings.duckdb,
            "snowflake": settings.snowflake,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


# Global settings instance
settings = Settings()

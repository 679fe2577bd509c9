"""sqlgen - Main entry point."""

import logging
from typing import Optional, List

import typer
from typing_extensions import Annotated
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import settings, RunConfig
from .database.registry import supported_drivers
from .errors import SqlgenError
from .generator import CodeGenerator
from .render import DataclassRenderer, DataclassTestRenderer

app = typer.Typer(
    name="sqlgen",
    help="Generate model code from a live database schema",
    add_completion=False,
)

console = Console()


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@app.command()
def generate(
    driver: str = typer.Argument(..., help="Database driver: postgres, mysql, duckdb, snowflake or mock"),
    schema: Optional[str] = typer.Option(None, "--schema", "-s", help="Schema to introspect (default: the driver's default schema)"),
    whitelist: Annotated[Optional[List[str]], typer.Option(
        "--whitelist", "-w", help="Only generate these tables (repeatable)"
    )] = None,
    blacklist: Annotated[Optional[List[str]], typer.Option(
        "--blacklist", "-b", help="Skip these tables (repeatable, ignored with --whitelist)"
    )] = None,
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output folder (or SQLGEN_OUTPUT env)"),
    pkg_name: Optional[str] = typer.Option(None, "--pkgname", "-p", help="Package name of the generated code"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Print the introspected tables as JSON"),
    no_tests: bool = typer.Option(False, "--no-tests", help="Do not generate test files"),
    wipe: bool = typer.Option(False, "--wipe", help="Delete the output folder before generating"),
    tinyint_as_bool: Optional[bool] = typer.Option(None, "--tinyint-as-bool", help="Map MySQL tinyint(1) to bool"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Introspect a database and generate one model per table."""
    _setup_logging(verbose)

    config = RunConfig.from_settings(
        settings,
        driver,
        schema_name=schema,
        whitelist=whitelist or [],
        blacklist=blacklist or [],
        out_folder=output,
        pkg_name=pkg_name,
        debug=debug,
        no_tests=no_tests,
        wipe=wipe,
        tinyint_as_bool=tinyint_as_bool,
    )

    try:
        generator = CodeGenerator(config, DataclassRenderer(), DataclassTestRenderer())
        written = generator.run()
    except SqlgenError as e:
        console.print(f"[red]Error ({e.code}): {escape(e.message)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Generated {len(written)} files in {config.out_folder}[/green]")


@app.command()
def drivers():
    """List supported database drivers."""
    for name in supported_drivers():
        console.print(f"  {name}")


@app.command()
def config():
    """Show current configuration."""
    table = Table(title="Current Configuration")
    table.add_column("Setting")
    table.add_column("Value")

    table.add_row("Output folder", settings.output)
    table.add_row("Package name", settings.pkg_name)
    table.add_row("tinyint(1) as bool", str(settings.tinyint_as_bool))
    for name in ("postgres", "mysql"):
        block = getattr(settings, name)
        table.add_row(f"{name}", f"{block.user or '-'}@{block.host}:{block.port}/{block.dbname or '-'}")
        table.add_row(f"{name} password", "Configured" if block.password else "Not set")
    table.add_row("duckdb", settings.duckdb.path or ":memory:")
    table.add_row("snowflake", f"{settings.snowflake.account or '-'} / {settings.snowflake.database or '-'}")

    console.print(table)


@app.callback()
def main():
    """
    sqlgen - generate model code from a live database schema.

    Examples:

        sqlgen generate postgres --schema public -o models

        sqlgen generate mysql -w users -w roles --tinyint-as-bool

        sqlgen generate mock --debug
    """
    pass


if __name__ == "__main__":
    app()

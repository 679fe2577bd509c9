"""Runs introspection and hands every table to the renderers."""

import json
import logging
import os
import shutil
from enum import Enum
from pathlib import Path
from typing import Optional, List, Callable

from .config import RunConfig
from .database.assembler import SchemaAssembler
from .database.base import Driver
from .database.models import Table
from .database.registry import create_driver
from .errors import SqlgenError, ConfigurationError, RenderError, OutputError
from .render.base import TemplateData, TableRenderer, TableTestRenderer

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    UNOPENED = "unopened"
    INTROSPECTING = "introspecting"
    READY = "ready"
    FAILED = "failed"


class CodeGenerator:
    """Owns the driver for one run and renders every non-join table.

    The driver is opened inside a ``with`` block so it is closed exactly
    once however the run ends. Any failure aborts the run; nothing is
    retried and no further table is rendered after a render error.
    """

    def __init__(
        self,
        config: RunConfig,
        renderer: Optional[TableRenderer],
        test_renderer: Optional[TableTestRenderer] = None,
        driver: Optional[Driver] = None,
    ):
        if renderer is None:
            raise ConfigurationError("a table renderer must be configured")

        self.config = config
        self.renderer = renderer
        self.test_renderer = test_renderer
        self.driver = driver or create_driver(config)
        self.tables: List[Table] = []
        self.state = RunState.UNOPENED

    @property
    def schema(self) -> str:
        return self.config.schema_name or self.driver.default_schema

    def run(self) -> List[Path]:
        """Introspect the database and write the generated files.

        Returns:
            Paths of every file written
        """
        try:
            with self.driver:
                self.driver.open()
                self.state = RunState.INTROSPECTING
                self.tables = SchemaAssembler(self.driver).assemble(
                    self.schema, self.config.whitelist, self.config.blacklist
                )
                self.state = RunState.READY

                if self.config.debug:
                    print(json.dumps([t.to_dict() for t in self.tables], indent=2))

                self._init_out_folder()
                return self._render_all()
        except Exception:
            self.state = RunState.FAILED
            raise

    def _template_data(self, table: Table) -> TemplateData:
        return TemplateData(
            table=table,
            tables=tuple(self.tables),
            pkg_name=self.config.pkg_name,
            schema=self.schema,
            left_quote=self.driver.left_quote(),
            right_quote=self.driver.right_quote(),
            use_last_insert_id=self.driver.use_last_insert_id(),
            use_top_clause=self.driver.use_top_clause(),
            index_placeholders=self.driver.index_placeholders(),
        )

    def _render_all(self) -> List[Path]:
        written = []
        for table in self.tables:
            if table.is_join_table:
                logger.debug("Skipping join table %s", table.name)
                continue

            data = self._template_data(table)
            written.append(self._write(table.name, self.renderer.file_suffix, self.renderer.render, data))

            if self.test_renderer is not None and not self.config.no_tests:
                written.append(self._write(
                    table.name, self.test_renderer.test_file_suffix, self.test_renderer.render_test, data
                ))

        logger.info("Generated %d files in %s", len(written), self.config.out_folder)
        return written

    def _write(self, table_name: str, suffix: str, render: Callable, data: TemplateData) -> Path:
        """Render into <out>/<table>/<table><suffix>, refusing to overwrite."""
        directory = Path(self.config.out_folder) / table_name
        path = directory / f"{table_name}{suffix}"
        try:
            directory.mkdir(parents=True, exist_ok=True)
            out = open(path, "x", encoding="utf-8")
        except OSError as e:
            raise OutputError(str(path), f"unable to create {path}: {e}") from e

        with out:
            try:
                render(data, out)
            except SqlgenError:
                raise
            except Exception as e:
                raise RenderError(table_name, f"unable to generate output for table {table_name}: {e}") from e

        logger.debug("Wrote %s", path)
        return path

    def _init_out_folder(self):
        """Create the output folder, wiping it first when configured."""
        out = self.config.out_folder
        try:
            if self.config.wipe and os.path.exists(out):
                logger.info("Wiping output folder %s", out)
                shutil.rmtree(out)
            os.makedirs(out, exist_ok=True)
        except OSError as e:
            raise OutputError(out, f"unable to initialize the output folder {out}: {e}") from e

"""Renderer contract consumed by the generator."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple, TextIO

from ..database.models import Table


@dataclass(frozen=True)
class TemplateData:
    """Per-table view handed to a renderer."""
    table: Table
    tables: Tuple[Table, ...]

    # Controls what names are output
    pkg_name: str
    schema: str

    # Dialect naming options
    left_quote: str = '"'
    right_quote: str = '"'
    use_last_insert_id: bool = False
    use_top_clause: bool = False
    index_placeholders: bool = True


class TableRenderer(ABC):
    """Produces model source for one table."""

    file_suffix: str = "_gen.py"

    @abstractmethod
    def render(self, data: TemplateData, out: TextIO):
        """Write the generated source for ``data.table`` to ``out``."""
        pass


class TableTestRenderer(ABC):
    """Produces test source for one table."""

    test_file_suffix: str = "_test_gen.py"

    @abstractmethod
    def render_test(self, data: TemplateData, out: TextIO):
        """Write the generated test source for ``data.table`` to ``out``."""
        pass

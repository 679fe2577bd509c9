"""Renderers that turn introspected tables into source files."""

from .base import TemplateData, TableRenderer, TableTestRenderer
from .dataclass_renderer import DataclassRenderer, DataclassTestRenderer

__all__ = [
    "TemplateData",
    "TableRenderer",
    "TableTestRenderer",
    "DataclassRenderer",
    "DataclassTestRenderer",
]

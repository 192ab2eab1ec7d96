"""Adapters for external I/O and rendering."""

from keysmith.adapters.file_adapter import (
    FileAdapter,
    FileSystemAdapter,
    create_file_adapter,
)
from keysmith.adapters.template_adapter import TemplateAdapter, create_template_adapter


__all__ = [
    "FileAdapter",
    "FileSystemAdapter",
    "TemplateAdapter",
    "create_file_adapter",
    "create_template_adapter",
]

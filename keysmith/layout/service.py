"""Layout service for loading, saving and checking layout documents."""

from pathlib import Path

from keysmith.adapters import FileAdapter, create_file_adapter
from keysmith.core.structlog_logger import StructlogMixin
from keysmith.layout.models import Layout
from keysmith.layout.parsers import (
    LayoutParseResult,
    MarkdownLayoutParser,
    MarkdownLayoutWriter,
    create_markdown_parser,
    create_markdown_writer,
)
from keysmith.layout.resolver import (
    KeycodeResolver,
    ResolutionResult,
    create_keycode_resolver,
)


class LayoutService(StructlogMixin):
    """Service for layout documents on disk.

    All reads and writes go through the file adapter; writes are atomic.
    """

    def __init__(
        self,
        file_adapter: FileAdapter,
        parser: MarkdownLayoutParser,
        writer: MarkdownLayoutWriter,
        resolver: KeycodeResolver,
    ) -> None:
        super().__init__()
        self._file_adapter = file_adapter
        self._parser = parser
        self._writer = writer
        self._resolver = resolver

    def load(self, path: Path) -> LayoutParseResult:
        """Read and parse a layout document.

        Raises:
            FileSystemError: If the file cannot be read
            LayoutParseError: If the document is malformed
        """
        text = self._file_adapter.read_text(path)
        result = self._parser.parse(text)
        self.logger.info(
            "layout_loaded",
            path=str(path),
            layers=len(result.layout.layers),
            warnings=len(result.warnings),
        )
        return result

    def save(self, layout: Layout, path: Path, touch: bool = True) -> Path:
        """Serialize ``layout`` and write it to ``path``.

        Args:
            layout: Layout to save
            path: Destination file
            touch: Update the modification timestamp first

        Returns:
            The path written
        """
        if touch:
            layout.touch()
        self._file_adapter.write_text(path, self._writer.serialize(layout))
        self.logger.info("layout_saved", path=str(path))
        return path

    def create(
        self,
        path: Path,
        name: str,
        rows: int,
        cols: int,
        keyboard: str | None = None,
        layout_variant: str | None = None,
    ) -> Layout:
        """Write a new skeleton layout to ``path``."""
        layout = Layout.skeleton(
            name, rows, cols, keyboard=keyboard, layout_variant=layout_variant
        )
        self.save(layout, path, touch=False)
        return layout

    def validate(self, path: Path) -> ResolutionResult:
        """Parse and resolve a layout, collecting every warning.

        Raises:
            LayoutParseError: On structural errors
            LayoutReferenceError: If any reference cannot be resolved
        """
        parsed = self.load(path)
        result = self._resolver.resolve(parsed.layout)
        result.warnings = parsed.warnings + result.warnings
        self.logger.info(
            "layout_validated", path=str(path), warnings=len(result.warnings)
        )
        return result

    def format(
        self, path: Path, output: Path | None = None, check: bool = False
    ) -> bool:
        """Rewrite a layout in canonical form.

        With ``check`` nothing is written.

        Returns:
            True if the canonical text differs from the original
        """
        original = self._file_adapter.read_text(path)
        layout = self._parser.parse(original).layout
        formatted = self._writer.serialize(layout)
        target = output or path
        changed = formatted != original
        if not check and (changed or target != path):
            self._file_adapter.write_text(target, formatted)
        self.logger.info("layout_formatted", path=str(target), changed=changed)
        return changed


def create_layout_service(file_adapter: FileAdapter | None = None) -> LayoutService:
    """Create a LayoutService with default collaborators."""
    return LayoutService(
        file_adapter=file_adapter or create_file_adapter(),
        parser=create_markdown_parser(),
        writer=create_markdown_writer(),
        resolver=create_keycode_resolver(),
    )


__all__ = ["LayoutService", "create_layout_service"]

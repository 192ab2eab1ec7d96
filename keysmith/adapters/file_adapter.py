"""File adapter for abstracting file system operations."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from keysmith.core.errors import FileSystemError


logger = logging.getLogger(__name__)


@runtime_checkable
class FileAdapter(Protocol):
    """Protocol for file system operations."""

    def read_text(self, path: Path, encoding: str = "utf-8") -> str:
        """Read text content from a file.

        Raises:
            FileSystemError: If file cannot be read
        """
        ...

    def write_text(self, path: Path, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file atomically.

        The content lands in a temporary file in the target directory which
        then replaces the target, so readers never see a partial file.

        Raises:
            FileSystemError: If file cannot be written
        """
        ...

    def write_files(self, files: dict[Path, str], encoding: str = "utf-8") -> None:
        """Write several files so that either all of them are replaced or none.

        Every file is staged in a temporary sibling before any target is
        touched. A failure while staging removes the staged files.

        Raises:
            FileSystemError: If any file cannot be written
        """
        ...

    def read_json(self, path: Path, encoding: str = "utf-8") -> dict[str, Any]:
        """Read and parse JSON content from a file.

        Raises:
            FileSystemError: If file cannot be read or JSON is invalid
        """
        ...

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        ...

    def mkdir(self, path: Path, parents: bool = True, exist_ok: bool = True) -> None:
        """Create a directory."""
        ...


class FileSystemAdapter:
    """File system adapter implementation."""

    def read_text(self, path: Path, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        try:
            logger.debug("Reading text file: %s", path)
            content = path.read_text(encoding=encoding)
            logger.debug("Successfully read %d characters from %s", len(content), path)
            return content
        except FileNotFoundError as e:
            logger.error("File not found: %s", path)
            raise FileSystemError("File not found", value=str(path)) from e
        except UnicodeDecodeError as e:
            logger.error("Encoding error reading file %s: %s", path, e)
            raise FileSystemError(
                f"Cannot decode file as {encoding}", value=str(path)
            ) from e
        except OSError as e:
            logger.error("Error reading file %s: %s", path, e)
            raise FileSystemError(f"Cannot read file: {e}", value=str(path)) from e

    def write_text(self, path: Path, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file through a temporary sibling file."""
        self.write_files({path: content}, encoding)

    def write_files(self, files: dict[Path, str], encoding: str = "utf-8") -> None:
        """Stage every file next to its target, then move them all into place."""
        staged: list[tuple[Path, Path]] = []
        current: Path | None = None
        try:
            for path, content in files.items():
                current = path
                self.mkdir(path.parent)
                logger.debug("Writing text file: %s", path)
                staged.append((self._stage(path, content, encoding), path))
            for tmp_path, path in staged:
                current = path
                os.replace(tmp_path, path)
        except FileSystemError:
            self._discard(staged)
            raise
        except OSError as e:
            self._discard(staged)
            logger.error("Error writing file %s: %s", current, e)
            raise FileSystemError(f"Cannot write file: {e}", value=str(current)) from e
        logger.debug("Successfully wrote %d files", len(staged))

    def _stage(self, path: Path, content: str, encoding: str) -> Path:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding=encoding, newline="\n") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        return tmp_path

    def _discard(self, staged: list[tuple[Path, Path]]) -> None:
        for tmp_path, _ in staged:
            tmp_path.unlink(missing_ok=True)

    def read_json(self, path: Path, encoding: str = "utf-8") -> dict[str, Any]:
        """Read and parse JSON content from a file."""
        content = self.read_text(path, encoding)
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in file %s: %s", path, e)
            raise FileSystemError(f"Invalid JSON: {e}", value=str(path)) from e
        if not isinstance(data, dict):
            raise FileSystemError("Expected a JSON object", value=str(path))
        return data

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        return path.exists()

    def mkdir(self, path: Path, parents: bool = True, exist_ok: bool = True) -> None:
        """Create a directory."""
        try:
            path.mkdir(parents=parents, exist_ok=exist_ok)
        except OSError as e:
            logger.error("Error creating directory %s: %s", path, e)
            raise FileSystemError(
                f"Cannot create directory: {e}", value=str(path)
            ) from e


def create_file_adapter() -> FileAdapter:
    """Create a file adapter with default implementation."""
    return FileSystemAdapter()


__all__ = ["FileAdapter", "FileSystemAdapter", "create_file_adapter"]

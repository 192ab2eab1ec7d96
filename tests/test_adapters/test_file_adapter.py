"""Tests for FileSystemAdapter."""

from pathlib import Path

import pytest

from keysmith.adapters import FileAdapter, create_file_adapter
from keysmith.core.errors import FileSystemError


@pytest.fixture
def adapter():
    return create_file_adapter()


class TestFileSystemAdapter:
    """Test file system operations."""

    def test_implements_protocol(self, adapter):
        assert isinstance(adapter, FileAdapter)

    def test_write_creates_parents(self, adapter, tmp_path: Path):
        path = tmp_path / "a" / "b" / "out.txt"
        adapter.write_text(path, "hello\n")
        assert path.read_text(encoding="utf-8") == "hello\n"

    def test_write_leaves_no_temporary_files(self, adapter, tmp_path: Path):
        path = tmp_path / "out.txt"
        adapter.write_text(path, "one")
        adapter.write_text(path, "two")
        assert [p.name for p in tmp_path.iterdir()] == ["out.txt"]
        assert adapter.read_text(path) == "two"

    def test_write_files(self, adapter, tmp_path: Path):
        adapter.write_files({tmp_path / "a.txt": "A", tmp_path / "sub" / "b.txt": "B"})
        assert (tmp_path / "a.txt").read_text(encoding="utf-8") == "A"
        assert (tmp_path / "sub" / "b.txt").read_text(encoding="utf-8") == "B"

    def test_write_files_is_all_or_nothing(self, adapter, tmp_path: Path):
        (tmp_path / "a.txt").write_text("old", encoding="utf-8")
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(FileSystemError):
            adapter.write_files(
                {tmp_path / "a.txt": "new", blocker / "b.txt": "B"}
            )
        assert (tmp_path / "a.txt").read_text(encoding="utf-8") == "old"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.txt", "blocker"]

    def test_read_missing_file(self, adapter, tmp_path: Path):
        with pytest.raises(FileSystemError, match="File not found"):
            adapter.read_text(tmp_path / "nope.txt")

    def test_read_json(self, adapter, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text('{"a": 1}', encoding="utf-8")
        assert adapter.read_json(path) == {"a": 1}

    def test_read_json_invalid(self, adapter, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(FileSystemError, match="Invalid JSON"):
            adapter.read_json(path)

    def test_read_json_requires_object(self, adapter, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(FileSystemError):
            adapter.read_json(path)

    def test_write_into_file_path_fails(self, adapter, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(FileSystemError):
            adapter.write_text(blocker / "out.txt", "content")

    def test_exists(self, adapter, tmp_path: Path):
        assert adapter.exists(tmp_path)
        assert not adapter.exists(tmp_path / "missing")

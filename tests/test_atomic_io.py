"""Tests for bankgen.utils.atomic_io module."""

from pathlib import Path

import pytest

from bankgen.utils.atomic_io import (
    TEMP_SUFFIX,
    atomic_write_bytes,
    atomic_write_text,
    cleanup_orphan_temp_files,
)

GENERATED = "// <auto-generated>\nnamespace Lumenfish.Audio\n{\n}\n"


class TestAtomicWriteBytes:
    """Tests for atomic_write_bytes function."""

    def test_creates_file_and_parents(self, tmp_path):
        """Should create missing output directories and the file."""
        path = tmp_path / "Assets" / "Generated" / "FmodEvents.g.cs"

        atomic_write_bytes(path, b"enum")

        assert path.read_bytes() == b"enum"

    def test_replaces_existing_file(self, tmp_path):
        """Should replace the previous generated file in one step."""
        path = tmp_path / "FmodEvents.g.cs"
        path.write_bytes(b"previous")

        atomic_write_bytes(path, b"current")

        assert path.read_bytes() == b"current"

    def test_no_temp_file_after_success(self, tmp_path):
        path = tmp_path / "FmodEvents.g.cs"

        atomic_write_bytes(path, b"data")

        assert not (tmp_path / ("FmodEvents.g.cs" + TEMP_SUFFIX)).exists()
        assert [p.name for p in tmp_path.iterdir()] == ["FmodEvents.g.cs"]

    def test_overwrites_stale_temp_file(self, tmp_path):
        """A temp file left by an interrupted run does not block the write."""
        path = tmp_path / "FmodEvents.g.cs"
        stale = tmp_path / "FmodEvents.g.cs.tmp"
        stale.write_bytes(b"half written")

        atomic_write_bytes(path, b"fresh")

        assert path.read_bytes() == b"fresh"
        assert not stale.exists()

    def test_custom_temp_suffix(self, tmp_path):
        path = tmp_path / "fmod_events.py"
        atomic_write_bytes(path, b"x = 1\n", temp_suffix=".partial")
        assert path.read_bytes() == b"x = 1\n"

    def test_accepts_string_path(self, tmp_path):
        path = str(tmp_path / "FmodBuses.g.cs")
        atomic_write_bytes(path, b"data")
        assert Path(path).exists()

    def test_large_and_empty_content(self, tmp_path):
        big = tmp_path / "big.g.cs"
        empty = tmp_path / "empty.g.cs"

        atomic_write_bytes(big, b"x" * 1_000_000)
        atomic_write_bytes(empty, b"")

        assert big.stat().st_size == 1_000_000
        assert empty.read_bytes() == b""

    def test_parent_is_a_file(self, tmp_path):
        """Should raise OSError and leave nothing behind."""
        blocker = tmp_path / "Generated"
        blocker.write_text("not a directory", encoding="utf-8")

        with pytest.raises(OSError):
            atomic_write_bytes(blocker / "FmodEvents.g.cs", b"data")

        assert blocker.read_text(encoding="utf-8") == "not a directory"


class TestAtomicWriteText:
    """Tests for atomic_write_text function."""

    def test_utf8_default(self, tmp_path):
        path = tmp_path / "FmodEvents.g.cs"
        text = GENERATED + '// "event:/Musique/Café"\n'

        atomic_write_text(path, text)

        assert path.read_text(encoding="utf-8") == text

    def test_newlines_preserved(self, tmp_path):
        """Should write the text byte for byte, without newline translation."""
        path = tmp_path / "FmodEvents.g.cs"

        atomic_write_text(path, GENERATED)

        assert path.read_bytes() == GENERATED.encode("utf-8")

    def test_custom_encoding(self, tmp_path):
        path = tmp_path / "latin.txt"
        atomic_write_text(path, "café", encoding="latin-1")
        assert path.read_bytes() == b"caf\xe9"


class TestCleanupOrphanTempFiles:
    """Tests for cleanup_orphan_temp_files function."""

    def test_removes_temp_files(self, tmp_path):
        (tmp_path / "FmodEvents.g.cs.tmp").write_text("a", encoding="utf-8")
        (tmp_path / "FmodBuses.g.cs.tmp").write_text("b", encoding="utf-8")
        (tmp_path / "FmodEvents.g.cs").write_text("keep", encoding="utf-8")

        removed = cleanup_orphan_temp_files(tmp_path)

        assert removed == 2
        assert [p.name for p in tmp_path.iterdir()] == ["FmodEvents.g.cs"]

    def test_specific_suffix_only(self, tmp_path):
        """A file-specific suffix leaves other temp files alone."""
        (tmp_path / "FmodEvents.g.cs.tmp").write_text("a", encoding="utf-8")
        (tmp_path / "other.tmp").write_text("b", encoding="utf-8")

        removed = cleanup_orphan_temp_files(tmp_path, temp_suffix="FmodEvents.g.cs.tmp")

        assert removed == 1
        assert (tmp_path / "other.tmp").exists()

    def test_not_recursive(self, tmp_path):
        nested = tmp_path / "sub"
        nested.mkdir()
        (nested / "x.tmp").write_text("a", encoding="utf-8")

        assert cleanup_orphan_temp_files(tmp_path) == 0
        assert (nested / "x.tmp").exists()

    def test_empty_directory(self, tmp_path):
        assert cleanup_orphan_temp_files(tmp_path) == 0

    def test_missing_directory(self, tmp_path):
        assert cleanup_orphan_temp_files(tmp_path / "missing") == 0

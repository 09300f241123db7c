"""Tests for splitting files into part files."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from dropbox_uploader import chunker


@pytest.fixture
def parts_dir(tmp_path: Path) -> Path:
    """Directory that receives the part files."""
    path = tmp_path / "parts"
    path.mkdir()
    return path


class TestChunkCount:
    """Tests for chunk_count."""

    def test_exact_multiple(self) -> None:
        """Test sizes that divide evenly."""
        assert chunker.chunk_count(30, 10) == 3

    def test_remainder_adds_a_part(self) -> None:
        """Test that a remainder needs one more part."""
        assert chunker.chunk_count(31, 10) == 4

    def test_empty(self) -> None:
        """Test that an empty file needs no parts."""
        assert chunker.chunk_count(0, 10) == 0

    def test_invalid_chunk_size(self) -> None:
        """Test that a non-positive chunk size is rejected."""
        with pytest.raises(ValueError):
            chunker.chunk_count(10, 0)


class TestSplit:
    """Tests for split."""

    def test_split_sizes_and_order(self, tmp_path: Path, parts_dir: Path) -> None:
        """Test that parts are chunk_size long except the last one."""
        data = os.urandom(25)
        source = tmp_path / "big.bin"
        source.write_bytes(data)

        parts = chunker.split(source, 10, parts_dir)

        assert [p.index for p in parts] == [0, 1, 2]
        assert [p.size_bytes for p in parts] == [10, 10, 5]
        assert b"".join(p.path.read_bytes() for p in parts) == data

    def test_part_count_matches_chunk_count(self, tmp_path: Path, parts_dir: Path) -> None:
        """Test that split produces ceil(N / chunk_size) parts."""
        source = tmp_path / "big.bin"
        source.write_bytes(b"x" * 1000)

        parts = chunker.split(source, 64, parts_dir)

        assert len(parts) == chunker.chunk_count(1000, 64)
        assert len(list(parts_dir.iterdir())) == len(parts)

    def test_chunk_larger_than_copy_buffer(self, tmp_path: Path, parts_dir: Path) -> None:
        """Test windows that need several buffered reads."""
        data = os.urandom(100)
        source = tmp_path / "big.bin"
        source.write_bytes(data)

        with patch.object(chunker, "COPY_BUFFER_SIZE", 7):
            parts = chunker.split(source, 40, parts_dir)

        assert [p.size_bytes for p in parts] == [40, 40, 20]
        assert b"".join(p.path.read_bytes() for p in parts) == data

    def test_part_names_follow_source(self, tmp_path: Path, parts_dir: Path) -> None:
        """Test that part files are named after the source file."""
        source = tmp_path / "App.ipa"
        source.write_bytes(b"abcdef")

        parts = chunker.split(source, 3, parts_dir)

        assert parts[0].path.name.startswith("App.ipa.part_00000_")
        assert parts[1].path.name.startswith("App.ipa.part_00001_")

    def test_empty_file_has_no_parts(self, tmp_path: Path, parts_dir: Path) -> None:
        """Test that an empty file yields no parts."""
        source = tmp_path / "empty.bin"
        source.write_bytes(b"")

        assert chunker.split(source, 10, parts_dir) == []

    def test_missing_source_raises_oserror(self, tmp_path: Path, parts_dir: Path) -> None:
        """Test that an unreadable source raises OSError."""
        with pytest.raises(OSError):
            chunker.split(tmp_path / "missing.bin", 10, parts_dir)

    def test_write_failure_removes_written_parts(self, tmp_path: Path, parts_dir: Path) -> None:
        """Test that parts written before a failure are removed."""
        source = tmp_path / "big.bin"
        source.write_bytes(b"x" * 30)
        real_mkstemp = chunker.tempfile.mkstemp
        calls = {"n": 0}

        def flaky_mkstemp(*args: object, **kwargs: object) -> tuple[int, str]:
            calls["n"] += 1
            if calls["n"] == 3:
                raise OSError("disk full")
            return real_mkstemp(*args, **kwargs)  # type: ignore[arg-type]

        with patch.object(chunker.tempfile, "mkstemp", side_effect=flaky_mkstemp):
            with pytest.raises(OSError, match="disk full"):
                chunker.split(source, 10, parts_dir)

        assert list(parts_dir.iterdir()) == []

    def test_invalid_chunk_size(self, tmp_path: Path) -> None:
        """Test that a non-positive chunk size is rejected."""
        source = tmp_path / "big.bin"
        source.write_bytes(b"x")

        with pytest.raises(ValueError):
            chunker.split(source, 0)


class TestRemoveParts:
    """Tests for remove_parts."""

    def test_removes_all_parts(self, tmp_path: Path, parts_dir: Path) -> None:
        """Test that every part file is deleted."""
        source = tmp_path / "big.bin"
        source.write_bytes(b"x" * 25)
        parts = chunker.split(source, 10, parts_dir)

        chunker.remove_parts(parts)

        assert list(parts_dir.iterdir()) == []

    def test_ignores_missing_parts(self, tmp_path: Path, parts_dir: Path) -> None:
        """Test that already deleted parts are skipped."""
        source = tmp_path / "big.bin"
        source.write_bytes(b"x" * 25)
        parts = chunker.split(source, 10, parts_dir)
        parts[0].path.unlink()

        chunker.remove_parts(parts)

        assert list(parts_dir.iterdir()) == []

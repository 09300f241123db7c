"""Split large files into fixed-size temporary part files."""

from __future__ import annotations

import contextlib
import logging
import math
import os
import tempfile
from pathlib import Path
from typing import BinaryIO

from dropbox_uploader.models import ChunkPart

logger = logging.getLogger(__name__)

# Read/write buffer used while copying a window into its part file
COPY_BUFFER_SIZE = 4 * 1024 * 1024


def chunk_count(size: int, chunk_size: int) -> int:
    """Number of parts a file of ``size`` bytes is split into."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    return math.ceil(size / chunk_size)


def split(
    file_path: str | Path,
    chunk_size: int,
    directory: str | Path | None = None,
) -> list[ChunkPart]:
    """Split a file into sequential part files of at most chunk_size bytes.

    Parts are written to ``directory`` (the system temp dir by default) and
    returned in read order. The caller owns the returned files and must
    delete them, see remove_parts().

    Args:
        file_path: File to split
        chunk_size: Maximum size of each part in bytes
        directory: Where to create the part files

    Returns:
        Parts in source order

    Raises:
        OSError: If the source can't be read or a part can't be written
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    file_path = Path(file_path)
    parts: list[ChunkPart] = []

    try:
        with file_path.open("rb") as source:
            while True:
                data = source.read(min(chunk_size, COPY_BUFFER_SIZE))
                if not data:
                    break
                parts.append(
                    _write_part(source, data, chunk_size, len(parts), file_path, directory)
                )
    except OSError:
        remove_parts(parts)
        raise

    logger.debug(f"Split {file_path.name} into {len(parts)} part(s)")
    return parts


def _write_part(
    source: BinaryIO,
    first: bytes,
    chunk_size: int,
    index: int,
    file_path: Path,
    directory: str | Path | None,
) -> ChunkPart:
    fd, name = tempfile.mkstemp(
        prefix=f"{file_path.name}.part_{index:05d}_",
        dir=directory,
    )
    part_path = Path(name)
    written = 0
    try:
        with os.fdopen(fd, "wb") as out:
            data = first
            while data:
                out.write(data)
                written += len(data)
                remaining = chunk_size - written
                if remaining <= 0:
                    break
                data = source.read(min(remaining, COPY_BUFFER_SIZE))
    except OSError:
        with contextlib.suppress(FileNotFoundError):
            part_path.unlink()
        raise
    return ChunkPart(index=index, size_bytes=written, path=part_path)


def remove_parts(parts: list[ChunkPart]) -> None:
    """Delete part files, skipping any that are already gone."""
    for part in parts:
        with contextlib.suppress(FileNotFoundError):
            part.path.unlink()

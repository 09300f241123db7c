"""Data models for the dropbox_uploader library."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

ADD = "add"
OVERWRITE = "overwrite"
UPDATE = "update"


@dataclass(frozen=True)
class AppCredentials:
    """Key and secret of the Dropbox app used for authorization."""

    app_key: str
    app_secret: str = field(repr=False)


@dataclass(frozen=True)
class WriteMode:
    """How Dropbox should handle a file that already exists at the target path.

    ``revision`` is only set for update mode, where the upload succeeds only
    if the remote file is still at that revision.
    """

    tag: str
    revision: str | None = None

    @classmethod
    def add(cls) -> WriteMode:
        return cls(ADD)

    @classmethod
    def overwrite(cls) -> WriteMode:
        return cls(OVERWRITE)

    @classmethod
    def update(cls, revision: str) -> WriteMode:
        return cls(UPDATE, revision)

    @property
    def is_update(self) -> bool:
        return self.tag == UPDATE


@dataclass(frozen=True)
class UploadRequest:
    """Everything needed to upload one file."""

    file_path: Path
    credentials: AppCredentials
    dropbox_path: str | None = None
    write_mode: WriteMode = WriteMode(ADD)
    keychain: str | None = None
    keychain_password: str | None = field(default=None, repr=False)

    @property
    def file_name(self) -> str:
        return self.file_path.name

    @property
    def destination(self) -> str:
        """Full Dropbox path of the uploaded file."""
        return f"{self.dropbox_path or ''}/{self.file_name}"


@dataclass(frozen=True)
class ChunkPart:
    """A temporary file holding one window of a split source file."""

    index: int
    size_bytes: int
    path: Path


@dataclass(frozen=True)
class RemoteFile:
    """Metadata Dropbox returns for a committed file."""

    name: str
    revision: str
    path_display: str | None = None
    size: int | None = None


@dataclass(frozen=True)
class UploadResult:
    """Result of a completed upload."""

    revision: str
    remote_path: str
    file_name: str
    chunked: bool = False
    parts: int = 1

"""Shared test helpers for dropbox_uploader tests."""

from __future__ import annotations

from pathlib import Path

from dropbox_uploader import RemoteFile, WriteMode


class MockFileMetadata:
    """Mock dropbox.files.FileMetadata."""

    def __init__(self, name: str, rev: str = "a1c10ce0dd78", size: int = 0) -> None:
        self.name = name
        self.rev = rev
        self.path_display = f"/{name}"
        self.size = size


class RecordingBackend:
    """StorageBackend fake that records calls and remembers session data."""

    def __init__(
        self, name: str, revision: str = "a1c10ce0dd78", chunk_dir: Path | None = None
    ) -> None:
        self.name = name
        self.revision = revision
        self.chunk_dir = chunk_dir
        self.calls: list[tuple[str, int]] = []
        self.received = b""
        self.parts_on_disk: list[int] = []
        self.fail_on: str | None = None
        self.error: Exception | None = None

    def _check(self, op: str) -> None:
        if self.chunk_dir is not None:
            self.parts_on_disk.append(len(list(self.chunk_dir.iterdir())))
        if self.fail_on == op and self.error is not None:
            raise self.error

    def upload(self, path: str, data: bytes, mode: WriteMode) -> RemoteFile:
        self.calls.append(("upload", len(data)))
        self._check("upload")
        self.received = data
        return RemoteFile(name=self.name, revision=self.revision, path_display=path)

    def start_session(self, data: bytes) -> dict[str, int]:
        self.calls.append(("start", len(data)))
        self._check("start")
        self.received = data
        return {"offset": len(data)}

    def append_session(self, cursor: dict[str, int], data: bytes) -> None:
        self.calls.append(("append", len(data)))
        self._check("append")
        self.received += data
        cursor["offset"] += len(data)

    def finish_session(self, cursor: dict[str, int], path: str, mode: WriteMode) -> RemoteFile:
        self.calls.append(("finish", cursor["offset"]))
        self._check("finish")
        return RemoteFile(name=self.name, revision=self.revision, path_display=path)


class MemoryCredentialStore:
    """CredentialStore fake keeping secrets in a dict."""

    def __init__(self, unlock_ok: bool = True, add_ok: bool = True) -> None:
        self.unlock_ok = unlock_ok
        self.add_ok = add_ok
        self.secrets: dict[tuple[str, str, str], str] = {}
        self.unlocked: list[tuple[str, str | None]] = []

    def default_store(self) -> str:
        return "/default/store"

    def unlock(self, store: str, secret: str | None) -> bool:
        self.unlocked.append((store, secret))
        return self.unlock_ok

    def find(self, store: str, service: str, account: str) -> str | None:
        return self.secrets.get((store, service, account))

    def add(self, store: str, service: str, account: str, secret: str) -> bool:
        if self.add_ok:
            self.secrets[(store, service, account)] = secret
        return self.add_ok


class StaticInteraction:
    """UserInteraction fake returning a fixed code."""

    def __init__(self, code: str = "auth-code") -> None:
        self.code = code
        self.urls: list[str] = []

    def prompt_for_code(self, url: str) -> str:
        self.urls.append(url)
        return self.code

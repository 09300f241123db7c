"""Dropbox SDK adapter implementing the storage operations the uploader needs."""

from __future__ import annotations

from typing import Any, Protocol

import dropbox
from dropbox.exceptions import ApiError
from dropbox.exceptions import AuthError as DropboxAuthError
from dropbox.files import CommitInfo, UploadSessionCursor

from dropbox_uploader.exceptions import AuthError, UploadError, WriteConflictError
from dropbox_uploader.models import ADD, OVERWRITE, UPDATE, RemoteFile, WriteMode


class StorageBackend(Protocol):
    """Remote storage operations used by DropboxUploader."""

    def upload(self, path: str, data: bytes, mode: WriteMode) -> RemoteFile: ...

    def start_session(self, data: bytes) -> Any: ...

    def append_session(self, cursor: Any, data: bytes) -> None: ...

    def finish_session(self, cursor: Any, path: str, mode: WriteMode) -> RemoteFile: ...


def to_sdk_write_mode(mode: WriteMode) -> dropbox.files.WriteMode:
    """Translate a WriteMode into the SDK's union type."""
    if mode.tag == ADD:
        return dropbox.files.WriteMode.add
    if mode.tag == OVERWRITE:
        return dropbox.files.WriteMode.overwrite
    if mode.tag == UPDATE:
        return dropbox.files.WriteMode.update(mode.revision)
    raise UploadError(f"Dropbox doesn't support write mode '{mode.tag}'")


def _api_message(e: ApiError) -> str:
    if e.user_message_text:
        return str(e.user_message_text)
    return str(e.error)


def _translate(e: Exception) -> Exception:
    if isinstance(e, DropboxAuthError):
        return AuthError(f"Dropbox rejected the access token: {e.error}")
    if isinstance(e, ApiError):
        is_path = getattr(e.error, "is_path", None)
        if callable(is_path) and is_path():
            return WriteConflictError(_api_message(e))
        return UploadError(_api_message(e))
    return e


def _remote_file(metadata: Any) -> RemoteFile:
    return RemoteFile(
        name=metadata.name,
        revision=metadata.rev,
        path_display=getattr(metadata, "path_display", None),
        size=getattr(metadata, "size", None),
    )


class DropboxBackend:
    """Thin wrapper over dropbox.Dropbox.

    SDK errors are translated into dropbox_uploader exceptions. Upload
    session cursors are dropbox.files.UploadSessionCursor objects whose
    offset is advanced after every append.
    """

    def __init__(self, access_token: str, client: dropbox.Dropbox | None = None) -> None:
        self._client = client or dropbox.Dropbox(access_token)

    def upload(self, path: str, data: bytes, mode: WriteMode) -> RemoteFile:
        try:
            metadata = self._client.files_upload(data, path, mode=to_sdk_write_mode(mode))
        except (ApiError, DropboxAuthError) as e:
            raise _translate(e) from e
        return _remote_file(metadata)

    def start_session(self, data: bytes) -> UploadSessionCursor:
        try:
            result = self._client.files_upload_session_start(data)
        except (ApiError, DropboxAuthError) as e:
            raise _translate(e) from e
        return UploadSessionCursor(session_id=result.session_id, offset=len(data))

    def append_session(self, cursor: UploadSessionCursor, data: bytes) -> None:
        try:
            self._client.files_upload_session_append_v2(data, cursor)
        except (ApiError, DropboxAuthError) as e:
            raise _translate(e) from e
        cursor.offset += len(data)

    def finish_session(
        self, cursor: UploadSessionCursor, path: str, mode: WriteMode
    ) -> RemoteFile:
        commit = CommitInfo(path=path, mode=to_sdk_write_mode(mode))
        try:
            metadata = self._client.files_upload_session_finish(b"", cursor, commit)
        except (ApiError, DropboxAuthError) as e:
            raise _translate(e) from e
        return _remote_file(metadata)

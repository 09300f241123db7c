"""DropboxUploader, the driver that takes one file from disk to Dropbox."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from dropbox_uploader import chunker
from dropbox_uploader._internal.dropbox_backend import DropboxBackend, StorageBackend
from dropbox_uploader.auth import AuthFlow
from dropbox_uploader.config import CHUNK_SIZE
from dropbox_uploader.credentials import TokenStore
from dropbox_uploader.exceptions import AuthError, UploadError
from dropbox_uploader.models import (
    AppCredentials,
    RemoteFile,
    UploadRequest,
    UploadResult,
    WriteMode,
)

logger = logging.getLogger(__name__)


class DropboxUploader:
    """Uploads a single file to Dropbox.

    The access token comes from the TokenStore; when none is stored yet the
    interactive AuthFlow runs once and its token is persisted. Files smaller
    than CHUNK_SIZE are sent in one request, anything larger is split into
    CHUNK_SIZE part files and sent through an upload session.

    Every failure is final. Nothing is retried.

    Example:
        request = build_request("app.ipa", "key", "secret", dropbox_path="/Builds")
        result = DropboxUploader().run(request)
        print(result.revision)
    """

    def __init__(
        self,
        token_store: TokenStore | None = None,
        auth_flow: AuthFlow | None = None,
        backend_factory: Callable[[str], StorageBackend] = DropboxBackend,
        *,
        chunk_dir: str | Path | None = None,
    ) -> None:
        """Initialize the uploader.

        Args:
            token_store: Where the access token is read from and saved to
            auth_flow: Used when no token is stored yet
            backend_factory: Builds a StorageBackend from an access token
            chunk_dir: Directory for temporary part files (system temp dir if None)
        """
        self._token_store = token_store or TokenStore()
        self._auth_flow = auth_flow or AuthFlow()
        self._backend_factory = backend_factory
        self._chunk_dir = chunk_dir

    def authorize(
        self,
        credentials: AppCredentials,
        keychain: str | None = None,
        keychain_password: str | None = None,
    ) -> str:
        """Return a stored access token, authorizing and storing a new one if needed.

        Raises:
            AuthError: If the store can't be unlocked, authorization fails, or
                the fresh token can't be stored
        """
        token = self._token_store.get(keychain, keychain_password)
        if token:
            logger.info("Using stored Dropbox access token")
            return token

        token = self._auth_flow.authorize(credentials.app_key, credentials.app_secret)
        if not self._token_store.put(keychain, token):
            raise AuthError("Failed to store access token in the credential store")
        return token

    def run(self, request: UploadRequest) -> UploadResult:
        """Upload the requested file.

        Returns:
            UploadResult with the revision of the uploaded file

        Raises:
            AuthError: If no access token could be obtained
            UploadError: If Dropbox rejects the upload or stores it under another name
            OSError: If the local file can't be read or split
        """
        logger.info(f"Starting upload of {request.file_path} to Dropbox")

        token = self.authorize(
            request.credentials, request.keychain, request.keychain_password
        )
        backend = self._backend_factory(token)

        size = request.file_path.stat().st_size
        chunked = size >= CHUNK_SIZE
        if chunked:
            remote = self._upload_chunked(
                backend, request.file_path, request.destination, request.write_mode
            )
        else:
            remote = self._upload_direct(
                backend, request.file_path, request.destination, request.write_mode
            )

        if remote.name != request.file_name:
            raise UploadError("Failed to upload file to Dropbox")

        logger.info(f"File revision: '{remote.revision}'")
        logger.info(f"Successfully uploaded file to Dropbox at '{request.destination}'")
        return UploadResult(
            revision=remote.revision,
            remote_path=request.destination,
            file_name=request.file_name,
            chunked=chunked,
            parts=chunker.chunk_count(size, CHUNK_SIZE) if chunked else 1,
        )

    def _upload_direct(
        self,
        backend: StorageBackend,
        file_path: Path,
        destination: str,
        mode: WriteMode,
    ) -> RemoteFile:
        try:
            return backend.upload(destination, file_path.read_bytes(), mode)
        except UploadError as e:
            raise type(e)(
                f'Failed to upload file to Dropbox. Error message returned by Dropbox API: "{e}"'
            ) from e

    def _upload_chunked(
        self,
        backend: StorageBackend,
        file_path: Path,
        destination: str,
        mode: WriteMode,
    ) -> RemoteFile:
        parts = chunker.split(file_path, CHUNK_SIZE, self._chunk_dir)
        if not parts:
            raise UploadError(f"{file_path.name} is empty, nothing to upload")
        logger.info("The file is bigger than 150MB so it is uploaded in 150MB chunks")

        try:
            first, rest = parts[0], parts[1:]
            logger.info(f"Uploading part #1 ({first.size_bytes} bytes)...")
            cursor = backend.start_session(first.path.read_bytes())
            for part in rest:
                logger.info(f"Uploading part #{part.index + 1} ({part.size_bytes} bytes)...")
                backend.append_session(cursor, part.path.read_bytes())
            return backend.finish_session(cursor, destination, mode)
        except UploadError as e:
            raise type(e)(f'Error uploading file to Dropbox: "{e}"') from e
        finally:
            chunker.remove_parts(parts)

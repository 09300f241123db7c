"""Exception hierarchy for the dropbox_uploader library."""

from __future__ import annotations


class DropboxUploaderError(Exception):
    """Base exception for all dropbox_uploader errors."""

    pass


class ConfigError(DropboxUploaderError):
    """Raised when upload parameters are missing or invalid."""

    pass


class AuthError(DropboxUploaderError):
    """Raised when an access token cannot be obtained, exchanged or stored.

    When the failure comes from the OAuth2 token endpoint, status_code and
    body hold the HTTP status and the raw response body.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UploadError(DropboxUploaderError):
    """Raised when Dropbox rejects an upload or the result doesn't match."""

    pass


class WriteConflictError(UploadError):
    """Raised when Dropbox refuses to write the file at the target path."""

    pass

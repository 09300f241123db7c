"""Dropbox Uploader - A Python library for uploading files to Dropbox.

Example usage:
    from dropbox_uploader import DropboxUploader, build_request

    request = build_request(
        "build/App.ipa",
        app_key="dropbox-app-key",
        app_secret="dropbox-app-secret",
        dropbox_path="/Builds/iOS",
    )
    result = DropboxUploader().run(request)
    print(f"Uploaded revision {result.revision}")
"""

from dropbox_uploader.auth import AuthFlow, ConsoleInteraction, UserInteraction
from dropbox_uploader.config import (
    CHUNK_SIZE,
    build_request,
    resolve_write_mode,
    validate_app_key,
    validate_app_secret,
    validate_dropbox_path,
    validate_keychain,
    validate_update_rev,
)
from dropbox_uploader.credentials import (
    SERVICE_NAME,
    CredentialStore,
    FileCredentialStore,
    KeychainCredentialStore,
    TokenStore,
)
from dropbox_uploader.exceptions import (
    AuthError,
    ConfigError,
    DropboxUploaderError,
    UploadError,
    WriteConflictError,
)
from dropbox_uploader.models import (
    AppCredentials,
    ChunkPart,
    RemoteFile,
    UploadRequest,
    UploadResult,
    WriteMode,
)
from dropbox_uploader.uploader import DropboxUploader

__version__ = "0.1.0"

__all__ = [
    # Main uploader
    "DropboxUploader",
    "build_request",
    "resolve_write_mode",
    "validate_app_key",
    "validate_app_secret",
    "validate_dropbox_path",
    "validate_keychain",
    "validate_update_rev",
    "CHUNK_SIZE",
    # Authorization and token storage
    "AuthFlow",
    "UserInteraction",
    "ConsoleInteraction",
    "TokenStore",
    "CredentialStore",
    "KeychainCredentialStore",
    "FileCredentialStore",
    "SERVICE_NAME",
    # Models
    "AppCredentials",
    "ChunkPart",
    "RemoteFile",
    "UploadRequest",
    "UploadResult",
    "WriteMode",
    # Exceptions
    "DropboxUploaderError",
    "ConfigError",
    "AuthError",
    "UploadError",
    "WriteConflictError",
]

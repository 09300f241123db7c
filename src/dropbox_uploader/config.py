"""Validation of upload parameters.

Everything here runs before any network or credential store I/O, so a bad
parameter never costs the user an authorization round-trip.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from dropbox_uploader.exceptions import ConfigError
from dropbox_uploader.models import (
    ADD,
    OVERWRITE,
    UPDATE,
    AppCredentials,
    UploadRequest,
    WriteMode,
)

logger = logging.getLogger(__name__)

# Files of this size or larger go through an upload session, 150 MiB
CHUNK_SIZE = 157_286_400

WRITE_MODES = (ADD, OVERWRITE, UPDATE)

_REVISION_RE = re.compile(r"[0-9a-f]{9,}")


def validate_file_path(value: str | Path | None) -> Path:
    if not value:
        raise ConfigError("No file path specified for upload to Dropbox")
    path = Path(value)
    if not path.is_file():
        raise ConfigError(f"Couldn't find file at path '{value}'")
    return path


def validate_app_key(value: str | None) -> str:
    if not value:
        raise ConfigError(
            "App Key not specified for Dropbox app. Provide your app's App Key or create "
            "a new app at https://www.dropbox.com/developers if you don't have an app yet."
        )
    return value


def validate_app_secret(value: str | None) -> str:
    if not value:
        raise ConfigError(
            "App Secret not specified for Dropbox app. Provide your app's App Secret or create "
            "a new app at https://www.dropbox.com/developers if you don't have an app yet."
        )
    return value


def validate_dropbox_path(value: str | None) -> str | None:
    """Check that the destination folder is absolute and drop any trailing slash."""
    if not value:
        return None
    if not value.startswith("/"):
        raise ConfigError(f"Dropbox path '{value}' must start with '/'")
    return value.rstrip("/") or None


def validate_update_rev(value: str | None) -> str | None:
    if value is None:
        return None
    if not _REVISION_RE.search(value):
        raise ConfigError("Revision no. must be at least 9 hexadecimal characters ([0-9a-f]).")
    return value


def validate_keychain(value: str | Path | None) -> str | None:
    if value is None:
        return None
    if not Path(value).exists():
        raise ConfigError(f"Couldn't find keychain at path '{value}'")
    return str(value)


def resolve_write_mode(write_mode: str | None, update_rev: str | None = None) -> WriteMode:
    """Turn the write_mode/update_rev parameters into a WriteMode.

    Unknown modes are passed through as-is and left for Dropbox to reject.

    Raises:
        ConfigError: If update mode is requested without a revision
    """
    if write_mode is None:
        return WriteMode.add()
    if write_mode == UPDATE:
        if update_rev is None:
            raise ConfigError("You need to specify `update_rev` when using `update` write_mode.")
        return WriteMode.update(update_rev)
    if write_mode not in WRITE_MODES:
        logger.warning(f"write_mode '{write_mode}' not recognized")
    return WriteMode(write_mode)


def build_request(
    file_path: str | Path | None,
    app_key: str | None,
    app_secret: str | None,
    *,
    dropbox_path: str | None = None,
    write_mode: str | None = None,
    update_rev: str | None = None,
    keychain: str | Path | None = None,
    keychain_password: str | None = None,
) -> UploadRequest:
    """Validate all upload parameters and build an UploadRequest.

    Raises:
        ConfigError: If any parameter is missing or invalid
    """
    path = validate_file_path(file_path)
    credentials = AppCredentials(
        app_key=validate_app_key(app_key),
        app_secret=validate_app_secret(app_secret),
    )
    mode = resolve_write_mode(write_mode, validate_update_rev(update_rev))
    return UploadRequest(
        file_path=path,
        credentials=credentials,
        dropbox_path=validate_dropbox_path(dropbox_path),
        write_mode=mode,
        keychain=validate_keychain(keychain),
        keychain_password=keychain_password,
    )

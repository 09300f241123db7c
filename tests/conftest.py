"""Pytest fixtures for dropbox_uploader tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from helpers import MemoryCredentialStore

from dropbox_uploader import AppCredentials, TokenStore, UploadRequest


@pytest.fixture
def credentials() -> AppCredentials:
    """App credentials used across tests."""
    return AppCredentials(app_key="K", app_secret="S")


@pytest.fixture
def temp_ipa(tmp_path: Path) -> Path:
    """Create a small file to upload."""
    path = tmp_path / "App.ipa"
    path.write_bytes(b"PK fake ipa content")
    return path


@pytest.fixture
def memory_store() -> MemoryCredentialStore:
    """Create an in-memory credential store."""
    return MemoryCredentialStore()


@pytest.fixture
def token_store(memory_store: MemoryCredentialStore) -> TokenStore:
    """TokenStore backed by the in-memory credential store."""
    return TokenStore(memory_store)


@pytest.fixture
def request_for(credentials: AppCredentials) -> Any:
    """Build an UploadRequest for a given file."""

    def _build(path: Path, **kwargs: Any) -> UploadRequest:
        return UploadRequest(file_path=path, credentials=credentials, **kwargs)

    return _build


@pytest.fixture
def patch_dropbox_class() -> Any:
    """Patch dropbox.Dropbox inside the backend module."""
    with patch("dropbox_uploader._internal.dropbox_backend.dropbox.Dropbox") as mock_class:
        mock_instance = MagicMock()
        mock_class.return_value = mock_instance
        yield mock_instance

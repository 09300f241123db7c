"""Persistent storage for the Dropbox access token.

Tokens live in a platform credential store. On macOS that is a keychain,
driven through the ``security`` command line utility; elsewhere a JSON token
cache file is used. Both sit behind the CredentialStore protocol so the
TokenStore and the uploader don't care which one is in use.
"""

from __future__ import annotations

import json
import logging
import re
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from dropbox_uploader.exceptions import AuthError

logger = logging.getLogger(__name__)

# Service (and account) name the token is stored under
SERVICE_NAME = "dropbox-uploader"

DEFAULT_TOKEN_CACHE = Path.home() / ".dropbox-uploader" / "token_cache.json"

SECURITY_BIN = "/usr/bin/security"

_DEFAULT_KEYCHAIN_RE = re.compile(r'"(.+)"')


class CredentialStore(Protocol):
    """Platform secret storage."""

    def default_store(self) -> str: ...

    def unlock(self, store: str, secret: str | None) -> bool: ...

    def find(self, store: str, service: str, account: str) -> str | None: ...

    def add(self, store: str, service: str, account: str, secret: str) -> bool: ...


class KeychainCredentialStore:
    """macOS keychain access through the ``security`` utility.

    Success and failure of every operation is decided by the exit status of
    the underlying command.
    """

    def __init__(self, security_bin: str = SECURITY_BIN) -> None:
        self._security_bin = security_bin

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            [self._security_bin, *args],
            capture_output=True,
            text=True,
            check=False,
        )

    def default_store(self) -> str:
        """Path of the user's default keychain."""
        try:
            proc = self._run("default-keychain")
        except OSError as e:
            raise AuthError(f"Failed to resolve default keychain: {e}") from e
        match = _DEFAULT_KEYCHAIN_RE.search(proc.stdout)
        if proc.returncode != 0 or not match:
            raise AuthError("Failed to resolve default keychain")
        return match.group(1)

    def unlock(self, store: str, secret: str | None) -> bool:
        # Without -p, security asks for the password on the terminal
        args = ["unlock-keychain"]
        if secret is not None:
            args += ["-p", secret]
        args.append(store)
        proc = subprocess.run([self._security_bin, *args], check=False)
        return proc.returncode == 0

    def find(self, store: str, service: str, account: str) -> str | None:
        proc = self._run("find-generic-password", "-s", service, "-w", store)
        if proc.returncode != 0:
            return None
        return proc.stdout.rstrip("\n")

    def add(self, store: str, service: str, account: str, secret: str) -> bool:
        proc = self._run(
            "add-generic-password", "-a", account, "-s", service, "-w", secret, store
        )
        if proc.returncode != 0:
            logger.warning(f"security add-generic-password exited with {proc.returncode}")
        return proc.returncode == 0


class FileCredentialStore:
    """Token cache kept in a JSON file.

    Layout: ``{service: {account: {"token": ..., "updated_at": ...}}}``.
    """

    def __init__(self, default_path: Path | str = DEFAULT_TOKEN_CACHE) -> None:
        self._default_path = Path(default_path)

    def default_store(self) -> str:
        return str(self._default_path)

    def unlock(self, store: str, secret: str | None) -> bool:
        return True

    def _load(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text())
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load token cache: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def find(self, store: str, service: str, account: str) -> str | None:
        entry = self._load(Path(store)).get(service, {}).get(account)
        token = entry.get("token") if isinstance(entry, dict) else entry
        return token or None

    def add(self, store: str, service: str, account: str, secret: str) -> bool:
        path = Path(store)
        data = self._load(path)
        data.setdefault(service, {})[account] = {
            "token": secret,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data, indent=2))
        except OSError as e:
            logger.warning(f"Failed to save token cache: {e}")
            return False
        return True


def default_credential_store() -> CredentialStore:
    """Keychain on macOS, JSON token cache everywhere else."""
    if sys.platform == "darwin":
        return KeychainCredentialStore()
    return FileCredentialStore()


class TokenStore:
    """Reads and writes the access token under a fixed service name."""

    def __init__(
        self,
        credential_store: CredentialStore | None = None,
        service_name: str = SERVICE_NAME,
    ) -> None:
        self._store = credential_store or default_credential_store()
        self.service_name = service_name

    def _resolve(self, store_id: str | None) -> str:
        return store_id or self._store.default_store()

    def get(self, store_id: str | None = None, unlock_secret: str | None = None) -> str | None:
        """Look up the stored token.

        Returns:
            The token, or None if nothing is stored yet

        Raises:
            AuthError: If the store can't be resolved or unlocked
        """
        store = self._resolve(store_id)
        if not self._store.unlock(store, unlock_secret):
            raise AuthError(f"Failed to unlock credential store '{store}'")
        return self._store.find(store, self.service_name, self.service_name)

    def put(self, store_id: str | None, token: str) -> bool:
        """Store the token. Returns False if the store refused the write."""
        store = self._resolve(store_id)
        return self._store.add(store, self.service_name, self.service_name, token)

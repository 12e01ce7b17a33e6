"""
Auth token storage for the client.

The token is absent at startup, set after a successful login and cleared on
logout. FetchApi only reads it (`get_token`); the convenience API writes it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from core import settings

logger = logging.getLogger(__name__)

TOKEN_KEY = "authToken"


class MemoryTokenStore:
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token

    def clear_token(self) -> None:
        self._token = None


class FileTokenStore:
    """
    Persistent key-value file (JSON object) holding the token under `authToken`.

    Other keys in the file are preserved.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable token file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get_token(self) -> str | None:
        token = self._read().get(TOKEN_KEY)
        return token if isinstance(token, str) and token else None

    def set_token(self, token: str) -> None:
        data = self._read()
        data[TOKEN_KEY] = token
        self._write(data)

    def clear_token(self) -> None:
        data = self._read()
        if data.pop(TOKEN_KEY, None) is not None:
            self._write(data)


TokenStore = MemoryTokenStore | FileTokenStore

_memory_store = MemoryTokenStore()


def default_token_store() -> TokenStore:
    """
    File store when AUTH_TOKEN_FILE is set, else the process-wide memory store.
    """
    path = settings.auth_token_file()
    if path:
        return FileTokenStore(path)
    return _memory_store

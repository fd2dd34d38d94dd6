# finance_tracker/client/storage.py
# Persistent storage for the single auth token the client keeps

from pathlib import Path
from typing import Optional, Union
import json
import logging
import os

logger = logging.getLogger(__name__)

STORAGE_KEY = "authToken"


class TokenStorage:
    """Interface for reading, writing and clearing the stored auth token."""

    def get(self) -> Optional[str]:
        raise NotImplementedError

    def set(self, token: str) -> None:
        raise NotImplementedError

    def delete(self) -> None:
        raise NotImplementedError


class MemoryTokenStorage(TokenStorage):
    """Keeps the token for the lifetime of the process only."""

    def __init__(self, token: Optional[str] = None):
        self._values = {}
        if token:
            self._values[STORAGE_KEY] = token

    def get(self) -> Optional[str]:
        return self._values.get(STORAGE_KEY)

    def set(self, token: str) -> None:
        self._values[STORAGE_KEY] = token

    def delete(self) -> None:
        self._values.pop(STORAGE_KEY, None)


class FileTokenStorage(TokenStorage):
    """JSON file readable and writable by the owning user only."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8")) or {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return {}

    def _write(self, values: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(values, handle)

    def get(self) -> Optional[str]:
        return self._read().get(STORAGE_KEY)

    def set(self, token: str) -> None:
        values = self._read()
        values[STORAGE_KEY] = token
        self._write(values)

    def delete(self) -> None:
        values = self._read()
        if values.pop(STORAGE_KEY, None) is not None:
            self._write(values)

"""
Device-local key-value storage backed by files in a single directory.

One file per key. Writes go to a temp file first and are swapped into place,
so a crash mid-write never leaves a half-written value behind.
Read failures propagate; write failures raise StorageError.
"""

import logging
import os
import re
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]+$")


class StorageError(Exception):
    """Raised when a value cannot be written to (or removed from) storage."""


class LocalKVClient:
    """
    File-backed key-value store.

    Usage:
        client = LocalKVClient("~/.studio")
        client.set("studioData", "{}")
        value = client.get("studioData")  # Returns None if missing
    """

    def __init__(self, directory: str | Path):
        """
        Initialize storage directory, creating it if needed.

        Raises:
            StorageError: If the directory cannot be created
        """
        self.directory = Path(directory).expanduser()
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create storage directory {self.directory}: {e}")
        logger.info(f"LocalKVClient using {self.directory}")

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key '{key}'")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        """
        Get value by key.

        Returns None if key doesn't exist (not an error).
        """
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        """
        Overwrite key with value.

        Raises:
            StorageError: On any filesystem failure (disk full, permissions)
        """
        path = self._path(key)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            logger.error(f"Failed to write key '{key}': {e}")
            raise StorageError(f"Failed to write key '{key}': {e}")

    def delete(self, key: str) -> bool:
        """
        Delete key.

        Returns True if key existed and was deleted, False if key didn't exist.
        """
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete key '{key}': {e}")
        return True

    def exists(self, key: str) -> bool:
        """Check if key exists."""
        return self._path(key).exists()

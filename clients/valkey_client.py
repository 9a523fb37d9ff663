"""
Valkey (Redis-compatible) client for shared studio storage.

Simple wrapper around redis-py, used when the studio aggregate lives on a
Valkey server instead of the local disk.
Fail-fast on connect; write failures surface as StorageError so the store
treats both backends the same way.
"""

import logging

import redis

from clients.local_kv_client import StorageError

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    Redis-compatible client for Valkey.

    Usage:
        client = ValkeyClient("redis://localhost:6379/0")
        client.set("studioData", "{}")
        value = client.get("studioData")  # Returns None if missing
    """

    def __init__(self, url: str, key_prefix: str = "studio:"):
        """
        Initialize Valkey connection.

        Args:
            url: Redis-compatible connection URL (e.g., redis://localhost:6379/0)
            key_prefix: Namespace prepended to every key

        Raises:
            redis.ConnectionError: If connection fails
        """
        self._client = redis.from_url(url, decode_responses=True)
        self._prefix = key_prefix
        # Verify connectivity immediately (fail-fast)
        self._client.ping()
        logger.info("ValkeyClient connected")

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def ping(self) -> bool:
        """
        Health check.

        Returns True if Valkey responds.
        Raises redis.ConnectionError if unreachable.
        """
        self._client.ping()
        return True

    def get(self, key: str) -> str | None:
        """
        Get value by key.

        Returns None if key doesn't exist (not an error).
        Raises on connection failure.
        """
        return self._client.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        """
        Overwrite key with value.

        Raises:
            StorageError: If the server rejects the write or is unreachable
        """
        try:
            self._client.set(self._key(key), value)
        except redis.RedisError as e:
            logger.error(f"Valkey write failed for '{key}': {e}")
            raise StorageError(f"Failed to write key '{key}': {e}")

    def delete(self, key: str) -> bool:
        """
        Delete key.

        Returns True if key existed and was deleted, False if key didn't exist.
        """
        try:
            return self._client.delete(self._key(key)) > 0
        except redis.RedisError as e:
            raise StorageError(f"Failed to delete key '{key}': {e}")

    def exists(self, key: str) -> bool:
        """Check if key exists."""
        return self._client.exists(self._key(key)) > 0

    def close(self) -> None:
        """Close the connection."""
        self._client.close()
        logger.info("ValkeyClient closed")

"""
Persistent store for the studio aggregate.

The whole StudioData document lives under one key in a key-value backend
and is read and written in full. Loading merges the stored document over a
fresh default one (top-level keys only) so collections added later pick up
their defaults without migrations.

Mutations go through mutate(), which holds a re-entrant lock across
load -> change -> save. Within one process that serializes writers, so two
quick mutations cannot overwrite each other. Separate processes sharing a
backend still race at whole-document granularity: last writer wins.
"""

import json
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Protocol

from clients.local_kv_client import LocalKVClient, StorageError
from core.config import StudioConfig
from core.models import StudioData

logger = logging.getLogger(__name__)


class KeyValueClient(Protocol):
    """What the store needs from a storage backend."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


def default_studio_data(initial_credits: int = 500) -> StudioData:
    """A brand-new studio: empty collections, starter credits, stock settings."""
    return StudioData(whatsapp_credits=initial_credits)


class StudioStore:
    """
    Owner of the persisted studio aggregate.

    Usage:
        store = StudioStore(LocalKVClient("~/.studio-ledger"))

        studio = store.load()              # read-only snapshot

        with store.mutate() as studio:     # locked read-modify-write
            studio.whatsapp_credits += 100
    """

    def __init__(
        self,
        kv: KeyValueClient,
        storage_key: str = "studioData",
        initial_credits: int = 500,
    ):
        self.kv = kv
        self.storage_key = storage_key
        self.initial_credits = initial_credits
        self._lock = threading.RLock()
        self._active = threading.local()

    def _defaults(self) -> dict:
        return default_studio_data(self.initial_credits).model_dump(mode="json", by_alias=True)

    def load(self) -> StudioData:
        """
        Return the last saved aggregate merged over the defaults.

        A missing key yields a fresh studio. An unreadable document is logged
        and also yields a fresh studio; the bad document stays in storage
        until the next save replaces it.
        """
        defaults = self._defaults()
        try:
            raw = self.kv.get(self.storage_key)
            if raw is None:
                return StudioData.model_validate(defaults)
            stored = json.loads(raw)
            if not isinstance(stored, dict):
                raise ValueError(f"expected a JSON object, got {type(stored).__name__}")
            # Shallow merge: nested objects (settings) are replaced, not merged
            return StudioData.model_validate({**defaults, **stored})
        except ValueError as e:
            logger.error(f"Stored studio data under '{self.storage_key}' is unreadable: {e}")
            return StudioData.model_validate(defaults)

    def save(self, data: StudioData) -> bool:
        """
        Serialize the entire aggregate and overwrite the stored copy.

        Returns:
            True if written. False if the backend refused the write; the
            failure is logged and the previously stored copy is left as is.
        """
        payload = data.model_dump_json(by_alias=True)
        try:
            self.kv.set(self.storage_key, payload)
        except StorageError:
            logger.exception(f"Failed to save studio data under '{self.storage_key}'")
            return False
        return True

    @contextmanager
    def mutate(self) -> Iterator[StudioData]:
        """
        Locked read-modify-write of the whole aggregate.

        Yields a freshly loaded StudioData; saves it when the block exits
        normally and changed something. If the block raises, nothing is
        written.

        A mutate() nested inside another on the same thread yields the
        outer block's aggregate and leaves saving to the outermost block.
        """
        with self._lock:
            outer = getattr(self._active, "data", None)
            if outer is not None:
                yield outer
                return

            data = self.load()
            before = data.model_dump()
            self._active.data = data
            try:
                yield data
            finally:
                self._active.data = None
            if data.model_dump() != before:
                self.save(data)


def open_store(config: StudioConfig) -> StudioStore:
    """Build the store on the backend named in config."""
    if config.storage_backend == "valkey":
        from clients.valkey_client import ValkeyClient

        kv = ValkeyClient(config.valkey_url)
    else:
        kv = LocalKVClient(config.storage_dir)

    logger.info(f"Studio store on {config.storage_backend} backend, key '{config.storage_key}'")
    return StudioStore(kv, storage_key=config.storage_key, initial_credits=config.initial_credits)

"""The disk cache engine.

Stores one file per key under the cache root. Each file holds a small
deadline header followed by the serialized value. There is no in-memory
state between calls: the directory is the only source of truth, so several
engines (or threads) can share a root, with last-writer-wins semantics for
concurrent puts on the same key.
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple, Type, Union

from diskstash.domain.errors import (
    CorruptEntryError,
    DecodingFailed,
    EncodingFailed,
    RemovalFailed,
    WriteFailed,
)
from diskstash.domain.interfaces.cache import CacheService
from diskstash.domain.interfaces.serializer import Serializer
from diskstash.domain.interfaces.storage import EntryStorage
from diskstash.domain.models.common import TTL, CacheKey, EntryName, ttl_to_seconds
from diskstash.infrastructure.cache.directory import CacheDirectory
from diskstash.infrastructure.cache.expiry_store import ExpiryStore
from diskstash.infrastructure.cache.key_codec import KeyCodec
from diskstash.infrastructure.cache.locations import resolve_cache_root
from diskstash.infrastructure.config.settings import get_default_ttl, get_serializer_name
from diskstash.infrastructure.serialization.codecs import PickleSerializer, get_serializer

logger = logging.getLogger(__name__)


class CacheEngine(CacheService):
    """Disk-backed object cache with optional per-entry expiry."""

    def __init__(
        self,
        storage: EntryStorage,
        serializer: Optional[Serializer] = None,
        default_ttl: Optional[TTL] = None,
        clock: Callable[[], float] = time.time,
        key_codec: Optional[KeyCodec] = None,
    ):
        """Initializes the engine and makes sure the cache root exists.

        Args:
            storage: Where entry files live.
            serializer: Used when a call does not pass its own. Defaults to pickle.
            default_ttl: TTL applied by `put` when none is given. None means
                entries never expire unless a TTL is passed; with a default
                set, pass `ttl=NO_EXPIRY` to store a never-expiring entry.
            clock: Returns the current Unix time; injectable for tests.
            key_codec: Maps keys to file names.

        Raises:
            DirectoryCreationFailed: If the cache root cannot be created.
            ValueError: If default_ttl is not a positive, finite duration.
        """
        self.storage = storage
        self.serializer = serializer or PickleSerializer()
        self.default_ttl = ttl_to_seconds(default_ttl) if default_ttl is not None else None
        self.clock = clock
        self.key_codec = key_codec or KeyCodec()
        self.expiry = ExpiryStore(storage, clock=clock)

        self.storage.ensure_exists()
        logger.debug(
            f"CacheEngine initialized. root={self.storage.root}, "
            f"serializer={self.serializer.name}, default_ttl={self.default_ttl}"
        )

    @property
    def root(self) -> Path:
        return self.storage.root

    def __repr__(self) -> str:
        return f"{type(self).__name__}(root={str(self.root)!r})"

    # --- CacheService Interface Implementation ---

    def put(
        self,
        key: CacheKey,
        value: Any,
        ttl: Optional[TTL] = None,
        serializer: Optional[Serializer] = None,
    ) -> None:
        name = self.key_codec.resolve(key)
        ttl_seconds = self.default_ttl if ttl is None else ttl_to_seconds(ttl)
        codec = serializer or self.serializer

        try:
            payload = codec.encode(value)
        except Exception as e:
            raise EncodingFailed(f"Cannot encode value for key '{key}': {e}", key=key) from e

        deadline = self.expiry.deadline_from_ttl(ttl_seconds)
        try:
            self.storage.write(name, self.expiry.pack(payload, deadline))
        except OSError as e:
            raise WriteFailed(f"Failed to write cache entry for key '{key}': {e}", key=key) from e
        logger.debug(f"Stored key '{key}' ({len(payload)} bytes, deadline={deadline})")

    def get(
        self,
        key: CacheKey,
        serializer: Optional[Serializer] = None,
        expected_type: Optional[Union[Type, Tuple[Type, ...]]] = None,
    ) -> Optional[Any]:
        name = self.key_codec.resolve(key)
        try:
            stamped = self.storage.read_stamped(name)
        except OSError as e:
            raise DecodingFailed(f"Cannot read cache entry for key '{key}': {e}", key=key) from e
        if stamped is None:
            logger.debug(f"Cache miss for key '{key}'")
            return None

        blob, stamp = stamped
        try:
            entry = self.expiry.to_entry(key, blob)
        except CorruptEntryError as e:
            raise CorruptEntryError(f"Cache entry for key '{key}' is corrupt: {e}", key=key) from e

        if entry.is_expired(self.clock()):
            logger.debug(f"Cache entry for key '{key}' expired. Removing file.")
            try:
                # A put that replaced the file after our read is left alone
                self.storage.remove_if_unchanged(name, stamp)
            except OSError as e:
                raise RemovalFailed(f"Failed to remove cache entry for key '{key}': {e}", key=key) from e
            return None

        codec = serializer or self.serializer
        try:
            value = codec.decode(entry.payload)
        except Exception as e:
            raise DecodingFailed(f"Cannot decode cache entry for key '{key}': {e}", key=key) from e

        if expected_type is not None and not isinstance(value, expected_type):
            raise DecodingFailed(
                f"Cache entry for key '{key}' holds {type(value).__name__}, "
                f"expected {_type_names(expected_type)}",
                key=key,
            )
        logger.debug(f"Cache hit for key '{key}'")
        return value

    def remove(self, key: CacheKey) -> None:
        self._remove_entry(key, self.key_codec.resolve(key))

    def clear(self) -> int:
        names = self._list_entries()
        removed, failures = 0, []
        for name in names:
            try:
                if self.storage.remove(name):
                    removed += 1
            except OSError as e:
                failures.append((name, e))
        self._raise_bulk_failures("clear", failures)
        logger.debug(f"Cleared {removed} entries from {self.root}")
        return removed

    def sweep(self) -> int:
        names = self._list_entries()
        now = self.clock()
        removed, failures = 0, []
        for name in names:
            if not self.key_codec.is_entry_name(name):
                continue  # not written by this cache
            try:
                expired = self.expiry.entry_is_expired(name, now)
            except FileNotFoundError:
                continue  # removed concurrently
            except CorruptEntryError:
                logger.debug(f"Skipping unreadable entry {name} during sweep")
                continue
            except OSError as e:
                failures.append((name, e))
                continue
            if not expired:
                continue
            try:
                if self.storage.remove(name):
                    removed += 1
            except OSError as e:
                failures.append((name, e))
        self._raise_bulk_failures("sweep", failures)
        logger.debug(f"Swept {removed} expired entries from {self.root}")
        return removed

    # --- Helpers ---

    def _remove_entry(self, key: CacheKey, name: EntryName) -> None:
        try:
            self.storage.remove(name)
        except OSError as e:
            raise RemovalFailed(f"Failed to remove cache entry for key '{key}': {e}", key=key) from e

    def _list_entries(self) -> List[EntryName]:
        try:
            return self.storage.list_entries()
        except FileNotFoundError:
            logger.warning(f"Cache directory {self.root} disappeared; nothing to remove.")
            return []
        except OSError as e:
            raise RemovalFailed(f"Cannot list cache directory {self.root}: {e}") from e

    def _raise_bulk_failures(self, operation: str, failures: List[Tuple[str, OSError]]) -> None:
        if not failures:
            return
        for name, error in failures:
            logger.warning(f"{operation}: failed to remove {name}: {error}")
        raise RemovalFailed(
            f"{operation} failed to remove {len(failures)} entr{'y' if len(failures) == 1 else 'ies'}",
            failures=failures,
        )


def _type_names(expected: Union[Type, Tuple[Type, ...]]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__


def open_cache(
    directory_name: Optional[str] = None,
    base_dir: Optional[Union[str, Path]] = None,
    serializer: Optional[Serializer] = None,
    default_ttl: Optional[TTL] = None,
    clock: Callable[[], float] = time.time,
) -> CacheEngine:
    """Creates a cache under the platform (or configured) caches directory.

    This acts as the Composition Root: anything not passed explicitly comes
    from configuration ('cache.base_dir', 'cache.directory_name',
    'cache.serializer', 'cache.default_ttl').

    Raises:
        DirectoryUnavailable: If the caches directory cannot be resolved.
        DirectoryCreationFailed: If the cache root cannot be created.
    """
    root = resolve_cache_root(directory_name, Path(base_dir) if base_dir is not None else None)
    return CacheEngine(
        CacheDirectory(root),
        serializer=serializer or get_serializer(get_serializer_name()),
        default_ttl=default_ttl if default_ttl is not None else get_default_ttl(),
        clock=clock,
    )

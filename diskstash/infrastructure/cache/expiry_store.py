"""Deadline bookkeeping for entry files.

Each entry file starts with a fixed-size header recording whether the entry
has a deadline and, if so, when it is. The payload follows unchanged.

    offset  size  field
    0       4     magic b"DSTH"
    4       1     format version (1)
    5       1     flags (bit 0: deadline present)
    6       8     deadline, big-endian double, Unix seconds (0.0 if absent)
"""

import logging
import struct
import time
from typing import Callable, Optional, Tuple

from diskstash.domain.errors import CorruptEntryError
from diskstash.domain.interfaces.storage import EntryStorage
from diskstash.domain.models.common import CacheEntry, CacheKey, Deadline, EntryName, deadline_passed

logger = logging.getLogger(__name__)

MAGIC = b"DSTH"
FORMAT_VERSION = 1
FLAG_HAS_DEADLINE = 0x01

_HEADER = struct.Struct(">4sBBd")
HEADER_SIZE = _HEADER.size


class ExpiryStore:
    """Associates an optional deadline with each entry without a separate index."""

    def __init__(self, storage: EntryStorage, clock: Callable[[], float] = time.time):
        self.storage = storage
        self.clock = clock

    # --- Header codec ---

    @staticmethod
    def pack(payload: bytes, deadline: Optional[float]) -> bytes:
        """Prefixes the payload with a header carrying the deadline."""
        flags = FLAG_HAS_DEADLINE if deadline is not None else 0
        header = _HEADER.pack(MAGIC, FORMAT_VERSION, flags, float(deadline or 0.0))
        return header + payload

    @staticmethod
    def parse_header(blob: bytes) -> Optional[Deadline]:
        """Extracts the deadline from the leading bytes of an entry file.

        Raises:
            CorruptEntryError: If the bytes do not start with a valid header.
        """
        if len(blob) < HEADER_SIZE:
            raise CorruptEntryError(f"Entry too short for header ({len(blob)} bytes)")
        magic, version, flags, deadline = _HEADER.unpack_from(blob)
        if magic != MAGIC:
            raise CorruptEntryError("Entry header has wrong magic")
        if version != FORMAT_VERSION:
            raise CorruptEntryError(f"Unsupported entry format version {version}")
        if flags & FLAG_HAS_DEADLINE:
            return Deadline(deadline)
        return None

    @classmethod
    def unpack(cls, blob: bytes) -> Tuple[Optional[Deadline], bytes]:
        """Splits an entry file into its deadline and payload."""
        deadline = cls.parse_header(blob)
        return deadline, blob[HEADER_SIZE:]

    @classmethod
    def to_entry(cls, key: CacheKey, blob: bytes) -> CacheEntry:
        """Builds the CacheEntry stored in an entry file."""
        deadline, payload = cls.unpack(blob)
        return CacheEntry(key=key, payload=payload, expires_at=deadline)

    # --- Deadline operations ---

    @staticmethod
    def is_expired(deadline: Optional[float], now: float) -> bool:
        """An entry is expired from the instant of its deadline onwards."""
        return deadline_passed(deadline, now)

    def deadline_from_ttl(self, ttl_seconds: Optional[float]) -> Optional[Deadline]:
        if ttl_seconds is None:
            return None
        return Deadline(self.clock() + ttl_seconds)

    def get_deadline(self, name: EntryName) -> Optional[Deadline]:
        """Reads an entry's deadline from its header only.

        Raises:
            FileNotFoundError: If the entry does not exist.
            CorruptEntryError: If the header is invalid.
        """
        prefix = self.storage.read_prefix(name, HEADER_SIZE)
        if prefix is None:
            raise FileNotFoundError(name)
        return self.parse_header(prefix)

    def set_deadline(self, name: EntryName, deadline: Optional[float]) -> None:
        """Replaces an entry's deadline, keeping its payload.

        Raises:
            FileNotFoundError: If the entry does not exist.
            CorruptEntryError: If the existing header is invalid.
        """
        blob = self.storage.read(name)
        if blob is None:
            raise FileNotFoundError(name)
        _, payload = self.unpack(blob)
        self.storage.write(name, self.pack(payload, deadline))
        logger.debug(f"Deadline of {name} set to {deadline}")

    def entry_is_expired(self, name: EntryName, now: Optional[float] = None) -> bool:
        """Checks an entry on disk against `now` (the store's clock by default)."""
        current = self.clock() if now is None else now
        return self.is_expired(self.get_deadline(name), current)

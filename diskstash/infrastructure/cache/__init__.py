"""Storage building blocks for the disk cache.

KeyCodec maps keys to file names, CacheDirectory owns the files and
ExpiryStore carries each entry's deadline in a small header.
Bounded Context: Cache Management
"""

from diskstash.infrastructure.cache.directory import CacheDirectory
from diskstash.infrastructure.cache.expiry_store import ExpiryStore
from diskstash.infrastructure.cache.key_codec import KeyCodec

__all__ = ["CacheDirectory", "ExpiryStore", "KeyCodec"]

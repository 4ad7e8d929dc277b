"""diskstash: a disk-backed, single-node object cache.

Values are stored one file per key under a cache directory, with an optional
time-to-live after which entries become invisible and reclaimable.
"""

from diskstash.core.cache_engine import CacheEngine, open_cache
from diskstash.domain.errors import (
    CacheError,
    CorruptEntryError,
    DecodingFailed,
    DirectoryCreationFailed,
    DirectoryUnavailable,
    EncodingFailed,
    RemovalFailed,
    WriteFailed,
)
from diskstash.domain.models.common import NO_EXPIRY
from diskstash.infrastructure.monitoring.logger_setup import setup_logging
from diskstash.infrastructure.serialization.codecs import (
    CallableSerializer,
    JsonSerializer,
    PickleSerializer,
    YamlSerializer,
)

__version__ = "0.1.0"

__all__ = [
    "CacheEngine",
    "open_cache",
    "NO_EXPIRY",
    "setup_logging",
    "CacheError",
    "CorruptEntryError",
    "DecodingFailed",
    "DirectoryCreationFailed",
    "DirectoryUnavailable",
    "EncodingFailed",
    "RemovalFailed",
    "WriteFailed",
    "CallableSerializer",
    "JsonSerializer",
    "PickleSerializer",
    "YamlSerializer",
]

"""Exceptions raised by the cache.

Construction errors (`DirectoryUnavailable`, `DirectoryCreationFailed`) abort
cache creation. Everything else is raised per call to the immediate caller.
A miss is never an error.
"""

from typing import List, Optional, Tuple


class CacheError(Exception):
    """Base class for every error raised by diskstash."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class DirectoryUnavailable(CacheError):
    """The base caches directory could not be resolved."""


class DirectoryCreationFailed(CacheError):
    """The cache root directory could not be created."""

    def __init__(self, path: str, reason: Exception):
        self.path = path
        super().__init__(f"Failed to create cache directory {path}: {reason}")


class EncodingFailed(CacheError):
    """The serializer rejected the value."""


class WriteFailed(CacheError):
    """An I/O error occurred while writing an entry."""


class DecodingFailed(CacheError):
    """Stored bytes are corrupt or do not match the requested type."""


class CorruptEntryError(DecodingFailed):
    """An entry file does not carry a valid header."""


class RemovalFailed(CacheError):
    """One or more entry files could not be deleted.

    For bulk operations `failures` lists every (entry name, error) pair;
    entries after a failing one are still attempted.
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        failures: Optional[List[Tuple[str, OSError]]] = None,
    ):
        self.failures = failures or []
        super().__init__(message, key=key)

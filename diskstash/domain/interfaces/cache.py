"""Interface for the cache engine.

Defines the contract for storing, retrieving and reclaiming cached values.
All operations are synchronous and blocking.
"""

import abc
from typing import Any, Optional, Type

from ..models.common import CacheKey, TTL
from .serializer import Serializer


class CacheService(abc.ABC):
    """Abstract Base Class for caching operations."""

    @abc.abstractmethod
    def put(
        self,
        key: CacheKey,
        value: Any,
        ttl: Optional[TTL] = None,
        serializer: Optional[Serializer] = None,
    ) -> None:
        """Stores a value, overwriting any previous entry for the key.

        Args:
            key: The cache key to store the value under.
            value: The value to store.
            ttl: Time-to-live (seconds or timedelta). None uses the cache default;
                NO_EXPIRY stores an entry that never expires.
            serializer: Overrides the cache's serializer for this call.

        Raises:
            EncodingFailed: If the serializer rejects the value.
            WriteFailed: On I/O error.
        """
        pass

    @abc.abstractmethod
    def get(
        self,
        key: CacheKey,
        serializer: Optional[Serializer] = None,
        expected_type: Optional[Type] = None,
    ) -> Optional[Any]:
        """Retrieves a value.

        Args:
            key: The cache key to look up.
            serializer: Overrides the cache's serializer for this call.
            expected_type: If given, the decoded value must be an instance of it.

        Returns:
            The cached value, or None on a miss (absent or expired).

        Raises:
            DecodingFailed: If the entry exists but cannot be decoded.
        """
        pass

    @abc.abstractmethod
    def remove(self, key: CacheKey) -> None:
        """Deletes the entry for a key. Removing an absent key is not an error.

        Raises:
            RemovalFailed: On I/O error other than absence.
        """
        pass

    @abc.abstractmethod
    def clear(self) -> int:
        """Deletes every entry. Not atomic.

        Returns:
            The number of entries deleted.
        """
        pass

    @abc.abstractmethod
    def sweep(self) -> int:
        """Deletes every expired entry, leaving live ones untouched.

        Returns:
            The number of entries deleted.
        """
        pass

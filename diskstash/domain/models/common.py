"""Defines common Value Objects used across the cache.

These objects represent simple values like cache keys, on-disk entry names
and deadlines, keeping signatures readable and consistent.
"""

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import NewType, Optional, Union

# === Caching Context ===
CacheKey = NewType("CacheKey", str)      # Caller-supplied logical key
EntryName = NewType("EntryName", str)    # File name of an entry under the cache root
Deadline = NewType("Deadline", float)    # Absolute Unix timestamp after which an entry is expired


class _NoExpiry:
    """Marker passed as `ttl` to store an entry that never expires, even when
    the cache has a default TTL."""

    def __repr__(self) -> str:
        return "NO_EXPIRY"


NO_EXPIRY = _NoExpiry()

# Accepted forms of a time-to-live: seconds, a timedelta, or NO_EXPIRY
TTL = Union[int, float, timedelta, _NoExpiry]


def deadline_passed(deadline: Optional[float], now: float) -> bool:
    """An entry is expired from the instant of its deadline onwards."""
    return deadline is not None and deadline <= now


@dataclass(frozen=True)
class CacheEntry:
    """One stored unit: the serialized payload and its optional deadline."""
    key: CacheKey
    payload: bytes
    expires_at: Optional[Deadline] = None  # None means "never expires"

    def is_expired(self, now: float) -> bool:
        return deadline_passed(self.expires_at, now)


def ttl_to_seconds(ttl: TTL) -> Optional[float]:
    """Normalizes a TTL to a positive, finite number of seconds.

    Returns:
        The TTL in seconds, or None for NO_EXPIRY.

    Raises:
        ValueError: If the TTL is zero, negative, NaN or infinite.
        TypeError: If the TTL is not a number, timedelta or NO_EXPIRY.
    """
    if ttl is NO_EXPIRY:
        return None
    if isinstance(ttl, timedelta):
        seconds = ttl.total_seconds()
    elif isinstance(ttl, (int, float)) and not isinstance(ttl, bool):
        seconds = float(ttl)
    else:
        raise TypeError(f"TTL must be a number of seconds or a timedelta, got {type(ttl).__name__}")
    if not math.isfinite(seconds) or seconds <= 0:
        raise ValueError(f"TTL must be a positive, finite number of seconds, got {seconds}s")
    return seconds

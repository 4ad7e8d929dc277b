"""Maps logical cache keys to on-disk file names."""

import hashlib
import re

from diskstash.domain.models.common import CacheKey, EntryName

ENTRY_SUFFIX = ".entry"
_ENTRY_NAME_RE = re.compile(r"^[0-9a-f]{64}" + re.escape(ENTRY_SUFFIX) + r"$")


class KeyCodec:
    """Derives a safe, deterministic file name from an arbitrary key.

    The name is the SHA-256 hex digest of the UTF-8 encoded key plus a fixed
    suffix, so it is stable across runs and can never escape the cache root.
    """

    def resolve(self, key: CacheKey) -> EntryName:
        if not isinstance(key, str):
            raise TypeError(f"Cache keys must be str, got {type(key).__name__}")
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return EntryName(digest + ENTRY_SUFFIX)

    @staticmethod
    def is_entry_name(name: str) -> bool:
        """Checks whether a file name could have been produced by `resolve`."""
        return bool(_ENTRY_NAME_RE.match(name))

"""Local file system implementation of EntryStorage.

Owns the cache root and is the only place that touches entry files. Writes
go to a temp file in the same directory and are moved into place with
`os.replace`, so readers see either the old or the new content.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Tuple, Union

from diskstash.domain.errors import DirectoryCreationFailed
from diskstash.domain.interfaces.storage import EntryStamp, EntryStorage
from diskstash.domain.models.common import EntryName

logger = logging.getLogger(__name__)

TEMP_PREFIX = "."
TEMP_SUFFIX = ".tmp"


class CacheDirectory(EntryStorage):
    """Entry files stored directly under a single root directory."""

    def __init__(self, root: Union[str, Path]):
        # Ensure root is a Path object for cross-platform handling
        self._root = Path(root) if not isinstance(root, Path) else root

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, name: EntryName) -> Path:
        return self._root / name

    @staticmethod
    def _is_temp(name: str) -> bool:
        return name.startswith(TEMP_PREFIX) and name.endswith(TEMP_SUFFIX)

    def ensure_exists(self) -> None:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create cache directory {self._root}: {e}")
            raise DirectoryCreationFailed(str(self._root), e) from e
        logger.debug(f"Cache directory ready at {self._root}")

    def write(self, name: EntryName, data: bytes) -> None:
        fd, temp_name = tempfile.mkstemp(
            dir=self._root, prefix=f"{TEMP_PREFIX}{name}.", suffix=TEMP_SUFFIX
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            # os.replace is atomic on both POSIX and Windows
            os.replace(temp_name, self._path(name))
        except BaseException:
            try:
                os.unlink(temp_name)
            except FileNotFoundError:
                pass
            raise
        logger.debug(f"Wrote {len(data)} bytes to {name}")

    def read(self, name: EntryName) -> Optional[bytes]:
        try:
            return self._path(name).read_bytes()
        except FileNotFoundError:
            return None

    def read_stamped(self, name: EntryName) -> Optional[Tuple[bytes, EntryStamp]]:
        try:
            with open(self._path(name), "rb") as f:
                stamp = _stamp(os.fstat(f.fileno()))
                return f.read(), stamp
        except FileNotFoundError:
            return None

    def read_prefix(self, name: EntryName, size: int) -> Optional[bytes]:
        try:
            with open(self._path(name), "rb") as f:
                return f.read(size)
        except FileNotFoundError:
            return None

    def remove(self, name: EntryName) -> bool:
        try:
            self._path(name).unlink()
        except FileNotFoundError:
            return False
        logger.debug(f"Removed entry file {name}")
        return True

    def remove_if_unchanged(self, name: EntryName, stamp: EntryStamp) -> bool:
        # Narrows, but does not close, the window between stat and unlink
        try:
            current = _stamp(os.stat(self._path(name)))
        except FileNotFoundError:
            return False
        if current != stamp:
            logger.debug(f"Entry file {name} was replaced; not removing it")
            return False
        return self.remove(name)

    def list_entries(self) -> List[EntryName]:
        names = []
        with os.scandir(self._root) as it:
            for entry in it:
                if self._is_temp(entry.name):
                    continue  # in-flight write
                if entry.is_file(follow_symlinks=False):
                    names.append(EntryName(entry.name))
        names.sort()
        return names


def _stamp(st: os.stat_result) -> EntryStamp:
    return (st.st_ino, st.st_mtime_ns, st.st_size)

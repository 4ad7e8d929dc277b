"""Interface for the storage that holds entry files.

Defines the contract for reading, writing and listing entries, allowing the
engine to stay independent of the concrete file system implementation.
"""

import abc
from pathlib import Path
from typing import List, Optional, Tuple

from ..models.common import EntryName

# Identity of one version of an entry file (inode, modification time in ns, size)
EntryStamp = Tuple[int, int, int]


class EntryStorage(abc.ABC):
    """Abstract Base Class for entry file operations."""

    @property
    @abc.abstractmethod
    def root(self) -> Path:
        """The directory holding the entries."""
        pass

    @abc.abstractmethod
    def ensure_exists(self) -> None:
        """Creates the root directory if needed. Idempotent.

        Raises:
            DirectoryCreationFailed: If the directory cannot be created.
        """
        pass

    @abc.abstractmethod
    def write(self, name: EntryName, data: bytes) -> None:
        """Replaces the entry's content atomically.

        Either the new content is fully in place or the previous file is
        untouched.

        Raises:
            OSError: On I/O failure.
        """
        pass

    @abc.abstractmethod
    def read(self, name: EntryName) -> Optional[bytes]:
        """Reads the entry's full content, or None if it does not exist."""
        pass

    @abc.abstractmethod
    def read_stamped(self, name: EntryName) -> Optional[Tuple[bytes, EntryStamp]]:
        """Reads the entry's full content together with the identity of the file read.

        Returns:
            (content, stamp), or None if the entry does not exist.
        """
        pass

    @abc.abstractmethod
    def read_prefix(self, name: EntryName, size: int) -> Optional[bytes]:
        """Reads at most `size` leading bytes, or None if the entry does not exist."""
        pass

    @abc.abstractmethod
    def remove(self, name: EntryName) -> bool:
        """Deletes the entry.

        Returns:
            True if a file was deleted, False if it was already absent.

        Raises:
            OSError: On I/O failure other than absence.
        """
        pass

    @abc.abstractmethod
    def remove_if_unchanged(self, name: EntryName, stamp: EntryStamp) -> bool:
        """Deletes the entry only if it is still the version identified by `stamp`.

        Returns:
            True if a file was deleted, False if it was absent or has been
            replaced since `stamp` was taken.

        Raises:
            OSError: On I/O failure other than absence.
        """
        pass

    @abc.abstractmethod
    def list_entries(self) -> List[EntryName]:
        """Lists the entry files directly under the root."""
        pass

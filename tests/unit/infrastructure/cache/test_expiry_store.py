import struct

import pytest

from diskstash.domain.errors import CorruptEntryError, DecodingFailed
from diskstash.domain.models.common import EntryName
from diskstash.infrastructure.cache.directory import CacheDirectory
from diskstash.infrastructure.cache.expiry_store import HEADER_SIZE, MAGIC, ExpiryStore

NAME = EntryName("entry.entry")


@pytest.fixture
def store(directory: CacheDirectory, clock) -> ExpiryStore:
    return ExpiryStore(directory, clock=clock)


def test_pack_unpack_without_deadline():
    deadline, payload = ExpiryStore.unpack(ExpiryStore.pack(b"data", None))
    assert deadline is None
    assert payload == b"data"


def test_pack_unpack_with_deadline():
    deadline, payload = ExpiryStore.unpack(ExpiryStore.pack(b"", 1234.5))
    assert deadline == 1234.5
    assert payload == b""


def test_no_deadline_is_distinct_from_zero_deadline():
    """An explicit flag marks 'never expires'; a deadline of 0.0 is still a deadline."""
    assert ExpiryStore.parse_header(ExpiryStore.pack(b"", None)) is None
    assert ExpiryStore.parse_header(ExpiryStore.pack(b"", 0.0)) == 0.0


def test_header_layout():
    blob = ExpiryStore.pack(b"xyz", 10.0)
    assert blob[:4] == MAGIC
    assert blob[4] == 1
    assert blob[5] == 1
    assert struct.unpack(">d", blob[6:14]) == (10.0,)
    assert blob[HEADER_SIZE:] == b"xyz"


@pytest.mark.parametrize("blob", [b"", b"DSTH", b"XXXX" + bytes(10), b"DSTH\x09" + bytes(9)])
def test_corrupt_headers_rejected(blob: bytes):
    with pytest.raises(CorruptEntryError):
        ExpiryStore.unpack(blob)


def test_corrupt_entry_is_a_decoding_failure():
    assert issubclass(CorruptEntryError, DecodingFailed)


def test_is_expired_boundary():
    assert ExpiryStore.is_expired(None, 1e12) is False
    assert ExpiryStore.is_expired(100.0, 99.999) is False
    assert ExpiryStore.is_expired(100.0, 100.0) is True
    assert ExpiryStore.is_expired(100.0, 100.001) is True


def test_deadline_from_ttl_uses_clock(store: ExpiryStore, clock):
    assert store.deadline_from_ttl(None) is None
    assert store.deadline_from_ttl(5) == clock.now + 5


def test_set_and_get_deadline_keep_payload(store: ExpiryStore, directory: CacheDirectory):
    directory.write(NAME, ExpiryStore.pack(b"payload", None))
    assert store.get_deadline(NAME) is None

    store.set_deadline(NAME, 500.0)
    assert store.get_deadline(NAME) == 500.0
    assert ExpiryStore.unpack(directory.read(NAME)) == (500.0, b"payload")

    store.set_deadline(NAME, None)
    assert store.get_deadline(NAME) is None


def test_get_deadline_reads_only_header(store: ExpiryStore, directory: CacheDirectory, mocker):
    directory.write(NAME, ExpiryStore.pack(b"x" * 1000, 1.0))
    read_spy = mocker.spy(directory, "read")
    assert store.get_deadline(NAME) == 1.0
    read_spy.assert_not_called()


def test_missing_entry_raises_file_not_found(store: ExpiryStore):
    with pytest.raises(FileNotFoundError):
        store.get_deadline(NAME)
    with pytest.raises(FileNotFoundError):
        store.set_deadline(NAME, 1.0)


def test_entry_is_expired_uses_clock(store: ExpiryStore, directory: CacheDirectory, clock):
    directory.write(NAME, ExpiryStore.pack(b"", clock.now + 10))
    assert store.entry_is_expired(NAME) is False
    clock.advance(10)
    assert store.entry_is_expired(NAME) is True
    assert store.entry_is_expired(NAME, now=0.0) is False


def test_to_entry_builds_cache_entry():
    entry = ExpiryStore.to_entry("k", ExpiryStore.pack(b"payload", 42.0))
    assert entry.key == "k"
    assert entry.payload == b"payload"
    assert entry.expires_at == 42.0
    assert entry.is_expired(42.0)

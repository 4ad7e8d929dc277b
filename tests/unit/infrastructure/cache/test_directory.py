import os
from pathlib import Path

import pytest

from diskstash.domain.errors import DirectoryCreationFailed
from diskstash.domain.models.common import EntryName
from diskstash.infrastructure.cache.directory import CacheDirectory


def test_ensure_exists_creates_parents_and_is_idempotent(tmp_path: Path):
    root = tmp_path / "a" / "b" / "CacheDirectory"
    d = CacheDirectory(root)
    d.ensure_exists()
    d.ensure_exists()
    assert root.is_dir()


def test_ensure_exists_fails_when_root_is_a_file(tmp_path: Path):
    blocker = tmp_path / "CacheDirectory"
    blocker.write_text("not a directory")
    with pytest.raises(DirectoryCreationFailed) as exc_info:
        CacheDirectory(blocker).ensure_exists()
    assert exc_info.value.path == str(blocker)
    assert isinstance(exc_info.value.__cause__, OSError)


def test_write_then_read(directory: CacheDirectory):
    directory.write(EntryName("x.entry"), b"payload")
    assert directory.read(EntryName("x.entry")) == b"payload"
    assert (directory.root / "x.entry").read_bytes() == b"payload"


def test_write_overwrites(directory: CacheDirectory):
    directory.write(EntryName("x.entry"), b"first")
    directory.write(EntryName("x.entry"), b"second")
    assert directory.read(EntryName("x.entry")) == b"second"


def test_write_leaves_no_temp_files(directory: CacheDirectory):
    directory.write(EntryName("x.entry"), b"data")
    assert os.listdir(directory.root) == ["x.entry"]


def test_failed_write_keeps_previous_content_and_cleans_temp(directory: CacheDirectory, mocker):
    directory.write(EntryName("x.entry"), b"old")
    mocker.patch("diskstash.infrastructure.cache.directory.os.replace", side_effect=OSError("disk full"))
    with pytest.raises(OSError, match="disk full"):
        directory.write(EntryName("x.entry"), b"new")
    assert directory.read(EntryName("x.entry")) == b"old"
    assert os.listdir(directory.root) == ["x.entry"]


def test_read_missing_returns_none(directory: CacheDirectory):
    assert directory.read(EntryName("missing.entry")) is None
    assert directory.read_prefix(EntryName("missing.entry"), 4) is None


def test_read_prefix(directory: CacheDirectory):
    directory.write(EntryName("x.entry"), b"0123456789")
    assert directory.read_prefix(EntryName("x.entry"), 4) == b"0123"
    assert directory.read_prefix(EntryName("x.entry"), 100) == b"0123456789"


def test_remove_reports_whether_file_existed(directory: CacheDirectory):
    directory.write(EntryName("x.entry"), b"data")
    assert directory.remove(EntryName("x.entry")) is True
    assert directory.remove(EntryName("x.entry")) is False


def test_list_entries_skips_temp_files_and_subdirectories(directory: CacheDirectory):
    directory.write(EntryName("b.entry"), b"1")
    directory.write(EntryName("a.entry"), b"2")
    (directory.root / ".a.entry.abc123.tmp").write_bytes(b"partial")
    (directory.root / "subdir").mkdir()
    assert directory.list_entries() == ["a.entry", "b.entry"]


def test_root_accepts_str(tmp_path: Path):
    d = CacheDirectory(str(tmp_path / "c"))
    assert isinstance(d.root, Path)


def test_read_stamped_returns_content_and_identity(directory: CacheDirectory):
    directory.write(EntryName("x.entry"), b"data")
    data, stamp = directory.read_stamped(EntryName("x.entry"))
    assert data == b"data"
    assert stamp[2] == 4
    assert directory.read_stamped(EntryName("missing.entry")) is None


def test_remove_if_unchanged_removes_same_version(directory: CacheDirectory):
    directory.write(EntryName("x.entry"), b"data")
    _, stamp = directory.read_stamped(EntryName("x.entry"))
    assert directory.remove_if_unchanged(EntryName("x.entry"), stamp) is True
    assert directory.read(EntryName("x.entry")) is None
    assert directory.remove_if_unchanged(EntryName("x.entry"), stamp) is False


def test_remove_if_unchanged_keeps_replaced_file(directory: CacheDirectory):
    directory.write(EntryName("x.entry"), b"old")
    _, stamp = directory.read_stamped(EntryName("x.entry"))
    directory.write(EntryName("x.entry"), b"new")
    assert directory.remove_if_unchanged(EntryName("x.entry"), stamp) is False
    assert directory.read(EntryName("x.entry")) == b"new"

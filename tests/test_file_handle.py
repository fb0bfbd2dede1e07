"""Tests for the open file wrapper."""

from __future__ import annotations

import io
import os
import stat
from datetime import datetime, timezone
from pathlib import Path

import pytest

from lazyfs import EntryKind, FileMetadata, FilesystemError, LazyDirectory, LazyFile, LocalFilesystem


def test_write_then_read_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "foo.txt"

    with LazyFile.create(path) as file:
        assert file.mode == "write"
        assert file.write(b"bar") == 3
        file.to_read()
        assert file.mode == "read"
        assert file.read() == b"bar"


def test_to_write_truncates_even_in_write_mode(tmp_path: Path) -> None:
    path = tmp_path / "data.bin"

    with LazyFile.create(path) as file:
        file.write(b"payload")
        file.to_write()
        file.to_read()
        assert file.read() == b""


def test_to_read_rewinds(tmp_path: Path) -> None:
    path = tmp_path / "data.bin"
    path.write_bytes(b"abc")

    with LazyFile.open(path) as file:
        assert file.read(2) == b"ab"
        file.to_read()
        assert file.read() == b"abc"


def test_open_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FilesystemError) as excinfo:
        LazyFile.open(tmp_path / "missing.txt")

    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_create_in_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(FilesystemError):
        LazyFile.create(tmp_path / "nope" / "file.txt")


def test_write_on_read_handle_raises(tmp_path: Path) -> None:
    path = tmp_path / "ro.txt"
    path.write_text("x", encoding="utf-8")

    with LazyFile.open(path) as file:
        with pytest.raises((FilesystemError, io.UnsupportedOperation)):
            file.write(b"y")


def test_metadata_is_a_snapshot(tmp_path: Path) -> None:
    path = tmp_path / "grow.txt"

    with LazyFile.create(path) as file:
        assert file.metadata.size == 0
        file.write(b"0123456789")
        file.to_read()
        assert file.metadata.size == 0
        assert file.read() == b"0123456789"


def test_metadata_reflects_stat(tmp_path: Path) -> None:
    path = tmp_path / "info.txt"
    path.write_text("hello", encoding="utf-8")
    path.chmod(0o640)

    with LazyFile.open(path) as file:
        result = os.stat(path)
        assert file.metadata.kind is EntryKind.FILE
        assert file.metadata.size == 5
        assert file.permissions == stat.S_IMODE(result.st_mode) == 0o640
        assert file.modified == datetime.fromtimestamp(result.st_mtime, tz=timezone.utc)
        assert file.accessed.tzinfo is not None
        assert file.metadata.readonly is False


def test_readonly_metadata(tmp_path: Path) -> None:
    path = tmp_path / "locked.txt"
    path.write_text("x", encoding="utf-8")
    path.chmod(0o444)

    with LazyFile.open(path) as file:
        assert file.metadata.readonly is True


def test_created_raises_when_unavailable(tmp_path: Path) -> None:
    path = tmp_path / "x.bin"
    path.write_bytes(b"")
    now = datetime.now(timezone.utc)
    metadata = FileMetadata(
        kind=EntryKind.FILE, size=0, accessed=now, modified=now, created=None, permissions=0o644
    )

    with LazyFile(str(path), path.open("rb"), metadata, mode="read") as file:
        with pytest.raises(FilesystemError, match="Creation time"):
            _ = file.created


def test_created_returns_snapshot_value(tmp_path: Path) -> None:
    path = tmp_path / "x.bin"
    path.write_bytes(b"")
    now = datetime.now(timezone.utc)
    metadata = FileMetadata(
        kind=EntryKind.FILE, size=0, accessed=now, modified=now, created=now, permissions=0o644
    )

    with LazyFile(str(path), path.open("rb"), metadata, mode="read") as file:
        assert file.created == now


def test_into_raw_returns_components(tmp_path: Path) -> None:
    path = tmp_path / "raw.txt"
    path.write_text("raw", encoding="utf-8")

    raw_path, handle, metadata = LazyFile.open(path).into_raw()
    try:
        assert raw_path == str(path)
        assert handle.read() == b"raw"
        assert metadata.size == 3
    finally:
        handle.close()


def test_close_and_display(tmp_path: Path) -> None:
    path = tmp_path / "shown.txt"
    path.write_text("x", encoding="utf-8")

    file = LazyFile.open(path)
    assert str(file) == str(path)
    assert repr(file) == f"LazyFile({str(path)!r}, mode='read')"
    file.close()
    assert file.closed


def test_seek_and_tell(tmp_path: Path) -> None:
    path = tmp_path / "seek.bin"
    path.write_bytes(b"abcdef")

    with LazyFile.open(path) as file:
        assert file.seek(2) == 2
        assert file.read(2) == b"cd"
        assert file.tell() == 4


def test_failed_mode_switch_keeps_current_handle(tmp_path: Path) -> None:
    path = tmp_path / "vanishing.txt"

    with LazyFile.create(path) as file:
        file.write(b"abc")
        path.unlink()

        with pytest.raises(FilesystemError):
            file.to_read()

        assert file.mode == "write"
        assert not file.closed
        assert file.write(b"more") == 4


def test_mode_switch_flushes_pending_writes(tmp_path: Path) -> None:
    path = tmp_path / "buffered.txt"

    with LazyFile.create(path) as file:
        file.write(b"keep")
        file.to_write()
        file.write(b"new")
        file.to_read()
        assert file.read() == b"new"


class _FarFutureFilesystem(LocalFilesystem):
    """Reports timestamps no datetime can represent."""

    def __init__(self) -> None:
        super().__init__()
        self.handles: list = []

    def open_read(self, path: str):
        handle = super().open_read(path)
        self.handles.append(handle)
        return handle

    def stat(self, handle) -> os.stat_result:
        real = super().stat(handle)
        huge = 1e20
        fields = (
            real.st_mode, real.st_ino, real.st_dev, real.st_nlink, real.st_uid,
            real.st_gid, real.st_size, int(huge), int(huge), int(huge),
        )
        return os.stat_result(fields, {"st_atime": huge, "st_mtime": huge, "st_ctime": huge})


def test_unrepresentable_metadata_raises_and_closes(tmp_path: Path) -> None:
    path = tmp_path / "future.txt"
    path.write_text("x", encoding="utf-8")
    filesystem = _FarFutureFilesystem()

    with pytest.raises(FilesystemError, match="metadata"):
        LazyFile.open(path, filesystem=filesystem)

    assert filesystem.handles and all(handle.closed for handle in filesystem.handles)


def test_unrepresentable_metadata_drops_entry_during_scan(tmp_path: Path) -> None:
    (tmp_path / "future.txt").write_text("x", encoding="utf-8")

    directory = LazyDirectory(tmp_path, cache=True, filesystem=_FarFutureFilesystem())

    assert directory.length() == 0


def test_operations_on_closed_file_raise_filesystem_error(tmp_path: Path) -> None:
    path = tmp_path / "closed.txt"
    path.write_text("x", encoding="utf-8")
    file = LazyFile.open(path)
    file.close()

    for operation in (file.read, file.tell, file.flush, lambda: file.seek(0)):
        with pytest.raises(FilesystemError):
            operation()

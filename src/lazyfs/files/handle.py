"""Open file wrapper bundling a handle with its metadata snapshot."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from types import TracebackType
from typing import BinaryIO, Literal, Optional, Tuple

from lazyfs.errors import FilesystemError
from lazyfs.platform import DEFAULT_FILESYSTEM, Filesystem

from .models import FileMetadata

LOGGER = logging.getLogger(__name__)

FileMode = Literal["read", "write"]

# Closed or wrong-mode handles raise ValueError rather than OSError.
_IO_ERRORS = (OSError, ValueError)


def _open_handle(filesystem: Filesystem, path: str, mode: FileMode) -> BinaryIO:
    try:
        if mode == "read":
            return filesystem.open_read(path)
        return filesystem.create_write(path)
    except OSError as exc:
        raise FilesystemError(f"Failed to open {path} for {mode}: {exc}") from exc


class LazyFile:
    """An open file together with the metadata observed when it was opened.

    Instances are built with :meth:`open` (read-only) or :meth:`create`
    (write-only). Reads and writes delegate to the underlying handle.
    """

    def __init__(
        self,
        path: str,
        handle: BinaryIO,
        metadata: FileMetadata,
        *,
        mode: FileMode,
        filesystem: Filesystem | None = None,
    ) -> None:
        self._path = path
        self._handle = handle
        self._metadata = metadata
        self._mode: FileMode = mode
        self._filesystem = filesystem or DEFAULT_FILESYSTEM

    @classmethod
    def open(
        cls, path: str | os.PathLike[str], *, filesystem: Filesystem | None = None
    ) -> "LazyFile":
        """Open ``path`` in read-only mode.

        Args:
            path: File to open.
            filesystem: Optional platform collaborator; defaults to the local filesystem.

        Returns:
            LazyFile: Wrapper holding the handle and a metadata snapshot.

        Raises:
            FilesystemError: If the file cannot be opened or inspected.
        """
        return cls._build(os.fspath(path), "read", filesystem or DEFAULT_FILESYSTEM)

    @classmethod
    def create(
        cls, path: str | os.PathLike[str], *, filesystem: Filesystem | None = None
    ) -> "LazyFile":
        """Create or truncate ``path`` and open it in write-only mode.

        Args:
            path: File to create.
            filesystem: Optional platform collaborator; defaults to the local filesystem.

        Returns:
            LazyFile: Wrapper holding the handle and a metadata snapshot.

        Raises:
            FilesystemError: If the file cannot be created or inspected.
        """
        return cls._build(os.fspath(path), "write", filesystem or DEFAULT_FILESYSTEM)

    @classmethod
    def _build(cls, path: str, mode: FileMode, filesystem: Filesystem) -> "LazyFile":
        handle = _open_handle(filesystem, path, mode)
        try:
            metadata = FileMetadata.from_stat(filesystem.stat(handle))
        except (OSError, ValueError, OverflowError) as exc:
            handle.close()
            raise FilesystemError(f"Failed to read metadata for {path}: {exc}") from exc
        LOGGER.debug("Opened %s in %s mode.", path, mode)
        return cls(path, handle, metadata, mode=mode, filesystem=filesystem)

    # Accessors ---------------------------------------------------------

    @property
    def path(self) -> str:
        return self._path

    @property
    def mode(self) -> FileMode:
        return self._mode

    @property
    def handle(self) -> BinaryIO:
        return self._handle

    @property
    def metadata(self) -> FileMetadata:
        return self._metadata

    @property
    def accessed(self) -> datetime:
        return self._metadata.accessed

    @property
    def modified(self) -> datetime:
        return self._metadata.modified

    @property
    def created(self) -> datetime:
        """Return the creation time captured at open time.

        Raises:
            FilesystemError: If the platform did not report a creation time.
        """
        if self._metadata.created is None:
            raise FilesystemError(f"Creation time is not available for {self._path}")
        return self._metadata.created

    @property
    def permissions(self) -> int:
        return self._metadata.permissions

    @property
    def is_file(self) -> bool:
        return True

    @property
    def is_dir(self) -> bool:
        return False

    @property
    def closed(self) -> bool:
        return self._handle.closed

    # I/O delegates -----------------------------------------------------

    def read(self, size: int = -1) -> bytes:
        try:
            return self._handle.read(size)
        except _IO_ERRORS as exc:
            raise FilesystemError(f"Failed to read {self._path}: {exc}") from exc

    def write(self, data: bytes) -> int:
        try:
            return self._handle.write(data)
        except _IO_ERRORS as exc:
            raise FilesystemError(f"Failed to write {self._path}: {exc}") from exc

    def flush(self) -> None:
        try:
            self._handle.flush()
        except _IO_ERRORS as exc:
            raise FilesystemError(f"Failed to flush {self._path}: {exc}") from exc

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        try:
            return self._handle.seek(offset, whence)
        except _IO_ERRORS as exc:
            raise FilesystemError(f"Failed to seek {self._path}: {exc}") from exc

    def tell(self) -> int:
        try:
            return self._handle.tell()
        except _IO_ERRORS as exc:
            raise FilesystemError(f"Failed to read the position of {self._path}: {exc}") from exc

    def close(self) -> None:
        try:
            self._handle.close()
        except _IO_ERRORS as exc:
            raise FilesystemError(f"Failed to close {self._path}: {exc}") from exc

    # Mode switching ----------------------------------------------------

    def to_read(self) -> None:
        """Reopen the file read-only, replacing the current handle.

        The file is reopened even when already in read mode, which rewinds it.
        The metadata snapshot is not refreshed.
        """
        self._reopen("read")

    def to_write(self) -> None:
        """Reopen the file write-only, replacing the current handle.

        The file is reopened even when already in write mode, which truncates
        its contents. The metadata snapshot is not refreshed.
        """
        self._reopen("write")

    def _reopen(self, mode: FileMode) -> None:
        if not self._handle.closed:
            self.flush()
        handle = _open_handle(self._filesystem, self._path, mode)
        old, self._handle, self._mode = self._handle, handle, mode
        old.close()
        LOGGER.debug("Reopened %s in %s mode.", self._path, mode)

    def into_raw(self) -> Tuple[str, BinaryIO, FileMetadata]:
        """Return the path, handle, and metadata, leaving the handle open.

        Returns:
            Tuple[str, BinaryIO, FileMetadata]: Components of the wrapper. The
            caller becomes responsible for closing the handle.
        """
        return self._path, self._handle, self._metadata

    # Protocol support --------------------------------------------------

    def __enter__(self) -> "LazyFile":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"LazyFile({self._path!r}, mode={self._mode!r})"


__all__ = ["FileMode", "LazyFile"]

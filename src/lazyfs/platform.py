"""Platform filesystem collaborator used by files and directory trees."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, BinaryIO, Optional, Protocol

if TYPE_CHECKING:
    from lazyfs.config.models import LazyFsConfig


class EntryKind(str, Enum):
    """Type of a filesystem object as reported without following symlinks."""

    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class DirectoryChild:
    """One child reported by a directory listing.

    Attributes:
        path: Path of the child, joined onto the listed directory.
        kind: Classified type, or None when classification failed.
    """

    path: str
    kind: Optional[EntryKind]


class Filesystem(Protocol):
    """Protocol for platform operations to enable dependency injection."""

    def is_directory(self, path: str) -> bool:
        """Return True when ``path`` refers to a directory."""
        ...

    def list_children(self, path: str) -> list[DirectoryChild]:
        """List the immediate children of ``path``.

        Raises:
            OSError: If the directory cannot be listed at all.
        """
        ...

    def open_read(self, path: str) -> BinaryIO:
        """Open ``path`` for binary reading."""
        ...

    def create_write(self, path: str) -> BinaryIO:
        """Create or truncate ``path`` and open it for binary writing."""
        ...

    def stat(self, handle: BinaryIO) -> os.stat_result:
        """Return stat information for an open handle."""
        ...


def _classify(entry: os.DirEntry[str]) -> Optional[EntryKind]:
    try:
        if entry.is_symlink():
            return EntryKind.OTHER
        if entry.is_file(follow_symlinks=False):
            return EntryKind.FILE
        if entry.is_dir(follow_symlinks=False):
            return EntryKind.DIRECTORY
    except OSError:
        return None
    return EntryKind.OTHER


class LocalFilesystem:
    """Filesystem implementation backed by the ``os`` module."""

    def __init__(self, *, buffering: int = -1) -> None:
        """Initialize the filesystem.

        Args:
            buffering: Buffering policy passed to ``open()`` for file handles.
        """
        self.buffering = buffering

    @classmethod
    def from_config(cls, config: "LazyFsConfig") -> "LocalFilesystem":
        """Build a filesystem using the file options of ``config``."""
        return cls(buffering=config.files.buffering)

    def is_directory(self, path: str) -> bool:
        return os.path.isdir(path)

    def list_children(self, path: str) -> list[DirectoryChild]:
        with os.scandir(path) as entries:
            return [DirectoryChild(path=entry.path, kind=_classify(entry)) for entry in entries]

    def open_read(self, path: str) -> BinaryIO:
        return open(path, "rb", buffering=self.buffering)

    def create_write(self, path: str) -> BinaryIO:
        return open(path, "wb", buffering=self.buffering)

    def stat(self, handle: BinaryIO) -> os.stat_result:
        return os.fstat(handle.fileno())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(buffering={self.buffering})"


DEFAULT_FILESYSTEM = LocalFilesystem()


__all__ = [
    "DEFAULT_FILESYSTEM",
    "DirectoryChild",
    "EntryKind",
    "Filesystem",
    "LocalFilesystem",
]

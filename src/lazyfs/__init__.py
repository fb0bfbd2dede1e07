"""Lazily scanned directory trees and open file wrappers."""

import logging
from importlib import metadata as _metadata

from lazyfs.errors import ConfigError, FilesystemError, LazyFsError
from lazyfs.files import FileMetadata, LazyFile
from lazyfs.platform import EntryKind, Filesystem, LocalFilesystem
from lazyfs.tree import Entry, LazyDirectory

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ConfigError",
    "Entry",
    "EntryKind",
    "FileMetadata",
    "Filesystem",
    "FilesystemError",
    "LazyDirectory",
    "LazyFile",
    "LazyFsError",
    "LocalFilesystem",
    "__version__",
]


def __getattr__(name: str):
    if name == "__version__":
        return _metadata.version("lazyfs")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return sorted(list(globals().keys()) + ["__version__"])

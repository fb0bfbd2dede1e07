"""Lazily scanned directory trees."""

from __future__ import annotations

import logging
import os
from typing import Iterator, List, Optional, Tuple, Union

from lazyfs.errors import FilesystemError, LazyFsError
from lazyfs.files import LazyFile
from lazyfs.platform import DEFAULT_FILESYSTEM, DirectoryChild, EntryKind, Filesystem

LOGGER = logging.getLogger(__name__)

Entry = Union[LazyFile, "LazyDirectory"]


class LazyDirectory:
    """A directory whose children are only listed when asked to.

    A directory starts unscanned unless ``cache`` is requested, in which case
    exactly one level is listed. Subdirectories are never scanned on
    construction; use :meth:`walk` to fill them.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        cache: bool = False,
        *,
        filesystem: Filesystem | None = None,
    ) -> None:
        """Create a directory node for ``path``.

        Args:
            path: Directory to represent.
            cache: Perform one shallow scan immediately when True.
            filesystem: Optional platform collaborator; defaults to the local filesystem.

        Raises:
            FilesystemError: If ``path`` is not a directory, or if ``cache`` is
                requested and the directory cannot be listed.
        """
        self._path = os.fspath(path)
        self._filesystem = filesystem or DEFAULT_FILESYSTEM
        self._entries: Optional[List[Entry]] = None
        if not self._filesystem.is_directory(self._path):
            raise FilesystemError(f"Path is not a directory: {self._path}")
        if cache:
            self.cache()

    # Accessors ---------------------------------------------------------

    @property
    def path(self) -> str:
        return self._path

    @property
    def is_cached(self) -> bool:
        """Return True if this directory has been scanned."""
        return self._entries is not None

    @property
    def is_file(self) -> bool:
        return False

    @property
    def is_dir(self) -> bool:
        return True

    @property
    def entries(self) -> Tuple[Entry, ...]:
        """Return the scanned entries, or an empty tuple when unscanned."""
        return tuple(self._entries or ())

    def get(self, index: int) -> Optional[Entry]:
        """Return the entry at ``index``, or None if unscanned or out of range.

        The returned entry is the live child, so scanning or walking it
        updates this tree.
        """
        if self._entries is None or not 0 <= index < len(self._entries):
            return None
        return self._entries[index]

    def length(self) -> Optional[int]:
        """Return the number of scanned entries, or None when unscanned."""
        if self._entries is None:
            return None
        return len(self._entries)

    def is_empty(self) -> Optional[bool]:
        """Return whether the scan found no entries, or None when unscanned."""
        if self._entries is None:
            return None
        return not self._entries

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries or ())

    # Scanning ----------------------------------------------------------

    def cache(self) -> None:
        """List this directory and replace any previously scanned entries.

        Children that cannot be classified, opened, or that are neither
        regular files nor directories are left out.

        Raises:
            FilesystemError: If the directory cannot be listed.
        """
        try:
            children = self._filesystem.list_children(self._path)
        except OSError as exc:
            raise FilesystemError(f"Failed to list directory {self._path}: {exc}") from exc

        entries: List[Entry] = []
        for child in children:
            entry = self._load_child(child)
            if entry is not None:
                entries.append(entry)
        self._entries = entries
        LOGGER.debug("Scanned %s: %d entries.", self._path, len(entries))

    def _load_child(self, child: DirectoryChild) -> Optional[Entry]:
        try:
            if child.kind is EntryKind.FILE:
                return LazyFile.open(child.path, filesystem=self._filesystem)
            if child.kind is EntryKind.DIRECTORY:
                return LazyDirectory(child.path, filesystem=self._filesystem)
        except LazyFsError:
            return None
        return None

    def walk(self, depth: int = 0) -> None:
        """Rescan this directory and fill subdirectories down to ``depth`` levels.

        A depth of 1 scans the direct subdirectories, 2 also scans theirs, and
        so on. A depth of 0 scans every reachable subdirectory. This directory
        is always rescanned first; descendants that cannot be listed are left
        unscanned.

        Args:
            depth: Number of subdirectory levels to fill, or 0 for all of them.

        Raises:
            FilesystemError: If this directory cannot be listed.
            ValueError: If ``depth`` is negative.
        """
        if depth < 0:
            raise ValueError(f"walk depth must be >= 0, got {depth}")
        LOGGER.debug("Walking %s (depth=%s).", self._path, depth or "unbounded")

        self.cache()
        stack = [(child, 1) for child in reversed(self._subdirectories())]
        while stack:
            directory, level = stack.pop()
            try:
                directory.cache()
            except FilesystemError:
                directory._entries = None
                continue
            if depth == 0 or level < depth:
                stack.extend((child, level + 1) for child in reversed(directory._subdirectories()))

    def _subdirectories(self) -> List["LazyDirectory"]:
        return [entry for entry in self._entries or () if isinstance(entry, LazyDirectory)]

    # Flattening --------------------------------------------------------

    def flatten(self) -> List[LazyFile]:
        """Move every cached file in this tree into a single list.

        Only scanned directories contribute files; unscanned subtrees are
        skipped. Every visited directory hands over its entries and is left
        unscanned, so the tree is consumed.

        Returns:
            List[LazyFile]: Files in depth-first, pre-order scan order.
        """
        files: List[LazyFile] = []
        pending = [iter(self._take_entries())]
        while pending:
            entry = next(pending[-1], None)
            if entry is None:
                pending.pop()
            elif isinstance(entry, LazyDirectory):
                pending.append(iter(entry._take_entries()))
            else:
                files.append(entry)
        LOGGER.debug("Flattened %s into %d files.", self._path, len(files))
        return files

    def flatten_all(self) -> List[LazyFile]:
        """Walk the whole tree, then flatten it.

        Returns:
            List[LazyFile]: Every reachable file that could be opened.

        Raises:
            FilesystemError: If this directory cannot be listed.
        """
        self.walk(0)
        return self.flatten()

    def _take_entries(self) -> List[Entry]:
        entries, self._entries = self._entries or [], None
        return entries

    # Rendering ---------------------------------------------------------

    def traverse(self) -> Iterator[Entry]:
        """Yield every entry of the cached tree in pre-order without scanning."""
        pending = [iter(self)]
        while pending:
            entry = next(pending[-1], None)
            if entry is None:
                pending.pop()
                continue
            yield entry
            if isinstance(entry, LazyDirectory):
                pending.append(iter(entry))

    def render(self) -> str:
        """Return one line per cached entry path, in pre-order, unindented."""
        return "".join(f"{entry.path}\n" for entry in self.traverse())

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"LazyDirectory({self._path!r}, cached={self.is_cached})"


__all__ = ["Entry", "LazyDirectory"]

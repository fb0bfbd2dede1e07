"""Shared fixtures for lazyfs tests."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pytest

from lazyfs.platform import DirectoryChild, LocalFilesystem


class SortedFilesystem(LocalFilesystem):
    """Local filesystem that lists children by name for deterministic order."""

    def list_children(self, path: str) -> list[DirectoryChild]:
        return sorted(super().list_children(path), key=lambda child: child.path)


class FaultyFilesystem(SortedFilesystem):
    """Sorted filesystem that fails chosen operations by file name."""

    def __init__(
        self,
        *,
        unopenable: Iterable[str] = (),
        unlistable: Iterable[str] = (),
        unclassifiable: Iterable[str] = (),
    ) -> None:
        super().__init__()
        self.unopenable = set(unopenable)
        self.unlistable = set(unlistable)
        self.unclassifiable = set(unclassifiable)

    def list_children(self, path: str) -> list[DirectoryChild]:
        if Path(path).name in self.unlistable:
            raise PermissionError(13, "Permission denied", path)
        return [
            DirectoryChild(path=child.path, kind=None)
            if Path(child.path).name in self.unclassifiable
            else child
            for child in super().list_children(path)
        ]

    def open_read(self, path: str):
        if Path(path).name in self.unopenable:
            raise PermissionError(13, "Permission denied", path)
        return super().open_read(path)


@pytest.fixture
def sorted_fs() -> SortedFilesystem:
    return SortedFilesystem()


@pytest.fixture
def three_level_tree(tmp_path: Path) -> Path:
    """Build ``root/{top.txt, a/{a.txt, b/{b.txt, c/{c.txt}}}}``."""
    root = tmp_path / "root"
    level3 = root / "a" / "b" / "c"
    level3.mkdir(parents=True)
    (root / "top.txt").write_text("top", encoding="utf-8")
    (root / "a" / "a.txt").write_text("a", encoding="utf-8")
    (root / "a" / "b" / "b.txt").write_text("b", encoding="utf-8")
    (level3 / "c.txt").write_text("c", encoding="utf-8")
    return root


@pytest.fixture
def faulty_fs() -> type[FaultyFilesystem]:
    """Return the failing filesystem class so tests choose which names fail."""
    return FaultyFilesystem

"""Metadata snapshot models for open files."""

from __future__ import annotations

import os
import stat
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict

from lazyfs.platform import EntryKind

_WRITE_BITS = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH


def _timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


class FileMetadata(BaseModel):
    """Metadata captured when a file handle was opened or created.

    The snapshot is never refreshed; it describes the file at open time.

    Attributes:
        kind: Type of the object behind the handle.
        size: Size in bytes.
        accessed: Last access time.
        modified: Last modification time.
        created: Creation time, or None when the platform does not report one.
        permissions: Permission bits (``st_mode & 0o7777``).
    """

    model_config = ConfigDict(frozen=True)

    kind: EntryKind
    size: int
    accessed: datetime
    modified: datetime
    created: Optional[datetime] = None
    permissions: int

    @classmethod
    def from_stat(cls, result: os.stat_result) -> "FileMetadata":
        """Build a snapshot from an ``os.stat_result``."""
        if stat.S_ISREG(result.st_mode):
            kind = EntryKind.FILE
        elif stat.S_ISDIR(result.st_mode):
            kind = EntryKind.DIRECTORY
        else:
            kind = EntryKind.OTHER
        birthtime = getattr(result, "st_birthtime", None)
        return cls(
            kind=kind,
            size=result.st_size,
            accessed=_timestamp(result.st_atime),
            modified=_timestamp(result.st_mtime),
            created=_timestamp(birthtime) if birthtime is not None else None,
            permissions=stat.S_IMODE(result.st_mode),
        )

    @property
    def readonly(self) -> bool:
        """Return True when no write permission bit is set."""
        return not self.permissions & _WRITE_BITS


__all__ = ["FileMetadata"]

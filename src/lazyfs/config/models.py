"""Configuration models describing lazyfs settings."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LazyFsBaseModel(BaseModel):
    """Shared configuration for lazyfs Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class FileOptions(LazyFsBaseModel):
    """Options applied when opening file handles.

    Attributes:
        buffering: Buffering policy forwarded to ``open()`` (-1 uses the default).
    """

    buffering: int = -1


class LoggingSettings(LazyFsBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level for the ``lazyfs`` logger.
        file: Optional log file; when unset no handler is attached.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    file: Optional[str] = None
    max_size_mb: int = 10
    backup_count: int = 3


class LazyFsConfig(LazyFsBaseModel):
    """Top-level configuration for lazyfs.

    Attributes:
        files: File handle options.
        logging: Logging configuration.
    """

    files: FileOptions = Field(default_factory=FileOptions)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


__all__ = ["LazyFsBaseModel", "FileOptions", "LoggingSettings", "LazyFsConfig"]

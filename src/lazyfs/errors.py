"""Exceptions raised by lazyfs."""


class LazyFsError(Exception):
    """Base exception for lazyfs operations."""


class FilesystemError(LazyFsError):
    """Raised when a filesystem operation requested by the caller fails."""


class ConfigError(LazyFsError):
    """Raised when configuration data cannot be processed."""

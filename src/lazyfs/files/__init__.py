"""Open file wrappers and their metadata snapshots."""

from .handle import FileMode, LazyFile
from .models import FileMetadata

__all__ = ["FileMetadata", "FileMode", "LazyFile"]

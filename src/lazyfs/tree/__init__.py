"""Lazy directory trees built from filesystem scans."""

from .directory import Entry, LazyDirectory

__all__ = ["Entry", "LazyDirectory"]

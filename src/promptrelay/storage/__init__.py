"""Trace cache backends."""

from .base import TraceCache
from .file import FileTraceCache
from .memory import MemoryTraceCache

__all__ = ["FileTraceCache", "MemoryTraceCache", "TraceCache"]

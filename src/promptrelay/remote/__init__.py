"""Remote client implementations."""

from .base import RemoteClient

__all__ = ["RemoteClient"]

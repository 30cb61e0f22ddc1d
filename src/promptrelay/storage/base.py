"""Trace cache abstractions."""

from __future__ import annotations

from typing import Any, Protocol


class TraceCache(Protocol):
    """Protocol for persisting fetched trace documents by id.

    ``load`` returns ``None`` only when no entry exists. Any other read
    problem raises ``StorageReadFailure``. ``save`` raises
    ``CacheWriteFailure`` when the entry cannot be written.
    """

    def load(self, trace_id: str) -> dict[str, Any] | None: ...
    def save(self, trace_id: str, document: dict[str, Any]) -> None: ...
    def list_traces(self) -> list[str]: ...

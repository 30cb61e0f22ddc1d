"""In-memory trace cache."""

from __future__ import annotations

import copy
from typing import Any


class MemoryTraceCache:
    """In-memory cache. Good for tests and short-lived scripts."""

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}

    def load(self, trace_id: str) -> dict[str, Any] | None:
        document = self._documents.get(trace_id)
        return copy.deepcopy(document) if document is not None else None

    def save(self, trace_id: str, document: dict[str, Any]) -> None:
        self._documents[trace_id] = copy.deepcopy(document)

    def list_traces(self) -> list[str]:
        return list(self._documents.keys())

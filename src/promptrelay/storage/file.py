"""File-based JSON trace cache."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..exceptions import CacheWriteFailure, StorageReadFailure, TraceCacheLoadError
from ..serializers import load_trace_json, save_trace_json


class FileTraceCache:
    """Writes each trace as ``<trace_id>.json`` in one flat directory.

    The directory is created on the first write, not at construction.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, trace_id: str) -> Path:
        if not trace_id or Path(trace_id).name != trace_id or trace_id in (".", ".."):
            raise StorageReadFailure(f"Invalid trace id for cache path: {trace_id!r}")
        return self.directory / f"{trace_id}.json"

    def load(self, trace_id: str) -> dict[str, Any] | None:
        path = self.path_for(trace_id)
        try:
            return load_trace_json(path)
        except FileNotFoundError:
            return None
        except TraceCacheLoadError:
            raise
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageReadFailure(f"Failed to read cached trace {trace_id}: {exc}") from exc

    def save(self, trace_id: str, document: dict[str, Any]) -> None:
        try:
            save_trace_json(document, self.path_for(trace_id))
        except (OSError, TypeError, ValueError, StorageReadFailure) as exc:
            raise CacheWriteFailure(f"Failed to cache trace {trace_id}: {exc}") from exc

    def list_traces(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(path.stem for path in self.directory.glob("*.json"))

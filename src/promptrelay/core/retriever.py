"""Trace retriever: cache-or-fetch a trace, then filter it down to a bounded payload."""

from __future__ import annotations

import asyncio
import logging
import warnings
from typing import Any

from ..config import DEFAULT_MAX_TRACE_BYTES
from ..exceptions import CacheWriteFailure, IndexOutOfBounds, InvalidTraceStructure
from ..models import ToolResult, TraceRecord
from ..remote import RemoteClient
from ..serializers import to_compact_json, to_pretty_json
from ..storage import TraceCache
from .filters import IndexFilter, NameFilter, TraceFilter, resolve_filter

logger = logging.getLogger(__name__)


class TraceRetriever:
    """Owns its remote client and cache handle. Construct via DI.

    Error-handling contract
    ----------------------
    - ``get_trace`` never raises. Remote failures, unreadable cache entries
      and malformed traces come back as error-flagged ``ToolResult`` values.
    - A cache entry that cannot be written is reported with ``warnings.warn``
      and the freshly fetched trace is still returned.
    - Cache entries are never refreshed once written.
    """

    def __init__(
        self,
        remote: RemoteClient,
        cache: TraceCache,
        *,
        max_trace_bytes: int = DEFAULT_MAX_TRACE_BYTES,
    ) -> None:
        self.remote = remote
        self.cache = cache
        self.max_trace_bytes = max_trace_bytes

    async def get_trace(
        self,
        trace_id: str,
        function_name: str | None = None,
        index: int | None = None,
    ) -> ToolResult:
        trace_filter = resolve_filter(function_name, index)
        try:
            document = await self.load_or_fetch(trace_id)
            record = self._validate(trace_id, document)
            return self.apply_filter(document, record, trace_filter)
        except (InvalidTraceStructure, IndexOutOfBounds) as exc:
            return ToolResult.error(f"Error: {exc}")
        except Exception as exc:
            logger.error("Error processing get_trace for %s: %s", trace_id, exc, exc_info=True)
            return ToolResult.error(f"Error fetching trace {trace_id}: {exc}")

    async def load_or_fetch(self, trace_id: str) -> dict[str, Any]:
        """Return the cached document, fetching and caching it on a miss.

        Only a missing entry counts as a miss. Other read failures propagate.
        """
        cached = await asyncio.to_thread(self.cache.load, trace_id)
        if cached is not None:
            logger.info("Cache hit for trace %s", trace_id)
            return cached

        logger.info("Cache miss for trace %s. Fetching from API.", trace_id)
        document = await self.remote.fetch_trace(trace_id)
        try:
            await asyncio.to_thread(self.cache.save, trace_id, document)
        except CacheWriteFailure as exc:
            logger.error("Error writing cache for trace %s: %s", trace_id, exc)
            warnings.warn(
                f"promptrelay: failed to cache trace {trace_id}. "
                "The fetched trace is returned uncached.",
                stacklevel=2,
            )
        else:
            logger.info("Cached trace %s successfully.", trace_id)
        return document

    def apply_filter(
        self, document: dict[str, Any], record: TraceRecord, trace_filter: TraceFilter
    ) -> ToolResult:
        if isinstance(trace_filter, IndexFilter):
            return self._by_index(record, trace_filter.index)
        if isinstance(trace_filter, NameFilter):
            return self._by_name(record, trace_filter.function_name)
        return self._bounded(document, record)

    def _validate(self, trace_id: str, document: Any) -> TraceRecord:
        if not isinstance(document, dict) or not isinstance(document.get("observations"), list):
            logger.error("Trace data or observations missing/invalid for trace %s", trace_id)
            raise InvalidTraceStructure(
                f"Invalid trace data structure for trace {trace_id}. Cannot process filters."
            )
        return TraceRecord.model_validate(document)

    def _by_index(self, record: TraceRecord, index: int) -> ToolResult:
        count = record.observation_count
        if not 0 <= index < count:
            raise IndexOutOfBounds(
                f"Index {index} is out of bounds. Valid range is [0, {count - 1}]."
            )
        return ToolResult(text=to_pretty_json(record.observations[index].io_payload()))

    def _by_name(self, record: TraceRecord, function_name: str) -> ToolResult:
        matches = [
            (position, observation)
            for position, observation in enumerate(record.observations)
            if observation.name == function_name
        ]
        if not matches:
            return ToolResult(text=f"No observations found with name: {function_name}")
        if len(matches) == 1:
            return ToolResult(text=to_pretty_json(matches[0][1].io_payload()))

        summary = [{"index": position, "name": observation.name} for position, observation in matches]
        return ToolResult(
            text=(
                f"Multiple observations found with name '{function_name}'. "
                "Use the 'index' argument with one of the following original indices "
                f"to retrieve specific details:\n\n{to_pretty_json(summary)}"
            )
        )

    def _bounded(self, document: dict[str, Any], record: TraceRecord) -> ToolResult:
        payload = to_compact_json(document)
        byte_size = len(payload.encode("utf-8"))
        if byte_size <= self.max_trace_bytes:
            return ToolResult(text=payload)
        return ToolResult(
            text=(
                f"Trace data exceeds {self.max_trace_bytes / 1024:g} KB "
                f"({byte_size / 1024:.2f} KB). Returning structure summary. "
                "Use 'function_name' or 'index' arguments to retrieve specific "
                f"observation details.\n\n{to_pretty_json(record.structure_summary())}"
            )
        )

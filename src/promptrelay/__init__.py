"""promptrelay: serve a Langfuse prompt catalog and its traces over MCP.

Pipelines (each constructed via DI with a remote client):
    CatalogLister(remote).list(cursor)                -> PromptPage
    PromptResolver(remote).resolve(name, arguments)   -> list[PromptMessage]
    TraceRetriever(remote, cache).get_trace(trace_id) -> ToolResult

The MCP server in ``promptrelay.server`` wires them to the protocol.
"""

from __future__ import annotations

from .config import RelayConfig
from .core import CatalogLister, PromptResolver, TraceRetriever
from .models import PromptMessage, PromptPage, PromptSummary, ToolResult, TraceRecord
from .storage import FileTraceCache, MemoryTraceCache, TraceCache

__version__ = "1.0.0"

__all__ = [
    "CatalogLister",
    "FileTraceCache",
    "MemoryTraceCache",
    "PromptMessage",
    "PromptPage",
    "PromptResolver",
    "PromptSummary",
    "RelayConfig",
    "ToolResult",
    "TraceCache",
    "TraceRecord",
    "TraceRetriever",
]

"""Core pipelines: catalog listing, prompt resolution, trace retrieval."""

from .catalog import CatalogLister, parse_cursor
from .filters import IndexFilter, NameFilter, NoFilter, TraceFilter, resolve_filter
from .resolver import PromptResolver, Resolved, Unresolved, normalize_role, to_messages
from .retriever import TraceRetriever
from .templates import compile_template, compile_text, extract_variables, template_variables

__all__ = [
    "CatalogLister",
    "IndexFilter",
    "NameFilter",
    "NoFilter",
    "PromptResolver",
    "Resolved",
    "TraceFilter",
    "TraceRetriever",
    "Unresolved",
    "compile_template",
    "compile_text",
    "extract_variables",
    "normalize_role",
    "parse_cursor",
    "resolve_filter",
    "template_variables",
    "to_messages",
]

"""Serialization helpers."""

from .json import (
    load_trace_json,
    save_trace_json,
    to_compact_json,
    to_pretty_json,
    trace_from_json,
    trace_to_json,
)

__all__ = [
    "load_trace_json",
    "save_trace_json",
    "to_compact_json",
    "to_pretty_json",
    "trace_from_json",
    "trace_to_json",
]

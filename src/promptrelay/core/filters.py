"""Observation filters for trace retrieval."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IndexFilter:
    index: int


@dataclass(frozen=True)
class NameFilter:
    function_name: str


@dataclass(frozen=True)
class NoFilter:
    pass


TraceFilter = IndexFilter | NameFilter | NoFilter


def resolve_filter(function_name: str | None = None, index: int | None = None) -> TraceFilter:
    """Pick exactly one filter mode. An integer ``index`` wins over ``function_name``."""
    if isinstance(index, int) and not isinstance(index, bool):
        return IndexFilter(index)
    if function_name:
        return NameFilter(function_name)
    return NoFilter()

from __future__ import annotations

import copy
from typing import Any

import pytest

from promptrelay.exceptions import RemoteFetchFailure
from promptrelay.models import (
    CatalogEntry,
    CatalogPage,
    ChatMessageTemplate,
    PromptKind,
    PromptTemplate,
)


class FakeRemote:
    """In-memory stand-in for the remote catalog and trace API."""

    def __init__(self) -> None:
        self.pages: dict[int, list[str]] = {}
        self.templates: dict[str, PromptTemplate] = {}
        self.traces: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[object, ...]] = []
        self.fail_catalog = False
        self.fail_traces = False
        self.fail_kinds: set[str] = set()

    async def list_catalog(self, *, limit: int, page: int, label: str) -> CatalogPage:
        self.calls.append(("list_catalog", limit, page, label))
        if self.fail_catalog:
            raise RemoteFetchFailure("catalog unavailable")
        return CatalogPage(
            entries=[CatalogEntry(name=name) for name in self.pages.get(page, [])],
            page=page,
            total_pages=len(self.pages),
        )

    async def fetch_template(
        self,
        name: str,
        *,
        kind: PromptKind | None = None,
        version: int | None = None,
        cache_ttl_seconds: int | None = None,
    ) -> PromptTemplate:
        self.calls.append(("fetch_template", name, kind, cache_ttl_seconds))
        if kind in self.fail_kinds:
            raise RemoteFetchFailure(f"{kind} lookup failed for {name}")
        if name not in self.templates:
            raise RemoteFetchFailure(f"Prompt not found: {name}")
        return self.templates[name]

    async def fetch_trace(self, trace_id: str) -> dict[str, Any]:
        self.calls.append(("fetch_trace", trace_id))
        if self.fail_traces:
            raise RemoteFetchFailure("trace API unavailable")
        if trace_id not in self.traces:
            raise RemoteFetchFailure(f"Trace {trace_id} not found")
        return copy.deepcopy(self.traces[trace_id])

    def call_count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)


def chat_template(name: str, *turns: tuple[str, str]) -> PromptTemplate:
    return PromptTemplate(
        name=name,
        kind="chat",
        template=[ChatMessageTemplate(role=role, content=content) for role, content in turns],
        version=1,
    )


def text_template(name: str, text: str) -> PromptTemplate:
    return PromptTemplate(name=name, kind="text", template=text, version=1)


def make_trace(trace_id: str, names: list[str]) -> dict[str, Any]:
    return {
        "id": trace_id,
        "name": "agent_run",
        "observations": [
            {
                "id": f"obs-{position}",
                "type": "SPAN",
                "name": name,
                "input": {"step": position},
                "output": {"result": f"{name}-{position}"},
                "parentObservationId": None,
            }
            for position, name in enumerate(names)
        ],
    }


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()
